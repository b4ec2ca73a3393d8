"""Story generation workflow."""
import asyncio
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from lingostory.config import settings
from lingostory.errors import (
    GenerationCancelledError,
    GenerationInProgressError,
    ProviderTimeoutError,
    QuotaExhaustedError,
    StoryError,
    UnknownStoryError,
)
from lingostory.models.story_models import (
    GeneratedStory,
    GenerationPhase,
    OrchestratorState,
    StoryRequest,
    StudyDirection,
)
from lingostory.monitoring import generation_failures, quota_rejections, stories_generated
from lingostory.providers.base import StoryProvider
from lingostory.services.eligibility import EligibilityFilter
from lingostory.services.interfaces import (
    CredentialSource,
    PremiumStatusSource,
    ProgressSource,
    VocabularySource,
)
from lingostory.services.quota_service import QuotaTracker
from lingostory.services.story_store import StoryStore
from lingostory.services.topic_validator import TopicValidator

logger = logging.getLogger(__name__)

StateListener = Callable[[OrchestratorState], None]


class GenerationOrchestrator:
    """Coordinates one story generation at a time.

    The workflow validates eligibility, then quota, then calls the provider.
    While the provider runs, a separate cosmetic timeline steps through the
    generation phases on fixed delays. The timeline is not a progress report:
    it neither waits for nor reflects the provider call.

    Quota is consumed only after the provider succeeds, so validation
    failures, provider failures, timeouts and cancellations cost nothing.
    """

    def __init__(
        self,
        vocabulary: VocabularySource,
        progress: ProgressSource,
        premium: PremiumStatusSource,
        credentials: CredentialSource,
        provider: StoryProvider,
        quota: QuotaTracker,
        store: StoryStore,
        eligibility: Optional[EligibilityFilter] = None,
        topic_validator: Optional[TopicValidator] = None,
        direction_source: Optional[Callable[[], StudyDirection]] = None,
        timeout: Optional[float] = None,
        settle_delay: Optional[float] = None,
        phase_durations: Optional[Dict[GenerationPhase, float]] = None,
    ):
        self.vocabulary = vocabulary
        self.progress = progress
        self.premium = premium
        self.credentials = credentials
        self.provider = provider
        self.quota = quota
        self.store = store
        self.eligibility = eligibility or EligibilityFilter()
        self.topic_validator = topic_validator or TopicValidator()
        self.direction_source = direction_source or (lambda: StudyDirection.EN_TR)
        self.timeout = settings.generation.timeout if timeout is None else timeout
        self.settle_delay = settings.generation.settle_delay if settle_delay is None else settle_delay
        if phase_durations is None:
            phase_durations = {
                phase: settings.phase_duration(phase.value)
                for phase in GenerationPhase.timeline()
            }
        self.phase_durations = phase_durations

        self._state = OrchestratorState()
        self._listeners: List[StateListener] = []
        self._provider_task: Optional[asyncio.Task] = None
        self._phase_task: Optional[asyncio.Task] = None
        self._cancel_requested = False
        self._committed = False

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def is_generating(self) -> bool:
        return self._state.is_generating

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback receiving every new state."""
        self._listeners.append(listener)

    def _set_state(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for listener in self._listeners:
            listener(self._state)

    def _record_failure(self, error: StoryError) -> None:
        generation_failures.labels(error_type=error.kind.value).inc()
        self._set_state(is_generating=False, last_error=error.kind)

    def _validate(self, request: StoryRequest):
        """Run the pre-provider checks; returns (topic, words, premium status)."""
        topic = self.topic_validator.validate(request.topic)

        words = self.vocabulary.all_eligible_words()
        direction = self.direction_source()
        eligible = self.eligibility.check(words, self.progress.progress_for, direction, request.length)

        is_premium = self.premium.is_premium()
        quota = self.quota.current(is_premium)
        if not quota.has_quota:
            quota_rejections.inc()
            raise QuotaExhaustedError(quota.remaining, quota.limit, is_premium)

        return topic, eligible, is_premium

    async def generate(self, request: StoryRequest) -> GeneratedStory:
        """Run the whole generation workflow and return the new story.

        Raises:
            GenerationInProgressError: another generation is in flight
            StoryError: any validation, provider or storage failure
        """
        if self._state.is_generating:
            logger.warning("Rejected generation request: another generation is in flight")
            raise GenerationInProgressError()

        try:
            topic, words, is_premium = self._validate(request)
        except StoryError as e:
            logger.info(f"Generation rejected: {e.message}")
            self._record_failure(e)
            raise

        self._cancel_requested = False
        self._committed = False
        self._set_state(
            is_generating=True,
            current_phase=GenerationPhase.COLLECTING_WORDS,
            last_error=None,
        )
        logger.info(
            f"Generating {request.length.value} {request.type.value} story "
            f"from {len(words)} eligible words"
        )

        try:
            if self.settle_delay:
                await asyncio.sleep(self.settle_delay)
            if self._cancel_requested:
                raise GenerationCancelledError()

            credential = self.credentials.get_credential()
            self._phase_task = asyncio.create_task(self._run_phase_timeline())
            story = await self._call_provider(topic, request, words, is_premium, credential)
            if self._cancel_requested:
                raise GenerationCancelledError()

            # Past this point the result is kept and cancel() is refused
            self._committed = True
            self.quota.consume(is_premium)
            self.store.insert(story)
            stories_generated.labels(story_type=story.type.value, length=story.length.value).inc()

            # The timeline always finishes its fixed schedule
            await asyncio.gather(self._phase_task, return_exceptions=True)
            self._set_state(is_generating=False)
            logger.info(f"Generated story {story.id} ({len(story.used_words)} words used)")
            return story
        except StoryError as e:
            logger.error(f"Story generation failed: {e.message}")
            self._record_failure(e)
            raise
        except asyncio.CancelledError:
            logger.info("Generation workflow cancelled")
            self._set_state(is_generating=False)
            raise
        except Exception as e:
            logger.exception("Unexpected error during story generation")
            error = UnknownStoryError(e)
            self._record_failure(error)
            raise error from e
        finally:
            if self._phase_task is not None and not self._phase_task.done():
                self._phase_task.cancel()
            self._phase_task = None
            self._cancel_requested = False
            self._committed = False

    async def _call_provider(self, topic, request, words, is_premium, credential) -> GeneratedStory:
        self._provider_task = asyncio.create_task(
            self.provider.generate(
                topic,
                request.type,
                request.length,
                words,
                is_premium,
                credential,
            )
        )
        try:
            return await asyncio.wait_for(self._provider_task, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(self.timeout) from e
        except asyncio.CancelledError:
            if self._cancel_requested:
                raise GenerationCancelledError()
            raise
        finally:
            self._provider_task = None

    async def _run_phase_timeline(self) -> None:
        for phase in GenerationPhase.timeline():
            self._set_state(current_phase=phase)
            await asyncio.sleep(self.phase_durations.get(phase, 0.0))

    def cancel(self) -> bool:
        """Abandon the in-flight generation.

        Returns False when idle or once the story has been committed.
        """
        if not self._state.is_generating or self._committed:
            return False
        self._cancel_requested = True
        if self._provider_task is not None and not self._provider_task.done():
            self._provider_task.cancel()
        logger.info("Generation cancellation requested")
        return True
