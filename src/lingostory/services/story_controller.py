"""Event reduction into the published story state."""
import logging
from dataclasses import replace
from typing import Callable, List

from lingostory.errors import StoryError
from lingostory.models.events import (
    CancelGeneration,
    CloseStory,
    DeleteStory,
    GenerateStory,
    LoadData,
    OpenStory,
    RefreshQuota,
    StoryEvent,
    ToggleFavorite,
)
from lingostory.models.story_models import (
    OrchestratorState,
    StoryErrorInfo,
    StoryState,
)
from lingostory.services.interfaces import PremiumStatusSource
from lingostory.services.orchestrator import GenerationOrchestrator
from lingostory.services.quota_service import QuotaTracker
from lingostory.services.story_store import StoryStore

logger = logging.getLogger(__name__)

StateSubscriber = Callable[[StoryState], None]


class StoryController:
    """Folds events through the story components and publishes snapshots.

    Failures never escape ``handle``; they are recorded in ``state.error``.
    """

    def __init__(
        self,
        orchestrator: GenerationOrchestrator,
        store: StoryStore,
        quota: QuotaTracker,
        premium: PremiumStatusSource,
    ):
        self.orchestrator = orchestrator
        self.store = store
        self.quota = quota
        self.premium = premium
        self._state = StoryState()
        self._subscribers: List[StateSubscriber] = []
        orchestrator.add_listener(self._on_orchestrator_state)

    @property
    def state(self) -> StoryState:
        return self._state

    def subscribe(self, subscriber: StateSubscriber) -> None:
        self._subscribers.append(subscriber)

    def _publish(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        for subscriber in self._subscribers:
            subscriber(self._state)

    def _publish_error(self, error: StoryError) -> None:
        self._publish(error=StoryErrorInfo.from_exception(error))

    def _on_orchestrator_state(self, orchestrator_state: OrchestratorState) -> None:
        self._publish(
            is_generating=orchestrator_state.is_generating,
            current_phase=orchestrator_state.current_phase,
        )

    async def handle(self, event: StoryEvent) -> StoryState:
        """Apply one event and return the resulting state."""
        logger.debug(f"Handling event {type(event).__name__}")
        if isinstance(event, GenerateStory):
            await self._generate(event)
        elif isinstance(event, LoadData):
            self._load_data()
        elif isinstance(event, RefreshQuota):
            self._refresh_quota()
        elif isinstance(event, ToggleFavorite):
            self._toggle_favorite(event.story_id)
        elif isinstance(event, DeleteStory):
            self._delete_story(event.story_id)
        elif isinstance(event, OpenStory):
            self._publish(current_story=self.store.get(event.story_id))
        elif isinstance(event, CloseStory):
            self._publish(current_story=None)
        elif isinstance(event, CancelGeneration):
            self.orchestrator.cancel()
        else:
            raise ValueError(f"Unknown event: {event!r}")
        return self._state

    def _load_data(self) -> None:
        self._publish(is_loading=True, error=None)
        try:
            stories = self.store.load()
            self._publish(stories=stories)
            self._refresh_quota()
        except StoryError as e:
            self._publish_error(e)
        finally:
            self._publish(is_loading=False)

    def _refresh_quota(self) -> None:
        self._publish(quota=self.quota.current(self.premium.is_premium()))

    async def _generate(self, event: GenerateStory) -> None:
        self._publish(error=None)
        try:
            story = await self.orchestrator.generate(event.request)
        except StoryError as e:
            self._publish_error(e)
            self._refresh_quota()
            return
        self._publish(stories=self.store.get_all(), current_story=story, error=None)
        self._refresh_quota()

    def _toggle_favorite(self, story_id: str) -> None:
        try:
            updated = self.store.toggle_favorite(story_id)
        except StoryError as e:
            self._publish_error(e)
            return
        current = self._state.current_story
        if current is not None and current.id == story_id:
            current = updated
        self._publish(stories=self.store.get_all(), current_story=current)

    def _delete_story(self, story_id: str) -> None:
        try:
            self.store.delete(story_id)
        except StoryError as e:
            self._publish_error(e)
            return
        current = self._state.current_story
        if current is not None and current.id == story_id:
            current = None
        self._publish(stories=self.store.get_all(), current_story=current)
