"""Application wiring."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from lingostory.config import ensure_directories, settings
from lingostory.models.base import SessionLocal, init_db
from lingostory.monitoring import start_monitoring
from lingostory.providers.base import StoryProvider
from lingostory.providers.factory import create_credential_source, create_provider
from lingostory.services.learner_service import LearnerService, get_or_create_user
from lingostory.services.orchestrator import GenerationOrchestrator
from lingostory.services.quota_service import QuotaTracker
from lingostory.services.story_controller import StoryController
from lingostory.services.story_repository import SqlStoryRepository
from lingostory.services.story_store import StoryStore


class StoryApp:
    """Builds the story services for one learner."""

    def __init__(
        self,
        username: str,
        db: Optional[Session] = None,
        provider: Optional[StoryProvider] = None,
        provider_name: Optional[str] = None,
    ):
        self.username = username
        self.db = db
        self.provider = provider
        self.provider_name = provider_name or settings.generation.provider
        self.controller: Optional[StoryController] = None
        self.learner: Optional[LearnerService] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    def start(self) -> StoryController:
        """Initialize the database and wire the services."""
        if self.running:
            return self.controller

        try:
            if self.db is None:
                ensure_directories()
                init_db()
                self.db = SessionLocal()
            self.logger.info("Database initialized")

            user = get_or_create_user(self.db, self.username)
            self.learner = LearnerService(self.db, user.id)

            store = StoryStore(SqlStoryRepository(self.db, user_id=user.id))
            quota = QuotaTracker(self.db, user_id=user.id)
            if self.provider is None:
                self.provider = create_provider(self.provider_name)

            orchestrator = GenerationOrchestrator(
                vocabulary=self.learner,
                progress=self.learner,
                premium=self.learner,
                credentials=create_credential_source(self.provider_name),
                provider=self.provider,
                quota=quota,
                store=store,
                direction_source=self.learner.study_direction,
            )
            self.controller = StoryController(orchestrator, store, quota, self.learner)

            if settings.monitoring.enabled:
                start_monitoring(settings.monitoring.port)
                self.logger.info(f"Metrics exposed on port {settings.monitoring.port}")

            self.running = True
            self.logger.info(f"Story services started for {self.username}")
            return self.controller

        except Exception as e:
            self.logger.error("Failed to start application: %s", str(e))
            self.stop()
            raise

    def stop(self) -> None:
        """Close the database session."""
        if self.db is not None:
            self.db.close()
            self.db = None
        self.running = False
        self.logger.info("Application stopped")
