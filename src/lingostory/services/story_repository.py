"""SQLAlchemy-backed story repository."""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lingostory.config import settings
from lingostory.errors import DeleteFailedError, SaveFailedError
from lingostory.models.models import StoryRecord
from lingostory.models.story_models import GeneratedStory
from lingostory.monitoring import db_errors

logger = logging.getLogger(__name__)


class SqlStoryRepository:
    """Persists generated stories for one learner.

    Only the newest ``max_stored_stories`` are kept.
    """

    def __init__(self, db: Session, user_id: Optional[int] = None, max_stored_stories: Optional[int] = None):
        """Initialize the repository with a database session."""
        self.db = db
        self.user_id = user_id
        if max_stored_stories is None:
            max_stored_stories = settings.generation.max_stored_stories
        self.max_stored_stories = max_stored_stories

    def _query(self):
        return self.db.query(StoryRecord).filter(StoryRecord.user_id == self.user_id)

    def _record(self, story_id: str) -> Optional[StoryRecord]:
        return self._query().filter(StoryRecord.id == story_id).first()

    def get_all(self) -> List[GeneratedStory]:
        """Get all stories, newest first."""
        records = self._query().order_by(StoryRecord.created_at.desc()).all()
        return [record.to_story() for record in records]

    def get(self, story_id: str) -> Optional[GeneratedStory]:
        record = self._record(story_id)
        return record.to_story() if record else None

    def persist(self, story: GeneratedStory) -> None:
        """Save a new story and drop the oldest beyond the limit."""
        try:
            self.db.add(StoryRecord.from_story(story, user_id=self.user_id))
            self.db.flush()
            overflow = (
                self._query()
                .order_by(StoryRecord.created_at.desc())
                .offset(self.max_stored_stories)
                .all()
            )
            for record in overflow:
                self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            db_errors.labels(operation_type="persist").inc()
            logger.error(f"Error saving story {story.id}: {e}")
            raise SaveFailedError(story.id) from e

        if overflow:
            logger.info(f"Dropped {len(overflow)} old stories for user {self.user_id}")

    def set_favorite(self, story_id: str, is_favorite: bool) -> GeneratedStory:
        """Set the favorite flag of a story."""
        record = self._record(story_id)
        if record is None:
            raise SaveFailedError(story_id, f"Story {story_id} not found.")
        try:
            record.is_favorite = is_favorite
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            db_errors.labels(operation_type="set_favorite").inc()
            logger.error(f"Error updating story {story_id}: {e}")
            raise SaveFailedError(story_id) from e
        return record.to_story()

    def delete(self, story_id: str) -> None:
        """Delete a story."""
        record = self._record(story_id)
        if record is None:
            raise DeleteFailedError(story_id, f"Story {story_id} not found.")
        try:
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            db_errors.labels(operation_type="delete").inc()
            logger.error(f"Error deleting story {story_id}: {e}")
            raise DeleteFailedError(story_id) from e
