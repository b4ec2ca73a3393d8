"""In-memory projection of the persisted story history."""
import logging
from typing import List, Optional, Tuple

from lingostory.errors import SaveFailedError
from lingostory.models.story_models import GeneratedStory, StoryType, newest_first
from lingostory.monitoring import favorite_toggles, stories_deleted
from lingostory.services.interfaces import StoryRepository

logger = logging.getLogger(__name__)


class StoryStore:
    """Single writer of the story history.

    Every mutation is written through to the repository first and the
    in-memory list is reloaded afterwards. A failed write leaves the
    in-memory view untouched.
    """

    def __init__(self, repository: StoryRepository):
        self.repository = repository
        self._stories: Tuple[GeneratedStory, ...] = ()

    def load(self) -> Tuple[GeneratedStory, ...]:
        """Reload the history from the repository."""
        self._stories = tuple(newest_first(self.repository.get_all()))
        return self._stories

    def get_all(self) -> Tuple[GeneratedStory, ...]:
        """Stories, newest first."""
        return self._stories

    def get(self, story_id: str) -> Optional[GeneratedStory]:
        for story in self._stories:
            if story.id == story_id:
                return story
        return None

    def favorites(self) -> List[GeneratedStory]:
        return [story for story in self._stories if story.is_favorite]

    def by_type(self, story_type: StoryType) -> List[GeneratedStory]:
        return [story for story in self._stories if story.type == story_type]

    def insert(self, story: GeneratedStory) -> None:
        """Add a new story at the head of the history."""
        self.repository.persist(story)
        self.load()
        logger.info("Stored story %s (%d in history)", story.id, len(self._stories))

    def toggle_favorite(self, story_id: str) -> GeneratedStory:
        """Flip the favorite flag and return the updated story."""
        story = self.get(story_id)
        if story is None:
            raise SaveFailedError(story_id, f"Story {story_id} not found.")

        self.repository.set_favorite(story_id, not story.is_favorite)
        self.load()
        favorite_toggles.inc()

        updated = self.get(story_id)
        if updated is None:
            raise SaveFailedError(story_id, f"Story {story_id} disappeared after update.")
        return updated

    def delete(self, story_id: str) -> None:
        """Remove a story from the history."""
        self.repository.delete(story_id)
        self.load()
        stories_deleted.inc()
        logger.info("Deleted story %s", story_id)
