"""Tests for the in-memory story store."""
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest

from lingostory.errors import DeleteFailedError, SaveFailedError
from lingostory.models.story_models import (
    GeneratedStory,
    StoryLength,
    StoryType,
    WordWithMeaning,
)
from lingostory.services.story_store import StoryStore

START = datetime(2025, 5, 1, 9, 0, tzinfo=UTC)


class InMemoryRepository:
    """Dictionary-backed repository returning stories in insertion order."""

    def __init__(self):
        self.stories: Dict[str, GeneratedStory] = {}

    def get_all(self) -> List[GeneratedStory]:
        return list(self.stories.values())

    def get(self, story_id: str) -> Optional[GeneratedStory]:
        return self.stories.get(story_id)

    def persist(self, story: GeneratedStory) -> None:
        self.stories[story.id] = story

    def set_favorite(self, story_id: str, is_favorite: bool) -> GeneratedStory:
        if story_id not in self.stories:
            raise SaveFailedError(story_id)
        self.stories[story_id] = replace(self.stories[story_id], is_favorite=is_favorite)
        return self.stories[story_id]

    def delete(self, story_id: str) -> None:
        if self.stories.pop(story_id, None) is None:
            raise DeleteFailedError(story_id)


def make_story(minutes: int = 0, story_type: StoryType = StoryType.MOTIVATION) -> GeneratedStory:
    return GeneratedStory(
        title=f"Story {minutes}",
        content="Content.",
        used_words=(WordWithMeaning(1, "river", "nehir"),),
        type=story_type,
        length=StoryLength.SHORT,
        created_at=START + timedelta(minutes=minutes),
    )


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def store(repository: InMemoryRepository) -> StoryStore:
    return StoryStore(repository)


def test_load(repository: InMemoryRepository, store: StoryStore) -> None:
    """Test loading the persisted history newest first."""
    repository.persist(make_story(1))
    repository.persist(make_story(2))

    assert [story.title for story in store.load()] == ["Story 2", "Story 1"]
    assert store.get_all() == store.load()


def test_insert_puts_story_first(store: StoryStore) -> None:
    """Test that a new story appears at the head."""
    store.insert(make_story(1))
    newest = make_story(2)
    store.insert(newest)

    assert store.get_all()[0] == newest
    assert len(store.get_all()) == 2


def test_toggle_favorite_twice_restores(store: StoryStore) -> None:
    """Test that two toggles return the flag to its original value."""
    story = make_story()
    store.insert(story)

    assert store.toggle_favorite(story.id).is_favorite
    assert store.favorites() == [store.get(story.id)]
    assert not store.toggle_favorite(story.id).is_favorite
    assert store.favorites() == []


def test_toggle_unknown_story(store: StoryStore) -> None:
    """Test favoriting a story that is not in the history."""
    with pytest.raises(SaveFailedError):
        store.toggle_favorite("missing")


def test_failed_favorite_leaves_memory_untouched(repository: InMemoryRepository, store: StoryStore) -> None:
    """Test write-through: a failed write changes nothing in memory."""
    story = make_story()
    store.insert(story)
    repository.set_favorite = Mock(side_effect=SaveFailedError(story.id))

    with pytest.raises(SaveFailedError):
        store.toggle_favorite(story.id)

    assert not store.get(story.id).is_favorite


def test_failed_insert_leaves_memory_untouched(repository: InMemoryRepository, store: StoryStore) -> None:
    """Test that an unsaved story does not show up in the history."""
    repository.persist = Mock(side_effect=SaveFailedError())

    with pytest.raises(SaveFailedError):
        store.insert(make_story())

    assert store.get_all() == ()


def test_delete(store: StoryStore) -> None:
    """Test removing a story."""
    story = make_story()
    store.insert(story)
    store.delete(story.id)

    assert store.get(story.id) is None
    with pytest.raises(DeleteFailedError):
        store.delete(story.id)


def test_by_type(store: StoryStore) -> None:
    """Test filtering by story type."""
    store.insert(make_story(1, StoryType.FANTASY))
    store.insert(make_story(2, StoryType.DIALOGUE))

    assert [story.title for story in store.by_type(StoryType.FANTASY)] == ["Story 1"]
