"""Tests for the SQLAlchemy story repository."""
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from lingostory.errors import DeleteFailedError, SaveFailedError
from lingostory.models.story_models import GeneratedStory, StoryLength, StoryType, WordWithMeaning
from lingostory.services.story_repository import SqlStoryRepository

START = datetime(2025, 5, 1, 9, 0, tzinfo=UTC)


def make_story(minutes: int = 0, **kwargs) -> GeneratedStory:
    defaults = dict(
        title=f"Story {minutes}",
        content="Bir gün river kenarında yürüdük.",
        used_words=(WordWithMeaning(1, "river", "nehir"),),
        type=StoryType.MOTIVATION,
        length=StoryLength.SHORT,
        created_at=START + timedelta(minutes=minutes),
    )
    defaults.update(kwargs)
    return GeneratedStory(**defaults)


@pytest.fixture
def repository(db, learner) -> SqlStoryRepository:
    return SqlStoryRepository(db, user_id=learner.user_id, max_stored_stories=3)


def test_get_all_newest_first(repository: SqlStoryRepository) -> None:
    """Test history ordering."""
    stories = [make_story(minutes) for minutes in (5, 1, 10)]
    for story in stories:
        repository.persist(story)

    assert [story.title for story in repository.get_all()] == ["Story 10", "Story 5", "Story 1"]


def test_persist_keeps_newest(repository: SqlStoryRepository) -> None:
    """Test that only max_stored_stories remain."""
    for minutes in range(5):
        repository.persist(make_story(minutes))

    titles = [story.title for story in repository.get_all()]
    assert titles == ["Story 4", "Story 3", "Story 2"]


def test_get(repository: SqlStoryRepository) -> None:
    """Test lookup by id."""
    story = make_story()
    repository.persist(story)

    assert repository.get(story.id) == story
    assert repository.get("missing") is None


def test_histories_are_per_user(db, repository: SqlStoryRepository) -> None:
    """Test that learners do not see each other's stories."""
    repository.persist(make_story())
    other = SqlStoryRepository(db, user_id=None)
    assert other.get_all() == []


def test_set_favorite(repository: SqlStoryRepository) -> None:
    """Test updating the favorite flag."""
    story = make_story()
    repository.persist(story)

    updated = repository.set_favorite(story.id, True)
    assert updated.is_favorite
    assert repository.get(story.id).is_favorite


def test_set_favorite_unknown_id(repository: SqlStoryRepository) -> None:
    """Test favoriting a missing story."""
    with pytest.raises(SaveFailedError) as exc_info:
        repository.set_favorite("missing", True)
    assert exc_info.value.story_id == "missing"


def test_delete(repository: SqlStoryRepository) -> None:
    """Test deleting a story."""
    story = make_story()
    repository.persist(story)
    repository.delete(story.id)
    assert repository.get_all() == []

    with pytest.raises(DeleteFailedError):
        repository.delete(story.id)


def test_persist_maps_database_errors(db, repository: SqlStoryRepository) -> None:
    """Test that SQLAlchemy failures become SaveFailedError."""
    story = make_story()
    with patch.object(db, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
        with pytest.raises(SaveFailedError):
            repository.persist(story)

    assert repository.get_all() == []


def test_delete_maps_database_errors(db, repository: SqlStoryRepository) -> None:
    """Test that SQLAlchemy failures become DeleteFailedError."""
    story = make_story()
    repository.persist(story)
    with patch.object(db, "commit", side_effect=OperationalError("DELETE", {}, Exception("locked"))):
        with pytest.raises(DeleteFailedError):
            repository.delete(story.id)

    assert repository.get(story.id) is not None
