"""Tests for the learner service."""
import pytest

from lingostory.models.story_models import StudyDirection
from lingostory.services.learner_service import LearnerService, get_or_create_user


def test_get_or_create_user(db) -> None:
    """Test user creation and retrieval."""
    user = get_or_create_user(db, "ayse")
    assert user.id is not None
    assert not user.is_premium
    assert get_or_create_user(db, "ayse").id == user.id


def test_deck_words(learner: LearnerService, make_deck) -> None:
    """Test that only deck words are returned."""
    words = make_deck(4)
    other = LearnerService(learner.db, get_or_create_user(learner.db, "other").id)

    assert [word.id for word in learner.all_eligible_words()] == [word.id for word in words]
    assert other.all_eligible_words() == []


def test_add_words_is_idempotent(learner: LearnerService, make_deck) -> None:
    """Test that re-adding deck words does not duplicate them."""
    words = make_deck(3)
    learner.add_words(words)
    assert len(learner.all_eligible_words()) == 3


def test_record_progress(learner: LearnerService, make_deck) -> None:
    """Test creating and updating progress records."""
    word = make_deck(1)[0]
    assert learner.progress_for(word.id, StudyDirection.EN_TR) is None

    learner.record_progress(word.id, StudyDirection.EN_TR, interval_days=4, learning_phase=True)
    progress = learner.record_progress(word.id, StudyDirection.EN_TR, interval_days=25)

    assert progress.interval_days == 25
    assert not progress.learning_phase
    assert learner.progress_for(word.id, StudyDirection.TR_EN) is None


def test_premium_and_direction(learner: LearnerService) -> None:
    """Test learner flags."""
    assert not learner.is_premium()
    learner.set_premium(True)
    assert learner.is_premium()
    assert learner.study_direction() == StudyDirection.EN_TR


def test_unknown_user(db) -> None:
    """Test lookups for a missing learner."""
    with pytest.raises(ValueError):
        LearnerService(db, 999).is_premium()
