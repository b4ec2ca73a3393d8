"""Learner data: deck words, progress and premium status."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from lingostory.models.models import User, UserWord, Word, WordProgress
from lingostory.models.story_models import StudyDirection

logger = logging.getLogger(__name__)


class LearnerService:
    """Database view of one learner for the story core."""

    def __init__(self, db: Session, user_id: int):
        """Initialize the service with a database session."""
        self.db = db
        self.user_id = user_id

    def get_user(self) -> User:
        user = self.db.query(User).filter(User.id == self.user_id).first()
        if not user:
            raise ValueError(f"User {self.user_id} not found")
        return user

    def all_eligible_words(self) -> List[Word]:
        """Words in the learner's selected deck."""
        return (
            self.db.query(Word)
            .join(UserWord, UserWord.word_id == Word.id)
            .filter(UserWord.user_id == self.user_id)
            .order_by(Word.id)
            .all()
        )

    def progress_for(self, word_id: int, direction: StudyDirection) -> Optional[WordProgress]:
        return (
            self.db.query(WordProgress)
            .filter(
                WordProgress.user_id == self.user_id,
                WordProgress.word_id == word_id,
                WordProgress.direction == direction.value,
            )
            .first()
        )

    def is_premium(self) -> bool:
        return bool(self.get_user().is_premium)

    def set_premium(self, value: bool) -> None:
        user = self.get_user()
        user.is_premium = value
        self.db.commit()
        logger.info(f"Premium status of user {self.user_id} set to {value}")

    def study_direction(self) -> StudyDirection:
        return StudyDirection(self.get_user().study_direction or StudyDirection.EN_TR.value)

    def add_words(self, words: List[Word]) -> None:
        """Select words into the learner's deck."""
        existing = {
            word_id for (word_id,) in
            self.db.query(UserWord.word_id).filter(UserWord.user_id == self.user_id).all()
        }
        for word in words:
            if word.id is None:
                self.db.add(word)
                self.db.flush()
            if word.id not in existing:
                self.db.add(UserWord(user_id=self.user_id, word_id=word.id))
                existing.add(word.id)
        self.db.commit()

    def record_progress(
        self,
        word_id: int,
        direction: StudyDirection,
        interval_days: float,
        learning_phase: bool = False,
    ) -> WordProgress:
        """Create or update a progress record."""
        progress = self.progress_for(word_id, direction)
        if progress is None:
            progress = WordProgress(user_id=self.user_id, word_id=word_id, direction=direction.value)
            self.db.add(progress)
        progress.interval_days = interval_days
        progress.learning_phase = learning_phase
        self.db.commit()
        return progress


def get_or_create_user(db: Session, username: str) -> User:
    """Get existing user or create a new one."""
    user = db.query(User).filter(User.username == username).first()
    if not user:
        user = User(username=username)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created user {username}")
    return user
