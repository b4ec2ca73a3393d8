"""Database models."""
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from lingostory.models.base import Base, TimestampMixin
from lingostory.models.story_models import (
    GeneratedStory,
    StoryLength,
    StoryType,
    StudyDirection,
    WordWithMeaning,
)


class User(Base, TimestampMixin):
    """Learner model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=True)
    is_premium = Column(Boolean, default=False)
    study_direction = Column(String, default=StudyDirection.EN_TR.value)

    # Relationships
    words = relationship("UserWord", back_populates="user")
    stories = relationship("StoryRecord", back_populates="user")


class Word(Base, TimestampMixin):
    """Vocabulary word."""

    __tablename__ = "words"

    id = Column(Integer, primary_key=True)
    english = Column(String, nullable=False)
    turkish = Column(String, nullable=False)
    level = Column(String)  # e.g. "a1"

    # Relationships
    users = relationship("UserWord", back_populates="word")
    progress = relationship("WordProgress", back_populates="word")

    def __repr__(self) -> str:
        return f"<Word {self.id} {self.english!r}>"


class UserWord(Base, TimestampMixin):
    """Word selected into a learner's deck."""

    __tablename__ = "user_words"
    __table_args__ = (UniqueConstraint("user_id", "word_id"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)

    # Relationships
    user = relationship("User", back_populates="words")
    word = relationship("Word", back_populates="users")


class WordProgress(Base, TimestampMixin):
    """Spaced-repetition progress of a word in one direction."""

    __tablename__ = "word_progress"
    __table_args__ = (UniqueConstraint("user_id", "word_id", "direction"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    direction = Column(String, nullable=False)  # StudyDirection value
    interval_days = Column(Float, default=0.0)
    learning_phase = Column(Boolean, default=True)
    repetitions = Column(Integer, default=0)
    next_review = Column(DateTime(timezone=True))

    # Relationships
    word = relationship("Word", back_populates="progress")


class StoryRecord(Base):
    """Persisted generated story."""

    __tablename__ = "stories"

    id = Column(String, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    used_words = Column(JSON, nullable=False, default=list)
    topic = Column(String, nullable=True)
    story_type = Column(String, nullable=False)
    length = Column(String, nullable=False)
    is_favorite = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True)

    # Relationships
    user = relationship("User", back_populates="stories")

    @classmethod
    def from_story(cls, story: GeneratedStory, user_id=None) -> "StoryRecord":
        return cls(
            id=story.id,
            user_id=user_id,
            title=story.title,
            content=story.content,
            used_words=[word.to_dict() for word in story.used_words],
            topic=story.topic,
            story_type=story.type.value,
            length=story.length.value,
            is_favorite=story.is_favorite,
            created_at=story.created_at,
        )

    def to_story(self) -> GeneratedStory:
        created_at = self.created_at
        # SQLite drops tzinfo on the way back
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return GeneratedStory(
            id=self.id,
            title=self.title,
            content=self.content,
            used_words=tuple(WordWithMeaning.from_dict(item) for item in self.used_words or []),
            topic=self.topic,
            type=StoryType(self.story_type),
            length=StoryLength(self.length),
            is_favorite=bool(self.is_favorite),
            created_at=created_at,
        )


class QuotaUsage(Base, TimestampMixin):
    """Stories generated by a learner in one quota period."""

    __tablename__ = "quota_usage"
    __table_args__ = (UniqueConstraint("user_id", "period"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    period = Column(String, nullable=False)  # "YYYY-MM"
    used_count = Column(Integer, default=0, nullable=False)
