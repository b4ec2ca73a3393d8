"""Test configuration."""
import os
from pathlib import Path
from typing import Callable, Generator, List

import pytest
from dotenv import load_dotenv
from faker import Faker

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lingostory.models.base import init_db
from lingostory.models.models import Word
from lingostory.services.learner_service import LearnerService, get_or_create_user

fake = Faker()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh in-memory database session for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def learner(db: Session) -> LearnerService:
    """Create a learner with an empty deck."""
    user = get_or_create_user(db, fake.user_name())
    return LearnerService(db, user.id)


@pytest.fixture
def make_deck(learner: LearnerService) -> Callable[[int], List[Word]]:
    """Return a helper adding ``count`` words to the learner's deck."""

    def _make_deck(count: int) -> List[Word]:
        # Numeric suffix keeps every word unique and distinct from filler text
        words = [Word(english=f"{fake.word()}{i}", turkish=f"{fake.word()}{i}") for i in range(count)]
        learner.add_words(words)
        return words

    return _make_deck
