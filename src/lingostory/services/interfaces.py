"""Contracts of the collaborators the story core depends on."""
from typing import Any, List, Optional, Protocol

from lingostory.models.story_models import GeneratedStory, StudyDirection


class VocabularySource(Protocol):
    """Words in the learner's selected deck."""

    def all_eligible_words(self) -> List[Any]:
        ...


class ProgressSource(Protocol):
    """Read-only view of spaced-repetition progress."""

    def progress_for(self, word_id: int, direction: StudyDirection) -> Optional[Any]:
        ...


class PremiumStatusSource(Protocol):
    """Current premium subscription status, polled at workflow start."""

    def is_premium(self) -> bool:
        ...


class CredentialSource(Protocol):
    """Provides the generation provider credential.

    Raises ConfigError when the credential is missing.
    """

    def get_credential(self) -> str:
        ...


class StoryRepository(Protocol):
    """Persisted story collection.

    Mutations raise SaveFailedError or DeleteFailedError.
    """

    def get_all(self) -> List[GeneratedStory]:
        ...

    def get(self, story_id: str) -> Optional[GeneratedStory]:
        ...

    def persist(self, story: GeneratedStory) -> None:
        ...

    def set_favorite(self, story_id: str, is_favorite: bool) -> GeneratedStory:
        ...

    def delete(self, story_id: str) -> None:
        ...


class WordLookup(Protocol):
    """Callable form of ProgressSource.progress_for."""

    def __call__(self, word_id: int, direction: StudyDirection) -> Optional[Any]:
        ...
