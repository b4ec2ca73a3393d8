"""Domain models for story generation."""
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from lingostory.errors import ErrorKind


class StudyDirection(Enum):
    """Direction a word is studied in."""
    EN_TR = "en_tr"
    TR_EN = "tr_en"


class StoryType(Enum):
    """Style of a generated story."""
    MOTIVATION = "motivation"
    DIALOGUE = "dialogue"
    FANTASY = "fantasy"

    @property
    def prompt_instruction(self) -> str:
        """Instruction given to the model for this story type."""
        return {
            StoryType.MOTIVATION: "write a motivational and inspiring piece",
            StoryType.DIALOGUE: "write an everyday dialogue between two people",
            StoryType.FANTASY: (
                "write a kid-friendly fantasy story with an original, "
                "copyright-free hero"
            ),
        }[self]


@dataclass(frozen=True)
class DeckWordBand:
    """Word-count range a story length requires."""
    min_deck_words: int
    exact_deck_words: int
    max_deck_words: int


class StoryLength(Enum):
    """Story length category."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @property
    def band(self) -> DeckWordBand:
        return _LENGTH_BANDS[self]

    @property
    def min_deck_words(self) -> int:
        return self.band.min_deck_words

    @property
    def exact_deck_words(self) -> int:
        return self.band.exact_deck_words

    @property
    def max_deck_words(self) -> int:
        return self.band.max_deck_words

    @property
    def target_word_count(self) -> int:
        """Approximate length of the story text."""
        return {StoryLength.SHORT: 180, StoryLength.MEDIUM: 350, StoryLength.LONG: 600}[self]

    @property
    def max_tokens(self) -> int:
        """Output token budget for the model."""
        return {StoryLength.SHORT: 300, StoryLength.MEDIUM: 550, StoryLength.LONG: 900}[self]


_LENGTH_BANDS = {
    StoryLength.SHORT: DeckWordBand(8, 10, 12),
    StoryLength.MEDIUM: DeckWordBand(12, 15, 20),
    StoryLength.LONG: DeckWordBand(20, 25, 40),
}


class GenerationPhase(Enum):
    """Cosmetic progress labels shown while a story is generated.

    The phases do not reflect real provider progress.
    """
    COLLECTING_WORDS = "collecting_words"
    WRITING_STORY = "writing_story"
    FINAL_TOUCHES = "final_touches"

    @classmethod
    def timeline(cls) -> List["GenerationPhase"]:
        """Phases in display order."""
        return [cls.COLLECTING_WORDS, cls.WRITING_STORY, cls.FINAL_TOUCHES]


@dataclass(frozen=True)
class WordWithMeaning:
    """A vocabulary word embedded in a story."""
    id: int
    english: str
    turkish: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "english": self.english, "turkish": self.turkish}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WordWithMeaning":
        return cls(id=int(data["id"]), english=data["english"], turkish=data["turkish"])

    @classmethod
    def from_word(cls, word: Any) -> "WordWithMeaning":
        return cls(id=word.id, english=word.english, turkish=word.turkish)


@dataclass(frozen=True)
class StoryRequest:
    """Parameters of a story generation request."""
    type: StoryType = StoryType.MOTIVATION
    length: StoryLength = StoryLength.SHORT
    topic: Optional[str] = None


@dataclass(frozen=True)
class GeneratedStory:
    """A story produced by a successful generation."""
    title: str
    content: str
    used_words: Tuple[WordWithMeaning, ...]
    type: StoryType
    length: StoryLength
    topic: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    is_favorite: bool = False

    @property
    def preview(self) -> str:
        """First 80 characters of the content."""
        if len(self.content) <= 80:
            return self.content
        return f"{self.content[:80]}..."


@dataclass(frozen=True)
class Quota:
    """Story allowance for the current period."""
    limit: int
    remaining: int
    is_premium: bool
    period: str = ""

    def __post_init__(self):
        if not 0 <= self.remaining <= self.limit:
            raise ValueError(f"Quota remaining {self.remaining} outside [0, {self.limit}]")

    @property
    def used(self) -> int:
        return self.limit - self.remaining

    @property
    def has_quota(self) -> bool:
        return self.remaining > 0

    @property
    def display_text(self) -> str:
        return f"{self.remaining}/{self.limit}"


@dataclass(frozen=True)
class StoryErrorInfo:
    """Presentation view of a failure."""
    kind: ErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_exception(cls, error: Any) -> "StoryErrorInfo":
        return cls(kind=error.kind, message=error.message, details=dict(error.details))


@dataclass(frozen=True)
class OrchestratorState:
    """State owned by the generation orchestrator."""
    is_generating: bool = False
    current_phase: GenerationPhase = GenerationPhase.COLLECTING_WORDS
    last_error: Optional[ErrorKind] = None


@dataclass(frozen=True)
class StoryState:
    """Immutable snapshot consumed by the presentation layer."""
    is_loading: bool = False
    is_generating: bool = False
    current_phase: GenerationPhase = GenerationPhase.COLLECTING_WORDS
    quota: Optional[Quota] = None
    stories: Tuple[GeneratedStory, ...] = ()
    current_story: Optional[GeneratedStory] = None
    error: Optional[StoryErrorInfo] = None


def newest_first(stories: Iterable[GeneratedStory]) -> List[GeneratedStory]:
    """Sort stories by creation time, newest first."""
    return sorted(stories, key=lambda story: story.created_at, reverse=True)
