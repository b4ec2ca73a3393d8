"""Eligibility of vocabulary for story generation."""
import logging
from typing import Any, Iterable, List, Optional

from lingostory.config import settings
from lingostory.errors import InsufficientWordsError
from lingostory.models.story_models import StoryLength, StudyDirection
from lingostory.services.interfaces import WordLookup

logger = logging.getLogger(__name__)


class EligibilityFilter:
    """Decides which words may appear in a generated story.

    A word is eligible when it has no progress record in the study direction
    (it is still being learned) or when its review interval is below the
    mastery threshold. The learning phase flag is not consulted.
    """

    def __init__(self, max_interval_days: Optional[float] = None):
        if max_interval_days is None:
            max_interval_days = settings.eligibility.max_interval_days
        self.max_interval_days = max_interval_days

    def is_eligible(self, progress: Optional[Any]) -> bool:
        if progress is None:
            return True
        return progress.interval_days < self.max_interval_days

    def eligible_words(
        self,
        words: Iterable[Any],
        progress_lookup: WordLookup,
        direction: StudyDirection,
    ) -> List[Any]:
        """Words that currently qualify for a story."""
        return [
            word for word in words
            if self.is_eligible(progress_lookup(word.id, direction))
        ]

    def eligible_count(
        self,
        words: Iterable[Any],
        progress_lookup: WordLookup,
        direction: StudyDirection,
    ) -> int:
        return len(self.eligible_words(words, progress_lookup, direction))

    @staticmethod
    def required_words(length: StoryLength) -> int:
        return length.exact_deck_words

    def check(
        self,
        words: Iterable[Any],
        progress_lookup: WordLookup,
        direction: StudyDirection,
        length: StoryLength,
    ) -> List[Any]:
        """Return eligible words or raise InsufficientWordsError."""
        eligible = self.eligible_words(words, progress_lookup, direction)
        required = self.required_words(length)
        if len(eligible) < required:
            logger.info(
                "Insufficient words for %s story: %d required, %d available",
                length.value,
                required,
                len(eligible),
            )
            raise InsufficientWordsError(required=required, available=len(eligible))
        return eligible
