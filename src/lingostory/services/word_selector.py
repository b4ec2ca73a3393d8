"""Random selection of deck words for a story."""
import logging
import random
from typing import Any, List, Optional, Sequence

from lingostory.errors import InsufficientWordsError
from lingostory.models.story_models import StoryLength, WordWithMeaning

logger = logging.getLogger(__name__)


class WordSelector:
    """Picks the words a story should contain."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def target_count(self, length: StoryLength, available: int) -> int:
        """Number of words to request, within the length's deck word band."""
        if available < length.min_deck_words:
            raise InsufficientWordsError(required=length.min_deck_words, available=available)
        upper = min(available, length.max_deck_words)
        lower = min(max(length.exact_deck_words, length.min_deck_words), upper)
        return self.rng.randint(lower, upper)

    def select(self, words: Sequence[Any], length: StoryLength) -> List[WordWithMeaning]:
        """Randomly choose words from the eligible ones."""
        count = self.target_count(length, len(words))
        chosen = self.rng.sample(list(words), count)
        logger.debug(f"Selected {count} of {len(words)} words for a {length.value} story")
        return [WordWithMeaning.from_word(word) for word in chosen]
