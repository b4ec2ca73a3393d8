"""
Base class for story generation providers.

A provider turns a story request and the learner's eligible words into a
GeneratedStory. Word selection, prompt building and output cleaning are
shared; concrete providers only implement the model call.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from lingostory.errors import EmptyResponseError
from lingostory.models.story_models import (
    GeneratedStory,
    StoryLength,
    StoryType,
)
from lingostory.services.content_cleaner import ContentCleaner, extract_used_words
from lingostory.services.prompt_builder import PromptBuilder
from lingostory.services.word_selector import WordSelector

logger = logging.getLogger(__name__)


class StoryProvider(ABC):
    """Abstract story generation provider."""

    name = "base"

    def __init__(
        self,
        word_selector: Optional[WordSelector] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        content_cleaner: Optional[ContentCleaner] = None,
    ):
        self.word_selector = word_selector or WordSelector()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.content_cleaner = content_cleaner or ContentCleaner()

    @abstractmethod
    async def complete(self, prompt: str, length: StoryLength, credential: str) -> str:
        """Send the prompt to the model and return its raw text."""

    async def generate(
        self,
        topic: Optional[str],
        story_type: StoryType,
        length: StoryLength,
        words: Sequence[Any],
        is_premium: bool,
        credential: str,
    ) -> GeneratedStory:
        """Generate a story embedding a subset of the given words."""
        selected = self.word_selector.select(words, length)
        prompt = self.prompt_builder.build(selected, topic, story_type, length)
        logger.info(
            f"Requesting {length.value} {story_type.value} story from {self.name} "
            f"with {len(selected)} words (premium: {is_premium})"
        )

        raw_text = await self.complete(prompt, length, credential)
        if not raw_text or not raw_text.strip():
            raise EmptyResponseError()

        title, content = self.content_cleaner.clean(raw_text)
        used_words = extract_used_words(content, selected)
        unused = [word.english for word in selected if word not in used_words]
        if unused:
            logger.warning(f"Model skipped {len(unused)} words: {', '.join(unused)}")

        return GeneratedStory(
            title=title,
            content=content,
            used_words=used_words,
            topic=topic,
            type=story_type,
            length=length,
        )
