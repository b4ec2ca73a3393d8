"""Offline story provider using Faker."""
import asyncio
import logging
import re
from typing import Optional

from faker import Faker

from lingostory.models.story_models import StoryLength
from lingostory.providers.base import StoryProvider

logger = logging.getLogger(__name__)


class FakerStoryProvider(StoryProvider):
    """Builds placeholder stories locally, for development without an API key."""

    name = "faker"

    def __init__(self, seed: Optional[int] = None, latency: float = 0.0, **kwargs):
        super().__init__(**kwargs)
        self.faker = Faker()
        if seed is not None:
            self.faker.seed_instance(seed)
        self.latency = latency

    async def complete(self, prompt: str, length: StoryLength, credential: str) -> str:
        """Weave the prompt's word list into random sentences."""
        if self.latency:
            await asyncio.sleep(self.latency)

        match = re.search(r"Use the following English words:\n(.+)", prompt)
        words = [word.strip() for word in match.group(1).split(",")] if match else []

        title = " ".join(self.faker.words(nb=3)).title()
        sentences = []
        for word in words:
            sentence = self.faker.sentence(nb_words=8).rstrip(".")
            sentences.append(f"{sentence} {word}.")
        while sum(len(sentence.split()) for sentence in sentences) < length.target_word_count:
            sentences.append(self.faker.sentence(nb_words=10))

        paragraphs = [" ".join(sentences[i:i + 5]) for i in range(0, len(sentences), 5)]
        logger.debug(f"Faker story with {len(words)} words and {len(paragraphs)} paragraphs")
        return f"{title}\n\n" + "\n\n".join(paragraphs)
