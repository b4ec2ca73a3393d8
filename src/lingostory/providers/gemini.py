"""
Google Gemini story provider.

All Gemini-specific code is isolated here. The ``genai`` module is injected
so tests can replace it.
"""
import logging
import time
from typing import Any, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from lingostory.config import settings
from lingostory.errors import EmptyResponseError, ProviderError
from lingostory.models.story_models import StoryLength
from lingostory.monitoring import generation_duration
from lingostory.providers.base import StoryProvider

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
TOP_K = 40
TOP_P = 0.95


class GeminiStoryProvider(StoryProvider):
    """Generates stories with Google's Generative AI models."""

    name = "gemini"

    def __init__(
        self,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
        genai_module: Any = genai,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.model_name = model_name or settings.generation.model or DEFAULT_GEMINI_MODEL
        self.temperature = settings.generation.temperature if temperature is None else temperature
        self._genai = genai_module
        logger.info(f"Initialized GeminiStoryProvider with model: {self.model_name}")

    def _generation_config(self, length: StoryLength):
        return self._genai.types.GenerationConfig(
            temperature=self.temperature,
            top_k=TOP_K,
            top_p=TOP_P,
            max_output_tokens=length.max_tokens,
        )

    async def complete(self, prompt: str, length: StoryLength, credential: str) -> str:
        """Generate text using the configured Gemini model."""
        start_time = time.time()
        try:
            self._genai.configure(api_key=credential)
            model = self._genai.GenerativeModel(self.model_name)
            response = await model.generate_content_async(
                prompt,
                generation_config=self._generation_config(length),
            )
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Gemini API error: {e}", exc_info=True)
            raise ProviderError(str(e), details={"provider": self.name}) from e
        except (ConnectionError, OSError) as e:
            logger.error(f"Network error generating content with Gemini: {e}", exc_info=True)
            raise ProviderError("network error", details={"provider": self.name}) from e
        finally:
            generation_duration.labels(provider=self.name).observe(time.time() - start_time)

        try:
            text = response.text
        except ValueError as e:
            # Raised when the candidate has no parts, e.g. blocked by safety filters
            finish_reason = "UNKNOWN"
            if getattr(response, "candidates", None):
                finish_reason = getattr(response.candidates[0], "finish_reason", "UNKNOWN")
            logger.warning(f"Gemini generation finished with reason: {finish_reason}. No text returned.")
            raise EmptyResponseError() from e

        if not text:
            raise EmptyResponseError()
        return text.strip()
