"""
Story provider factory and credential source.

Selects the provider from the LLM_PROVIDER setting.
"""
import logging
from typing import Optional

from lingostory.config import settings
from lingostory.errors import ConfigError
from lingostory.providers.base import StoryProvider

logger = logging.getLogger(__name__)


class EnvCredentialSource:
    """Reads the provider credential from GOOGLE_API_KEY."""

    def __init__(self, api_key: Optional[str] = None, required: bool = True):
        self.api_key = settings.gemini.api_key if api_key is None else api_key
        self.required = required

    def get_credential(self) -> str:
        if not self.api_key and self.required:
            raise ConfigError("GOOGLE_API_KEY environment variable is required")
        return self.api_key


def create_provider(provider_name: Optional[str] = None, **kwargs) -> StoryProvider:
    """
    Create a story provider instance.

    Args:
        provider_name: 'gemini', 'faker' or None for the configured provider
        **kwargs: Provider-specific configuration

    Raises:
        ValueError: If provider_name is unknown
    """
    if provider_name is None:
        provider_name = settings.generation.provider
    provider_name = provider_name.lower()

    if provider_name == "gemini":
        from lingostory.providers.gemini import GeminiStoryProvider
        provider = GeminiStoryProvider(**kwargs)
    elif provider_name == "faker":
        from lingostory.providers.faker_provider import FakerStoryProvider
        provider = FakerStoryProvider(**kwargs)
    else:
        raise ValueError(
            f"Unknown story provider: {provider_name}. Supported providers: gemini, faker"
        )

    logger.info(f"Created story provider: {type(provider).__name__}")
    return provider


def create_credential_source(provider_name: Optional[str] = None) -> EnvCredentialSource:
    """The faker provider runs without a key."""
    provider_name = (provider_name or settings.generation.provider).lower()
    return EnvCredentialSource(required=provider_name == "gemini")
