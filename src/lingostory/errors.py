"""
Error taxonomy for story generation.

Every failure the core can report is a StoryError carrying a machine-readable
ErrorKind, a user-facing message and a details dict for presentation.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Classification of story generation failures."""
    INSUFFICIENT_WORDS = "insufficient_words"
    QUOTA_EXHAUSTED = "quota_exhausted"
    TOPIC_REJECTED = "topic_rejected"
    GENERATION_IN_PROGRESS = "generation_in_progress"
    CANCELLED = "cancelled"
    CONFIG = "config"
    PROVIDER = "provider"
    SAVE_FAILED = "save_failed"
    DELETE_FAILED = "delete_failed"
    UNKNOWN = "unknown"


class StoryError(Exception):
    """Base exception for story generation errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InsufficientWordsError(StoryError):
    """Raised when too few eligible words exist for the requested length."""

    kind = ErrorKind.INSUFFICIENT_WORDS

    def __init__(self, required: int, available: int):
        super().__init__(
            f"Not enough words: at least {required} required, {available} available. "
            "Learn more words and try again.",
            details={"required": required, "available": available},
        )
        self.required = required
        self.available = available


class QuotaExhaustedError(StoryError):
    """Raised when the monthly story quota is used up."""

    kind = ErrorKind.QUOTA_EXHAUSTED

    def __init__(self, remaining: int, limit: int, is_premium: bool = False):
        if is_premium:
            message = f"You reached the monthly limit of {limit} stories. It resets next month."
        else:
            message = f"You reached the monthly limit of {limit} stories. Upgrade to premium for more."
        super().__init__(
            message,
            details={"remaining": remaining, "limit": limit, "is_premium": is_premium},
        )
        self.remaining = remaining
        self.limit = limit


class TopicRejectedError(StoryError):
    """Raised when a story topic fails content validation."""

    kind = ErrorKind.TOPIC_REJECTED

    def __init__(self, reason: str, message: str):
        super().__init__(message, details={"reason": reason})
        self.reason = reason


class GenerationInProgressError(StoryError):
    """Raised when a second generation is requested while one is running."""

    kind = ErrorKind.GENERATION_IN_PROGRESS

    def __init__(self):
        super().__init__("A story is already being generated.")


class GenerationCancelledError(StoryError):
    """Raised when an in-flight generation was cancelled."""

    kind = ErrorKind.CANCELLED

    def __init__(self):
        super().__init__("Story generation was cancelled.")


class ConfigError(StoryError):
    """Raised when the provider credential is missing or invalid."""

    kind = ErrorKind.CONFIG

    def __init__(self, message: str = "API key not found. Please update the application."):
        super().__init__(message)


class ProviderError(StoryError):
    """Raised when the generation call fails or returns unusable output."""

    kind = ErrorKind.PROVIDER

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Story generation failed: {message}", details=details)


class ProviderTimeoutError(ProviderError):
    """Raised when the provider does not answer in time."""

    def __init__(self, timeout: float):
        super().__init__(f"request timed out after {timeout:g} seconds", details={"timeout": timeout})
        self.timeout = timeout


class EmptyResponseError(ProviderError):
    """Raised when the provider returns no text."""

    def __init__(self):
        super().__init__("the model returned an empty response")


class SaveFailedError(StoryError):
    """Raised when a story mutation cannot be persisted."""

    kind = ErrorKind.SAVE_FAILED

    def __init__(self, story_id: Optional[str] = None, message: str = "Story could not be saved."):
        super().__init__(message, details={"story_id": story_id} if story_id else None)
        self.story_id = story_id


class DeleteFailedError(StoryError):
    """Raised when a story cannot be deleted."""

    kind = ErrorKind.DELETE_FAILED

    def __init__(self, story_id: Optional[str] = None, message: str = "Story could not be deleted."):
        super().__init__(message, details={"story_id": story_id} if story_id else None)
        self.story_id = story_id


class UnknownStoryError(StoryError):
    """Wraps an unexpected exception."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, error: BaseException):
        super().__init__(
            f"Unexpected error: {error}",
            details={"error_type": type(error).__name__},
        )
        self.original = error
