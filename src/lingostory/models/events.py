"""Events accepted by the story controller."""
from dataclasses import dataclass, field

from lingostory.models.story_models import StoryRequest


class StoryEvent:
    """Base class for story events."""


@dataclass(frozen=True)
class LoadData(StoryEvent):
    """Reload quota and story history."""


@dataclass(frozen=True)
class RefreshQuota(StoryEvent):
    """Recompute the quota snapshot."""


@dataclass(frozen=True)
class GenerateStory(StoryEvent):
    """Run the generation workflow."""
    request: StoryRequest = field(default_factory=StoryRequest)


@dataclass(frozen=True)
class CancelGeneration(StoryEvent):
    """Abandon the in-flight generation."""


@dataclass(frozen=True)
class ToggleFavorite(StoryEvent):
    story_id: str


@dataclass(frozen=True)
class DeleteStory(StoryEvent):
    story_id: str


@dataclass(frozen=True)
class OpenStory(StoryEvent):
    story_id: str


@dataclass(frozen=True)
class CloseStory(StoryEvent):
    """Clear the currently viewed story."""
