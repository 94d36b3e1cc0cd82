"""Generation result types and orchestrator state snapshots."""

from dataclasses import dataclass, field
from enum import StrEnum

from hairstyle_helper.domain.suggestions import Suggestion


class OperationKind(StrEnum):
    """The three generation request types."""

    SUGGESTIONS = "suggestions"
    IMAGE = "image"
    AUDIO = "audio"


@dataclass(frozen=True)
class ImageResult:
    url: str


@dataclass(frozen=True)
class AudioResult:
    url: str


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Failed:
    reason: str


GenerationResult = ImageResult | AudioResult | Pending | Failed


@dataclass(frozen=True)
class GenerationState:
    """Immutable snapshot of everything the orchestrator owns."""

    suggestions: tuple[Suggestion, ...] = ()
    selected: Suggestion | None = None
    image: GenerationResult | None = None
    audio: GenerationResult | None = None
    busy: frozenset[OperationKind] = frozenset()
    errors: dict[OperationKind, str] = field(default_factory=dict)
