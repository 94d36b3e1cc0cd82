"""Models for hairstyle suggestions and favorites."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Suggestion(BaseModel):
    """Single hairstyle idea returned by the suggestion service."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str


class SuggestionEnvelope(BaseModel):
    """Enveloped suggestions payload."""

    suggestions: list[Suggestion]


@dataclass(frozen=True)
class Favorite:
    """A saved suggestion.

    ``id``, ``user_id`` and ``created_at`` are only set for favorites
    persisted on the server.
    """

    name: str
    description: str
    id: int | None = None
    user_id: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> "Favorite":
        """Create a local-only favorite from a suggestion."""
        return cls(name=suggestion.name, description=suggestion.description)
