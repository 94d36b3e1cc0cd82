"""Server-side favorites persistence service."""

from dataclasses import dataclass
from typing import Protocol

from hairstyle_helper.domain.errors import ValidationFailure
from hairstyle_helper.domain.suggestions import Favorite


class FavoriteRecordRepository(Protocol):
    """Persistence interface for the favorites table."""

    def list_for_user(self, user_id: str) -> list[Favorite]:
        """Return a user's favorites, oldest first."""

    def create(self, user_id: str, name: str, description: str) -> Favorite:
        """Insert a favorite row and return it."""


@dataclass
class SavedFavoritesService:
    """Application service for stored favorites."""

    repository: FavoriteRecordRepository

    def list_favorites(self, user_id: str) -> list[Favorite]:
        return self.repository.list_for_user(user_id)

    def save(self, user_id: str, name: str | None, description: str | None) -> Favorite:
        """Store a favorite after checking both fields are present."""
        if not name or not description:
            raise ValidationFailure("Name and description are required", 400)
        return self.repository.create(user_id, name, description)
