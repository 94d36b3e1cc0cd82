"""Supabase implementation for the favorites table."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from hairstyle_helper.domain.suggestions import Favorite
from hairstyle_helper.services.saved_favorites import FavoriteRecordRepository

_COLUMNS = "id, user_id, name, description, created_at"


@dataclass
class SupabaseFavoriteRepository(FavoriteRecordRepository):
    """Supabase-backed repository for saved favorites."""

    client: Client

    def list_for_user(self, user_id: str) -> list[Favorite]:
        """Return a user's favorites, oldest first."""
        response = (
            self.client.table("favorites")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [_parse_favorite(row) for row in response.data or []]

    def create(self, user_id: str, name: str, description: str) -> Favorite:
        """Insert a favorite row and return it."""
        response = (
            self.client.table("favorites")
            .insert({"user_id": user_id, "name": name, "description": description})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save favorite in Supabase")
        return _parse_favorite(response.data[0])


def _parse_favorite(row: dict[str, object]) -> Favorite:
    """Parse a favorites row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return Favorite(
        id=int(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row.get("name", "")),
        description=str(row.get("description", "")),
        created_at=created_at,
    )
