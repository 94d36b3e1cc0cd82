"""HTTP client for the authenticated favorites routes."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

import httpx

from hairstyle_helper.adapters.api_errors import decode_json, raise_for_api_error
from hairstyle_helper.domain.errors import MalformedResponse, NetworkFailure
from hairstyle_helper.domain.suggestions import Favorite
from hairstyle_helper.services.favorites import FavoritesApi


@dataclass
class HttpxFavoritesClient(FavoritesApi):
    """Favorites client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    @classmethod
    def create(cls, base_url: str, timeout: float = 30) -> "HttpxFavoritesClient":
        """Create a favorites client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def list_favorites(self, access_token: str) -> list[Favorite]:
        """Fetch every favorite for the token's identity."""
        body = await self._request("GET", "/api/favorites", access_token)
        if not isinstance(body, list):
            raise MalformedResponse("Favorites response is not a list")
        return [parse_favorite_row(row) for row in body]

    async def save_favorite(
        self, access_token: str, name: str, description: str
    ) -> Favorite:
        """Persist a favorite and return the stored row."""
        body = await self._request(
            "POST",
            "/api/saveFavorite",
            access_token,
            json={"name": name, "description": description},
        )
        return parse_favorite_row(body)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str,
        json: dict[str, object] | None = None,
    ) -> object:
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers={"Authorization": f"Bearer {access_token}"},
                json=json,
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise NetworkFailure(f"Request to {path} failed: {exc}") from exc
        raise_for_api_error(response)
        return decode_json(response)


def parse_favorite_row(row: object) -> Favorite:
    """Parse a ``{id, userId, name, description, createdAt}`` row."""
    if not isinstance(row, Mapping):
        raise MalformedResponse("Favorite row is not an object")
    name = row.get("name")
    description = row.get("description")
    if not isinstance(name, str) or not isinstance(description, str):
        raise MalformedResponse("Favorite row is missing name or description")
    created_raw = row.get("createdAt")
    raw_id = row.get("id")
    user_id = row.get("userId")
    try:
        created_at = (
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        )
        favorite_id = int(raw_id) if raw_id is not None else None
    except (TypeError, ValueError) as exc:
        raise MalformedResponse(f"Favorite row has an invalid field: {exc}") from exc
    return Favorite(
        name=name,
        description=description,
        id=favorite_id,
        user_id=str(user_id) if user_id is not None else None,
        created_at=created_at,
    )
