"""Favorites repositories and the service that switches between them."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from hairstyle_helper.domain.auth import AuthSession
from hairstyle_helper.domain.errors import ErrorKind, HairstyleHelperError
from hairstyle_helper.domain.suggestions import Favorite, Suggestion
from hairstyle_helper.services.observable import Observable
from hairstyle_helper.services.telemetry import ErrorReporter, LoggingErrorReporter

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save favorite. Please try again."
LOAD_FAILED_MESSAGE = "Failed to load your favorites."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."


class FavoritesApi(Protocol):
    """Authenticated access to server-persisted favorites."""

    async def list_favorites(self, access_token: str) -> list[Favorite]:
        """Return every favorite stored for the token's identity."""

    async def save_favorite(
        self, access_token: str, name: str, description: str
    ) -> Favorite:
        """Persist a favorite and return the stored row."""


class FavoritesRepository(Protocol):
    """Interface shared by the local and remote favorites variants."""

    def list(self) -> list[Favorite]:
        """Return the cached favorites."""

    async def add(self, suggestion: Suggestion) -> Favorite:
        """Add a suggestion unless one with the same name is present."""

    async def load_initial(self) -> list[Favorite]:
        """Populate the cache from the backing store."""


@dataclass
class LocalFavoritesRepository(FavoritesRepository):
    """In-memory favorites used while signed out."""

    favorites: list[Favorite] = field(default_factory=list)

    def list(self) -> list[Favorite]:
        return list(self.favorites)

    async def add(self, suggestion: Suggestion) -> Favorite:
        existing = _find_by_name(self.favorites, suggestion.name)
        if existing is not None:
            return existing
        favorite = Favorite.from_suggestion(suggestion)
        self.favorites.append(favorite)
        return favorite

    async def load_initial(self) -> list[Favorite]:
        return []


@dataclass
class RemoteFavoritesRepository(FavoritesRepository):
    """Favorites persisted on the server for an authenticated identity.

    Dedup is checked against the local cache only. Concurrent adds of the same
    name share a single pending persist call, so a rapid double-add produces
    one server row.
    """

    api: FavoritesApi
    session: AuthSession
    favorites: list[Favorite] = field(default_factory=list)
    _pending: dict[str, asyncio.Future[Favorite]] = field(
        default_factory=dict, repr=False
    )

    def list(self) -> list[Favorite]:
        return list(self.favorites)

    async def load_initial(self) -> list[Favorite]:
        """Replace the cache wholesale with the server's favorites."""
        self.favorites = list(await self.api.list_favorites(self.session.access_token))
        logger.info("Loaded %d favorites", len(self.favorites))
        return self.list()

    async def add(self, suggestion: Suggestion) -> Favorite:
        existing = _find_by_name(self.favorites, suggestion.name)
        if existing is not None:
            return existing
        name = suggestion.name
        pending = self._pending.get(name)
        if pending is None:
            pending = asyncio.ensure_future(self._persist(suggestion))
            self._pending[name] = pending
            pending.add_done_callback(lambda _: self._pending.pop(name, None))
        return await asyncio.shield(pending)

    async def _persist(self, suggestion: Suggestion) -> Favorite:
        saved = await self.api.save_favorite(
            self.session.access_token, suggestion.name, suggestion.description
        )
        existing = _find_by_name(self.favorites, saved.name)
        if existing is not None:
            return existing
        self.favorites.append(saved)
        return saved


@dataclass
class FavoritesService:
    """Holds the active favorites variant and the shared favorites error slot.

    Failures are reported and stored in ``error``. An authorization failure
    additionally invokes ``on_auth_failure``. A failure from a variant that has
    since been replaced is only reported.
    """

    api: FavoritesApi
    reporter: ErrorReporter = field(default_factory=LoggingErrorReporter)
    on_auth_failure: Callable[[], None] | None = None
    error: str | None = None
    _repository: FavoritesRepository = field(
        default_factory=LocalFavoritesRepository, repr=False
    )
    _favorites: Observable[tuple[Favorite, ...]] = field(
        default_factory=lambda: Observable(()), repr=False
    )

    @property
    def repository(self) -> FavoritesRepository:
        return self._repository

    @property
    def is_remote(self) -> bool:
        return isinstance(self._repository, RemoteFavoritesRepository)

    @property
    def favorites(self) -> list[Favorite]:
        return list(self._favorites.value)

    def subscribe(
        self, callback: Callable[[tuple[Favorite, ...]], None]
    ) -> Callable[[], None]:
        return self._favorites.subscribe(callback)

    def use_local(self) -> None:
        """Switch to an empty in-memory variant, discarding the current cache."""
        self._repository = LocalFavoritesRepository()
        self._publish()

    def use_remote(self, session: AuthSession) -> None:
        """Switch to the server-backed variant. Call ``load`` to populate it."""
        self._repository = RemoteFavoritesRepository(api=self.api, session=session)
        self._publish()

    def update_credential(self, session: AuthSession) -> None:
        """Swap the bearer credential of the remote variant without reloading."""
        if isinstance(self._repository, RemoteFavoritesRepository):
            self._repository.session = session

    async def load(self) -> list[Favorite] | None:
        """Populate the active variant, returning ``None`` on failure."""
        repository = self._repository
        try:
            favorites = await repository.load_initial()
        except Exception as exc:
            self._fail(repository, exc, "load", LOAD_FAILED_MESSAGE)
            return None
        if repository is self._repository:
            self.error = None
            self._publish()
        return favorites

    async def add(self, suggestion: Suggestion) -> Favorite | None:
        """Add a suggestion to the active variant, returning ``None`` on failure."""
        repository = self._repository
        self.error = None
        try:
            favorite = await repository.add(suggestion)
        except Exception as exc:
            self._fail(repository, exc, "save", SAVE_FAILED_MESSAGE)
            return None
        if repository is self._repository:
            self._publish()
        return favorite

    def _fail(
        self,
        repository: FavoritesRepository,
        exc: Exception,
        action: str,
        message: str,
    ) -> None:
        self.reporter.capture(exc, context=f"favorites {action}")
        if repository is not self._repository:
            logger.info("Ignoring %s failure from a replaced favorites variant", action)
            return
        if isinstance(exc, HairstyleHelperError) and exc.kind is ErrorKind.AUTH:
            self.error = SESSION_EXPIRED_MESSAGE
            if self.on_auth_failure is not None:
                self.on_auth_failure()
            return
        self.error = message

    def _publish(self) -> None:
        self._favorites.set(tuple(self._repository.list()))


def _find_by_name(favorites: Sequence[Favorite], name: str) -> Favorite | None:
    for favorite in favorites:
        if favorite.name == name:
            return favorite
    return None
