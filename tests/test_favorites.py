"""Tests for favorites repositories and the favorites service."""

import asyncio

from hairstyle_helper.domain.auth import AuthSession
from hairstyle_helper.domain.errors import ServerFailure
from hairstyle_helper.domain.suggestions import Suggestion
from hairstyle_helper.services.favorites import (
    LOAD_FAILED_MESSAGE,
    SAVE_FAILED_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
    FavoritesService,
    LocalFavoritesRepository,
    RemoteFavoritesRepository,
)
from tests.conftest import InMemoryFavoritesApi, RecordingErrorReporter

BOB = Suggestion(name="Bob", description="short and sleek.")
SESSION = AuthSession(user_id="user-1", access_token="token-1")


def _api() -> InMemoryFavoritesApi:
    api = InMemoryFavoritesApi()
    api.valid_tokens["token-1"] = "user-1"
    return api


def test_local_add_creates_unpersisted_favorite() -> None:
    repository = LocalFavoritesRepository()

    favorite = asyncio.run(repository.add(BOB))

    assert favorite.name == "Bob"
    assert favorite.id is None
    assert favorite.user_id is None
    assert favorite.created_at is None


def test_local_add_is_idempotent_by_name() -> None:
    repository = LocalFavoritesRepository()

    first = asyncio.run(repository.add(BOB))
    second = asyncio.run(repository.add(Suggestion(name="Bob", description="other")))

    assert second is first
    assert len(repository.list()) == 1


def test_local_dedup_is_case_sensitive() -> None:
    repository = LocalFavoritesRepository()

    asyncio.run(repository.add(BOB))
    asyncio.run(repository.add(Suggestion(name="bob", description="lower")))

    assert [item.name for item in repository.list()] == ["Bob", "bob"]


def test_local_load_initial_is_empty() -> None:
    assert asyncio.run(LocalFavoritesRepository().load_initial()) == []


def test_remote_load_initial_replaces_cache() -> None:
    api = _api()
    api.seed("token-1", "user-1", ["Pixie", "Shag"])
    repository = RemoteFavoritesRepository(api=api, session=SESSION)
    asyncio.run(repository.add(BOB))

    loaded = asyncio.run(repository.load_initial())

    assert [item.name for item in loaded] == ["Pixie", "Shag", "Bob"]
    assert repository.list() == loaded


def test_remote_sequential_adds_persist_once() -> None:
    api = _api()
    repository = RemoteFavoritesRepository(api=api, session=SESSION)

    first = asyncio.run(repository.add(BOB))
    second = asyncio.run(repository.add(BOB))

    assert second is first
    assert first.id is not None
    assert first.user_id == "user-1"
    assert len(repository.list()) == 1
    assert api.save_calls == 1


def test_remote_concurrent_adds_share_one_persist_call() -> None:
    async def scenario() -> tuple[object, object, RemoteFavoritesRepository, int]:
        release = asyncio.Event()
        api = _api()
        api.release = release
        repository = RemoteFavoritesRepository(api=api, session=SESSION)
        first = asyncio.create_task(repository.add(BOB))
        second = asyncio.create_task(repository.add(BOB))
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(first, second)
        return results[0], results[1], repository, api.save_calls

    first, second, repository, save_calls = asyncio.run(scenario())

    assert first is second
    assert save_calls == 1
    assert len(repository.list()) == 1


def test_service_add_stores_error_on_failure() -> None:
    class BrokenApi(InMemoryFavoritesApi):
        async def save_favorite(self, access_token, name, description):  # type: ignore[no-untyped-def]
            raise ServerFailure("Error saving favorite", 500)

    reporter = RecordingErrorReporter()
    service = FavoritesService(api=BrokenApi(), reporter=reporter)
    service.use_remote(SESSION)

    result = asyncio.run(service.add(BOB))

    assert result is None
    assert service.error == SAVE_FAILED_MESSAGE
    assert service.favorites == []
    assert reporter.captured[0][1] == "favorites save"


def test_service_auth_failure_invokes_hook() -> None:
    triggered: list[bool] = []
    service = FavoritesService(
        api=InMemoryFavoritesApi(),
        reporter=RecordingErrorReporter(),
        on_auth_failure=lambda: triggered.append(True),
    )
    service.use_remote(AuthSession(user_id="user-1", access_token="expired"))

    result = asyncio.run(service.load())

    assert result is None
    assert service.error == SESSION_EXPIRED_MESSAGE
    assert triggered == [True]


def test_service_load_failure_message() -> None:
    class OfflineApi(InMemoryFavoritesApi):
        async def list_favorites(self, access_token):  # type: ignore[no-untyped-def]
            raise ServerFailure("down", 500)

    service = FavoritesService(api=OfflineApi(), reporter=RecordingErrorReporter())
    service.use_remote(SESSION)

    assert asyncio.run(service.load()) is None
    assert service.error == LOAD_FAILED_MESSAGE


def test_service_mode_switch_discards_cache() -> None:
    api = _api()
    api.seed("token-1", "user-1", ["Pixie"])
    service = FavoritesService(api=api, reporter=RecordingErrorReporter())
    asyncio.run(service.add(BOB))
    assert service.is_remote is False

    service.use_remote(SESSION)
    asyncio.run(service.load())
    assert [item.name for item in service.favorites] == ["Pixie"]

    service.use_local()
    assert service.favorites == []
    assert service.is_remote is False


def test_service_update_credential_keeps_cache() -> None:
    api = _api()
    api.valid_tokens["token-2"] = "user-1"
    service = FavoritesService(api=api, reporter=RecordingErrorReporter())
    service.use_remote(SESSION)
    asyncio.run(service.add(BOB))

    service.update_credential(AuthSession(user_id="user-1", access_token="token-2"))
    asyncio.run(service.add(Suggestion(name="Shag", description="choppy.")))

    assert [item.name for item in service.favorites] == ["Bob", "Shag"]
    assert api.list_calls == 0


def test_service_notifies_subscribers() -> None:
    service = FavoritesService(api=_api(), reporter=RecordingErrorReporter())
    seen: list[int] = []
    service.subscribe(lambda favorites: seen.append(len(favorites)))

    asyncio.run(service.add(BOB))

    assert seen == [1]


def test_service_ignores_auth_failure_from_replaced_variant() -> None:
    async def scenario() -> tuple[FavoritesService, list[bool]]:
        api = _api()
        api.seed("token-1", "user-1", ["Pixie"])
        api.seed("token-2", "user-2", ["Shag"])
        stale = asyncio.Event()
        api.list_gates["token-1"] = stale
        triggered: list[bool] = []
        service = FavoritesService(
            api=api,
            reporter=RecordingErrorReporter(),
            on_auth_failure=lambda: triggered.append(True),
        )

        service.use_remote(SESSION)
        first_load = asyncio.ensure_future(service.load())
        await asyncio.sleep(0)
        service.use_local()
        service.use_remote(AuthSession(user_id="user-2", access_token="token-2"))
        await service.load()

        del api.valid_tokens["token-1"]
        stale.set()
        assert await first_load is None
        return service, triggered

    service, triggered = asyncio.run(scenario())

    assert triggered == []
    assert service.error is None
    assert [item.name for item in service.favorites] == ["Shag"]
