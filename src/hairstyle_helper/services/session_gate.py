"""Authentication-state machine driving the favorites mode."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from types import TracebackType
from typing import Protocol

from hairstyle_helper.domain.auth import AuthSession, SessionState
from hairstyle_helper.services.favorites import FavoritesService
from hairstyle_helper.services.observable import Observable
from hairstyle_helper.services.telemetry import ErrorReporter, LoggingErrorReporter

logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    """Interface for the identity provider."""

    def get_session(self) -> AuthSession | None:
        """Return the currently persisted session, if any."""

    def subscribe(
        self, callback: Callable[[AuthSession | None], None]
    ) -> Callable[[], None]:
        """Register for auth-state notifications and return an unsubscribe."""

    def sign_out(self) -> None:
        """End the provider session."""


class AuthSubscription:
    """Handle returned by ``SessionGate.start``.

    After ``stop`` no further provider notification reaches the gate.
    """

    def __init__(self, gate: "SessionGate", unsubscribe: Callable[[], None]) -> None:
        self._gate = gate
        self._unsubscribe = unsubscribe
        self.active = True

    def stop(self) -> None:
        if not self.active:
            return
        self.active = False
        self._unsubscribe()
        self._gate._detach(self)

    dispose = stop

    def __enter__(self) -> "AuthSubscription":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.stop()


@dataclass
class SessionGate:
    """Tracks signed-in/out state and switches the favorites variant.

    Only changes of the signed-in boolean have side effects. Each transition
    to signed-in switches favorites to the remote variant and loads it once.
    """

    provider: AuthProvider
    favorites: FavoritesService
    reporter: ErrorReporter = field(default_factory=LoggingErrorReporter)
    session: AuthSession | None = field(default=None, init=False)
    _state: Observable[SessionState] = field(
        default_factory=lambda: Observable(SessionState.SIGNED_OUT),
        init=False,
        repr=False,
    )
    _subscription: AuthSubscription | None = field(default=None, init=False)
    _tasks: set[asyncio.Task] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        self.favorites.on_auth_failure = self.handle_auth_failure

    @property
    def state(self) -> SessionState:
        return self._state.value

    @property
    def is_signed_in(self) -> bool:
        return self.state is SessionState.SIGNED_IN

    def subscribe(self, callback: Callable[[SessionState], None]) -> Callable[[], None]:
        return self._state.subscribe(callback)

    async def start(self) -> AuthSubscription:
        """Apply the provider's current session and subscribe to changes."""
        if self._subscription is not None:
            return self._subscription
        try:
            session = self.provider.get_session()
        except Exception as exc:
            self.reporter.capture(exc, context="session lookup")
            session = None
        load = self._transition(session)
        subscription = AuthSubscription(self, self.provider.subscribe(self._on_auth_change))
        self._subscription = subscription
        if load is not None:
            await load
        return subscription

    async def sign_out(self) -> None:
        """Sign out explicitly. Local state is reset even if the provider fails."""
        try:
            self.provider.sign_out()
        except Exception as exc:
            self.reporter.capture(exc, context="sign out")
        finally:
            self._transition(None)

    def handle_auth_failure(self) -> None:
        """Treat rejected credentials as stale and sign out."""
        if not self.is_signed_in:
            return
        logger.warning("Credentials rejected, signing out")
        self._transition(None)
        try:
            self.provider.sign_out()
        except Exception as exc:
            self.reporter.capture(exc, context="sign out")

    async def wait_idle(self) -> None:
        """Wait for scheduled favorites loads to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_auth_change(self, session: AuthSession | None) -> None:
        if self._subscription is None or not self._subscription.active:
            return
        load = self._transition(session)
        if load is not None:
            self._schedule(load)

    def _transition(
        self, session: AuthSession | None
    ) -> Coroutine[object, object, object] | None:
        """Apply a session change and return the favorites load it requires."""
        if session is None:
            self.session = None
            if not self.is_signed_in:
                return None
            self._cancel_loads()
            self.favorites.use_local()
            self._state.set(SessionState.SIGNED_OUT)
            logger.info("Signed out")
            return None

        self.session = session
        if self.is_signed_in:
            self.favorites.update_credential(session)
            return None
        self.favorites.use_remote(session)
        self._state.set(SessionState.SIGNED_IN)
        logger.info("Signed in as %s", session.user_id)
        return self.favorites.load()

    def _schedule(self, load: Coroutine[object, object, object]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Clients are bound to the loop they were first used on.
            logger.warning("No running event loop, favorites load skipped")
            load.close()
            return
        task = loop.create_task(load)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _detach(self, subscription: AuthSubscription) -> None:
        if self._subscription is subscription:
            self._subscription = None
        self._cancel_loads()

    def _cancel_loads(self) -> None:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        for task in list(self._tasks):
            if task is not current:
                task.cancel()
