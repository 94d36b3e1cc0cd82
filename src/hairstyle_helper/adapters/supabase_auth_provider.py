"""Supabase Auth adapter for the session gate."""

from collections.abc import Callable
from dataclasses import dataclass

from supabase import Client

from hairstyle_helper.domain.auth import AuthSession
from hairstyle_helper.services.session_gate import AuthProvider


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Exposes Supabase Auth sessions as ``AuthSession`` values."""

    client: Client

    def get_session(self) -> AuthSession | None:
        """Return the session persisted by the Supabase client, if any."""
        return _to_auth_session(self.client.auth.get_session())

    def subscribe(
        self, callback: Callable[[AuthSession | None], None]
    ) -> Callable[[], None]:
        """Forward auth-state changes and return the unsubscribe handle."""

        def on_change(_event: object, session: object) -> None:
            callback(_to_auth_session(session))

        subscription = self.client.auth.on_auth_state_change(on_change)
        return subscription.unsubscribe

    def sign_out(self) -> None:
        self.client.auth.sign_out()


def _to_auth_session(session: object) -> AuthSession | None:
    """Convert a Supabase session into the domain model."""
    if session is None:
        return None
    user = getattr(session, "user", None)
    access_token = getattr(session, "access_token", None)
    if user is None or not access_token:
        return None
    return AuthSession(user_id=str(user.id), access_token=access_token)
