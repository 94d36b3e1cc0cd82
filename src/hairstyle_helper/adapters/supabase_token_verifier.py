"""Supabase-backed bearer token verification."""

from dataclasses import dataclass

from supabase import Client

from hairstyle_helper.domain.errors import AuthFailure
from hairstyle_helper.services.tokens import TokenVerifier


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Resolves access tokens through Supabase Auth."""

    client: Client

    def verify(self, token: str) -> str:
        """Return the user id for a token, raising ``AuthFailure`` if rejected."""
        try:
            response = self.client.auth.get_user(token)
        except Exception as exc:
            raise AuthFailure("Token rejected by Supabase Auth", 401) from exc
        if response is None or response.user is None:
            raise AuthFailure("Token does not belong to a user", 401)
        return str(response.user.id)
