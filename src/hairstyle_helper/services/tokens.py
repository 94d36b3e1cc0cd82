"""Bearer-token authentication for the favorites routes."""

from typing import Protocol

from hairstyle_helper.domain.errors import AuthFailure


class TokenVerifier(Protocol):
    """Resolves a bearer token to the identity it belongs to."""

    def verify(self, token: str) -> str:
        """Return the user id for ``token`` or raise ``AuthFailure``."""


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        raise AuthFailure("Missing Authorization header", 401)
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthFailure("Invalid Authorization header", 401)
    return token
