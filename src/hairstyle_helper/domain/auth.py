"""Authentication session model."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class AuthSession:
    """An authenticated identity and its bearer credential."""

    user_id: str
    access_token: str


class SessionState(StrEnum):
    SIGNED_OUT = "signed_out"
    SIGNED_IN = "signed_in"
