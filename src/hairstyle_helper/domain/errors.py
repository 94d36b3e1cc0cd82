"""Error taxonomy shared by the client core and the backend."""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Structured failure codes carried through every failure path."""

    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"
    AUTH = "auth"
    VALIDATION = "validation"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    SERVER = "server"


class HairstyleHelperError(Exception):
    """Base error for remote-call failures."""

    kind: ErrorKind = ErrorKind.SERVER

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkFailure(HairstyleHelperError):
    """Transport-level failure (connection, timeout)."""

    kind = ErrorKind.NETWORK


class MalformedResponse(HairstyleHelperError):
    """A 2xx response whose body has an unexpected shape."""

    kind = ErrorKind.MALFORMED_RESPONSE


class AuthFailure(HairstyleHelperError):
    """Missing, invalid or expired credentials."""

    kind = ErrorKind.AUTH


class ValidationFailure(HairstyleHelperError):
    """The request body was rejected."""

    kind = ErrorKind.VALIDATION


class MethodNotAllowed(HairstyleHelperError):
    kind = ErrorKind.METHOD_NOT_ALLOWED


class ServerFailure(HairstyleHelperError):
    kind = ErrorKind.SERVER


_STATUS_ERRORS: dict[int, type[HairstyleHelperError]] = {
    400: ValidationFailure,
    401: AuthFailure,
    405: MethodNotAllowed,
}


def error_for_status(status_code: int, message: str) -> HairstyleHelperError:
    """Build the error matching an HTTP status code."""
    error_type = _STATUS_ERRORS.get(status_code, ServerFailure)
    return error_type(message, status_code=status_code)
