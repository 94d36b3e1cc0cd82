"""Helpers mapping HTTP responses to the error taxonomy."""

from collections.abc import Mapping

import httpx

from hairstyle_helper.domain.errors import MalformedResponse, error_for_status


def raise_for_api_error(response: httpx.Response) -> None:
    """Raise the mapped error for any non-2xx response.

    Only the ``error`` field of a JSON object body is trusted.
    """
    if response.is_success:
        return
    message = f"Request failed with status {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping) and isinstance(body.get("error"), str):
        message = body["error"]
    raise error_for_status(response.status_code, message)


def decode_json(response: httpx.Response) -> object:
    """Decode a successful response body."""
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponse("Response body is not valid JSON") from exc
