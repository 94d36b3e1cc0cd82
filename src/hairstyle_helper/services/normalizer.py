"""Normalization of the dual-shape generation responses."""

from collections.abc import Mapping

from pydantic import TypeAdapter, ValidationError

from hairstyle_helper.domain.errors import MalformedResponse
from hairstyle_helper.domain.suggestions import Suggestion, SuggestionEnvelope

_SUGGESTION_LIST = TypeAdapter(list[Suggestion])


def normalize_suggestions(raw: object) -> list[Suggestion]:
    """Accept a bare suggestion list or a ``{"suggestions": [...]}`` envelope."""
    try:
        return _SUGGESTION_LIST.validate_python(raw)
    except ValidationError:
        pass
    try:
        return SuggestionEnvelope.model_validate(raw).suggestions
    except ValidationError as exc:
        raise MalformedResponse(
            "Unexpected suggestions response shape"
        ) from exc


def normalize_image(raw: object) -> str | None:
    """Return the image reference from a bare string or ``imageUrl`` envelope."""
    return _normalize_reference(raw, "imageUrl")


def normalize_audio(raw: object) -> str | None:
    """Return the audio reference from a bare string or ``audioUrl`` envelope."""
    return _normalize_reference(raw, "audioUrl")


def _normalize_reference(raw: object, envelope_field: str) -> str | None:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, Mapping):
        value = raw.get(envelope_field)
        if isinstance(value, str):
            return value
    return None
