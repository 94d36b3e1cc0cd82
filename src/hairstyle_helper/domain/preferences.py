"""Style preferences entered by the user."""

from dataclasses import dataclass

PREFERENCE_FIELDS: tuple[str, ...] = (
    "hair_length",
    "hair_type",
    "desired_style",
    "color_preference",
)


@dataclass(frozen=True)
class Preferences:
    """Snapshot of the current query parameters."""

    hair_length: str = ""
    hair_type: str = ""
    desired_style: str = ""
    color_preference: str = ""
