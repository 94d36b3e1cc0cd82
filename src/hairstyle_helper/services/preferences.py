"""Store for the user's style preferences."""

from collections.abc import Callable
from dataclasses import replace

from hairstyle_helper.domain.preferences import PREFERENCE_FIELDS, Preferences
from hairstyle_helper.services.observable import Observable


class PreferenceStore:
    """Holds the current preferences snapshot."""

    def __init__(self, initial: Preferences | None = None) -> None:
        self._cell = Observable(initial or Preferences())

    def get(self) -> Preferences:
        """Return the full current snapshot."""
        return self._cell.value

    def set(self, field: str, value: str) -> Preferences:
        """Replace one field, leaving the others untouched."""
        if field not in PREFERENCE_FIELDS:
            raise KeyError(f"Unknown preference field: {field}")
        updated = replace(self._cell.value, **{field: value})
        self._cell.set(updated)
        return updated

    def subscribe(self, callback: Callable[[Preferences], None]) -> Callable[[], None]:
        """Notify ``callback`` with every committed snapshot."""
        return self._cell.subscribe(callback)
