"""Port for persisting user interface preferences."""

from typing import Protocol

from src.domain.models.preferences import UiPreferences


class PreferencesStorePort(Protocol):
    """Port loading preferences at startup and saving them on change."""

    def load(self) -> UiPreferences:
        """Return stored preferences, or defaults when none exist."""

    def save(self, preferences: UiPreferences) -> None:
        """Persist preferences."""


__all__ = ["PreferencesStorePort"]
