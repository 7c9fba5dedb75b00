"""JSON file storage for UI preferences."""

import json
from pathlib import Path

from src.domain.models.preferences import Theme, UiPreferences
from src.infrastructure.logging.logger import get_app_logger


class JsonPreferencesStore:
    """PreferencesStorePort implementation writing a small JSON file."""

    def __init__(self, path: Path, logger=None) -> None:
        """Initialize the store.

        Args:
            path: JSON file holding the preferences.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._path = Path(path)
        self._logger = logger or get_app_logger()

    def load(self) -> UiPreferences:
        """Return stored preferences, falling back to defaults.

        Returns:
            UiPreferences: Stored values, or defaults when the file is
            missing or unreadable.
        """
        if not self._path.exists():
            return UiPreferences()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return UiPreferences(theme=Theme(raw.get("theme", "light")))
        except (OSError, ValueError, AttributeError) as exc:
            self._logger.warning(
                f"Ignoring unreadable preferences file {self._path}: {exc}"
            )
            return UiPreferences()

    def save(self, preferences: UiPreferences) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps({"theme": preferences.theme.value}),
            encoding="utf-8",
        )
        self._logger.info(f"Saved preferences theme={preferences.theme.value}")


__all__ = ["JsonPreferencesStore"]
