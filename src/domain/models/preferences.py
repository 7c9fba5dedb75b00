"""User interface preferences."""

from dataclasses import dataclass, replace
from enum import Enum


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class UiPreferences:
    """Process-wide display preferences, loaded at startup."""

    theme: Theme = Theme.LIGHT

    @property
    def dark_mode(self) -> bool:
        return self.theme is Theme.DARK

    def with_dark_mode(self, enabled: bool) -> "UiPreferences":
        return replace(self, theme=Theme.DARK if enabled else Theme.LIGHT)


__all__ = ["Theme", "UiPreferences"]
