"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from pathlib import Path
from urllib.parse import urlparse

from src.domain.constants import DEFAULT_QUERY_LIMIT
from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ExpenseTrackerSettings:
    """Settings for reaching the expense store and storing preferences.

    Attributes:
        base_url: Origin of the expense store; API paths are relative to it.
        timeout: Request timeout in seconds.
        page_size: Result-size cap for expense searches.
        preferences_file: JSON file holding UI preferences.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_QUERY_LIMIT
    preferences_file: Path | None = None

    @classmethod
    def from_env(cls) -> "ExpenseTrackerSettings":
        """Build settings from environment variables.

        Returns:
            ExpenseTrackerSettings: Settings sourced from environment
            variables, with defaults for missing or invalid values.
        """
        logger = get_app_logger()
        base_url = cls._normalize_base_url(
            os.getenv("EXPENSE_API_BASE_URL", DEFAULT_BASE_URL),
            logger=logger,
        )
        timeout = cls._parse_number(
            os.getenv("EXPENSE_API_TIMEOUT"),
            DEFAULT_TIMEOUT,
            "EXPENSE_API_TIMEOUT",
            float,
            logger=logger,
        )
        page_size = cls._parse_number(
            os.getenv("EXPENSE_QUERY_LIMIT"),
            DEFAULT_QUERY_LIMIT,
            "EXPENSE_QUERY_LIMIT",
            int,
            logger=logger,
        )
        raw_preferences = os.getenv("EXPENSE_PREFERENCES_FILE")
        if raw_preferences:
            preferences_file = Path(raw_preferences).expanduser().resolve()
        else:
            preferences_file = get_project_root() / "data" / "preferences.json"
        return cls(
            base_url=base_url,
            timeout=timeout,
            page_size=page_size,
            preferences_file=preferences_file,
        )

    @staticmethod
    def _normalize_base_url(raw_url: str, logger) -> str:
        """Strip the base URL and warn when it is not an HTTP origin.

        Args:
            raw_url: Raw base URL string.
            logger: Logger used for warnings.

        Returns:
            str: Base URL without trailing slash.
        """
        cleaned = raw_url.strip().rstrip("/")
        parsed = urlparse(cleaned)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            logger.warning(
                f"EXPENSE_API_BASE_URL does not look like an HTTP origin: "
                f"{raw_url!r}"
            )
        return cleaned

    @staticmethod
    def _parse_number(raw_value, default, name: str, cast, logger):
        if raw_value is None or not raw_value.strip():
            return default
        try:
            value = cast(raw_value.strip())
        except ValueError:
            logger.warning(f"Invalid {name}={raw_value!r}; using {default}")
            return default
        if value <= 0:
            logger.warning(f"{name} must be positive; using {default}")
            return default
        return value


__all__ = ["ExpenseTrackerSettings", "DEFAULT_BASE_URL", "DEFAULT_TIMEOUT"]
