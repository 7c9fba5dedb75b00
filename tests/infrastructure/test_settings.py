"""Tests for infrastructure settings."""

from pathlib import Path
from unittest.mock import MagicMock

from src.infrastructure import settings as settings_module
from src.infrastructure.settings import ExpenseTrackerSettings


def _clear_env(monkeypatch) -> None:
    for name in (
        "EXPENSE_API_BASE_URL",
        "EXPENSE_API_TIMEOUT",
        "EXPENSE_QUERY_LIMIT",
        "EXPENSE_PREFERENCES_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults(monkeypatch, tmp_path: Path) -> None:
    """Missing variables fall back to defaults."""
    _clear_env(monkeypatch)
    monkeypatch.setattr(settings_module, "get_project_root", lambda: tmp_path)

    settings = ExpenseTrackerSettings.from_env()

    assert settings.base_url == "http://localhost:8000"
    assert settings.timeout == 10.0
    assert settings.page_size == 100
    assert settings.preferences_file == tmp_path / "data" / "preferences.json"


def test_from_env_reads_values(monkeypatch, tmp_path: Path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("EXPENSE_API_BASE_URL", "https://api.example.com/ ")
    monkeypatch.setenv("EXPENSE_API_TIMEOUT", "2.5")
    monkeypatch.setenv("EXPENSE_QUERY_LIMIT", "20")
    monkeypatch.setenv("EXPENSE_PREFERENCES_FILE", str(tmp_path / "p.json"))

    settings = ExpenseTrackerSettings.from_env()

    assert settings.base_url == "https://api.example.com"
    assert settings.timeout == 2.5
    assert settings.page_size == 20
    assert settings.preferences_file == (tmp_path / "p.json").resolve()


def test_invalid_numbers_fall_back_with_warning(monkeypatch) -> None:
    _clear_env(monkeypatch)
    logger = MagicMock()
    monkeypatch.setattr(settings_module, "get_app_logger", lambda: logger)
    monkeypatch.setenv("EXPENSE_API_TIMEOUT", "soon")
    monkeypatch.setenv("EXPENSE_QUERY_LIMIT", "-5")

    settings = ExpenseTrackerSettings.from_env()

    assert settings.timeout == 10.0
    assert settings.page_size == 100
    assert logger.warning.call_count == 2


def test_non_http_base_url_warns() -> None:
    logger = MagicMock()

    cleaned = ExpenseTrackerSettings._normalize_base_url("ftp://x/", logger)

    assert cleaned == "ftp://x"
    logger.warning.assert_called_once()
