"""Tests for the Streamlit app helpers."""

from datetime import date, time
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapters.interface.streamlit import app
from src.application.events import EventBus
from src.domain.models.budgets import AlertLevel
from src.domain.models.expenses import BreakdownShare
from src.domain.models.preferences import UiPreferences


def test_format_currency() -> None:
    assert app._format_currency(Decimal("1234.5")) == "$1,234.50"
    assert app._format_currency(None) == "$0.00"
    assert app._format_currency(Decimal("-5")) == "-$5.00"


def test_alert_color_defaults_to_normal() -> None:
    assert app._alert_color(AlertLevel.CRITICAL) == "#dc2626"
    assert app._alert_color(None) == app.ALERT_COLORS[AlertLevel.NORMAL]


def test_receipt_preview_kind() -> None:
    assert app._receipt_preview_kind("https://x.test/receipt.PNG") == "image"
    assert app._receipt_preview_kind("https://x.test/receipt.pdf") == "link"
    assert app._receipt_preview_kind("") is None
    assert app._receipt_preview_kind(None) is None


def test_category_label_falls_back() -> None:
    assert app._category_label("Food") == "Food"
    assert app._category_label(None) == "Uncategorized"


def test_local_input_formats_widgets() -> None:
    assert app._local_input(date(2024, 5, 6), time(7, 8)) == "2024-05-06T07:08"


def test_prepare_breakdown_chart_data() -> None:
    rows = app._prepare_breakdown_chart_data(
        [BreakdownShare(None, Decimal("12.5"), Decimal("25"))]
    )

    assert rows == [
        {
            "category": "Uncategorized",
            "total": 12.5,
            "total_label": "$12.50",
            "share_label": "25.0%",
        }
    ]


def test_run_drains_emitted_events() -> None:
    """_run waits for background refetches before the loop closes."""
    handler = AsyncMock()
    bus = EventBus(logger=MagicMock())
    bus.subscribe(str, handler)
    container = MagicMock(event_bus=bus)

    async def mutate():
        bus.emit("changed")
        return "done"

    assert app._run(container, mutate()) == "done"
    handler.assert_awaited_once_with("changed")


class _FakeStreamlit:
    def __init__(self) -> None:
        self.session_state: dict = {}


def test_dark_mode_change_is_saved(monkeypatch) -> None:
    fake_st = _FakeStreamlit()
    fake_store = MagicMock()
    fake_store.load.return_value = UiPreferences()
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(app, "build_preferences_store", lambda: fake_store)

    unchanged = app._set_dark_mode(False)
    updated = app._set_dark_mode(True)

    assert unchanged.dark_mode is False
    assert updated.dark_mode is True
    assert fake_st.session_state["preferences"] is updated
    fake_store.save.assert_called_once_with(updated)
    fake_store.load.assert_called_once()


def test_container_is_built_once_per_session(monkeypatch) -> None:
    fake_st = _FakeStreamlit()
    built = []

    def _build():
        built.append(object())
        return built[-1]

    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(app, "build_app_container", _build)

    first = app._get_container()
    second = app._get_container()

    assert first is second
    assert len(built) == 1


def _detail_with(expense=None) -> MagicMock:
    return MagicMock(is_open=expense is not None, expense=expense)


def test_closed_detail_is_not_reopened_after_selection_reset(monkeypatch) -> None:
    """Save or cancel clears the selector so the editor stays closed."""
    fake_st = _FakeStreamlit()
    fake_st.session_state[app.SELECTION_KEY] = "7"
    monkeypatch.setattr(app, "st", fake_st)

    app._request_selection_reset()
    app._consume_selection_reset()

    selected = fake_st.session_state[app.SELECTION_KEY]
    assert selected == ""
    assert app.SELECTION_RESET_KEY not in fake_st.session_state
    assert app._expense_to_open(_detail_with(), selected, {"7": "x"}) is None


def test_selection_reset_only_applies_when_requested(monkeypatch) -> None:
    fake_st = _FakeStreamlit()
    fake_st.session_state[app.SELECTION_KEY] = "7"
    monkeypatch.setattr(app, "st", fake_st)

    app._consume_selection_reset()

    assert fake_st.session_state[app.SELECTION_KEY] == "7"


def test_expense_to_open_follows_selection_changes() -> None:
    first = MagicMock(id="1")
    second = MagicMock(id="2")
    by_id = {"1": first, "2": second}

    assert app._expense_to_open(_detail_with(), "1", by_id) is first
    assert app._expense_to_open(_detail_with(first), "1", by_id) is None
    assert app._expense_to_open(_detail_with(first), "2", by_id) is second
    assert app._expense_to_open(_detail_with(), "gone", by_id) is None
    assert app._expense_to_open(_detail_with(), "", by_id) is None


def test_amount_edit_compares_by_value() -> None:
    """A stored 500.0 and a typed 500 are the same limit."""
    assert app._amount_edit("500", Decimal("500.0")) is None
    assert app._amount_edit("750", Decimal("500")) == Decimal("750")
    assert app._amount_edit("", Decimal("0")) is None


def test_amount_edit_rejects_text() -> None:
    with pytest.raises(ValueError):
        app._amount_edit("lots", Decimal("500"))


def test_limit_changed_compares_by_value() -> None:
    assert app._limit_changed("120", Decimal("120.00")) is False
    assert app._limit_changed("", None) is False
    assert app._limit_changed("abc", None) is False
    assert app._limit_changed("", Decimal("50")) is True
    assert app._limit_changed("60", Decimal("50")) is True
