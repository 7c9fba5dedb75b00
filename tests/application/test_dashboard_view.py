"""Tests for dashboard composition and its controller."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.dashboard_view import (
    DashboardController,
    compose_dashboard_view,
)
from src.application.use_cases.expense_mutations import ExpenseMutationClient
from src.domain.errors import NetworkFailure
from src.domain.models.expenses import (
    Category,
    DashboardPeriod,
    Expense,
    ExpensePayload,
    PaymentMethod,
)
from src.domain.models.filters import FilterCriteria

UTC = timezone.utc


def _controller(store, event_bus) -> DashboardController:
    return DashboardController(store, event_bus, logger=MagicMock(), tz=UTC)


def test_compose_with_missing_inputs_is_empty() -> None:
    state = compose_dashboard_view(DashboardPeriod.WEEK, None, None, None)

    assert state.total_spent == Decimal("0")
    assert state.recent_count == 0
    assert state.categories_used == 0
    assert state.breakdown == ()
    assert state.expenses == ()


def test_compose_resolves_category_names() -> None:
    expenses = [
        Expense(
            id="1",
            amount=Decimal("3"),
            payment_method=PaymentMethod.CASH,
            date=datetime(2024, 1, 1, tzinfo=UTC),
            category_id="1",
        ),
        Expense(
            id="2",
            amount=Decimal("4"),
            payment_method=PaymentMethod.CASH,
            date=datetime(2024, 1, 1, tzinfo=UTC),
            category_id="deleted",
        ),
    ]

    state = compose_dashboard_view(
        DashboardPeriod.MONTH,
        None,
        [Category("1", "Food")],
        expenses,
    )

    assert [row.category_name for row in state.expenses] == ["Food", None]


@pytest.mark.asyncio
async def test_create_refreshes_dashboard(store, event_bus) -> None:
    """Creating an expense updates totals, breakdown and the list."""
    dashboard = _controller(store, event_bus)
    mutations = ExpenseMutationClient(
        store,
        event_bus,
        logger=MagicMock(),
        usage_logger=MagicMock(),
    )
    await dashboard.refresh()
    assert dashboard.view_state().total_spent == Decimal("0")

    await mutations.create(
        ExpensePayload(
            amount=Decimal("42.50"),
            payment_method=PaymentMethod.CARD,
            category_id="1",
            description="Lunch",
        )
    )
    await event_bus.drain()
    state = dashboard.view_state()

    assert state.total_spent == Decimal("42.50")
    assert state.recent_count == 1
    assert state.categories_used == 1
    assert state.breakdown[0].category_name == "Food"
    assert state.breakdown[0].share == Decimal("100")
    assert state.expenses[0].category_name == "Food"
    assert state.expenses[0].expense.description == "Lunch"


@pytest.mark.asyncio
async def test_refresh_fetches_each_resource_once(store, event_bus) -> None:
    dashboard = _controller(store, event_bus)

    await dashboard.refresh()
    await dashboard.refresh()

    assert sorted(store.call_names()) == [
        "fetch_categories",
        "fetch_dashboard",
        "fetch_expenses",
    ]


@pytest.mark.asyncio
async def test_set_period_refetches_summary(store, event_bus) -> None:
    dashboard = _controller(store, event_bus)
    await dashboard.refresh()

    await dashboard.set_period("year")

    assert dashboard.period is DashboardPeriod.YEAR
    assert store.calls[-1] == ("fetch_dashboard", DashboardPeriod.YEAR)
    assert dashboard.view_state().period is DashboardPeriod.YEAR


@pytest.mark.asyncio
async def test_set_criteria_builds_query(store, event_bus) -> None:
    dashboard = _controller(store, event_bus)

    await dashboard.set_criteria(FilterCriteria(q="taxi", category_id="2"))

    assert dashboard.query.as_dict() == {
        "q": "taxi",
        "category_id": "2",
        "limit": "100",
    }
    assert store.calls[-1] == ("fetch_expenses", dashboard.query)


@pytest.mark.asyncio
async def test_invalid_criteria_keep_previous_query(store, event_bus) -> None:
    dashboard = _controller(store, event_bus)
    previous = dashboard.query

    with pytest.raises(ValueError):
        await dashboard.set_criteria(FilterCriteria(date_from="not a date"))

    assert dashboard.query == previous
    assert dashboard.criteria == FilterCriteria()


@pytest.mark.asyncio
async def test_errors_are_reported_per_resource(store, event_bus) -> None:
    store.fail["fetch_dashboard"] = NetworkFailure("offline")
    dashboard = _controller(store, event_bus)

    await dashboard.refresh()
    state = dashboard.view_state()

    assert state.errors == {"dashboard": "offline"}
    assert state.total_spent == Decimal("0")
    assert len(state.categories) == 2


@pytest.mark.asyncio
async def test_category_index_rebuilt_only_on_new_fetch(store, event_bus) -> None:
    dashboard = _controller(store, event_bus)
    await dashboard.refresh()

    first = dashboard.category_index()
    assert dashboard.category_index() is first

    store.categories.append(Category("3", "Books"))
    await dashboard.categories.refetch()

    rebuilt = dashboard.category_index()
    assert rebuilt is not first
    assert rebuilt.name_for("3") == "Books"


@pytest.mark.asyncio
async def test_delete_removes_expense_and_decrements_totals(
    store,
    event_bus,
) -> None:
    dashboard = _controller(store, event_bus)
    mutations = ExpenseMutationClient(
        store,
        event_bus,
        logger=MagicMock(),
        usage_logger=MagicMock(),
    )
    kept = await mutations.create(
        ExpensePayload(amount=Decimal("10"), payment_method=PaymentMethod.CASH)
    )
    removed = await mutations.create(
        ExpensePayload(amount=Decimal("5"), payment_method=PaymentMethod.CASH)
    )
    await dashboard.refresh()
    assert dashboard.view_state().total_spent == Decimal("15")

    await mutations.delete(removed.id, confirmed=True)
    await event_bus.drain()
    state = dashboard.view_state()

    assert state.total_spent == Decimal("10")
    assert [row.expense.id for row in state.expenses] == [kept.id]
