"""Tests for the quick-add form and the expense detail view."""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.events import ExpenseDeleted
from src.application.use_cases.expense_form import (
    ExpenseDetail,
    ExpenseForm,
    ExpenseFormFields,
)
from src.application.use_cases.expense_mutations import ExpenseMutationClient
from src.domain.errors import RejectedByStore
from src.domain.models.expenses import Expense, PaymentMethod

UTC = timezone.utc


def _mutations(store, event_bus) -> ExpenseMutationClient:
    return ExpenseMutationClient(
        store,
        event_bus,
        logger=MagicMock(),
        usage_logger=MagicMock(),
    )


def _expense(**overrides) -> Expense:
    values = {
        "id": "9",
        "amount": Decimal("12.30"),
        "payment_method": PaymentMethod.CASH,
        "date": datetime(2024, 4, 2, 18, 45, tzinfo=UTC),
        "category_id": "2",
        "description": "Taxi",
        "attachment_url": "https://example.com/r.png",
    }
    values.update(overrides)
    return Expense(**values)


def test_fields_convert_to_payload() -> None:
    fields = ExpenseFormFields(
        amount="42.50",
        category_id="",
        description="  ",
        payment_method="card",
        date="2024-03-01T12:00",
    )

    payload = fields.to_payload(UTC)

    assert payload.amount == Decimal("42.50")
    assert payload.payment_method is PaymentMethod.CARD
    assert payload.category_id is None
    assert payload.description is None
    assert payload.date == datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def test_fields_require_amount() -> None:
    with pytest.raises(ValueError, match="Amount is required"):
        ExpenseFormFields(amount=" ").to_payload(UTC)


def test_fields_prefill_from_expense() -> None:
    fields = ExpenseFormFields.from_expense(_expense(), UTC)

    assert fields.amount == "12.30"
    assert fields.category_id == "2"
    assert fields.payment_method == "cash"
    assert fields.date == "2024-04-02T18:45"
    assert fields.attachment_url == "https://example.com/r.png"


@pytest.mark.asyncio
async def test_submit_resets_fields_on_success(store, event_bus) -> None:
    form = ExpenseForm(_mutations(store, event_bus), tz=UTC, logger=MagicMock())
    form.update(amount="42.50", description="Lunch", category_id="1")

    created = await form.submit()
    await event_bus.drain()

    assert created is not None
    assert created.description == "Lunch"
    assert form.fields.amount == ""
    assert form.fields.description == ""
    assert form.error is None


@pytest.mark.asyncio
async def test_submit_keeps_fields_on_failure(store, event_bus) -> None:
    """A failed submission keeps every value the user entered."""
    form = ExpenseForm(_mutations(store, event_bus), tz=UTC, logger=MagicMock())
    form.update(amount="42.50", description="Lunch", payment_method="card")
    store.fail["create_expense"] = RejectedByStore(422, "bad category")

    created = await form.submit()

    assert created is None
    assert "422" in form.error
    assert form.fields.amount == "42.50"
    assert form.fields.description == "Lunch"
    assert form.fields.payment_method == "card"


@pytest.mark.asyncio
async def test_submit_reports_invalid_amount(store, event_bus) -> None:
    form = ExpenseForm(_mutations(store, event_bus), tz=UTC, logger=MagicMock())
    form.update(amount="-3")

    assert await form.submit() is None
    assert form.error
    assert store.calls == []


@pytest.mark.asyncio
async def test_detail_save_failure_keeps_view_open(store, event_bus) -> None:
    detail = ExpenseDetail(_mutations(store, event_bus), tz=UTC, logger=MagicMock())
    detail.open(_expense(id="missing"))
    detail.update(amount="99")

    assert await detail.save() is None

    assert detail.is_open
    assert detail.fields.amount == "99"
    assert "404" in detail.error


@pytest.mark.asyncio
async def test_detail_save_closes_on_success(store, event_bus) -> None:
    mutations = _mutations(store, event_bus)
    created = await mutations.create(
        ExpenseFormFields(amount="5", date="2024-01-01T10:00").to_payload(UTC)
    )
    detail = ExpenseDetail(mutations, tz=UTC, logger=MagicMock())
    detail.open(created)
    detail.update(description="Coffee")

    updated = await detail.save()
    await event_bus.drain()

    assert updated.description == "Coffee"
    assert not detail.is_open
    assert detail.expense is None


@pytest.mark.asyncio
async def test_detail_delete_requires_confirmation(store, event_bus) -> None:
    detail = ExpenseDetail(_mutations(store, event_bus), logger=MagicMock())
    detail.open(_expense())

    assert await detail.delete(confirmed=False) is False

    assert detail.is_open
    assert detail.error
    assert store.calls == []


@pytest.mark.asyncio
async def test_detail_closes_before_refetch_finishes(store, event_bus) -> None:
    """The view closes once the store confirms, not after the refetch."""
    gate = asyncio.Event()
    refetched = []

    async def slow_refetch(event) -> None:
        await gate.wait()
        refetched.append(event)

    event_bus.subscribe(ExpenseDeleted, slow_refetch)
    detail = ExpenseDetail(_mutations(store, event_bus), logger=MagicMock())
    detail.open(_expense())

    assert await detail.delete(confirmed=True) is True
    assert not detail.is_open
    assert refetched == []

    gate.set()
    await event_bus.drain()
    assert refetched == [ExpenseDeleted(expense_id="9")]
