"""Shared fixtures: an in-memory expense store and quiet loggers."""

from dataclasses import replace
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from src.application.events import EventBus
from src.domain.errors import RejectedByStore
from src.domain.models.budgets import CategoryUsage, UsageSummary
from src.domain.models.expenses import (
    BreakdownItem,
    Category,
    DashboardPeriod,
    DashboardSummary,
    Expense,
    PaymentMethod,
)


class FakeExpenseStore:
    """In-memory ExpenseStorePort recording every call.

    Set ``fail[method_name]`` to an exception to make that method raise.
    """

    def __init__(self) -> None:
        self.categories = [Category("1", "Food"), Category("2", "Travel")]
        self.expenses: list[Expense] = []
        self.budgets = {}
        self.calls: list[tuple] = []
        self.fail: dict[str, Exception] = {}
        self._next_id = 1

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail:
            raise self.fail[name]

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def fetch_dashboard(self, period):
        self._record("fetch_dashboard", period)
        names = {category.id: category.name for category in self.categories}
        totals: dict[str | None, Decimal] = {}
        for expense in self.expenses:
            name = names.get(expense.category_id)
            totals[name] = totals.get(name, Decimal("0")) + expense.amount
        return DashboardSummary(
            period=DashboardPeriod(period),
            total_spent=sum(
                (expense.amount for expense in self.expenses),
                start=Decimal("0"),
            ),
            recent=tuple(self.expenses[-5:]),
            breakdown=tuple(
                BreakdownItem(name, total) for name, total in totals.items()
            ),
        )

    async def fetch_categories(self):
        self._record("fetch_categories")
        return list(self.categories)

    async def fetch_expenses(self, query):
        self._record("fetch_expenses", query)
        params = query.as_dict()
        needle = params.get("q", "").lower()
        result = [
            expense
            for expense in self.expenses
            if needle in (expense.description or "").lower()
        ]
        if "category_id" in params:
            result = [
                expense
                for expense in result
                if expense.category_id == params["category_id"]
            ]
        return result[: int(params["limit"])]

    async def create_expense(self, payload):
        self._record("create_expense", payload)
        expense = Expense(
            id=str(self._next_id),
            amount=payload.amount,
            payment_method=PaymentMethod(payload.payment_method),
            date=payload.date,
            category_id=payload.category_id,
            description=payload.description,
            attachment_url=payload.attachment_url,
        )
        self._next_id += 1
        self.expenses.append(expense)
        return expense

    async def update_expense(self, expense_id, payload):
        self._record("update_expense", expense_id, payload)
        for position, expense in enumerate(self.expenses):
            if expense.id == expense_id:
                updated = replace(
                    expense,
                    amount=payload.amount,
                    payment_method=PaymentMethod(payload.payment_method),
                    date=payload.date,
                    category_id=payload.category_id,
                    description=payload.description,
                    attachment_url=payload.attachment_url,
                )
                self.expenses[position] = updated
                return updated
        raise RejectedByStore(404, "Expense not found")

    async def delete_expense(self, expense_id):
        self._record("delete_expense", expense_id)
        self.expenses = [
            expense for expense in self.expenses if expense.id != expense_id
        ]

    async def fetch_budget(self, month):
        self._record("fetch_budget", month)
        return self.budgets.get(month)

    async def save_budget(self, budget):
        self._record("save_budget", budget)
        self.budgets[budget.month] = budget

    async def fetch_usage(self, month):
        self._record("fetch_usage", month)
        names = {category.id: category.name for category in self.categories}
        totals: dict[str | None, Decimal] = {}
        for expense in self.expenses:
            if expense.date.strftime("%Y-%m") != month:
                continue
            totals[expense.category_id] = (
                totals.get(expense.category_id, Decimal("0")) + expense.amount
            )
        return UsageSummary(
            month=month,
            total=sum(totals.values(), start=Decimal("0")),
            per_category=tuple(
                CategoryUsage(category_id, names.get(category_id), total)
                for category_id, total in totals.items()
            ),
        )


@pytest.fixture
def store() -> FakeExpenseStore:
    return FakeExpenseStore()


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def event_bus(logger) -> EventBus:
    return EventBus(logger=logger)
