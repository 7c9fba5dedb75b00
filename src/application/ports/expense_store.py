"""Application port for the remote expense store."""

from typing import Protocol

from src.domain.models.budgets import Budget, UsageSummary
from src.domain.models.expenses import (
    Category,
    DashboardPeriod,
    DashboardSummary,
    Expense,
    ExpensePayload,
)
from src.domain.models.filters import ExpenseQuery


class ExpenseStorePort(Protocol):
    """Port exposing the expense, category and budget endpoints.

    Every method is a suspension point. Implementations raise
    ``ExpenseStoreError`` subclasses on transport, decoding or status
    failures.
    """

    async def fetch_dashboard(
        self,
        period: DashboardPeriod,
    ) -> DashboardSummary:
        """Return the dashboard aggregates for a period."""

    async def fetch_categories(self) -> list[Category]:
        """Return every category."""

    async def fetch_expenses(self, query: ExpenseQuery) -> list[Expense]:
        """Return the expenses matching a query."""

    async def create_expense(self, payload: ExpensePayload) -> Expense:
        """Create an expense and return it with its assigned id."""

    async def update_expense(
        self,
        expense_id: str,
        payload: ExpensePayload,
    ) -> Expense:
        """Replace an expense and return the stored record."""

    async def delete_expense(self, expense_id: str) -> None:
        """Delete an expense."""

    async def fetch_budget(self, month: str) -> Budget | None:
        """Return the budget for a month, or None when none is stored."""

    async def save_budget(self, budget: Budget) -> None:
        """Store a budget as a whole record."""

    async def fetch_usage(self, month: str) -> UsageSummary:
        """Return the spend aggregated for a month."""


__all__ = ["ExpenseStorePort"]
