"""Use case to compute budget usage for one month."""

import asyncio

from src.application.ports.expense_store import ExpenseStorePort
from src.domain.models.budgets import Budget, BudgetUsageReport
from src.domain.services.budget_usage import compute_budget_usage
from src.domain.services.normalization import normalize_month
from src.infrastructure.logging.logger import get_app_logger


class GetBudgetStatusUseCase:
    """Fetch a month's budget and usage and compute alert levels."""

    def __init__(self, store: ExpenseStorePort, logger=None) -> None:
        """Initialize the use case.

        Args:
            store: Port to the remote expense store.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._logger = logger or get_app_logger()

    async def execute(self, month: str) -> BudgetUsageReport:
        """Return the usage report for a month.

        A month without a stored budget is reported against a zero budget.

        Args:
            month: Month key formatted as ``YYYY-MM``.

        Returns:
            BudgetUsageReport: Overall and per-category usage.
        """
        key = normalize_month(month)
        budget, usage = await asyncio.gather(
            self._store.fetch_budget(key),
            self._store.fetch_usage(key),
        )
        if budget is None:
            budget = Budget.empty(key)
        report = compute_budget_usage(budget, usage)
        self._logger.info(
            f"Budget status for {key}: {report.overall_percent}% "
            f"({report.alert_level.value})"
        )
        return report


__all__ = ["GetBudgetStatusUseCase"]
