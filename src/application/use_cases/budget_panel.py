"""Budget panel state: selected month, budget draft and usage."""

import asyncio
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from src.application.data_loader import DataLoader
from src.application.events import EXPENSE_EVENTS, BudgetSaved, EventBus
from src.application.ports.expense_store import ExpenseStorePort
from src.domain.errors import ExpenseStoreError
from src.domain.models.budgets import (
    Budget,
    BudgetDraft,
    BudgetLoaded,
    BudgetState,
    BudgetUnloaded,
    BudgetUsageReport,
    UsageSummary,
)
from src.domain.services.budget_usage import compute_budget_usage
from src.domain.services.normalization import (
    current_month,
    normalize_month,
    parse_limit_input,
)
from src.domain.services.validation import (
    prune_unknown_category_limits,
    validate_budget,
)
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.utils.decimal_utils import coerce_decimal


class BudgetPanelController:
    """Own the month selector and the budget and usage loaders.

    The budget loader holds a ``BudgetState``: ``BudgetLoaded`` when the
    store returned a budget, ``BudgetDraft`` when the store has none or the
    user edited it. A draft is never reported as persisted until ``save``
    succeeds and the budget is fetched again.
    """

    def __init__(
        self,
        store: ExpenseStorePort,
        event_bus: EventBus,
        logger=None,
        usage_logger=None,
        today: date | None = None,
    ) -> None:
        """Initialize the controller and subscribe to mutation events.

        Args:
            store: Port to the remote expense store.
            event_bus: Bus publishing mutation events.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording user actions.
            today: Date used to pick the initial month.
        """
        self._store = store
        self._event_bus = event_bus
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self._month = current_month(today)
        self.budget: DataLoader[str, BudgetState] = DataLoader(
            self._fetch_budget_state,
            "budget",
            self._logger,
        )
        self.usage: DataLoader[str, UsageSummary] = DataLoader(
            store.fetch_usage,
            "usage",
            self._logger,
        )
        self.save_error: str | None = None
        event_bus.subscribe(BudgetSaved, self._on_budget_saved)
        for event_type in EXPENSE_EVENTS:
            event_bus.subscribe(event_type, self._on_expense_changed)

    @property
    def month(self) -> str:
        return self._month

    @property
    def state(self) -> BudgetState:
        state = self.budget.data
        if state is None or state.budget.month != self._month:
            return BudgetUnloaded()
        return state

    @property
    def working_budget(self) -> Budget:
        """Budget being displayed or edited; zero-valued when unloaded."""
        state = self.state
        if isinstance(state, BudgetUnloaded):
            return Budget.empty(self._month)
        return state.budget

    async def refresh(self) -> None:
        """Fetch budget and usage for the month if not fetched yet."""
        await asyncio.gather(
            self.budget.load_if_changed(self._month),
            self.usage.load_if_changed(self._month),
        )

    async def select_month(self, month: str | date) -> None:
        """Switch to another month and fetch its budget and usage.

        Raises:
            ValueError: If the month is not a valid ``YYYY-MM`` key.
        """
        self._month = normalize_month(month)
        self.save_error = None
        await self.refresh()

    def set_amount(self, value: str | Decimal) -> None:
        """Edit the overall limit locally.

        Raises:
            ValueError: If the value is not a number.
        """
        amount = coerce_decimal(value)
        self.budget.set_data(
            BudgetDraft(budget=self.working_budget.with_amount(amount))
        )

    def set_category_limit(self, category_id: str, value: str | None) -> None:
        """Edit one category limit locally; blank input removes it."""
        limit = parse_limit_input(value)
        self.budget.set_data(
            BudgetDraft(
                budget=self.working_budget.with_category_limit(
                    category_id,
                    limit,
                )
            )
        )

    async def save(
        self,
        known_category_ids: Iterable[str] | None = None,
    ) -> bool:
        """Store the working budget as a whole record.

        Args:
            known_category_ids: Ids of fetched categories; limits for other
                ids are dropped before saving.

        Returns:
            bool: True when saved. On failure ``save_error`` holds the
            reason and the draft is kept.
        """
        budget = self.working_budget
        try:
            validate_budget(budget)
            if known_category_ids is not None:
                budget = prune_unknown_category_limits(
                    budget,
                    known_category_ids,
                    self._logger,
                )
            await self._store.save_budget(budget)
        except (ValueError, ExpenseStoreError) as exc:
            self.save_error = str(exc)
            self._logger.warning(
                f"Budget save failed for month={budget.month}: {exc}"
            )
            return False
        self.save_error = None
        self._logger.info(
            f"Saved budget month={budget.month} amount={budget.amount}"
        )
        self._usage_logger.info(f"budget_saved month={budget.month}")
        await self._event_bus.publish(BudgetSaved(budget=budget))
        return True

    def usage_report(self) -> BudgetUsageReport | None:
        """Return the usage report, or None while usage is unavailable."""
        usage = self.usage.data
        if usage is None or usage.month != self._month:
            return None
        return compute_budget_usage(self.working_budget, usage)

    async def reload(self) -> None:
        await asyncio.gather(self.budget.refetch(), self.usage.refetch())

    async def _fetch_budget_state(self, month: str) -> BudgetState:
        budget = await self._store.fetch_budget(month)
        if budget is None:
            self._logger.info(f"No budget stored for {month}; using a draft")
            return BudgetDraft(budget=Budget.empty(month))
        return BudgetLoaded(budget=budget)

    async def _on_budget_saved(self, event: object) -> None:
        self._logger.info(
            f"Refreshing budget panel after {type(event).__name__}"
        )
        await self.reload()

    async def _on_expense_changed(self, event: object) -> None:
        # Expense changes leave the budget record and any draft untouched.
        self._logger.info(
            f"Refreshing budget usage after {type(event).__name__}"
        )
        await self.usage.refetch()


__all__ = ["BudgetPanelController"]
