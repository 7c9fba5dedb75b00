"""Dashboard composition: summary, categories and filtered expenses."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import tzinfo
from decimal import Decimal

from src.application.data_loader import DataLoader, LoaderSnapshot
from src.application.events import EXPENSE_EVENTS, EventBus
from src.application.ports.expense_store import ExpenseStorePort
from src.domain.constants import DEFAULT_QUERY_LIMIT
from src.domain.models.expenses import (
    BreakdownShare,
    Category,
    DashboardPeriod,
    DashboardSummary,
    Expense,
)
from src.domain.models.filters import ExpenseQuery, FilterCriteria
from src.domain.services.breakdown import (
    CategoryIndex,
    compute_breakdown_shares,
)
from src.domain.services.filter_query import build_expense_query
from src.infrastructure.logging.logger import get_app_logger

CATEGORIES_KEY = "categories"


@dataclass(frozen=True)
class ExpenseRow:
    """Expense with its resolved category name (None when unknown)."""

    expense: Expense
    category_name: str | None


@dataclass(frozen=True)
class DashboardViewState:
    """Everything the dashboard renders, with missing data as empty."""

    period: DashboardPeriod
    total_spent: Decimal
    recent_count: int
    categories_used: int
    breakdown: tuple[BreakdownShare, ...]
    categories: tuple[Category, ...]
    expenses: tuple[ExpenseRow, ...]
    loading: dict[str, bool] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


def compose_dashboard_view(
    period: DashboardPeriod,
    summary: DashboardSummary | None,
    categories: Sequence[Category] | None,
    expenses: Sequence[Expense] | None,
    index: CategoryIndex | None = None,
    loading: dict[str, bool] | None = None,
    errors: dict[str, str] | None = None,
) -> DashboardViewState:
    """Compose the dashboard state from possibly missing inputs.

    Args:
        period: Selected dashboard period.
        summary: Dashboard aggregates, or None if not available.
        categories: Fetched categories, or None if not available.
        expenses: Filtered expenses, or None if not available.
        index: Optional prebuilt category index.
        loading: Loading flags per resource.
        errors: Error messages per resource.

    Returns:
        DashboardViewState: Renderable state; absent inputs count as empty.
    """
    resolved_index = index if index is not None else CategoryIndex(categories)
    breakdown = summary.breakdown if summary else ()
    return DashboardViewState(
        period=period,
        total_spent=summary.total_spent if summary else Decimal("0"),
        recent_count=len(summary.recent) if summary else 0,
        categories_used=len(breakdown),
        breakdown=compute_breakdown_shares(breakdown),
        categories=tuple(categories or ()),
        expenses=tuple(
            ExpenseRow(
                expense=expense,
                category_name=resolved_index.name_for(expense.category_id),
            )
            for expense in expenses or ()
        ),
        loading=dict(loading or {}),
        errors=dict(errors or {}),
    )


class DashboardController:
    """Own the dashboard loaders and the active period and criteria."""

    def __init__(
        self,
        store: ExpenseStorePort,
        event_bus: EventBus,
        logger=None,
        page_size: int = DEFAULT_QUERY_LIMIT,
        tz: tzinfo | None = None,
        period: DashboardPeriod = DashboardPeriod.MONTH,
    ) -> None:
        """Initialize the controller and subscribe to expense events.

        Args:
            store: Port to the remote expense store.
            event_bus: Bus publishing mutation events.
            logger: Optional logger compatible with logging.Logger-like API.
            page_size: Result-size cap appended to every expense query.
            tz: Timezone for date filters; system local when None.
            period: Initial dashboard period.
        """
        self._logger = logger or get_app_logger()
        self._page_size = page_size
        self._tz = tz
        self._period = period
        self._criteria = FilterCriteria()
        self._query = build_expense_query(
            self._criteria,
            limit=page_size,
            tz=tz,
        )
        self.summary: DataLoader[DashboardPeriod, DashboardSummary] = (
            DataLoader(store.fetch_dashboard, "dashboard", self._logger)
        )
        self.categories: DataLoader[str, list[Category]] = DataLoader(
            lambda _key: store.fetch_categories(),
            "categories",
            self._logger,
        )
        self.expenses: DataLoader[ExpenseQuery, list[Expense]] = DataLoader(
            store.fetch_expenses,
            "expenses",
            self._logger,
        )
        self._index = CategoryIndex()
        self._indexed_categories: list[Category] | None = None
        for event_type in EXPENSE_EVENTS:
            event_bus.subscribe(event_type, self._on_expense_changed)

    @property
    def period(self) -> DashboardPeriod:
        return self._period

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def query(self) -> ExpenseQuery:
        return self._query

    async def refresh(self) -> None:
        """Fetch every resource whose dependency changed."""
        await asyncio.gather(
            self.summary.load_if_changed(self._period),
            self.categories.load_if_changed(CATEGORIES_KEY),
            self.expenses.load_if_changed(self._query),
        )

    async def set_period(self, period: DashboardPeriod | str) -> None:
        self._period = DashboardPeriod(period)
        await self.summary.load_if_changed(self._period)

    async def set_criteria(self, criteria: FilterCriteria) -> None:
        """Apply new filter criteria and fetch the matching expenses.

        Raises:
            ValueError: If the criteria cannot be turned into a query.
        """
        query = build_expense_query(
            criteria,
            limit=self._page_size,
            tz=self._tz,
        )
        self._criteria = criteria
        self._query = query
        await self.expenses.load_if_changed(query)

    async def reload(self) -> None:
        """Refetch the period totals and the filtered expenses."""
        await asyncio.gather(self.summary.refetch(), self.expenses.refetch())

    def category_index(self) -> CategoryIndex:
        categories = self.categories.data
        if categories is not self._indexed_categories:
            self._index = CategoryIndex(categories)
            self._indexed_categories = categories
        return self._index

    def view_state(self) -> DashboardViewState:
        """Return the composed dashboard state."""
        snapshots: dict[str, LoaderSnapshot] = {
            "dashboard": self.summary.snapshot,
            "categories": self.categories.snapshot,
            "expenses": self.expenses.snapshot,
        }
        return compose_dashboard_view(
            self._period,
            self.summary.data,
            self.categories.data,
            self.expenses.data,
            index=self.category_index(),
            loading={name: snap.loading for name, snap in snapshots.items()},
            errors={
                name: snap.error
                for name, snap in snapshots.items()
                if snap.error is not None
            },
        )

    async def _on_expense_changed(self, event: object) -> None:
        self._logger.info(
            f"Refreshing dashboard after {type(event).__name__}"
        )
        await self.reload()


__all__ = [
    "DashboardController",
    "DashboardViewState",
    "ExpenseRow",
    "compose_dashboard_view",
    "CATEGORIES_KEY",
]
