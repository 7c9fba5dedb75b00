"""Domain models package."""

from .budgets import (
    AlertLevel,
    Budget,
    BudgetDraft,
    BudgetLoaded,
    BudgetState,
    BudgetUnloaded,
    BudgetUsageReport,
    CategoryUsage,
    CategoryUsageRow,
    UsageSummary,
)
from .expenses import (
    BreakdownItem,
    BreakdownShare,
    Category,
    DashboardPeriod,
    DashboardSummary,
    Expense,
    ExpensePayload,
    PaymentMethod,
)
from .filters import ExpenseQuery, FilterCriteria
from .preferences import Theme, UiPreferences

__all__ = [
    "AlertLevel",
    "Budget",
    "BudgetDraft",
    "BudgetLoaded",
    "BudgetState",
    "BudgetUnloaded",
    "BudgetUsageReport",
    "CategoryUsage",
    "CategoryUsageRow",
    "UsageSummary",
    "BreakdownItem",
    "BreakdownShare",
    "Category",
    "DashboardPeriod",
    "DashboardSummary",
    "Expense",
    "ExpensePayload",
    "PaymentMethod",
    "ExpenseQuery",
    "FilterCriteria",
    "Theme",
    "UiPreferences",
]
