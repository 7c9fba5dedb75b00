"""Domain package for business rules and core models."""

from .constants import (
    CRITICAL_THRESHOLD,
    DEFAULT_QUERY_LIMIT,
    NOTICE_THRESHOLD,
    UNCATEGORIZED_LABEL,
    WARNING_THRESHOLD,
)
from .errors import (
    ConfirmationRequired,
    DecodeFailure,
    ExpenseStoreError,
    NetworkFailure,
    RejectedByStore,
)
from .models import (
    AlertLevel,
    Budget,
    BudgetUsageReport,
    Category,
    DashboardPeriod,
    Expense,
    ExpensePayload,
    ExpenseQuery,
    FilterCriteria,
    PaymentMethod,
)
from .services import (
    build_expense_query,
    classify_alert_level,
    compute_breakdown_shares,
    compute_budget_usage,
    usage_percent,
)

__all__ = [
    "AlertLevel",
    "Budget",
    "BudgetUsageReport",
    "Category",
    "DashboardPeriod",
    "Expense",
    "ExpensePayload",
    "ExpenseQuery",
    "FilterCriteria",
    "PaymentMethod",
    "ExpenseStoreError",
    "NetworkFailure",
    "DecodeFailure",
    "RejectedByStore",
    "ConfirmationRequired",
    "DEFAULT_QUERY_LIMIT",
    "NOTICE_THRESHOLD",
    "WARNING_THRESHOLD",
    "CRITICAL_THRESHOLD",
    "UNCATEGORIZED_LABEL",
    "build_expense_query",
    "classify_alert_level",
    "compute_breakdown_shares",
    "compute_budget_usage",
    "usage_percent",
]
