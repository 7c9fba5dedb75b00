"""Domain services package."""

from .breakdown import CategoryIndex, compute_breakdown_shares
from .budget_usage import (
    classify_alert_level,
    compute_budget_usage,
    usage_percent,
)
from .filter_query import build_expense_query, to_utc_instant
from .normalization import normalize_month, parse_limit_input
from .validation import validate_budget, validate_expense_payload

__all__ = [
    "CategoryIndex",
    "compute_breakdown_shares",
    "classify_alert_level",
    "compute_budget_usage",
    "usage_percent",
    "build_expense_query",
    "to_utc_instant",
    "normalize_month",
    "parse_limit_input",
    "validate_budget",
    "validate_expense_payload",
]
