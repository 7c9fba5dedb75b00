"""JSON mapping between the expense store wire format and domain models."""

from collections.abc import Mapping
from datetime import datetime, timezone
from functools import wraps

from src.domain.errors import DecodeFailure
from src.domain.models.budgets import Budget, CategoryUsage, UsageSummary
from src.domain.models.expenses import (
    BreakdownItem,
    Category,
    DashboardPeriod,
    DashboardSummary,
    Expense,
    ExpensePayload,
    PaymentMethod,
)
from src.domain.services.filter_query import format_instant
from src.utils.decimal_utils import coerce_decimal, to_json_number


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_id(value) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _decoding(kind: str):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise DecodeFailure(f"Malformed {kind} payload: {exc}") from exc

        return wrapper

    return decorator


@_decoding("expense")
def parse_expense(raw: Mapping) -> Expense:
    """Build an Expense from its JSON object."""
    return Expense(
        id=str(raw["id"]),
        amount=coerce_decimal(raw["amount"]),
        payment_method=PaymentMethod(raw.get("payment_method") or "other"),
        date=parse_timestamp(raw["date"]),
        category_id=_optional_id(raw.get("category_id")),
        description=raw.get("description") or None,
        attachment_url=raw.get("attachment_url") or None,
    )


@_decoding("category")
def parse_category(raw: Mapping) -> Category:
    return Category(id=str(raw["id"]), name=str(raw["name"]))


@_decoding("dashboard")
def parse_dashboard(raw: Mapping, period: DashboardPeriod) -> DashboardSummary:
    """Build the dashboard summary; missing lists count as empty."""
    return DashboardSummary(
        period=period,
        total_spent=coerce_decimal(raw.get("total_spent")),
        recent=tuple(parse_expense(item) for item in raw.get("recent") or ()),
        breakdown=tuple(
            BreakdownItem(
                category_name=item.get("category_name") or None,
                total=coerce_decimal(item.get("total")),
            )
            for item in raw.get("breakdown") or ()
        ),
    )


@_decoding("budget")
def parse_budget(raw: Mapping | None, month: str) -> Budget | None:
    """Build a Budget, or None when the store has none for the month."""
    if raw is None:
        return None
    per_category = raw.get("per_category") or {}
    return Budget(
        month=str(raw.get("month") or month),
        amount=coerce_decimal(raw.get("amount")),
        per_category=tuple(
            (str(category_id), coerce_decimal(limit))
            for category_id, limit in per_category.items()
        ),
    )


@_decoding("usage")
def parse_usage(raw: Mapping, month: str) -> UsageSummary:
    return UsageSummary(
        month=month,
        total=coerce_decimal(raw.get("total")),
        per_category=tuple(
            CategoryUsage(
                category_id=_optional_id(item.get("category_id")),
                category_name=item.get("category_name") or None,
                total=coerce_decimal(item.get("total")),
            )
            for item in raw.get("per_category") or ()
        ),
    )


def parse_list(raw, parser) -> list:
    if not isinstance(raw, list):
        raise DecodeFailure(f"Expected a JSON array, got {type(raw).__name__}")
    return [parser(item) for item in raw]


def encode_expense_payload(payload: ExpensePayload) -> dict:
    """Serialize a create or update body."""
    return {
        "amount": to_json_number(payload.amount),
        "category_id": payload.category_id,
        "description": payload.description,
        "payment_method": PaymentMethod(payload.payment_method).value,
        "date": format_instant(payload.date) if payload.date else None,
        "attachment_url": payload.attachment_url,
    }


def encode_budget(budget: Budget) -> dict:
    return {
        "month": budget.month,
        "amount": to_json_number(budget.amount),
        "per_category": {
            category_id: to_json_number(limit)
            for category_id, limit in budget.per_category
        },
    }


__all__ = [
    "parse_timestamp",
    "parse_expense",
    "parse_category",
    "parse_dashboard",
    "parse_budget",
    "parse_usage",
    "parse_list",
    "encode_expense_payload",
    "encode_budget",
]
