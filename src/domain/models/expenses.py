"""Domain models for expenses, categories and dashboard aggregates."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class PaymentMethod(str, Enum):
    """Payment methods accepted by the expense store."""

    CASH = "cash"
    CARD = "card"
    BANK = "bank"
    WALLET = "wallet"
    OTHER = "other"


class DashboardPeriod(str, Enum):
    """Aggregation windows offered by the dashboard endpoint."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class Category:
    """Expense category as returned by the store."""

    id: str
    name: str


@dataclass(frozen=True)
class Expense:
    """Client-side copy of a persisted expense.

    Attributes:
        id: Identifier assigned by the store.
        amount: Positive amount spent.
        payment_method: How the expense was paid.
        date: Timezone-aware timestamp of the expense.
        category_id: Optional reference to a Category.
        description: Optional free text.
        attachment_url: Optional receipt URL.
    """

    id: str
    amount: Decimal
    payment_method: PaymentMethod
    date: datetime
    category_id: str | None = None
    description: str | None = None
    attachment_url: str | None = None


@dataclass(frozen=True)
class ExpensePayload:
    """Body of a create or full-replace update request.

    ``date`` may be left unset on creation; the mutation client fills it
    with the current time.
    """

    amount: Decimal
    payment_method: PaymentMethod
    category_id: str | None = None
    description: str | None = None
    date: datetime | None = None
    attachment_url: str | None = None


@dataclass(frozen=True)
class BreakdownItem:
    """Spend for one category inside a dashboard period."""

    category_name: str | None
    total: Decimal


@dataclass(frozen=True)
class DashboardSummary:
    """Aggregates returned by the dashboard endpoint."""

    period: DashboardPeriod
    total_spent: Decimal
    recent: tuple[Expense, ...] = ()
    breakdown: tuple[BreakdownItem, ...] = ()


@dataclass(frozen=True)
class BreakdownShare:
    """Breakdown item with its share of the breakdown sum, in percent."""

    category_name: str | None
    total: Decimal
    share: Decimal


__all__ = [
    "PaymentMethod",
    "DashboardPeriod",
    "Category",
    "Expense",
    "ExpensePayload",
    "BreakdownItem",
    "DashboardSummary",
    "BreakdownShare",
]
