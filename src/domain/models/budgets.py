"""Domain models for monthly budgets and their usage."""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum


class AlertLevel(str, Enum):
    """Usage tiers derived from the spend-to-limit ratio."""

    NORMAL = "normal"
    NOTICE = "notice"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Budget:
    """Monthly spending limits.

    Attributes:
        month: Month key formatted as ``YYYY-MM``.
        amount: Overall monthly limit. Zero means no usable ceiling.
        per_category: Pairs of (category_id, limit). A category missing
            from this tuple has no limit.
    """

    month: str
    amount: Decimal = Decimal("0")
    per_category: tuple[tuple[str, Decimal], ...] = ()

    @classmethod
    def from_mapping(
        cls,
        month: str,
        amount: Decimal,
        per_category: Mapping[str, Decimal] | None = None,
    ) -> "Budget":
        """Build a budget from a category_id -> limit mapping."""
        return cls(
            month=month,
            amount=amount,
            per_category=tuple((per_category or {}).items()),
        )

    @classmethod
    def empty(cls, month: str) -> "Budget":
        """Return the zero-valued budget used when none is stored."""
        return cls(month=month)

    @property
    def limits(self) -> dict[str, Decimal]:
        return dict(self.per_category)

    def limit_for(self, category_id: str | None) -> Decimal | None:
        """Return the configured limit for a category, if any."""
        if category_id is None:
            return None
        return self.limits.get(category_id)

    def with_amount(self, amount: Decimal) -> "Budget":
        return replace(self, amount=amount)

    def with_category_limit(
        self,
        category_id: str,
        limit: Decimal | None,
    ) -> "Budget":
        """Return a copy with one category limit set or removed."""
        limits = self.limits
        if limit is None:
            limits.pop(category_id, None)
        else:
            limits[category_id] = limit
        return replace(self, per_category=tuple(limits.items()))


@dataclass(frozen=True)
class CategoryUsage:
    """Spend aggregated for one category in a month."""

    category_id: str | None
    category_name: str | None
    total: Decimal


@dataclass(frozen=True)
class UsageSummary:
    """Actual spend for a month, computed by the store."""

    month: str
    total: Decimal
    per_category: tuple[CategoryUsage, ...] = ()


@dataclass(frozen=True)
class CategoryUsageRow:
    """Usage of one category against its optional limit.

    ``percent`` and ``alert_level`` are ``None`` when the category has no
    configured limit.
    """

    category_id: str | None
    category_name: str | None
    total: Decimal
    limit: Decimal | None
    percent: int | None
    alert_level: AlertLevel | None


@dataclass(frozen=True)
class BudgetUsageReport:
    """Overall and per-category usage of a monthly budget."""

    month: str
    total: Decimal
    limit: Decimal
    overall_percent: int
    alert_level: AlertLevel
    categories: tuple[CategoryUsageRow, ...] = ()


@dataclass(frozen=True)
class BudgetUnloaded:
    """No budget fetched yet for the selected month."""

    kind = "unloaded"


@dataclass(frozen=True)
class BudgetLoaded:
    """Budget confirmed by the store."""

    budget: Budget
    kind = "loaded"


@dataclass(frozen=True)
class BudgetDraft:
    """Budget held locally and not yet saved."""

    budget: Budget
    kind = "draft"


BudgetState = BudgetUnloaded | BudgetLoaded | BudgetDraft


__all__ = [
    "AlertLevel",
    "Budget",
    "CategoryUsage",
    "UsageSummary",
    "CategoryUsageRow",
    "BudgetUsageReport",
    "BudgetUnloaded",
    "BudgetLoaded",
    "BudgetDraft",
    "BudgetState",
]
