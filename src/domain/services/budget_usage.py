"""Budget usage computation.

Turns a monthly budget and the store's usage summary into percentages and
alert levels. The same threshold policy applies to the overall limit and to
every per-category limit.
"""

from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache

from src.domain.constants import (
    CRITICAL_THRESHOLD,
    NOTICE_THRESHOLD,
    WARNING_THRESHOLD,
)
from src.domain.models.budgets import (
    AlertLevel,
    Budget,
    BudgetUsageReport,
    CategoryUsageRow,
    UsageSummary,
)

_ALERT_TIERS = (
    (CRITICAL_THRESHOLD, AlertLevel.CRITICAL),
    (WARNING_THRESHOLD, AlertLevel.WARNING),
    (NOTICE_THRESHOLD, AlertLevel.NOTICE),
)


def usage_percent(total: Decimal, limit: Decimal | None) -> int:
    """Return spend as a whole percentage of a limit, capped at 100.

    A missing or zero limit yields 0: it is treated as no usable ceiling.
    """
    if limit is None or limit <= 0:
        return 0
    ratio = min(Decimal("100"), total / limit * Decimal("100"))
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def classify_alert_level(percent: int) -> AlertLevel:
    """Map a usage percentage to its alert tier, highest tier first."""
    for threshold, level in _ALERT_TIERS:
        if percent >= threshold:
            return level
    return AlertLevel.NORMAL


@lru_cache(maxsize=128)
def compute_budget_usage(
    budget: Budget,
    usage: UsageSummary,
) -> BudgetUsageReport:
    """Combine a budget and a usage summary into a usage report.

    Args:
        budget: Monthly limits.
        usage: Store-computed spend for the same month.

    Returns:
        BudgetUsageReport: Overall percentage and alert level, plus one row
        per usage entry in the store's order.

    Raises:
        ValueError: If the budget and usage refer to different months.
    """
    if budget.month != usage.month:
        raise ValueError(
            f"Budget month {budget.month} does not match usage month "
            f"{usage.month}"
        )

    overall = usage_percent(usage.total, budget.amount)
    limits = budget.limits
    rows = []
    for item in usage.per_category:
        limit = limits.get(item.category_id) if item.category_id else None
        if limit is None or limit <= 0:
            rows.append(
                CategoryUsageRow(
                    category_id=item.category_id,
                    category_name=item.category_name,
                    total=item.total,
                    limit=None,
                    percent=None,
                    alert_level=None,
                )
            )
            continue
        percent = usage_percent(item.total, limit)
        rows.append(
            CategoryUsageRow(
                category_id=item.category_id,
                category_name=item.category_name,
                total=item.total,
                limit=limit,
                percent=percent,
                alert_level=classify_alert_level(percent),
            )
        )

    return BudgetUsageReport(
        month=usage.month,
        total=usage.total,
        limit=budget.amount,
        overall_percent=overall,
        alert_level=classify_alert_level(overall),
        categories=tuple(rows),
    )


__all__ = ["usage_percent", "classify_alert_level", "compute_budget_usage"]
