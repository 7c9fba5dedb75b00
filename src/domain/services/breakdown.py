"""Dashboard aggregate helpers."""

from collections.abc import Iterable
from decimal import Decimal

from src.domain.models.expenses import BreakdownItem, BreakdownShare, Category


class CategoryIndex:
    """Category names keyed by id, built once per category fetch."""

    def __init__(self, categories: Iterable[Category] | None = None) -> None:
        self._names = {
            category.id: category.name for category in categories or ()
        }

    def name_for(self, category_id: str | None) -> str | None:
        """Return the category name, or None when unknown or unset."""
        if category_id is None:
            return None
        return self._names.get(category_id)

    def ids(self) -> set[str]:
        return set(self._names)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._names

    def __len__(self) -> int:
        return len(self._names)


def compute_breakdown_shares(
    breakdown: Iterable[BreakdownItem] | None,
) -> tuple[BreakdownShare, ...]:
    """Return each breakdown item with its share of the breakdown sum.

    Args:
        breakdown: Items from the dashboard summary, possibly missing.

    Returns:
        tuple[BreakdownShare, ...]: Items in input order. Shares are zero
        when the sum is zero.
    """
    items = list(breakdown or ())
    total = sum((item.total for item in items), start=Decimal("0"))
    return tuple(
        BreakdownShare(
            category_name=item.category_name,
            total=item.total,
            share=(item.total / total * Decimal("100"))
            if total
            else Decimal("0"),
        )
        for item in items
    )


__all__ = ["CategoryIndex", "compute_breakdown_shares"]
