"""Domain validation helpers."""

from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal
from logging import Logger

from src.domain.models.budgets import Budget
from src.domain.models.expenses import ExpensePayload, PaymentMethod


def validate_expense_payload(payload: ExpensePayload) -> None:
    """Reject payloads the store would refuse.

    Args:
        payload: Create or update body.

    Raises:
        ValueError: If the amount is not a positive finite number or the
            payment method is not one of the supported values.
    """
    amount = payload.amount
    if not isinstance(amount, Decimal) or not amount.is_finite():
        raise ValueError(f"Expense amount must be a finite number: {amount!r}")
    if amount <= 0:
        raise ValueError(f"Expense amount must be positive: {amount}")
    PaymentMethod(payload.payment_method)


def validate_budget(budget: Budget) -> None:
    """Reject budgets with negative or non-finite limits.

    Raises:
        ValueError: If any limit is negative or not finite.
    """
    limits = [("overall", budget.amount), *budget.per_category]
    for label, limit in limits:
        if not limit.is_finite():
            raise ValueError(f"Budget limit for {label} must be finite")
        if limit < 0:
            raise ValueError(
                f"Budget limit for {label} must not be negative: {limit}"
            )


def prune_unknown_category_limits(
    budget: Budget,
    known_category_ids: Iterable[str],
    logger: Logger,
) -> Budget:
    """Drop per-category limits that reference unknown categories.

    Args:
        budget: Budget about to be saved.
        known_category_ids: Ids of the categories fetched from the store.
        logger: Logger used for warnings.

    Returns:
        Budget: Budget holding only limits for known categories.
    """
    known = set(known_category_ids)
    kept = []
    for category_id, limit in budget.per_category:
        if category_id in known:
            kept.append((category_id, limit))
        else:
            logger.warning(
                f"Dropping budget limit for unknown category_id={category_id}"
            )
    return replace(budget, per_category=tuple(kept))


__all__ = [
    "validate_expense_payload",
    "validate_budget",
    "prune_unknown_category_limits",
]
