"""Use case to create, update and delete expenses in the remote store."""

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from src.application.events import (
    EventBus,
    ExpenseCreated,
    ExpenseDeleted,
    ExpenseUpdated,
)
from src.application.ports.expense_store import ExpenseStorePort
from src.domain.errors import ConfirmationRequired
from src.domain.models.expenses import Expense, ExpensePayload
from src.domain.services.validation import validate_expense_payload
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseMutationClient:
    """Send expense mutations and announce their results.

    Successful mutations emit an event on the bus so that views holding
    dependent data refetch. Failures propagate to the caller unchanged and
    emit nothing.

    ``create`` is not idempotent: the store assigns ids, so resubmitting
    after an ambiguous failure can create a duplicate record.
    """

    def __init__(
        self,
        store: ExpenseStorePort,
        event_bus: EventBus,
        logger=None,
        usage_logger=None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the client.

        Args:
            store: Port to the remote expense store.
            event_bus: Bus receiving mutation events.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording user actions.
            clock: Returns the current time; used for missing dates.
        """
        self._store = store
        self._event_bus = event_bus
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()
        self._clock = clock

    async def create(self, payload: ExpensePayload) -> Expense:
        """Create an expense.

        Args:
            payload: Expense fields. ``date`` defaults to now.

        Returns:
            Expense: The persisted expense with its assigned id.

        Raises:
            ValueError: If the payload is invalid; nothing is sent.
            ExpenseStoreError: If the store call fails.
        """
        validate_expense_payload(payload)
        if payload.date is None:
            payload = replace(payload, date=self._clock())
        expense = await self._store.create_expense(payload)
        self._logger.info(
            f"Created expense id={expense.id} amount={expense.amount}"
        )
        self._usage_logger.info(f"expense_created id={expense.id}")
        self._event_bus.emit(ExpenseCreated(expense=expense))
        return expense

    async def update(
        self,
        expense_id: str,
        payload: ExpensePayload,
    ) -> Expense:
        """Replace every field of an expense.

        The caller merges unchanged fields into ``payload`` beforehand.

        Raises:
            ValueError: If the payload is invalid; nothing is sent.
            ExpenseStoreError: If the store call fails.
        """
        validate_expense_payload(payload)
        if payload.date is None:
            payload = replace(payload, date=self._clock())
        expense = await self._store.update_expense(expense_id, payload)
        self._logger.info(f"Updated expense id={expense_id}")
        self._usage_logger.info(f"expense_updated id={expense_id}")
        self._event_bus.emit(ExpenseUpdated(expense=expense))
        return expense

    async def delete(self, expense_id: str, *, confirmed: bool = False) -> None:
        """Delete an expense after explicit confirmation.

        Raises:
            ConfirmationRequired: If ``confirmed`` is not True.
            ExpenseStoreError: If the store call fails.
        """
        if not confirmed:
            raise ConfirmationRequired(
                f"Deleting expense {expense_id} requires confirmation"
            )
        await self._store.delete_expense(expense_id)
        self._logger.info(f"Deleted expense id={expense_id}")
        self._usage_logger.info(f"expense_deleted id={expense_id}")
        self._event_bus.emit(ExpenseDeleted(expense_id=expense_id))


__all__ = ["ExpenseMutationClient"]
