"""Events published after successful mutations.

Views owning fetched data subscribe to the events that invalidate it and
refetch when they are published.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from src.domain.models.budgets import Budget
from src.domain.models.expenses import Expense
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class ExpenseCreated:
    expense: Expense


@dataclass(frozen=True)
class ExpenseUpdated:
    expense: Expense


@dataclass(frozen=True)
class ExpenseDeleted:
    expense_id: str


@dataclass(frozen=True)
class BudgetSaved:
    budget: Budget


EXPENSE_EVENTS = (ExpenseCreated, ExpenseUpdated, ExpenseDeleted)

Handler = Callable[[object], Awaitable[None]]


class EventBus:
    """Dispatch mutation events to async subscribers."""

    def __init__(self, logger=None) -> None:
        self._subscribers: dict[type, list[Handler]] = {}
        self._pending: set[asyncio.Task] = set()
        self._logger = logger or get_app_logger()

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    async def publish(self, event: object) -> None:
        """Run every handler for the event and wait for them to finish.

        Handlers for one event run concurrently; the first handler error
        propagates to the caller.
        """
        handlers = list(self._subscribers.get(type(event), []))
        self._logger.debug(
            f"Publishing {type(event).__name__} to {len(handlers)} handlers"
        )
        if handlers:
            await asyncio.gather(*(handler(event) for handler in handlers))

    def emit(self, event: object) -> asyncio.Task:
        """Schedule the event's handlers without waiting for them.

        Returns:
            asyncio.Task: Task running the handlers; also awaited by drain.
        """
        task = asyncio.get_running_loop().create_task(self.publish(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait until every emitted event has been handled."""
        while self._pending:
            await asyncio.gather(*list(self._pending))


__all__ = [
    "EventBus",
    "ExpenseCreated",
    "ExpenseUpdated",
    "ExpenseDeleted",
    "BudgetSaved",
    "EXPENSE_EVENTS",
]
