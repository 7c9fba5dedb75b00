"""Composition root for wiring infrastructure adapters."""

from src.application.events import EventBus
from src.application.ports.expense_store import ExpenseStorePort
from src.application.ports.preferences import PreferencesStorePort
from src.application.use_cases.budget_panel import BudgetPanelController
from src.application.use_cases.dashboard_view import DashboardController
from src.application.use_cases.expense_mutations import ExpenseMutationClient
from src.application.use_cases.get_budget_status import GetBudgetStatusUseCase
from src.infrastructure.http_expense_store import HttpExpenseStore
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.preferences_store import JsonPreferencesStore
from src.infrastructure.settings import ExpenseTrackerSettings


def build_expense_store(
    settings: ExpenseTrackerSettings | None = None,
) -> ExpenseStorePort:
    """Return the HTTP expense store for the configured origin."""
    resolved = settings or ExpenseTrackerSettings.from_env()
    return HttpExpenseStore(
        resolved.base_url,
        timeout=resolved.timeout,
        logger=get_app_logger(),
    )


def build_preferences_store(
    settings: ExpenseTrackerSettings | None = None,
) -> PreferencesStorePort:
    """Return the preferences store."""
    resolved = settings or ExpenseTrackerSettings.from_env()
    return JsonPreferencesStore(resolved.preferences_file, logger=get_app_logger())


def build_budget_status_use_case(
    store: ExpenseStorePort | None = None,
    logger=None,
) -> GetBudgetStatusUseCase:
    """Return the budget status use case."""
    return GetBudgetStatusUseCase(store or build_expense_store(), logger=logger)


class AppContainer:
    """Shared store, event bus, mutation client and view controllers."""

    def __init__(
        self,
        settings: ExpenseTrackerSettings | None = None,
        store: ExpenseStorePort | None = None,
    ) -> None:
        self.settings = settings or ExpenseTrackerSettings.from_env()
        self.store = store or build_expense_store(self.settings)
        self.event_bus = EventBus()
        self.mutations = ExpenseMutationClient(self.store, self.event_bus)
        self.dashboard = DashboardController(
            self.store,
            self.event_bus,
            page_size=self.settings.page_size,
        )
        self.budget_panel = BudgetPanelController(self.store, self.event_bus)


def build_app_container(
    settings: ExpenseTrackerSettings | None = None,
) -> AppContainer:
    """Return a fully wired container for one UI session."""
    return AppContainer(settings=settings)


__all__ = [
    "AppContainer",
    "build_app_container",
    "build_expense_store",
    "build_preferences_store",
    "build_budget_status_use_case",
]
