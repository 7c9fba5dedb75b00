"""Application use cases package."""

from .budget_panel import BudgetPanelController
from .dashboard_view import (
    DashboardController,
    DashboardViewState,
    compose_dashboard_view,
)
from .expense_form import ExpenseDetail, ExpenseForm, ExpenseFormFields
from .expense_mutations import ExpenseMutationClient
from .get_budget_status import GetBudgetStatusUseCase

__all__ = [
    "BudgetPanelController",
    "DashboardController",
    "DashboardViewState",
    "compose_dashboard_view",
    "ExpenseDetail",
    "ExpenseForm",
    "ExpenseFormFields",
    "ExpenseMutationClient",
    "GetBudgetStatusUseCase",
]
