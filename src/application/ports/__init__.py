"""Application ports package."""

from .expense_store import ExpenseStorePort
from .preferences import PreferencesStorePort

__all__ = ["ExpenseStorePort", "PreferencesStorePort"]
