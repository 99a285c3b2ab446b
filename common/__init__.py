"""Core business logic package for the expense tracker."""

from .models import Expense, ExpensePatch
from .services import ExpenseService, Summary, summarize
from .storage import ExpenseStore
from .exceptions import RecordNotFoundError, StorageError, ValidationError

__all__ = [
    "Expense",
    "ExpensePatch",
    "ExpenseService",
    "Summary",
    "summarize",
    "ExpenseStore",
    "RecordNotFoundError",
    "StorageError",
    "ValidationError",
]
