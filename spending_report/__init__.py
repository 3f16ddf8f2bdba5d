"""Core business logic package for the spending report."""

from .context import AppContext, build_context
from .drafts import Editing, ExpenseDraft, NoSelection, select
from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .models import CATEGORIES, BudgetState, ExpenseRecord
from .scheduling import MonthlyRollover, next_month_boundary
from .services import BudgetTracker, ExpenseLedger, SpendingService
from .storage import JSONStorage

__all__ = [
    "CATEGORIES",
    "AppContext",
    "BudgetState",
    "BudgetTracker",
    "Editing",
    "ExpenseDraft",
    "ExpenseLedger",
    "ExpenseRecord",
    "JSONStorage",
    "MonthlyRollover",
    "NoSelection",
    "PersistenceError",
    "RecordNotFoundError",
    "SpendingService",
    "ValidationError",
    "build_context",
    "next_month_boundary",
    "select",
]
