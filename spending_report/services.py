"""Framework-agnostic business services for the spending report."""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from .exceptions import PersistenceError, RecordNotFoundError
from .models import CATEGORIES, BudgetState, ExpenseRecord, Period, month_of
from .scheduling import MonthlyRollover, TimerFactory
from .storage import JSONStorage

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class ExpenseLedger:
    """Ordered collection of expense records mirrored to a JSON file.

    Insertion order is entry order, not purchase-date order. Writes are
    best-effort: a failed save is logged and the ledger keeps working from
    memory.
    """

    def __init__(self, storage: JSONStorage, resource: str = "expenses.json") -> None:
        self._storage = storage
        self._resource = resource
        self._records: List[ExpenseRecord] = []
        self._lock = threading.RLock()
        self.load()  # Hydrate in-memory list from persistence on construction.

    # Public API -----------------------------------------------------------
    def add(self, record: ExpenseRecord) -> bool:
        with self._lock:
            if not _is_well_formed(record):
                logger.warning("Skipping malformed expense %s", record.id)
                return False
            if self._index_of(record.id) is not None:
                logger.warning("Skipping expense %s: id already present", record.id)
                return False
            self._records.append(record)
            self._persist()
            return True

    def update(self, record: ExpenseRecord) -> bool:
        with self._lock:
            index = self._index_of(record.id)
            if index is None:
                logger.debug("Update ignored: expense %s not found", record.id)
                return False
            if not _is_well_formed(record):
                logger.warning("Skipping malformed update for expense %s", record.id)
                return False
            self._records[index] = record
            self._persist()
            return True

    def delete(self, record: ExpenseRecord) -> None:
        with self._lock:
            index = self._index_of(record.id)
            if index is None:
                logger.warning("Attempted to delete expense %s that does not exist", record.id)
                raise RecordNotFoundError(f"Expense {record.id} not found")
            del self._records[index]
            self._persist()

    def get(self, record_id: str) -> ExpenseRecord:
        with self._lock:
            index = self._index_of(record_id)
            if index is None:
                raise RecordNotFoundError(f"Expense {record_id} not found")
            return self._records[index]

    def records(self) -> List[ExpenseRecord]:
        with self._lock:
            return list(self._records)

    def recent(self, n: int) -> List[ExpenseRecord]:
        """Return the last ``n`` inserted records, most recent first."""
        if n <= 0:
            return []
        with self._lock:
            return list(reversed(self._records[-n:]))

    def category_total(self, category: str) -> Decimal:
        with self._lock:
            return sum(
                (record.amount for record in self._records if record.category == category),
                start=ZERO,
            )

    def category_totals(self) -> Dict[str, Decimal]:
        totals: Dict[str, Decimal] = {category: ZERO for category in CATEGORIES}
        with self._lock:
            for record in self._records:
                totals[record.category] = totals.get(record.category, ZERO) + record.amount
        return totals

    def load(self) -> None:
        """Load existing expenses; a missing or unreadable file yields an empty ledger."""
        with self._lock:
            try:
                raw_records = self._storage.load(self._resource, list) or []
                self._records = [ExpenseRecord.from_dict(payload) for payload in raw_records]
            except PersistenceError as exc:
                logger.warning("Starting with an empty ledger: %s", exc)
                self._records = []
            except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
                logger.warning("Starting with an empty ledger: malformed record in %s (%s)", self._resource, exc)
                self._records = []

    def __len__(self) -> int:
        return len(self._records)

    # Internal helpers -----------------------------------------------------
    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def _persist(self) -> None:
        try:
            self._storage.save(self._resource, [record.to_dict() for record in self._records])
        except PersistenceError:
            logger.exception("Failed to save expenses; continuing in memory")


class BudgetTracker:
    """Tracks the current month's total and remaining budget."""

    def __init__(
        self,
        storage: JSONStorage,
        resource: str = "budget.json",
        clock: Callable[[], datetime] = datetime.now,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._storage = storage
        self._resource = resource
        self._clock = clock
        self._timer_factory = timer_factory
        self._state = BudgetState()
        self._rollover: Optional[MonthlyRollover] = None
        self._lock = threading.RLock()
        self.load()

    @property
    def state(self) -> BudgetState:
        return self._state

    @property
    def total_budget(self) -> Decimal:
        return self._state.total_budget

    @property
    def remaining_budget(self) -> Decimal:
        return self._state.remaining_budget

    def set_monthly_budget(self, amount: Decimal) -> bool:
        if amount < 0:
            logger.warning("Ignoring negative monthly budget %s", amount)
            return False
        with self._lock:
            self._state = BudgetState(amount, amount, self._current_period())
            self._persist()
        return True

    def subtract_expense(self, amount: Decimal, when: date) -> bool:
        """Decrement the remaining budget only for expenses dated in the current month."""
        if amount <= 0:
            logger.warning("Ignoring non-positive expense amount %s", amount)
            return False
        with self._lock:
            self.resync()
            if month_of(when) != self._current_period():
                logger.debug("Expense dated %s is outside the current month; budget unchanged", when)
                return False
            state = self._state
            self._state = BudgetState(
                state.total_budget, state.remaining_budget - amount, state.period
            )
            self._persist()
        return True

    def rollover(self) -> None:
        with self._lock:
            state = self._state
            self._state = BudgetState(state.total_budget, state.total_budget, self._current_period())
            self._persist()
        logger.info("Monthly budget reset to %s", self._state.total_budget)

    def resync(self) -> bool:
        """Apply a rollover that was missed while the process was stopped or the timer lagged."""
        with self._lock:
            period = self._state.period
            if period is None or period == self._current_period():
                return False
            logger.info("Budget belongs to %04d-%02d; applying missed rollover", *period)
            self.rollover()
            return True

    def schedule_monthly_reset(self) -> MonthlyRollover:
        with self._lock:
            if self._rollover is None or not self._rollover.is_armed:
                kwargs = {"timer_factory": self._timer_factory} if self._timer_factory else {}
                self._rollover = MonthlyRollover(self.rollover, clock=self._clock, **kwargs)
                self._rollover.start()
            return self._rollover

    def shutdown(self) -> None:
        with self._lock:
            if self._rollover is not None:
                self._rollover.cancel()
                self._rollover = None

    def load(self) -> None:
        with self._lock:
            try:
                payload = self._storage.load(self._resource, dict)
                self._state = BudgetState.from_dict(payload) if payload else BudgetState()
            except PersistenceError as exc:
                logger.warning("Starting with an empty budget: %s", exc)
                self._state = BudgetState()
            except (TypeError, ValueError, ArithmeticError) as exc:
                logger.warning("Starting with an empty budget: malformed %s (%s)", self._resource, exc)
                self._state = BudgetState()
            self.resync()

    def _current_period(self) -> Period:
        return month_of(self._clock())

    def _persist(self) -> None:
        try:
            self._storage.save(self._resource, self._state.to_dict())
        except PersistenceError:
            logger.exception("Failed to save budget; continuing in memory")


class SpendingService:
    """Coordinates the ledger with an optional budget, as the entry screen does."""

    def __init__(self, ledger: ExpenseLedger, budget: Optional[BudgetTracker] = None) -> None:
        self._ledger = ledger
        self._budget = budget

    def record_expense(self, record: ExpenseRecord) -> bool:
        """Add the record and charge it to the budget when one is tracked."""
        added = self._ledger.add(record)
        if added and self._budget is not None:
            self._budget.subtract_expense(record.amount, record.date)
        return added

    def summary(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "count": len(self._ledger),
            "categories": {
                name: f"{total:.2f}" for name, total in self._ledger.category_totals().items()
            },
        }
        if self._budget is not None:
            data["budget"] = self._budget.state.to_dict()
        return data

    def refresh(self) -> None:
        """Reload data from persistence for both stores."""
        self._ledger.load()
        if self._budget is not None:
            self._budget.load()

    def snapshot(self) -> Dict[str, object]:
        """Return serialisable snapshot useful for testing or exports."""
        return {
            "expenses": [record.to_dict() for record in self._ledger.records()],
            "budget": self._budget.state.to_dict() if self._budget is not None else None,
        }


def _is_well_formed(record: ExpenseRecord) -> bool:
    return bool(record.category) and record.amount > 0
