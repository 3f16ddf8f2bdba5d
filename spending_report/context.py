"""Explicit application context handed to front-ends instead of global stores."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .scheduling import TimerFactory
from .services import BudgetTracker, ExpenseLedger, SpendingService
from .storage import JSONStorage


@dataclass
class AppContext:
    storage: JSONStorage
    ledger: ExpenseLedger
    budget: BudgetTracker
    service: SpendingService

    def close(self) -> None:
        self.budget.shutdown()


def build_context(
    data_dir: Path,
    clock: Optional[Callable[[], datetime]] = None,
    timer_factory: Optional[TimerFactory] = None,
) -> AppContext:
    storage = JSONStorage(Path(data_dir))
    ledger = ExpenseLedger(storage)
    budget = BudgetTracker(storage, clock=clock or datetime.now, timer_factory=timer_factory)
    return AppContext(
        storage=storage,
        ledger=ledger,
        budget=budget,
        service=SpendingService(ledger, budget),
    )
