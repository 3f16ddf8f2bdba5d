"""Editable drafts and the edit-selection state used by front-ends."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Union

from .exceptions import RecordNotFoundError
from .models import ExpenseRecord, new_record_id
from .services import ExpenseLedger
from .validators import parse_amount, validate_category, validate_date, validate_description

__all__ = ["Editing", "ExpenseDraft", "NoSelection", "Selection", "select"]


@dataclass
class ExpenseDraft:
    """Raw form values, kept apart from the committed record until saved."""

    category: str = ""
    amount: str = ""
    date: object = field(default_factory=date.today)
    description: str = ""

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseDraft":
        return cls(
            category=record.category,
            amount=f"{record.amount:.2f}",
            date=record.date,
            description=record.description,
        )

    def is_valid(self) -> bool:
        """Mirror of the entry screen's gate: a category and a positive amount."""
        try:
            validate_category(self.category)
            parse_amount(self.amount)
        except ValueError:
            return False
        return True

    def build(self) -> ExpenseRecord:
        """Validate the draft and return a new record with a fresh id."""
        return self._to_record(new_record_id())

    def apply_to(self, record: ExpenseRecord) -> ExpenseRecord:
        """Validate the draft and return a replacement for ``record`` keeping its id."""
        return self._to_record(record.id)

    def _to_record(self, record_id: str) -> ExpenseRecord:
        return ExpenseRecord(
            id=record_id,
            category=validate_category(self.category),
            amount=parse_amount(self.amount),
            date=validate_date(self.date),
            description=validate_description(self.description),
        )


@dataclass(frozen=True)
class NoSelection:
    """Nothing is open for editing."""


@dataclass(frozen=True)
class Editing:
    record: ExpenseRecord

    def draft(self) -> ExpenseDraft:
        return ExpenseDraft.from_record(self.record)


Selection = Union[NoSelection, Editing]


def select(ledger: ExpenseLedger, record_id: str) -> Selection:
    try:
        return Editing(ledger.get(record_id))
    except RecordNotFoundError:
        return NoSelection()
