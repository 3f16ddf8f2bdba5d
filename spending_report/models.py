"""Data models for the spending report domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

__all__ = [
    "CATEGORIES",
    "BudgetState",
    "ExpenseRecord",
    "Period",
    "format_period",
    "month_of",
    "new_record_id",
    "parse_period",
]

CATEGORIES: Tuple[str, ...] = (
    "Gas",
    "Sweet Treats",
    "Eating Out",
    "Fun Items",
    "Video Games",
    "Gifts",
    "Necessities",
    "Groceries",
    "Experiences",
)

Period = Tuple[int, int]


def new_record_id() -> str:
    return str(uuid4())


def month_of(value: date) -> Period:
    """Return the (year, month) pair a date or datetime falls in."""
    return value.year, value.month


def format_period(period: Optional[Period]) -> Optional[str]:
    if period is None:
        return None
    year, month = period
    return f"{year:04d}-{month:02d}"


def parse_period(value: Optional[str]) -> Optional[Period]:
    if not value:
        return None
    year, month = value.split("-")
    parsed = int(year), int(month)
    if not 1 <= parsed[1] <= 12:
        raise ValueError(f"Invalid month in period {value!r}")
    return parsed


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


@dataclass(frozen=True)
class ExpenseRecord:
    id: str
    category: str
    amount: Decimal
    date: date
    description: str = ""

    @classmethod
    def create(
        cls, category: str, amount: Decimal, date: date, description: str = ""
    ) -> "ExpenseRecord":
        """Build a record with a freshly generated id."""
        return cls(
            id=new_record_id(),
            category=category,
            amount=amount,
            date=date,
            description=description,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the record to JSON-friendly natives."""
        return {
            "id": self.id,
            "category": self.category,
            "amount": f"{self.amount:.2f}",
            "date": self.date.isoformat(),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpenseRecord":
        """Hydrate a record from JSON-native data."""
        return cls(
            id=str(data["id"]),
            category=str(data.get("category") or ""),
            amount=Decimal(str(data["amount"])),
            date=_as_date(data["date"]),
            description=str(data.get("description") or ""),
        )


@dataclass(frozen=True)
class BudgetState:
    """Current month's allocation; a total of zero means no budget is set."""

    total_budget: Decimal = Decimal("0.00")
    remaining_budget: Decimal = Decimal("0.00")
    period: Optional[Period] = None

    @property
    def is_set(self) -> bool:
        return self.total_budget > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalBudget": f"{self.total_budget:.2f}",
            "remainingBudget": f"{self.remaining_budget:.2f}",
            "period": format_period(self.period),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BudgetState":
        return cls(
            total_budget=Decimal(str(data.get("totalBudget", "0"))),
            remaining_budget=Decimal(str(data.get("remainingBudget", "0"))),
            period=parse_period(data.get("period")),
        )
