"""Validation helpers shared by the front-ends and the draft model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .exceptions import ValidationError
from .models import CATEGORIES

DESCRIPTION_MAX_LENGTH = 200


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _to_decimal(raw: object, field: str) -> Decimal:
    if isinstance(raw, str):
        # Entry fields accept "$12.50" and "1,200" the same way the amount pad does.
        raw = raw.replace("$", "").replace(",", "").strip()
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a numeric value")
    return amount


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a positive Decimal with exactly two fraction digits."""
    amount = _to_decimal(raw, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return _quantize_two_decimals(amount)


def parse_budget_amount(raw: object, field: str = "amount") -> Decimal:
    """Like :func:`parse_amount` but zero is allowed; it clears the budget."""
    amount = _to_decimal(raw, field)
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    return _quantize_two_decimals(amount)


def validate_category(value: object, field: str = "category") -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    for category in CATEGORIES:
        if category.lower() == trimmed.lower():
            return category
    raise ValidationError(f"{field} must be one of: {', '.join(CATEGORIES)}")


def validate_date(value: object, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from exc
    raise ValidationError(f"{field} must be a date or ISO 8601 string")


def validate_description(value: Optional[object], field: str = "description") -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if len(trimmed) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"{field} must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return trimmed
