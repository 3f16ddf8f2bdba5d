from datetime import date
from decimal import Decimal

import pytest

from conftest import make_record
from spending_report.drafts import Editing, ExpenseDraft, NoSelection, select
from spending_report.exceptions import ValidationError
from spending_report.services import ExpenseLedger


def test_build_creates_validated_record():
    draft = ExpenseDraft(category="eating out", amount="$1,234.5", date="2024-03-27", description="  dinner ")
    record = draft.build()

    assert record.category == "Eating Out"
    assert record.amount == Decimal("1234.50")
    assert record.date == date(2024, 3, 27)
    assert record.description == "dinner"
    assert record.id


def test_build_generates_distinct_ids():
    draft = ExpenseDraft(category="Gas", amount="10")
    assert draft.build().id != draft.build().id


@pytest.mark.parametrize(
    "category, amount",
    [("", "10"), ("Gas", "0"), ("Gas", "-3"), ("Gas", "abc"), ("Rent", "10")],
)
def test_invalid_drafts_are_rejected(category, amount):
    draft = ExpenseDraft(category=category, amount=amount)
    assert not draft.is_valid()
    with pytest.raises(ValidationError):
        draft.build()


def test_apply_to_keeps_id():
    record = make_record("Gas", "40.00")
    draft = ExpenseDraft.from_record(record)
    draft.amount = "45"

    updated = draft.apply_to(record)
    assert updated.id == record.id
    assert updated.amount == Decimal("45.00")
    assert record.amount == Decimal("40.00")


def test_select_returns_tagged_variant(storage):
    ledger = ExpenseLedger(storage)
    record = make_record()
    ledger.add(record)

    assert select(ledger, record.id) == Editing(record)
    assert isinstance(select(ledger, "missing"), NoSelection)
    assert select(ledger, record.id).draft().category == "Gas"
