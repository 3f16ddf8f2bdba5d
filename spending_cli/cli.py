"""Console interface for the spending report."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from spending_report.context import AppContext, build_context
from spending_report.drafts import ExpenseDraft, NoSelection, select
from spending_report.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from spending_report.models import CATEGORIES, ExpenseRecord
from spending_report.validators import parse_budget_amount

DATE_FORMAT = "%Y-%m-%d"
RECENT_DEFAULT = 5


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value.replace("$", "").replace(",", ""))
        positive = amount.is_finite() and amount > 0
    except Exception as exc:  # pragma: no cover - delegated to the draft
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not positive:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return value


def format_date(value: date) -> str:
    """Medium date style, e.g. ``Mar 27, 2024``."""
    return f"{value:%b} {value.day}, {value.year}"


def format_expense(record: ExpenseRecord) -> str:
    line = f"{record.category}: ${record.amount:.2f} - {format_date(record.date)}"
    if record.description:
        line += f"\n  {record.description}"
    return f"[{record.id}] {line}"


def handle_expense(args: argparse.Namespace, context: AppContext) -> None:
    ledger = context.ledger
    if args.command == "add":
        draft = ExpenseDraft(
            category=args.category,
            amount=args.amount,
            date=args.date or date.today().strftime(DATE_FORMAT),
            description=args.description or "",
        )
        record = draft.build()
        context.service.record_expense(record)
        print("Expense added:\n" + format_expense(record))
    elif args.command == "recent":
        records = ledger.recent(args.n)
        if not records:
            print("No expenses recorded.")
            return
        for record in records:
            print(format_expense(record))
    elif args.command == "edit":
        selection = select(ledger, args.id)
        if isinstance(selection, NoSelection):
            raise RecordNotFoundError(f"Expense {args.id} not found")
        draft = selection.draft()
        if args.category is not None:
            draft.category = args.category
        if args.amount is not None:
            draft.amount = args.amount
        if args.date is not None:
            draft.date = args.date
        if args.description is not None:
            draft.description = args.description
        updated = draft.apply_to(selection.record)
        ledger.update(updated)
        print("Expense updated:\n" + format_expense(updated))
    elif args.command == "delete":
        record = ledger.get(args.id)
        ledger.delete(record)
        print(f"Expense {args.id} deleted.")
    elif args.command == "total":
        category = args.category
        total = ledger.category_total(category)
        print(f"{category}: ${total:.2f}")


def handle_budget(args: argparse.Namespace, context: AppContext) -> None:
    budget = context.budget
    if args.command == "set":
        budget.set_monthly_budget(parse_budget_amount(args.amount))
    state = budget.state
    if not state.is_set:
        print("No monthly budget set.")
        return
    print(f"Monthly budget: ${state.total_budget:.2f}")
    print(f"Remaining: ${state.remaining_budget:.2f}")


def handle_summary(args: argparse.Namespace, context: AppContext) -> None:
    summary = context.service.summary()
    print(f"{summary['count']} expenses recorded")
    for name, total in summary["categories"].items():
        if total != "0.00":
            print(f"  {name}: ${total}")
    handle_budget(argparse.Namespace(command="show"), context)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Spending Report CLI")
    parser.add_argument(
        "--data-dir",
        default="data",
        type=Path,
        help="Directory to store JSON data (default: ./data)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    expense_parser = subparsers.add_parser("expense", help="Manage expenses")
    expense_sub = expense_parser.add_subparsers(dest="command", required=True)

    expense_add = expense_sub.add_parser("add", help="Record a new expense")
    expense_add.add_argument("category", choices=CATEGORIES)
    expense_add.add_argument("amount", type=_parse_amount)
    expense_add.add_argument("--date", type=_parse_date, help="Date of purchase (default: today)")
    expense_add.add_argument("--description")

    expense_recent = expense_sub.add_parser("recent", help="Show the most recent expenses")
    expense_recent.add_argument("-n", type=int, default=RECENT_DEFAULT)

    expense_edit = expense_sub.add_parser("edit", help="Edit an existing expense")
    expense_edit.add_argument("id")
    expense_edit.add_argument("--category", choices=CATEGORIES)
    expense_edit.add_argument("--amount", type=_parse_amount)
    expense_edit.add_argument("--date", type=_parse_date)
    expense_edit.add_argument("--description")

    expense_delete = expense_sub.add_parser("delete", help="Delete an expense")
    expense_delete.add_argument("id")

    expense_total = expense_sub.add_parser("total", help="Total spent in a category")
    expense_total.add_argument("category", choices=CATEGORIES)

    budget_parser = subparsers.add_parser("budget", help="Manage the monthly budget")
    budget_sub = budget_parser.add_subparsers(dest="command", required=True)
    budget_set = budget_sub.add_parser("set", help="Set the monthly budget")
    budget_set.add_argument("amount")
    budget_sub.add_parser("show", help="Show the current budget")

    subparsers.add_parser("summary", help="Per-category totals and budget")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    context = build_context(args.data_dir)

    try:
        if args.entity == "expense":
            handle_expense(args, context)
        elif args.entity == "budget":
            handle_budget(args, context)
        elif args.entity == "summary":
            handle_summary(args, context)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    finally:
        context.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
