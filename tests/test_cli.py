import json
from datetime import date

import pytest

from spending_cli.cli import format_date, main


@pytest.fixture
def run(tmp_path):
    def _run(*argv):
        return main(["--data-dir", str(tmp_path), *argv])

    _run.data_dir = tmp_path
    return _run


def _expenses(data_dir):
    return json.loads((data_dir / "expenses.json").read_text(encoding="utf-8"))


def test_format_date_uses_medium_style():
    assert format_date(date(2024, 3, 7)) == "Mar 7, 2024"


def test_add_and_recent(run, capsys):
    assert run("expense", "add", "Gas", "40", "--date", "2024-03-01") == 0
    assert run("expense", "add", "Gifts", "12.5", "--date", "2024-03-02", "--description", "card") == 0
    capsys.readouterr()

    assert run("expense", "recent", "-n", "1") == 0
    out = capsys.readouterr().out
    assert "Gifts: $12.50 - Mar 2, 2024" in out
    assert "Gas" not in out


def test_add_today_charges_budget(run, capsys):
    assert run("budget", "set", "300") == 0
    assert run("expense", "add", "Gas", "40") == 0
    capsys.readouterr()

    assert run("budget", "show") == 0
    out = capsys.readouterr().out
    assert "Monthly budget: $300.00" in out
    assert "Remaining: $260.00" in out


def test_edit_and_delete(run, capsys):
    run("expense", "add", "Gas", "40", "--date", "2024-03-01")
    record_id = _expenses(run.data_dir)[0]["id"]

    assert run("expense", "edit", record_id, "--amount", "42", "--category", "Groceries") == 0
    stored = _expenses(run.data_dir)[0]
    assert stored["amount"] == "42.00"
    assert stored["category"] == "Groceries"
    assert stored["date"] == "2024-03-01"

    assert run("expense", "delete", record_id) == 0
    assert _expenses(run.data_dir) == []


def test_unknown_id_exits_with_error(run, capsys):
    assert run("expense", "delete", "missing") == 1
    assert run("expense", "edit", "missing", "--amount", "5") == 1
    assert "not found" in capsys.readouterr().err


def test_category_total(run, capsys):
    run("expense", "add", "Gas", "40", "--date", "2024-03-01")
    run("expense", "add", "Gas", "2.25", "--date", "2024-03-02")
    capsys.readouterr()

    assert run("expense", "total", "Gas") == 0
    assert "Gas: $42.25" in capsys.readouterr().out


def test_negative_budget_is_a_validation_error(run, capsys):
    assert run("budget", "set", "-5") == 1
    assert "Validation error" in capsys.readouterr().err


def test_non_positive_amount_is_rejected_by_parser(run):
    with pytest.raises(SystemExit):
        run("expense", "add", "Gas", "0")


def test_summary(run, capsys):
    run("expense", "add", "Experiences", "20", "--date", "2024-03-01")
    capsys.readouterr()

    assert run("summary") == 0
    out = capsys.readouterr().out
    assert "1 expenses recorded" in out
    assert "Experiences: $20.00" in out
    assert "No monthly budget set." in out
