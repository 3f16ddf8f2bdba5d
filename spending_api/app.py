"""Flask JSON API exposing the spending report services."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from spending_report.context import build_context
from spending_report.drafts import ExpenseDraft, NoSelection, select
from spending_report.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from spending_report.models import CATEGORIES
from spending_report.validators import parse_budget_amount, validate_category

RECENT_DEFAULT = 5


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


def create_app(data_dir: Optional[Path] = None, schedule_rollover: Optional[bool] = None) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("SPENDING_REPORT_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("SPENDING_REPORT_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    data_root = data_dir or os.getenv("SPENDING_REPORT_DATA_DIR", "data")
    context = build_context(Path(data_root))
    if schedule_rollover is None:
        schedule_rollover = _env_flag("SPENDING_REPORT_SCHEDULE_ROLLOVER", True)
    if schedule_rollover:
        rollover = context.budget.schedule_monthly_reset()
        app.logger.info("Next budget rollover at %s", rollover.next_fire_at)
    app.extensions["spending_report"] = context

    ledger = context.ledger
    budget = context.budget

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _limit() -> int:
        raw = request.args.get("limit")
        if raw in (None, ""):
            return RECENT_DEFAULT
        try:
            return int(raw)
        except ValueError as exc:
            raise ValidationError("limit must be an integer") from exc

    @app.get("/categories")
    def list_categories():
        totals = ledger.category_totals()
        items = [{"name": name, "total": f"{totals[name]:.2f}"} for name in CATEGORIES]
        return _success({"items": items})

    @app.get("/categories/<name>/total")
    def category_total(name: str):
        category = validate_category(name)
        return _success({"category": category, "total": f"{ledger.category_total(category):.2f}"})

    @app.get("/expenses")
    def list_expenses():
        records = ledger.recent(_limit())
        return _success({"items": [record.to_dict() for record in records], "count": len(ledger)})

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        draft = ExpenseDraft(
            category=payload.get("category", ""),
            amount=str(payload.get("amount", "")),
            date=payload.get("date") or date.today(),
            description=payload.get("description") or "",
        )
        record = draft.build()
        context.service.record_expense(record)
        return _success(record.to_dict(), 201)

    @app.get("/expenses/<expense_id>")
    def get_expense(expense_id: str):
        return _success(ledger.get(expense_id).to_dict())

    @app.put("/expenses/<expense_id>")
    def update_expense(expense_id: str):
        selection = select(ledger, expense_id)
        if isinstance(selection, NoSelection):
            raise RecordNotFoundError(f"Expense {expense_id} not found")
        payload = _json_body()
        draft = selection.draft()
        for field in ("category", "date", "description"):
            if payload.get(field) is not None:
                setattr(draft, field, payload[field])
        if payload.get("amount") is not None:
            draft.amount = str(payload["amount"])
        updated = draft.apply_to(selection.record)
        ledger.update(updated)
        return _success(updated.to_dict())

    @app.delete("/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        ledger.delete(ledger.get(expense_id))
        return _success({}, 204)

    @app.get("/budget")
    def get_budget():
        return _success(budget.state.to_dict())

    @app.put("/budget")
    def set_budget():
        payload = _json_body()
        budget.set_monthly_budget(parse_budget_amount(payload.get("amount")))
        return _success(budget.state.to_dict())

    @app.get("/summary")
    def summary():
        return _success(context.service.summary())

    return app
