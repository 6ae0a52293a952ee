from typing import Optional

from flask import Flask, abort, flash, jsonify, redirect, render_template, request, url_for

from loan_schedule.config import Settings, configure_logging
from loan_schedule.data_models import LoanInput, LoanSummary
from loan_schedule.engine import calculate_from_input
from loan_schedule.exceptions import HistoryStorageError, InvalidLoanParameters
from loan_schedule.formatter import FormatConfig, format_currency, format_percent
from loan_schedule.history import HistoryStore, create_store_from_env
from loan_schedule.validation import validate_loan_input

OPERATION_FAILED = "The operation failed. Please try again."


def _formatted_summary(loan: LoanInput, summary: LoanSummary, config: FormatConfig) -> dict:
    """Pre-format every value the templates and the JSON API display."""
    return {
        "principal": format_currency(loan.principal, config),
        "rate": format_percent(loan.annual_rate_percent, config),
        "term": loan.term_months,
        "monthly_payment": format_currency(summary.monthly_payment, config),
        "total_payment": format_currency(summary.total_payment, config),
        "total_interest": format_currency(summary.total_interest, config),
        "payments": [
            {
                "month": p.month,
                "payment": format_currency(p.payment, config),
                "principal": format_currency(p.principal_portion, config),
                "interest": format_currency(p.interest_portion, config),
                "remaining_balance": format_currency(p.remaining_balance, config),
            }
            for p in summary.payments
        ],
    }


def _form_values(form) -> dict:
    return {
        "principal": form.get("principal", "").strip(),
        "rate": form.get("rate", "").strip(),
        "term": form.get("term", "").strip(),
    }


def create_app(settings: Optional[Settings] = None, store: Optional[HistoryStore] = None) -> Flask:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    format_config = settings.format_config()
    history_store = store or create_store_from_env(
        settings.database_url, max_items=settings.history_limit
    )
    app.extensions["history_store"] = history_store

    @app.route("/", methods=["GET", "POST"])
    def index():
        values = {"principal": "", "rate": "", "term": ""}
        errors = {}
        result = None
        status = 200

        if request.method == "POST":
            values = _form_values(request.form)
            action = request.form.get("action", "calculate")
            try:
                loan = validate_loan_input(values["principal"], values["rate"], values["term"])
            except InvalidLoanParameters as exc:
                errors = exc.errors
                status = 400
            else:
                summary = calculate_from_input(loan)
                result = _formatted_summary(loan, summary, format_config)
                if action == "save":
                    try:
                        item = history_store.save_calculation(loan, summary)
                    except HistoryStorageError:
                        flash(OPERATION_FAILED, "error")
                    else:
                        flash("Calculation saved.", "success")
                        return redirect(url_for("history_detail", item_id=item.id))

        return (
            render_template("index.html", values=values, errors=errors, result=result),
            status,
        )

    @app.get("/history")
    def history():
        try:
            items = history_store.get_history()
        except HistoryStorageError:
            flash(OPERATION_FAILED, "error")
            items = []
        rows = [
            {
                "id": item.id,
                "date": item.created_at,
                "principal": format_currency(item.principal, format_config),
                "rate": format_percent(item.annual_rate_percent, format_config),
                "term": item.term_months,
                "monthly_payment": format_currency(item.result.monthly_payment, format_config),
            }
            for item in items
        ]
        return render_template("history.html", items=rows)

    @app.get("/history/<item_id>")
    def history_detail(item_id: str):
        try:
            item = history_store.get_item(item_id)
        except HistoryStorageError:
            flash(OPERATION_FAILED, "error")
            return redirect(url_for("history"))
        if item is None:
            abort(404)
        result = _formatted_summary(item.loan, item.result, format_config)
        return render_template("detail.html", item=item, result=result)

    @app.post("/history/<item_id>/delete")
    def history_delete(item_id: str):
        try:
            history_store.delete_item(item_id)
        except HistoryStorageError:
            flash(OPERATION_FAILED, "error")
        return redirect(url_for("history"))

    @app.post("/history/clear")
    def history_clear():
        try:
            history_store.clear_history()
        except HistoryStorageError:
            flash(OPERATION_FAILED, "error")
        return redirect(url_for("history"))

    @app.post("/api/calculate")
    def api_calculate():
        payload = request.get_json(silent=True)
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            return jsonify({"errors": {"payload": "Expected a JSON object"}}), 400
        try:
            loan = validate_loan_input(
                payload.get("principal"),
                payload.get("annual_rate_percent"),
                payload.get("term_months"),
            )
        except InvalidLoanParameters as exc:
            return jsonify({"errors": exc.errors}), 400
        summary = calculate_from_input(loan)
        return jsonify(
            {
                "input": {
                    "principal": loan.principal,
                    "annual_rate_percent": loan.annual_rate_percent,
                    "term_months": loan.term_months,
                },
                "result": summary.to_dict(),
                "formatted": _formatted_summary(loan, summary, format_config),
            }
        )

    return app


if __name__ == "__main__":
    print("Starting loan schedule web app...")
    create_app().run(host="0.0.0.0", port=8710, debug=True)
