"""Command-line interface for the loan schedule calculator.

Examples::

    loan-schedule schedule -p 100.000 -r 12 -t 12
    loan-schedule summary -p 250k -r 3,5 -t 120 --output summary.json
    loan-schedule schedule -p 100000 -r 12 -t 12 --save
    loan-schedule history list
"""

from __future__ import annotations

import csv
import json
import os
from pathlib import Path
from typing import Optional

import click

from .config import Settings, configure_logging
from .data_models import LoanInput, LoanSummary
from .engine import calculate_from_input
from .exceptions import HistoryStorageError, InvalidLoanParameters
from .formatter import (
    FormatConfig,
    check_currency,
    check_locale,
    format_currency,
    format_percent,
    print_schedule,
    print_summary,
)
from .history import HistoryStore, create_store_from_env
from .validation import validate_loan_input

MAX_PRINTED_ROWS = 120


class CliContext:
    """Settings shared by all commands; the history store is opened lazily."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._store: Optional[HistoryStore] = None

    @property
    def format_config(self) -> FormatConfig:
        return self.settings.format_config()

    @property
    def store(self) -> HistoryStore:
        if self._store is None:
            self._store = create_store_from_env(
                self.settings.database_url, max_items=self.settings.history_limit
            )
        return self._store


def build_loan_from_options(principal: str, rate: str, term: str) -> LoanInput:
    """Validate CLI option values, reporting problems as click usage errors."""
    try:
        return validate_loan_input(principal, rate, term)
    except InvalidLoanParameters as exc:
        option_names = {
            "principal": "--principal",
            "annual_rate_percent": "--rate",
            "term_months": "--term",
        }
        lines = [f"{option_names[name]}: {message}" for name, message in exc.errors.items()]
        raise click.UsageError("\n".join(lines)) from exc


def export_to_json(path: Path, loan: LoanInput, summary: LoanSummary) -> None:
    """Export inputs, totals and schedule to a JSON file."""
    data = {
        "input": {
            "amount": loan.principal,
            "interestRate": loan.annual_rate_percent,
            "term": loan.term_months,
        },
        "summary": summary.to_dict(),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, summary: LoanSummary) -> None:
    """Export the schedule to a CSV file with unrounded values."""
    header = ["Month", "Payment", "Principal", "Interest", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in summary.payments:
            writer.writerow(
                [e.month, e.payment, e.principal_portion, e.interest_portion, e.remaining_balance]
            )


def _save(ctx: CliContext, loan: LoanInput, summary: LoanSummary) -> None:
    try:
        item = ctx.store.save_calculation(loan, summary)
    except HistoryStorageError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Calculation saved as {item.id}")


def _print_full(summary: LoanSummary, loan: LoanInput, config: FormatConfig) -> None:
    print_summary(summary, loan, config)
    payments = summary.payments
    if len(payments) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(payments)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        payments = payments[:MAX_PRINTED_ROWS]
    print_schedule(payments, config)


def loan_options(func):
    func = click.option("--term", "-t", "term", required=True, help="Loan term in months")(func)
    func = click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)")(func)
    func = click.option("--principal", "-p", "principal", required=True, help="Loan amount")(func)
    return func


@click.group()
@click.option("--locale", "locale", help="Locale used for formatting, e.g. tr_TR")
@click.option("--currency", "currency", help="ISO 4217 currency code, e.g. TRY")
@click.option("--db-url", "db_url", help="SQLAlchemy URL of the history database")
@click.option("--log-level", "log_level", help="Logging level (DEBUG, INFO, ...)")
@click.pass_context
def cli(
    ctx: click.Context,
    locale: Optional[str],
    currency: Optional[str],
    db_url: Optional[str],
    log_level: Optional[str],
) -> None:
    """A command-line loan calculator producing level-payment schedules."""
    env = dict(os.environ)
    if locale:
        try:
            env["LOAN_LOCALE"] = check_locale(locale)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--locale") from exc
    if currency:
        try:
            env["LOAN_CURRENCY"] = check_currency(currency.upper())
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--currency") from exc
    if db_url:
        env["LOAN_HISTORY_DATABASE_URL"] = db_url
    if log_level:
        env["LOAN_LOG_LEVEL"] = log_level
    try:
        settings = Settings.from_env(env)
    except ValueError as exc:
        raise click.UsageError(f"Invalid configuration: {exc}") from exc
    configure_logging(settings.log_level)
    ctx.obj = CliContext(settings)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.option("--save", "save", is_flag=True, help="Store the calculation in the history")
@click.pass_obj
def schedule(ctx: CliContext, principal: str, rate: str, term: str, output: Optional[str], save: bool) -> None:
    """Compute and print the full amortization schedule."""
    loan = build_loan_from_options(principal, rate, term)
    summary_data = calculate_from_input(loan)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, loan, summary_data)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, summary_data)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
    else:
        _print_full(summary_data, loan, ctx.format_config)
    if save:
        _save(ctx, loan, summary_data)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.option("--save", "save", is_flag=True, help="Store the calculation in the history")
@click.pass_obj
def summary(ctx: CliContext, principal: str, rate: str, term: str, output: Optional[str], save: bool) -> None:
    """Compute and print only the summary totals for a loan."""
    loan = build_loan_from_options(principal, rate, term)
    summary_data = calculate_from_input(loan)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        totals = summary_data.to_dict()
        totals.pop("payments")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": totals}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data, loan, ctx.format_config)
    if save:
        _save(ctx, loan, summary_data)


@cli.group()
def history() -> None:
    """Inspect and manage saved calculations."""


@history.command("list")
@click.pass_obj
def history_list(ctx: CliContext) -> None:
    """List saved calculations, newest first."""
    try:
        items = ctx.store.get_history()
    except HistoryStorageError as exc:
        raise click.ClickException(str(exc)) from exc
    if not items:
        click.echo("No saved calculations.")
        return
    config = ctx.format_config
    click.echo("\t".join(["Id", "Date", "Amount", "Rate", "Term", "Monthly"]))
    for item in items:
        click.echo(
            "\t".join(
                [
                    item.id,
                    item.created_at,
                    format_currency(item.principal, config),
                    format_percent(item.annual_rate_percent, config),
                    str(item.term_months),
                    format_currency(item.result.monthly_payment, config),
                ]
            )
        )


@history.command("show")
@click.argument("item_id")
@click.pass_obj
def history_show(ctx: CliContext, item_id: str) -> None:
    """Print a saved calculation with its schedule."""
    try:
        item = ctx.store.get_item(item_id)
    except HistoryStorageError as exc:
        raise click.ClickException(str(exc)) from exc
    if item is None:
        raise click.ClickException(f"No saved calculation with id {item_id}")
    _print_full(item.result, item.loan, ctx.format_config)


@history.command("delete")
@click.argument("item_id")
@click.pass_obj
def history_delete(ctx: CliContext, item_id: str) -> None:
    """Delete one saved calculation."""
    try:
        deleted = ctx.store.delete_item(item_id)
    except HistoryStorageError as exc:
        raise click.ClickException(str(exc)) from exc
    if not deleted:
        raise click.ClickException(f"No saved calculation with id {item_id}")
    click.echo(f"Deleted {item_id}")


@history.command("clear")
@click.confirmation_option(prompt="Delete all saved calculations?")
@click.pass_obj
def history_clear(ctx: CliContext) -> None:
    """Delete every saved calculation."""
    try:
        ctx.store.clear_history()
    except HistoryStorageError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo("History cleared.")


if __name__ == "__main__":
    cli()
