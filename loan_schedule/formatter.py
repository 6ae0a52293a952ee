"""Output helpers for the loan schedule calculator.

``format_currency`` and ``format_percent`` render numbers for display using a
fixed locale and currency taken from a :class:`FormatConfig`. Locale data
comes from Babel (CLDR), so grouping, decimal separators and symbol placement
follow the configured locale rather than the host's ``locale`` settings.

The ``print_*`` functions render summaries and schedules as simple text
tables for the command-line interface.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from babel import Locale, UnknownLocaleError
from babel.numbers import NumberPattern, is_currency, parse_pattern

from .data_models import LoanInput, LoanSummary, PaymentEntry

FRACTION_DIGITS = 2


@dataclass(frozen=True)
class FormatConfig:
    """Locale and currency used when rendering values.

    The defaults match the reference deployment: Turkish locale and Turkish
    lira.
    """

    locale: str = "tr_TR"
    currency: str = "TRY"


DEFAULT_FORMAT = FormatConfig()


def check_locale(locale: str) -> str:
    """Return ``locale`` unchanged, or raise ``ValueError`` if Babel has no data for it."""
    try:
        Locale.parse(locale)
    except (UnknownLocaleError, ValueError, TypeError) as exc:
        raise ValueError(f"Unknown locale: {locale}") from exc
    return locale


def check_currency(currency: str) -> str:
    """Return ``currency`` unchanged, or raise ``ValueError`` if it is not an ISO 4217 code."""
    if not is_currency(currency):
        raise ValueError(f"Unknown currency code: {currency}")
    return currency


def _fixed_pattern(pattern: NumberPattern) -> NumberPattern:
    """Copy a locale pattern with its fraction digits pinned to two."""
    fixed = parse_pattern(pattern.pattern)
    fixed.frac_prec = (FRACTION_DIGITS, FRACTION_DIGITS)
    return fixed


def _check_finite(value: float) -> None:
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value: {value}")


def format_currency(amount: float, config: Optional[FormatConfig] = None) -> str:
    """Render ``amount`` as currency text with exactly two fractional digits.

    >>> format_currency(1234.5)
    '₺1.234,50'
    """
    config = config or DEFAULT_FORMAT
    _check_finite(amount)
    locale = Locale.parse(config.locale)
    pattern = _fixed_pattern(locale.currency_formats["standard"])
    return pattern.apply(amount, locale, currency=config.currency, currency_digits=False)


def format_percent(percent: float, config: Optional[FormatConfig] = None) -> str:
    """Render a 0-100 percentage with exactly two fractional digits.

    The value is divided by 100 before the locale's percent pattern is
    applied, so ``12.5`` means twelve and a half percent.

    >>> format_percent(12.5)
    '%12,50'
    """
    config = config or DEFAULT_FORMAT
    _check_finite(percent)
    locale = Locale.parse(config.locale)
    pattern = _fixed_pattern(locale.percent_formats[None])
    return pattern.apply(percent / 100, locale)


def print_summary(
    summary: LoanSummary,
    loan: Optional[LoanInput] = None,
    config: Optional[FormatConfig] = None,
) -> None:
    """Print the loan totals in a human-readable format."""
    print("Summary")
    print("-" * 72)
    if loan is not None:
        print(f"Principal          : {format_currency(loan.principal, config)}")
        print(f"Annual rate        : {format_percent(loan.annual_rate_percent, config)}")
        print(f"Term               : {loan.term_months} months")
    print(f"Monthly payment    : {format_currency(summary.monthly_payment, config)}")
    print(f"Total payment      : {format_currency(summary.total_payment, config)}")
    print(f"Total interest     : {format_currency(summary.total_interest, config)}")
    print("-" * 72)


def print_schedule(payments: Iterable[PaymentEntry], config: Optional[FormatConfig] = None) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Month", "Payment", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for entry in payments:
        row = [
            str(entry.month),
            format_currency(entry.payment, config),
            format_currency(entry.principal_portion, config),
            format_currency(entry.interest_portion, config),
            format_currency(entry.remaining_balance, config),
        ]
        print("\t".join(row))
