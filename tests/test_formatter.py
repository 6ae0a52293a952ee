"""Unit tests for currency and percent formatting"""

import math

import pytest

from loan_schedule.data_models import LoanInput
from loan_schedule.engine import calculate_loan
from loan_schedule.formatter import (
    FormatConfig,
    check_currency,
    check_locale,
    format_currency,
    format_percent,
    print_schedule,
    print_summary,
)

US = FormatConfig(locale="en_US", currency="USD")


def test_currency_turkish_default():
    assert format_currency(1234.5) == "₺1.234,50"


def test_currency_always_two_fraction_digits():
    assert format_currency(7) == "₺7,00"
    assert format_currency(8884.878867) == "₺8.884,88"


def test_currency_other_locale():
    assert format_currency(1234.5, US) == "$1,234.50"


def test_currency_zero_fraction_currency_still_shows_cents():
    text = format_currency(1500, FormatConfig(locale="en_US", currency="JPY"))
    assert text.endswith("1,500.00")


def test_percent_turkish_default():
    assert format_percent(12.5) == "%12,50"


def test_percent_other_locale():
    assert format_percent(12.5, US) == "12.50%"
    assert format_percent(100, US) == "100.00%"


def test_formatting_does_not_change_value():
    amount = 1234.5678
    format_currency(amount)
    assert amount == 1234.5678


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_values_rejected(value):
    with pytest.raises(ValueError):
        format_currency(value)
    with pytest.raises(ValueError):
        format_percent(value)


def test_print_summary_uses_formatters(capsys):
    loan = LoanInput(100000, 12, 12)
    print_summary(calculate_loan(100000, 12, 12), loan)

    out = capsys.readouterr().out
    assert "₺8.884,88" in out
    assert "₺100.000,00" in out
    assert "12 months" in out


def test_print_schedule_one_row_per_month(capsys):
    print_schedule(calculate_loan(100000, 12, 12).payments, US)

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].split("\t") == ["Month", "Payment", "Principal", "Interest", "Balance"]
    assert len(lines) == 13
    assert lines[1].split("\t") == ["1", "$8,884.88", "$7,884.88", "$1,000.00", "$92,115.12"]


def test_check_locale():
    assert check_locale("en_US") == "en_US"
    with pytest.raises(ValueError):
        check_locale("xx_YY")


def test_check_currency():
    assert check_currency("TRY") == "TRY"
    with pytest.raises(ValueError):
        check_currency("XYZQ")
