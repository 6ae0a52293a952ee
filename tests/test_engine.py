"""Unit tests for the amortization engine"""

import math

import pytest

from loan_schedule.data_models import LoanInput
from loan_schedule.engine import calculate_from_input, calculate_loan


def test_reference_scenario_totals():
    """100k at 12 % for 12 months: monthly rate of exactly 1 %"""
    result = calculate_loan(100000, 12, 12)

    assert result.monthly_payment == pytest.approx(8884.88, abs=0.005)
    assert result.total_payment == pytest.approx(106618.55, abs=0.01)
    assert result.total_interest == pytest.approx(6618.55, abs=0.01)


def test_reference_scenario_first_entry():
    """First month's interest accrues on the full principal"""
    first = calculate_loan(100000, 12, 12).payments[0]

    assert first.month == 1
    assert first.interest_portion == pytest.approx(1000.00)
    assert first.principal_portion == pytest.approx(7884.88, abs=0.005)
    assert first.remaining_balance == pytest.approx(92115.12, abs=0.005)


@pytest.mark.parametrize("term", [1, 2, 12, 61, 360])
def test_months_are_contiguous(term):
    payments = calculate_loan(250000, 7.5, term).payments

    assert len(payments) == term
    assert [p.month for p in payments] == list(range(1, term + 1))


def test_total_payment_is_payment_times_term():
    result = calculate_loan(1234567, 3.25, 240)
    assert result.total_payment == result.monthly_payment * 240


def test_payment_is_constant_and_splits_into_portions():
    result = calculate_loan(500000, 18, 120)

    for entry in result.payments:
        assert entry.payment == result.monthly_payment
        assert entry.principal_portion + entry.interest_portion == pytest.approx(
            entry.payment, rel=1e-9
        )


def test_balance_non_increasing_and_non_negative():
    balances = [p.remaining_balance for p in calculate_loan(10000000, 99.9, 360).payments]

    assert all(b >= 0 for b in balances)
    assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))


def test_final_balance_is_zero_within_tolerance():
    result = calculate_loan(750000, 4.2, 180)
    assert result.payments[-1].remaining_balance == pytest.approx(0, abs=1e-6)


def test_total_interest_is_sum_of_interest_portions():
    result = calculate_loan(300000, 9.99, 96)
    assert result.total_interest == pytest.approx(
        sum(p.interest_portion for p in result.payments), rel=1e-12
    )


def test_single_month_term():
    """A one-month loan repays principal plus one month of interest"""
    result = calculate_loan(1000, 12, 1)

    assert len(result.payments) == 1
    assert result.monthly_payment == pytest.approx(1000 * 1.01)
    assert result.payments[0].remaining_balance == pytest.approx(0, abs=1e-9)


def test_deterministic():
    assert calculate_loan(420000, 6.75, 300) == calculate_loan(420000, 6.75, 300)


def test_interest_declines_over_the_term():
    payments = calculate_loan(200000, 10, 60).payments
    assert payments[0].interest_portion > payments[-1].interest_portion
    assert payments[0].principal_portion < payments[-1].principal_portion


def test_zero_rate_splits_principal_evenly():
    result = calculate_loan(12000, 0, 12)

    assert result.monthly_payment == pytest.approx(1000)
    assert result.total_interest == 0
    assert result.payments[-1].remaining_balance == pytest.approx(0, abs=1e-9)


def test_vanishing_rate_does_not_divide_by_zero():
    result = calculate_loan(12000, 1e-15, 12)
    assert math.isfinite(result.monthly_payment)
    assert result.monthly_payment == pytest.approx(1000)


def test_zero_term_is_degenerate_not_an_error():
    result = calculate_loan(10000, 12, 0)

    assert result.payments == ()
    assert math.isnan(result.monthly_payment)
    assert result.total_interest == 0


def test_calculate_from_input_matches_direct_call():
    loan = LoanInput(principal=50000, annual_rate_percent=15, term_months=24)
    assert calculate_from_input(loan) == calculate_loan(50000, 15, 24)


def test_result_is_immutable():
    result = calculate_loan(10000, 12, 3)
    with pytest.raises(AttributeError):
        result.monthly_payment = 0
