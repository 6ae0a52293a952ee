"""Core calculation engine for the loan schedule calculator.

This module turns a principal, an annual interest rate and a term into a
level-payment (annuity) amortization schedule. Payments are made at the end of
each month and every month is treated as an equal period. All arithmetic is
done in floating point; rounding to cents happens only when values are
formatted for display.

The engine does not validate its inputs. Callers are expected to pass values
checked by :mod:`loan_schedule.validation`; degenerate inputs produce
degenerate (possibly non-finite) numbers rather than exceptions.
"""

from __future__ import annotations

import math
from typing import List

from .data_models import LoanInput, LoanSummary, PaymentEntry


def _monthly_rate(annual_rate_percent: float) -> float:
    return annual_rate_percent / 12 / 100


def _calculate_annuity_payment(principal: float, rate_per_month: float, term: int) -> float:
    """Return the level monthly payment that amortizes ``principal``.

    The formula is:

        payment = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When ``(1 + i)^n`` equals one (a zero
    rate, or a rate too small to register in floating point) the payment
    is the limit of the formula, ``P / n``. A term below one has no payment
    and yields ``nan``.
    """
    if term < 1:
        return math.nan
    factor = (1 + rate_per_month) ** term
    if factor == 1:
        return principal / term
    return principal * rate_per_month * factor / (factor - 1)


def calculate_loan(principal: float, annual_rate_percent: float, term_months: int) -> LoanSummary:
    """Compute the amortization schedule and totals for a loan.

    Parameters
    ----------
    principal: float
        The borrowed amount.
    annual_rate_percent: float
        Nominal annual rate in percent; the monthly rate is a twelfth of it.
    term_months: int
        Number of monthly payments.

    Returns
    -------
    LoanSummary
        The level monthly payment, the total paid over the term, the total
        interest and one :class:`PaymentEntry` per month.

    Interest for a month accrues on the balance outstanding at the start of
    that month. The balance stored on each entry is clamped at zero, but the
    unclamped balance is carried into the next month so accumulated float
    drift is not hidden from the interest computation. The final period is
    not trued up.
    """
    rate_per_month = _monthly_rate(annual_rate_percent)
    monthly_payment = _calculate_annuity_payment(principal, rate_per_month, term_months)

    remaining_balance = principal
    total_interest = 0.0
    payments: List[PaymentEntry] = []

    for month in range(1, term_months + 1):
        interest_payment = remaining_balance * rate_per_month
        principal_payment = monthly_payment - interest_payment

        total_interest += interest_payment
        remaining_balance -= principal_payment

        payments.append(
            PaymentEntry(
                month=month,
                payment=monthly_payment,
                principal_portion=principal_payment,
                interest_portion=interest_payment,
                remaining_balance=max(0.0, remaining_balance),
            )
        )

    return LoanSummary(
        monthly_payment=monthly_payment,
        total_payment=monthly_payment * term_months,
        total_interest=total_interest,
        payments=tuple(payments),
    )


def calculate_from_input(loan: LoanInput) -> LoanSummary:
    """Run :func:`calculate_loan` on a validated :class:`LoanInput`."""
    return calculate_loan(loan.principal, loan.annual_rate_percent, loan.term_months)
