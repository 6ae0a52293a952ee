"""Validation of raw loan form input.

The engine trusts its inputs, so every caller goes through
:func:`validate_loan_input` first. All three fields are checked and every
problem is reported at once through :class:`InvalidLoanParameters`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

from .data_models import LoanInput
from .exceptions import InvalidLoanParameters
from .utils import parse_amount, parse_integer, parse_number

logger = logging.getLogger(__name__)

RawValue = Union[str, int, float, None]


@dataclass(frozen=True)
class LoanLimits:
    """Bounds enforced on user input before calling the engine."""

    min_principal: float = 1_000
    max_principal: float = 10_000_000
    max_rate_percent: float = 100
    max_term_months: int = 360


DEFAULT_LIMITS = LoanLimits()


def _is_blank(value: RawValue) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse(value: RawValue, parser: Callable[[str], float]) -> float:
    if isinstance(value, str):
        return parser(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid numeric value: {value!r}")
    # numbers from an API payload carry no separators or suffixes
    if parser is parse_integer:
        return parse_integer(str(value))
    return parse_number(str(value))


def _check_principal(value: RawValue, limits: LoanLimits) -> Tuple[Optional[float], Optional[str]]:
    if _is_blank(value):
        return None, "Loan amount is required"
    try:
        amount = _parse(value, parse_amount)
    except ValueError:
        return None, "Loan amount must be a number"
    if amount < limits.min_principal:
        return None, f"Loan amount must be at least {limits.min_principal:,.0f}"
    if amount > limits.max_principal:
        return None, f"Loan amount must be at most {limits.max_principal:,.0f}"
    return amount, None


def _check_rate(value: RawValue, limits: LoanLimits) -> Tuple[Optional[float], Optional[str]]:
    if _is_blank(value):
        return None, "Interest rate is required"
    try:
        rate = _parse(value, parse_number)
    except ValueError:
        return None, "Enter a valid interest rate"
    if rate <= 0:
        return None, "Enter a valid interest rate"
    if rate > limits.max_rate_percent:
        return None, f"Interest rate cannot exceed {limits.max_rate_percent:g}"
    return rate, None


def _check_term(value: RawValue, limits: LoanLimits) -> Tuple[Optional[int], Optional[str]]:
    if _is_blank(value):
        return None, "Term is required"
    try:
        term = _parse(value, parse_integer)
    except ValueError:
        return None, "Enter a valid term"
    if term <= 0:
        return None, "Enter a valid term"
    if term > limits.max_term_months:
        return None, f"Term can be at most {limits.max_term_months} months"
    return term, None


def validate_loan_input(
    principal: RawValue,
    annual_rate_percent: RawValue,
    term_months: RawValue,
    limits: LoanLimits = DEFAULT_LIMITS,
) -> LoanInput:
    """Parse and bound-check the three loan fields.

    Values may be raw strings from a form or numbers from an API payload.

    Raises
    ------
    InvalidLoanParameters
        With one message per offending field.
    """
    amount, amount_error = _check_principal(principal, limits)
    rate, rate_error = _check_rate(annual_rate_percent, limits)
    term, term_error = _check_term(term_months, limits)

    errors: Dict[str, str] = {}
    if amount_error:
        errors["principal"] = amount_error
    if rate_error:
        errors["annual_rate_percent"] = rate_error
    if term_error:
        errors["term_months"] = term_error
    if errors:
        logger.debug("Rejected loan input: %s", errors)
        raise InvalidLoanParameters(errors)

    return LoanInput(principal=amount, annual_rate_percent=rate, term_months=term)
