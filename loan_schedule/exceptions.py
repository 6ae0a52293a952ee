"""Exceptions raised by the loan schedule calculator.

The engine itself never raises; these cover the collaborators around it.
"""

from __future__ import annotations

from typing import Dict, Optional


class LoanCalculatorError(Exception):
    """Base class for errors raised by this package."""


class InvalidLoanParameters(LoanCalculatorError, ValueError):
    """User input failed validation.

    ``errors`` maps a field name (``principal``, ``annual_rate_percent`` or
    ``term_months``) to a human-readable message.
    """

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None) -> None:
        self.errors = dict(errors)
        if message is None:
            message = "; ".join(f"{name}: {text}" for name, text in self.errors.items())
        super().__init__(message)


class HistoryStorageError(LoanCalculatorError):
    """Reading or writing the calculation history failed."""
