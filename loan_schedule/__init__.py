"""Level-payment loan amortization: engine, formatters and collaborators."""

from .data_models import HistoryItem, LoanInput, LoanSummary, PaymentEntry
from .engine import calculate_loan
from .exceptions import HistoryStorageError, InvalidLoanParameters, LoanCalculatorError
from .formatter import FormatConfig, format_currency, format_percent

__all__ = [
    "FormatConfig",
    "HistoryItem",
    "HistoryStorageError",
    "InvalidLoanParameters",
    "LoanCalculatorError",
    "LoanInput",
    "LoanSummary",
    "PaymentEntry",
    "calculate_loan",
    "format_currency",
    "format_percent",
]
