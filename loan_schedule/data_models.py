"""Data models for the loan schedule calculator.

This module defines the dataclasses passed between the engine, the formatters
and the history store: the validated loan inputs, a single schedule entry and
the summary returned by the engine. All of them are frozen so a result can be
handed to any collaborator without being changed underneath it.

Each type can be converted to and from a plain dictionary. The dictionary keys
follow the JSON shape stored by the history store, so a summary written to the
database reads back identical to the one the engine produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class LoanInput:
    """The three validated inputs of a calculation.

    Attributes
    ----------
    principal: float
        The borrowed amount.
    annual_rate_percent: float
        Nominal annual interest rate on the 0-100 scale (``12`` means 12 %).
    term_months: int
        Number of monthly payments.
    """

    principal: float
    annual_rate_percent: float
    term_months: int


@dataclass(frozen=True)
class PaymentEntry:
    """One month of the amortization schedule.

    ``remaining_balance`` is the outstanding balance after this payment,
    clamped at zero. The payment is the same for every entry of a loan and
    always equals ``principal_portion + interest_portion``.
    """

    month: int
    payment: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "payment": self.payment,
            "principal": self.principal_portion,
            "interest": self.interest_portion,
            "remainingBalance": self.remaining_balance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentEntry":
        return cls(
            month=int(data["month"]),
            payment=float(data["payment"]),
            principal_portion=float(data["principal"]),
            interest_portion=float(data["interest"]),
            remaining_balance=float(data["remainingBalance"]),
        )


@dataclass(frozen=True)
class LoanSummary:
    """Result of a single engine run.

    ``payments`` is a tuple with exactly one entry per month of the term.
    """

    monthly_payment: float
    total_payment: float
    total_interest: float
    payments: Tuple[PaymentEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monthlyPayment": self.monthly_payment,
            "totalPayment": self.total_payment,
            "totalInterest": self.total_interest,
            "payments": [p.to_dict() for p in self.payments],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoanSummary":
        return cls(
            monthly_payment=float(data["monthlyPayment"]),
            total_payment=float(data["totalPayment"]),
            total_interest=float(data["totalInterest"]),
            payments=tuple(PaymentEntry.from_dict(p) for p in data.get("payments", [])),
        )


@dataclass(frozen=True)
class HistoryItem:
    """A saved calculation: the original inputs plus the engine result."""

    id: str
    created_at: str  # ISO-8601 timestamp
    principal: float
    annual_rate_percent: float
    term_months: int
    result: LoanSummary

    @property
    def loan(self) -> LoanInput:
        return LoanInput(self.principal, self.annual_rate_percent, self.term_months)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.created_at,
            "amount": self.principal,
            "interestRate": self.annual_rate_percent,
            "term": self.term_months,
            "result": self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryItem":
        return cls(
            id=str(data["id"]),
            created_at=str(data["date"]),
            principal=float(data["amount"]),
            annual_rate_percent=float(data["interestRate"]),
            term_months=int(data["term"]),
            result=LoanSummary.from_dict(data["result"]),
        )
