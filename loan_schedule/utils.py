"""Utility functions for the loan schedule calculator.

Helpers for turning the raw text a user types into numbers. Amounts follow
the Turkish convention of ``.`` as thousands separator; rates accept either
``,`` or ``.`` as decimal separator.
"""

from __future__ import annotations

import math
import re

_CURRENCY_MARKS = re.compile(r"(₺|tl|try)", re.IGNORECASE)


def parse_amount(value: str) -> float:
    """Parse an amount string with optional suffixes.

    Accepts plain numbers ("500000"), thousands separated with dots or
    spaces ("1.250.000"), an optional currency mark ("₺", "TL") and
    shorthand with ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    Raises ``ValueError`` if the text is not a finite number.
    """
    cleaned = _CURRENCY_MARKS.sub("", value.strip()).strip().lower()
    cleaned = cleaned.replace(" ", "").replace("\u00a0", "")
    factor = 1.0
    if cleaned.endswith("k"):
        factor = 1_000.0
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = 1_000_000.0
        cleaned = cleaned[:-1]
    # "1.250.000" or "1.250.000,50": dots group thousands
    if "," in cleaned or cleaned.count(".") > 1 or re.fullmatch(r"\d{1,3}(\.\d{3})+", cleaned):
        cleaned = cleaned.replace(".", "").replace(",", ".")
    return parse_number(cleaned) * factor


def parse_number(value: str) -> float:
    """Convert a numeric string into a finite ``float``.

    A single ``,`` is accepted as the decimal separator and a trailing
    ``%`` is ignored.
    """
    cleaned = value.strip()
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1].strip()
    if cleaned.startswith("%"):
        cleaned = cleaned[1:].strip()
    if cleaned.count(",") == 1 and "." not in cleaned:
        cleaned = cleaned.replace(",", ".")
    try:
        number = float(cleaned)
    except ValueError as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not math.isfinite(number):
        raise ValueError(f"Invalid numeric value: {value}")
    return number


def parse_integer(value: str) -> int:
    """Convert a string holding a whole number into an ``int``.

    ``"12"`` and ``"12.0"`` are accepted; ``"12.5"`` is rejected.
    """
    number = parse_number(value)
    if not number.is_integer():
        raise ValueError(f"Not a whole number: {value}")
    return int(number)
