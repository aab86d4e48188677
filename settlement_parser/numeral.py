"""Helpers for parsing and formatting Brazilian formatted amounts."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

__all__ = ["parse_amount", "format_amount", "to_money", "ZERO"]

ZERO = Decimal("0.00")
_CENTS = Decimal("0.01")

_WHITESPACE_PATTERN = re.compile(r"\s+")
_NON_NUMERIC_PATTERN = re.compile(r"[^0-9.\-]")


def parse_amount(raw: Any) -> Decimal:
    """Parse a value such as ``'1.234,56'`` into a Decimal.

    Never raises: empty, missing or unparsable input yields zero. Numeric
    input is passed through as a Decimal without reinterpreting separators.
    """
    if raw is None or isinstance(raw, bool):
        return Decimal(0)
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else Decimal(0)
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        if raw != raw or raw in (float("inf"), float("-inf")):
            return Decimal(0)
        return Decimal(repr(raw))

    value = _WHITESPACE_PATTERN.sub("", str(raw))
    if not value:
        return Decimal(0)

    # "." groups thousands, the first "," is the decimal point
    normalized = value.replace(".", "").replace(",", ".", 1)
    normalized = _NON_NUMERIC_PATTERN.sub("", normalized)
    try:
        parsed = Decimal(normalized)
    except InvalidOperation:
        return Decimal(0)
    return parsed if parsed.is_finite() else Decimal(0)


def to_money(raw: Any) -> Decimal:
    """Parse ``raw`` and quantize it to two fraction digits.

    Amounts too large for the decimal context count as unparsable and yield zero.
    """
    try:
        amount = parse_amount(raw).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return ZERO
    return amount if amount else ZERO


def format_amount(value: Any) -> str:
    """Format a number as ``'1.234,50'``: ``.`` groups thousands, ``,`` marks decimals."""
    amount = to_money(value)
    # Decimal supports the "," grouping option; swap separators afterwards
    text = f"{amount:,.2f}"
    return text.replace(",", "\0").replace(".", ",").replace("\0", ".")
