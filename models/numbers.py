"""Conversions between stored JSON numbers and in-memory Decimals."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union


ZERO = Decimal("0")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Convert a stored number (int, float, str) to Decimal.

    Floats go through str() so 0.1 stays 0.1. Empty or unparseable values
    fall back to default.
    """
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    """Like to_decimal, but unset values stay None."""
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def to_number(value: Optional[Decimal]) -> Union[int, float, None]:
    """Convert a Decimal back to a JSON number (int when integral)."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)
