"""
Common utilities and shared functions.
Symbol normalization and decimal rounding rules shared by the services.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

MONEY_PLACES = Decimal("0.01")
QUANTITY_PLACES = Decimal("0.0001")
PERCENTAGE_PLACES = Decimal("0.0001")

MAX_SYMBOL_LENGTH = 20

Number = Union[Decimal, int, float, str]


def normalize_symbol(symbol: Optional[str]) -> str:
    """
    Normalize a ticker symbol for storage and price lookup.

    Args:
        symbol: Raw symbol as typed by the user (may be None)

    Returns:
        Trimmed, upper-cased symbol; empty string for None

    Examples:
        >>> normalize_symbol(" bbas3 ")
        'BBAS3'
        >>> normalize_symbol(None)
        ''
    """
    if symbol is None:
        return ""
    return str(symbol).strip().upper()


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal without inheriting binary float noise.
    Floats go through their shortest repr, so 0.1 becomes Decimal('0.1').
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize_money(value: Number) -> Decimal:
    """Round to 2 fractional digits, half-up."""
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def quantize_quantity(value: Number) -> Decimal:
    """Round to 4 fractional digits, half-up."""
    return to_decimal(value).quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)


def quantize_percentage(value: Number) -> Decimal:
    """Round a percentage to 4 fractional digits, half-up."""
    return to_decimal(value).quantize(PERCENTAGE_PLACES, rounding=ROUND_HALF_UP)
