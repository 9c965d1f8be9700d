"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout. Floats are only
accepted at the boundary and converted through their string representation.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Numeric = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PLACES = 2


def is_numeric(value: object) -> bool:
    """
    Check whether a value can be used as a number.

    Accepts int, float, Decimal and numeric strings. Rejects bool, None,
    NaN and infinities.
    """
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, int):
        return True
    if not isinstance(value, (float, Decimal, str)):
        return False
    try:
        return Decimal(str(value).strip()).is_finite()
    except InvalidOperation:
        return False


def to_decimal(value: Union[Numeric, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        if isinstance(value, float):
            return Decimal(str(value))
        if isinstance(value, str):
            return Decimal(value.strip())
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Numeric, places: int = MONEY_PLACES) -> Decimal:
    """
    Round monetary value half-up to the given number of places.

    Args:
        value: Value to round
        places: Decimal places to keep

    Returns:
        Rounded Decimal value
    """
    precision = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(precision, rounding=ROUND_HALF_UP)


def number_format(
    value: Numeric,
    decimals: int = MONEY_PLACES,
    decimal_point: str = ".",
    thousand_separator: str = ",",
) -> str:
    """
    Format a number with grouped thousands.

    >>> number_format(Decimal("6000"), 2, ",", ".")
    '6.000,00'
    >>> number_format(5000, 2, ",", "")
    '5000,00'
    """
    rounded = round_money(value, decimals)
    formatted = f"{rounded:,.{decimals}f}"
    # Swap through a placeholder so "." and "," can trade places
    return (
        formatted.replace(",", "\x00")
        .replace(".", decimal_point)
        .replace("\x00", thousand_separator)
    )


def add(a: Numeric, b: Numeric) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Numeric, factor: Numeric) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def divide(value: Numeric, divisor: Numeric) -> Decimal:
    """Safe division of monetary value."""
    d = to_decimal(divisor)
    if d == 0:
        return Decimal("0")
    return to_decimal(value) / d


def percent(value: Numeric, percent_value: Numeric) -> Decimal:
    """Calculate percentage of a monetary value."""
    return multiply(value, divide(percent_value, 100))
