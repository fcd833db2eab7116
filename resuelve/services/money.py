"""
Money Utilities - Decimal operations for USD and Bolívar amounts.

Prices are stored in USD; local-currency amounts are derived by multiplying
with the exchange rate. Stored values keep full precision, rounding happens
only when formatting for display.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Union

Number = Union[str, int, float, Decimal]

# Display precision (2 decimal places)
MONEY_PRECISION = Decimal("0.01")


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Floats go through their string representation so 0.1 stays 0.1.
    None and unparseable values become Decimal("0").
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round a monetary value to 2 decimals (half up)."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def to_float(value: Number) -> float:
    """
    Convert to float for JSON serialization or RPC parameters.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def multiply(value: Number, factor: Number) -> Decimal:
    """Multiplication of a monetary value by a factor (quantity, rate)."""
    return to_decimal(value) * to_decimal(factor)


def total(values: Iterable[Number]) -> Decimal:
    """Sum of monetary values; an empty iterable sums to Decimal("0")."""
    result = Decimal("0")
    for value in values:
        result += to_decimal(value)
    return result


def format_money(value: Number, currency: str = "USD") -> str:
    """
    Format monetary value with currency symbol, 2 decimals.

    Examples:
        format_money(13, "USD") -> "$13.00"
        format_money(500.5, "VES") -> "Bs 500.50"
    """
    from resuelve.services.currency import CURRENCY_SYMBOLS

    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    formatted = f"{round_money(value):,.2f}"

    if currency == "USD":
        return f"{symbol}{formatted}"
    return f"{symbol} {formatted}"
