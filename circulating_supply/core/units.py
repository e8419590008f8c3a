"""Conversion between token base units and display units.

Amounts are plain Python ints, so conversion is done with integer
``divmod`` and string formatting. Floats are never involved.
"""

from .types import BaseAmount, DisplayAmount

# Exponent relating base units to display units (1 token = 10**18 base units)
TOKEN_DECIMALS = 18


def to_display(amount: BaseAmount, decimals: int = TOKEN_DECIMALS) -> DisplayAmount:
    """
    Convert a base-unit amount to a display-unit decimal string.

    Trailing fractional zeros are dropped, and the decimal point with them
    when the fraction is empty.

    Args:
        amount: Non-negative amount in base units
        decimals: Base-unit exponent

    Returns:
        Decimal string, e.g. ``to_display(1_500_000_000_000_000_000) == "1.5"``
    """
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    if decimals < 0:
        raise ValueError(f"Decimals must be non-negative, got {decimals}")
    if decimals == 0:
        return str(amount)

    whole, fraction = divmod(amount, 10**decimals)
    if fraction == 0:
        return str(whole)

    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{fraction_str}"

