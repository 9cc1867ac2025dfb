"""Helpers for Decimal normalization and output rounding."""

from decimal import ROUND_HALF_UP, Decimal

TWO_PLACES = Decimal("0.01")
THREE_PLACES = Decimal("0.001")
WHOLE = Decimal("1")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def coerce_optional_decimal(value) -> Decimal | None:
    """Normalize numeric values to Decimal while keeping absent values.

    Args:
        value: Raw numeric value or None.

    Returns:
        Decimal | None: Normalized value, or None when absent.
    """
    if value is None:
        return None
    return coerce_decimal(value)


def quantize(value: Decimal | None, places: Decimal = TWO_PLACES) -> Decimal | None:
    """Round a value half-up to the given exponent.

    Args:
        value: Value to round, or None.
        places: Exponent such as ``Decimal("0.01")``.

    Returns:
        Decimal | None: Rounded value, or None when absent.
    """
    if value is None:
        return None
    return value.quantize(places, rounding=ROUND_HALF_UP)


def round_money(value: Decimal) -> Decimal:
    """Round a non-null amount to two decimals."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_price(value: Decimal | None) -> Decimal | None:
    """Round a unit price to three decimals."""
    return quantize(value, THREE_PLACES)


def round_whole(value: Decimal | None) -> Decimal | None:
    """Round odometer-like values to whole units."""
    return quantize(value, WHOLE)


def safe_divide(value: Decimal | None, divisor: Decimal | None) -> Decimal | None:
    """Divide without producing infinities.

    Args:
        value: Dividend, or None.
        divisor: Divisor, or None.

    Returns:
        Decimal | None: Quotient, or None when either side is absent or the
        divisor is zero.
    """
    if value is None or divisor is None or divisor == 0:
        return None
    return value / divisor


def percentage(part: Decimal | None, total: Decimal | None) -> Decimal | None:
    """Return ``part`` as an unrounded percentage of ``total``."""
    ratio = safe_divide(part, total)
    if ratio is None:
        return None
    return ratio * Decimal("100")


__all__ = [
    "TWO_PLACES",
    "THREE_PLACES",
    "WHOLE",
    "coerce_decimal",
    "coerce_optional_decimal",
    "quantize",
    "round_money",
    "round_price",
    "round_whole",
    "safe_divide",
    "percentage",
]
