"""Conversions between stored metric quantities and user units.

Stored values are kilometers and liters. Conversions keep full precision;
rounding happens when a report is assembled.
"""

from decimal import Decimal

from vehicle_reports.domain.constants import (
    MILES_TO_KM,
    UK_GALLON_TO_LITERS,
    US_GALLON_TO_LITERS,
)

_ONE = Decimal("1")
_HUNDRED = Decimal("100")

# Metric quantity represented by one unit of each code.
METRIC_FACTORS: dict[str, Decimal] = {
    "km": _ONE,
    "mi": MILES_TO_KM,
    "l": _ONE,
    "gal-us": US_GALLON_TO_LITERS,
    "gal-uk": UK_GALLON_TO_LITERS,
    "kwh": _ONE,
    "kg": _ONE,
}

CONSUMPTION_UNIT_LABELS: dict[str, str] = {
    "l100km": "L/100km",
    "km-l": "km/L",
    "mpg-us": "mpg-us",
    "mpg-uk": "mpg-uk",
    "mi-l": "mi/L",
}

VOLUME_UNIT_LABELS: dict[str, str] = {
    "l": "L",
    "gal-us": "gal (US)",
    "gal-uk": "gal (UK)",
}


def _factor(unit_code: str) -> Decimal:
    factor = METRIC_FACTORS.get(unit_code)
    if factor is None:
        raise ValueError(f"Unsupported unit code: {unit_code}")
    return factor


def to_user_unit(value: Decimal | None, unit_code: str) -> Decimal | None:
    """Convert a metric quantity into ``unit_code``.

    Args:
        value: Quantity in kilometers or liters, or None.
        unit_code: Target unit code (km, mi, l, gal-us, gal-uk, kwh, kg).

    Returns:
        Decimal | None: Converted value, or None when ``value`` is None.

    Raises:
        ValueError: If the unit code is unknown.
    """
    factor = _factor(unit_code)
    if value is None:
        return None
    return value / factor


def from_user_unit(value: Decimal | None, unit_code: str) -> Decimal | None:
    """Convert a quantity expressed in ``unit_code`` back to metric."""
    factor = _factor(unit_code)
    if value is None:
        return None
    return value * factor


def to_metric_distance(value: Decimal | None, distance_unit: str) -> Decimal | None:
    """Convert a distance in ``distance_unit`` to kilometers."""
    return from_user_unit(value, distance_unit)


def from_metric_distance(value: Decimal | None, distance_unit: str) -> Decimal | None:
    """Convert kilometers to ``distance_unit``."""
    return to_user_unit(value, distance_unit)


def to_metric_volume(value: Decimal | None, volume_unit: str) -> Decimal | None:
    """Convert a volume in ``volume_unit`` to liters."""
    return from_user_unit(value, volume_unit)


def from_metric_volume(value: Decimal | None, volume_unit: str) -> Decimal | None:
    """Convert liters to ``volume_unit``."""
    return to_user_unit(value, volume_unit)


def derive_consumption_unit(distance_unit: str, volume_unit: str) -> str:
    """Return the consumption unit matching a distance and volume unit.

    Args:
        distance_unit: km or mi.
        volume_unit: l, gal-us or gal-uk.

    Returns:
        str: Consumption unit code.
    """
    if distance_unit == "mi":
        if volume_unit == "gal-us":
            return "mpg-us"
        if volume_unit == "gal-uk":
            return "mpg-uk"
        return "mi-l"
    if volume_unit in ("gal-us", "gal-uk"):
        return "km-l"
    return "l100km"


def consumption_unit_label(consumption_unit: str) -> str:
    """Return the display label of a consumption unit code."""
    return CONSUMPTION_UNIT_LABELS.get(consumption_unit, consumption_unit)


def volume_unit_label(volume_unit: str) -> str:
    """Return the display label of a volume unit code."""
    return VOLUME_UNIT_LABELS.get(volume_unit, volume_unit)


def calculate_consumption(
    distance_km: Decimal | None,
    volume_liters: Decimal | None,
    consumption_unit: str,
) -> Decimal | None:
    """Express a liquid-fuel consumption in ``consumption_unit``.

    Args:
        distance_km: Distance driven, in kilometers.
        volume_liters: Fuel used, in liters.
        consumption_unit: Target consumption unit code.

    Returns:
        Decimal | None: Consumption, or None when either input is missing or
        not strictly positive.
    """
    if distance_km is None or volume_liters is None:
        return None
    if distance_km <= 0 or volume_liters <= 0:
        return None
    if consumption_unit == "km-l":
        return distance_km / volume_liters
    if consumption_unit == "mpg-us":
        return (distance_km / MILES_TO_KM) / (volume_liters / US_GALLON_TO_LITERS)
    if consumption_unit == "mpg-uk":
        return (distance_km / MILES_TO_KM) / (volume_liters / UK_GALLON_TO_LITERS)
    if consumption_unit == "mi-l":
        return (distance_km / MILES_TO_KM) / volume_liters
    return volume_liters / distance_km * _HUNDRED


__all__ = [
    "METRIC_FACTORS",
    "CONSUMPTION_UNIT_LABELS",
    "VOLUME_UNIT_LABELS",
    "to_user_unit",
    "from_user_unit",
    "to_metric_distance",
    "from_metric_distance",
    "to_metric_volume",
    "from_metric_volume",
    "derive_consumption_unit",
    "consumption_unit_label",
    "volume_unit_label",
    "calculate_consumption",
]
