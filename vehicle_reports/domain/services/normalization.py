"""Domain normalization helpers."""

from logging import Logger

from vehicle_reports.domain.constants import (
    CONSUMPTION_UNITS,
    DEFAULT_CONSUMPTION_UNIT,
    DEFAULT_DISTANCE_UNIT,
    DEFAULT_VOLUME_UNIT,
    DISTANCE_UNITS,
    VOLUME_UNITS,
)
from vehicle_reports.domain.models.preferences import UserPreferences


def normalize_currency_code(code: str | None) -> str | None:
    """Normalize currency codes.

    Args:
        code: Raw currency code from a repository.

    Returns:
        str | None: Upper-cased code, or None when blank.
    """
    if not code:
        return None
    cleaned = code.strip()
    return cleaned.upper() if cleaned else None


def normalize_fuel_type(fuel_type: str | None) -> str | None:
    """Normalize fuel type codes to lower case."""
    if not fuel_type:
        return None
    cleaned = fuel_type.strip()
    return cleaned.lower() if cleaned else None


def _unit_or_default(
    raw: str | None,
    allowed: tuple[str, ...],
    default: str,
    label: str,
    logger: Logger | None,
) -> str:
    cleaned = (raw or "").strip().lower()
    if cleaned in allowed:
        return cleaned
    if logger is not None:
        logger.warning(f"Unknown {label} unit {raw!r}, using {default}")
    return default


def normalize_preferences(
    distance_unit: str | None,
    volume_unit: str | None,
    consumption_unit: str | None,
    home_currency: str | None,
    logger: Logger | None = None,
) -> UserPreferences:
    """Build preferences from stored values, defaulting unknown units.

    Args:
        distance_unit: Stored distance unit code.
        volume_unit: Stored volume unit code.
        consumption_unit: Stored consumption unit code.
        home_currency: Stored home currency code.
        logger: Optional logger used to warn about replaced values.

    Returns:
        UserPreferences: Normalized preferences.

    Raises:
        ValueError: If the home currency is missing.
    """
    currency = normalize_currency_code(home_currency)
    if currency is None:
        raise ValueError("User preferences have no home currency")
    return UserPreferences(
        distance_unit=_unit_or_default(
            distance_unit, DISTANCE_UNITS, DEFAULT_DISTANCE_UNIT, "distance", logger
        ),
        volume_unit=_unit_or_default(
            volume_unit, VOLUME_UNITS, DEFAULT_VOLUME_UNIT, "volume", logger
        ),
        consumption_unit=_unit_or_default(
            consumption_unit,
            CONSUMPTION_UNITS,
            DEFAULT_CONSUMPTION_UNIT,
            "consumption",
            logger,
        ),
        home_currency=currency,
    )


__all__ = [
    "normalize_currency_code",
    "normalize_fuel_type",
    "normalize_preferences",
]
