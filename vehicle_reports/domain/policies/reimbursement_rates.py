"""Static mileage reimbursement rate tables and deductible travel types."""

from decimal import Decimal

from vehicle_reports.domain.models.reimbursement import (
    RateTier,
    ReimbursementRateConfig,
)

DEDUCTIBLE_TRAVEL_TYPES: dict[str, tuple[str, ...]] = {
    "US": ("business", "medical", "charity"),
    "CA": ("business", "medical", "charity"),
}

JURISDICTION_DISTANCE_UNITS: dict[str, str] = {"US": "mi", "CA": "km"}
JURISDICTION_CURRENCIES: dict[str, str] = {"US": "USD", "CA": "CAD"}


def _us(year: int, travel_type: str, rate: str) -> ReimbursementRateConfig:
    return ReimbursementRateConfig(
        year=year,
        jurisdiction="US",
        travel_type=travel_type,
        currency="USD",
        distance_unit="mi",
        tiers=(RateTier(threshold=None, rate=Decimal(rate)),),
    )


def _ca(year: int, travel_type: str, first: str, rest: str) -> ReimbursementRateConfig:
    return ReimbursementRateConfig(
        year=year,
        jurisdiction="CA",
        travel_type=travel_type,
        currency="CAD",
        distance_unit="km",
        tiers=(
            RateTier(threshold=Decimal("5000"), rate=Decimal(first)),
            RateTier(threshold=None, rate=Decimal(rest)),
        ),
    )


RATE_TABLES: tuple[ReimbursementRateConfig, ...] = (
    _us(2023, "business", "0.655"),
    _us(2023, "medical", "0.22"),
    _us(2023, "charity", "0.14"),
    _us(2024, "business", "0.67"),
    _us(2024, "medical", "0.21"),
    _us(2024, "charity", "0.14"),
    _us(2025, "business", "0.70"),
    _us(2025, "medical", "0.21"),
    _us(2025, "charity", "0.14"),
    _ca(2024, "business", "0.70", "0.64"),
    _ca(2024, "medical", "0.70", "0.64"),
    _ca(2024, "charity", "0.70", "0.64"),
    _ca(2025, "business", "0.72", "0.66"),
    _ca(2025, "medical", "0.72", "0.66"),
    _ca(2025, "charity", "0.72", "0.66"),
)


def deductible_travel_types(jurisdiction: str | None) -> tuple[str, ...]:
    """Return the travel types deductible in a jurisdiction."""
    if jurisdiction is None:
        return ()
    return DEDUCTIBLE_TRAVEL_TYPES.get(jurisdiction, ())


def is_deductible_travel_type(travel_type: str, jurisdiction: str | None) -> bool:
    """Return True when ``travel_type`` is deductible in ``jurisdiction``."""
    return travel_type in deductible_travel_types(jurisdiction)


def get_rate_config(
    year: int,
    jurisdiction: str | None,
    travel_type: str,
) -> ReimbursementRateConfig | None:
    """Return the rate schedule for a year, or the latest earlier one.

    Args:
        year: Tax year.
        jurisdiction: Jurisdiction code.
        travel_type: Travel type.

    Returns:
        ReimbursementRateConfig | None: Matching schedule, or None when no
        table applies.
    """
    candidates = [
        config
        for config in RATE_TABLES
        if config.jurisdiction == jurisdiction
        and config.travel_type == travel_type
        and config.year <= year
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda config: config.year)


__all__ = [
    "DEDUCTIBLE_TRAVEL_TYPES",
    "JURISDICTION_DISTANCE_UNITS",
    "JURISDICTION_CURRENCIES",
    "RATE_TABLES",
    "deductible_travel_types",
    "is_deductible_travel_type",
    "get_rate_config",
]
