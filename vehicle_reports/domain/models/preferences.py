"""Domain models for user unit and currency preferences."""

from dataclasses import dataclass

from vehicle_reports.domain.constants import (
    DEFAULT_CONSUMPTION_UNIT,
    DEFAULT_DISTANCE_UNIT,
    DEFAULT_VOLUME_UNIT,
)


@dataclass(frozen=True)
class UserPreferences:
    """Units and currency a report is rendered in.

    Attributes:
        distance_unit: Distance unit code (km or mi).
        volume_unit: Volume unit code (l, gal-us or gal-uk).
        consumption_unit: Consumption unit code such as l100km or mpg-us.
        home_currency: ISO code of the account's reporting currency.
    """

    distance_unit: str = DEFAULT_DISTANCE_UNIT
    volume_unit: str = DEFAULT_VOLUME_UNIT
    consumption_unit: str = DEFAULT_CONSUMPTION_UNIT
    home_currency: str = "USD"


__all__ = ["UserPreferences"]
