"""Per-propulsion rules for presenting consumption figures.

Liquid fuels follow the user's volume and consumption units. Electric and
hydrogen vehicles keep their energy unit (kWh or kg) and are shown per
100 km, or as miles per unit when the user prefers a distance-per-volume
unit such as mpg.
"""

from decimal import Decimal

from vehicle_reports.domain.models.consumption import Propulsion
from vehicle_reports.domain.models.preferences import UserPreferences
from vehicle_reports.domain.services.normalization import normalize_fuel_type
from vehicle_reports.domain.services.units import (
    calculate_consumption,
    consumption_unit_label,
    from_metric_distance,
    from_metric_volume,
    volume_unit_label,
)
from vehicle_reports.utils.decimal_utils import safe_divide

ELECTRIC_FUEL_TYPES = frozenset({"electric"})
HYDROGEN_FUEL_TYPES = frozenset({"hydrogen"})
DISTANCE_PER_ENERGY_UNITS = frozenset({"mpg-us", "mpg-uk"})

_HUNDRED = Decimal("100")


class PropulsionRules:
    """Base rules shared by every propulsion kind."""

    propulsion: Propulsion
    realistic_range: tuple[Decimal, Decimal]

    def is_outlier(self, consumption_per_100km: Decimal) -> bool:
        """Return True when a per-100km figure is outside realistic bounds."""
        low, high = self.realistic_range
        return consumption_per_100km < low or consumption_per_100km > high

    def fuel_unit(self, preferences: UserPreferences) -> str:
        raise NotImplementedError

    def fuel_amount(
        self,
        fuel_consumed: Decimal,
        preferences: UserPreferences,
    ) -> Decimal:
        raise NotImplementedError

    def consumption_unit(self, preferences: UserPreferences) -> str:
        raise NotImplementedError

    def consumption(
        self,
        distance_km: Decimal,
        fuel_consumed: Decimal,
        preferences: UserPreferences,
    ) -> Decimal | None:
        raise NotImplementedError


class LiquidFuelRules(PropulsionRules):
    """Rules for gasoline, diesel, LPG and other liquid fuels."""

    propulsion = Propulsion.LIQUID
    realistic_range = (Decimal("1"), Decimal("50"))

    def fuel_unit(self, preferences: UserPreferences) -> str:
        return volume_unit_label(preferences.volume_unit)

    def fuel_amount(
        self,
        fuel_consumed: Decimal,
        preferences: UserPreferences,
    ) -> Decimal:
        return from_metric_volume(fuel_consumed, preferences.volume_unit)

    def consumption_unit(self, preferences: UserPreferences) -> str:
        return consumption_unit_label(preferences.consumption_unit)

    def consumption(
        self,
        distance_km: Decimal,
        fuel_consumed: Decimal,
        preferences: UserPreferences,
    ) -> Decimal | None:
        return calculate_consumption(
            distance_km,
            fuel_consumed,
            preferences.consumption_unit,
        )


class EnergyRules(PropulsionRules):
    """Rules for propulsion measured in an energy or mass unit."""

    def __init__(
        self,
        propulsion: Propulsion,
        energy_unit: str,
        realistic_range: tuple[Decimal, Decimal],
    ) -> None:
        self.propulsion = propulsion
        self.energy_unit = energy_unit
        self.realistic_range = realistic_range

    def _per_distance(self, preferences: UserPreferences) -> bool:
        return preferences.consumption_unit in DISTANCE_PER_ENERGY_UNITS

    def fuel_unit(self, preferences: UserPreferences) -> str:
        return self.energy_unit

    def fuel_amount(
        self,
        fuel_consumed: Decimal,
        preferences: UserPreferences,
    ) -> Decimal:
        return fuel_consumed

    def consumption_unit(self, preferences: UserPreferences) -> str:
        if self._per_distance(preferences):
            return f"mi/{self.energy_unit}"
        return f"{self.energy_unit}/100km"

    def consumption(
        self,
        distance_km: Decimal,
        fuel_consumed: Decimal,
        preferences: UserPreferences,
    ) -> Decimal | None:
        if distance_km <= 0 or fuel_consumed <= 0:
            return None
        if self._per_distance(preferences):
            return safe_divide(from_metric_distance(distance_km, "mi"), fuel_consumed)
        return fuel_consumed / distance_km * _HUNDRED


_RULES: dict[Propulsion, PropulsionRules] = {
    Propulsion.LIQUID: LiquidFuelRules(),
    Propulsion.ELECTRIC: EnergyRules(
        Propulsion.ELECTRIC,
        "kWh",
        (Decimal("5"), Decimal("60")),
    ),
    Propulsion.HYDROGEN: EnergyRules(
        Propulsion.HYDROGEN,
        "kg",
        (Decimal("0.3"), Decimal("5")),
    ),
}


def propulsion_for(fuel_type: str | None) -> Propulsion:
    """Return the propulsion kind of a fuel type code."""
    normalized = normalize_fuel_type(fuel_type)
    if normalized in ELECTRIC_FUEL_TYPES:
        return Propulsion.ELECTRIC
    if normalized in HYDROGEN_FUEL_TYPES:
        return Propulsion.HYDROGEN
    return Propulsion.LIQUID


def rules_for(fuel_type: str | None) -> PropulsionRules:
    """Return the rules applying to a fuel type code."""
    return _RULES[propulsion_for(fuel_type)]


__all__ = [
    "ELECTRIC_FUEL_TYPES",
    "HYDROGEN_FUEL_TYPES",
    "DISTANCE_PER_ENERGY_UNITS",
    "PropulsionRules",
    "LiquidFuelRules",
    "EnergyRules",
    "propulsion_for",
    "rules_for",
]
