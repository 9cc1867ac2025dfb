"""Domain models for fuel and energy consumption estimation."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Propulsion(str, Enum):
    """Closed set of propulsion kinds handled by the estimator."""

    LIQUID = "liquid"
    ELECTRIC = "electric"
    HYDROGEN = "hydrogen"


class Confidence(str, Enum):
    """Confidence rating attached to a consumption figure."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IntervalSource(str, Enum):
    """How the tank levels bounding an interval were known."""

    FULL_TO_FULL = "full-to-full"
    TANK_PERCENTAGE = "tank-percentage"
    APPROXIMATION = "approximation"


@dataclass(frozen=True)
class ConsumptionDataPoint:
    """One measured interval between two known tank levels.

    Attributes:
        vehicle_id: Vehicle the interval was measured on.
        fuel_type: Fuel type code, or None to resolve it from the tank config.
        distance_km: Distance driven during the interval.
        fuel_consumed: Liters, kWh or kg consumed during the interval.
        timestamp_ordinal: Ordering key of the closing measurement.
        tank: Tank the interval was measured on (main or addl).
        source: Whether both ends were full tanks, at least one end was a
            tank percentage, or no level was known at all.
        mixed_sources: True when an end of the interval is not a refuel.
    """

    vehicle_id: str
    fuel_type: str | None
    distance_km: Decimal
    fuel_consumed: Decimal
    timestamp_ordinal: int
    tank: str = "main"
    source: IntervalSource = IntervalSource.FULL_TO_FULL
    mixed_sources: bool = False


@dataclass(frozen=True)
class CarTankConfig:
    """Per-vehicle tank and propulsion metadata."""

    vehicle_id: str
    main_fuel_type: str | None
    main_capacity: Decimal | None = None
    addl_fuel_type: str | None = None
    addl_capacity: Decimal | None = None

    def fuel_type_for(self, tank: str) -> str | None:
        """Return the fuel type of the given tank."""
        if tank == "addl":
            return self.addl_fuel_type
        return self.main_fuel_type

    def capacity_for(self, tank: str) -> Decimal | None:
        """Return the capacity of the given tank, or None when not positive."""
        capacity = self.addl_capacity if tank == "addl" else self.main_capacity
        if capacity is None or capacity <= 0:
            return None
        return capacity


@dataclass(frozen=True)
class FuelTypeConsumption:
    """Metric consumption aggregate for one fuel type."""

    fuel_type: str
    propulsion: Propulsion
    consumption_per_100km: Decimal | None
    distance_km: Decimal
    fuel_consumed: Decimal
    confidence: Confidence
    confidence_reasons: tuple[str, ...]
    vehicles_count: int
    data_points_count: int


@dataclass(frozen=True)
class ConsumptionResult:
    """Unformatted consumption estimate for a scope and period."""

    by_fuel_type: list[FuelTypeConsumption]
    total_distance_km: Decimal
    total_vehicles_count: int

    @classmethod
    def empty(cls) -> "ConsumptionResult":
        """Return a result without any fuel type."""
        return cls(
            by_fuel_type=[],
            total_distance_km=Decimal("0"),
            total_vehicles_count=0,
        )


@dataclass(frozen=True)
class ConsumptionThresholds:
    """Minimums below which a consumption figure is rated low."""

    min_data_points: int = 2
    min_distance_km: Decimal = Decimal("100")
    min_fuel_units: Decimal = Decimal("5")


@dataclass(frozen=True)
class FuelTypeConsumptionView:
    """Consumption for one fuel type, rounded and in the user's units."""

    fuel_type: str
    propulsion: str
    consumption: Decimal | None
    consumption_unit: str
    distance: Decimal
    fuel_consumed: Decimal
    fuel_unit: str
    confidence: str
    confidence_reasons: list[str]
    vehicles_count: int
    data_points_count: int


@dataclass(frozen=True)
class ConsumptionSummary:
    """Report section describing consumption in the user's units."""

    by_fuel_type: list[FuelTypeConsumptionView]
    total_distance: Decimal
    distance_unit: str
    total_vehicles_count: int


__all__ = [
    "Propulsion",
    "Confidence",
    "IntervalSource",
    "ConsumptionDataPoint",
    "CarTankConfig",
    "FuelTypeConsumption",
    "ConsumptionResult",
    "ConsumptionThresholds",
    "FuelTypeConsumptionView",
    "ConsumptionSummary",
]
