"""Fuel and energy consumption estimation with a confidence model."""

from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal
from logging import Logger

from vehicle_reports.domain.models.consumption import (
    CarTankConfig,
    Confidence,
    ConsumptionDataPoint,
    ConsumptionResult,
    ConsumptionSummary,
    ConsumptionThresholds,
    FuelTypeConsumption,
    FuelTypeConsumptionView,
    IntervalSource,
)
from vehicle_reports.domain.models.preferences import UserPreferences
from vehicle_reports.domain.models.report_rows import TankReading
from vehicle_reports.domain.services.normalization import normalize_fuel_type
from vehicle_reports.domain.services.propulsion import rules_for
from vehicle_reports.domain.services.units import from_metric_distance
from vehicle_reports.domain.services.validation import (
    validate_interval_distance,
)
from vehicle_reports.utils.decimal_utils import quantize, round_money

REASON_INSUFFICIENT_DISTANCE = "insufficient-distance-data"
REASON_INSUFFICIENT_FUEL = "insufficient-fuel-data"
REASON_TOO_FEW_DATA_POINTS = "too-few-data-points"
REASON_SHORT_DISTANCE = "short-distance"
REASON_LOW_FUEL_VOLUME = "low-fuel-volume"
REASON_SINGLE_MEASUREMENT = "single-measurement"
REASON_MULTIPLE_VEHICLES = "multiple-vehicles"
REASON_OUTLIER = "consumption-outlier"
REASON_APPROXIMATION = "approximation"
REASON_TANK_PERCENTAGE = "tank-percentage"
REASON_MIXED_SOURCES = "mixed-sources"

_HUNDRED = Decimal("100")
_ZERO = Decimal("0")


def _tank_level(
    reading: TankReading,
    capacity: Decimal | None,
) -> tuple[Decimal, bool] | None:
    """Return the tank level after ``reading`` and whether the tank was full.

    Without a known capacity only full tanks give a level, measured relative
    to a full tank.
    """
    if reading.is_refuel and reading.is_full_tank:
        return (capacity if capacity is not None else _ZERO), True
    if capacity is None or reading.fuel_in_tank is None:
        return None
    if not _ZERO <= reading.fuel_in_tank <= 1:
        return None
    return reading.fuel_in_tank * capacity, False


def _measured_intervals(
    vehicle_id: str,
    tank: str,
    group: list[TankReading],
    capacity: Decimal | None,
    logger: Logger,
) -> list[ConsumptionDataPoint]:
    data_points: list[ConsumptionDataPoint] = []
    opening: TankReading | None = None
    opening_level: tuple[Decimal, bool] | None = None
    fuel_since_opening = _ZERO
    for reading in group:
        level = _tank_level(reading, capacity)
        if opening is None:
            if level is not None:
                opening, opening_level = reading, level
                fuel_since_opening = _ZERO
            continue
        if reading.is_refuel:
            fuel_since_opening += reading.volume_liters
        if level is None:
            continue
        distance = reading.odometer_km - opening.odometer_km
        # Start level plus fuel added minus end level.
        consumed = opening_level[0] + fuel_since_opening - level[0]
        if not validate_interval_distance(vehicle_id, distance, logger):
            pass
        elif consumed < 0:
            logger.warning(
                f"Discarding negative consumption for vehicle_id={vehicle_id}, "
                f"tank={tank}: {consumed}"
            )
        else:
            data_points.append(
                ConsumptionDataPoint(
                    vehicle_id=vehicle_id,
                    fuel_type=reading.fuel_type,
                    distance_km=distance,
                    fuel_consumed=consumed,
                    timestamp_ordinal=reading.when_done.toordinal(),
                    tank=tank,
                    source=(
                        IntervalSource.FULL_TO_FULL
                        if opening_level[1] and level[1]
                        else IntervalSource.TANK_PERCENTAGE
                    ),
                    mixed_sources=not (opening.is_refuel and reading.is_refuel),
                )
            )
        opening, opening_level = reading, level
        fuel_since_opening = _ZERO
    return data_points


def _approximate(
    vehicle_id: str,
    tank: str,
    group: list[TankReading],
    logger: Logger,
) -> ConsumptionDataPoint | None:
    """Approximate an interval from refuels alone.

    The first refuel only marks the start, so its volume is left out.
    """
    refuels = [item for item in group if item.is_refuel and item.volume_liters > 0]
    if len(refuels) < 2:
        return None
    first, last = refuels[0], refuels[-1]
    distance = last.odometer_km - first.odometer_km
    if distance <= 0:
        return None
    logger.info(
        f"No known tank levels for vehicle_id={vehicle_id}, tank={tank}; "
        f"approximating from {len(refuels)} refuels"
    )
    return ConsumptionDataPoint(
        vehicle_id=vehicle_id,
        fuel_type=last.fuel_type,
        distance_km=distance,
        fuel_consumed=sum((item.volume_liters for item in refuels[1:]), _ZERO),
        timestamp_ordinal=last.when_done.toordinal(),
        tank=tank,
        source=IntervalSource.APPROXIMATION,
    )


def build_consumption_intervals(
    readings: Iterable[TankReading],
    tank_configs: Iterable[CarTankConfig],
    logger: Logger,
) -> list[ConsumptionDataPoint]:
    """Derive consumption intervals from refuel and checkpoint readings.

    Readings are grouped per vehicle and tank and ordered by odometer. A
    reading gives a known tank level when it is a full-tank refuel, or when
    it carries a ``fuel_in_tank`` fraction and the tank capacity is known.
    Each interval between two consecutive known levels consumed the opening
    level plus every volume added up to and including the closing reading,
    minus the closing level. A vehicle and tank with fewer than two known
    levels falls back to a single approximated interval over its refuels.

    Args:
        readings: Readings in any order.
        tank_configs: Tank configuration of the readings' vehicles.
        logger: Logger used to report discarded or approximated intervals.

    Returns:
        list[ConsumptionDataPoint]: Intervals with a non-negative distance and
        consumption.
    """
    configs = {config.vehicle_id: config for config in tank_configs}
    grouped: dict[tuple[str, str], list[TankReading]] = defaultdict(list)
    for reading in readings:
        if reading.odometer_km is None:
            continue
        grouped[(reading.vehicle_id, reading.tank)].append(reading)

    data_points: list[ConsumptionDataPoint] = []
    for (vehicle_id, tank), group in sorted(grouped.items()):
        group.sort(key=lambda item: (item.odometer_km, item.when_done, item.record_id))
        config = configs.get(vehicle_id)
        capacity = config.capacity_for(tank) if config is not None else None
        known = [item for item in group if _tank_level(item, capacity) is not None]
        if len(known) >= 2:
            data_points.extend(
                _measured_intervals(vehicle_id, tank, group, capacity, logger)
            )
            continue
        approximated = _approximate(vehicle_id, tank, group, logger)
        if approximated is not None:
            data_points.append(approximated)
    return data_points


def _rate_partition(
    fuel_type: str,
    points: list[ConsumptionDataPoint],
    thresholds: ConsumptionThresholds,
) -> FuelTypeConsumption:
    rules = rules_for(fuel_type)
    distance = sum((point.distance_km for point in points), Decimal("0"))
    fuel = sum((point.fuel_consumed for point in points), Decimal("0"))
    vehicles = {point.vehicle_id for point in points}
    reasons: list[str] = []

    if distance <= 0:
        reasons.append(REASON_INSUFFICIENT_DISTANCE)
    if fuel <= 0:
        reasons.append(REASON_INSUFFICIENT_FUEL)
    if reasons:
        return FuelTypeConsumption(
            fuel_type=fuel_type,
            propulsion=rules.propulsion,
            consumption_per_100km=None,
            distance_km=distance,
            fuel_consumed=fuel,
            confidence=Confidence.LOW,
            confidence_reasons=tuple(reasons),
            vehicles_count=len(vehicles),
            data_points_count=len(points),
        )

    consumption = fuel / distance * _HUNDRED
    confidence = Confidence.HIGH
    if len(points) < thresholds.min_data_points:
        confidence = Confidence.LOW
        reasons.append(REASON_TOO_FEW_DATA_POINTS)
    if distance < thresholds.min_distance_km:
        confidence = Confidence.LOW
        reasons.append(REASON_SHORT_DISTANCE)
    if fuel < thresholds.min_fuel_units:
        confidence = Confidence.LOW
        reasons.append(REASON_LOW_FUEL_VOLUME)
    if rules.is_outlier(consumption):
        confidence = Confidence.LOW
        reasons.append(REASON_OUTLIER)
    if len(vehicles) > 1:
        reasons.append(REASON_MULTIPLE_VEHICLES)
        if confidence is Confidence.HIGH:
            confidence = Confidence.MEDIUM
    elif len(points) < 2 and confidence is Confidence.HIGH:
        confidence = Confidence.MEDIUM
        reasons.append(REASON_SINGLE_MEASUREMENT)

    sources = {point.source for point in points}
    if IntervalSource.APPROXIMATION in sources:
        confidence = Confidence.LOW
        reasons.append(REASON_APPROXIMATION)
    if IntervalSource.TANK_PERCENTAGE in sources:
        reasons.append(REASON_TANK_PERCENTAGE)
        if confidence is Confidence.HIGH:
            confidence = Confidence.MEDIUM
    if any(point.mixed_sources for point in points):
        reasons.append(REASON_MIXED_SOURCES)
        if confidence is Confidence.HIGH:
            confidence = Confidence.MEDIUM

    return FuelTypeConsumption(
        fuel_type=fuel_type,
        propulsion=rules.propulsion,
        consumption_per_100km=consumption,
        distance_km=distance,
        fuel_consumed=fuel,
        confidence=confidence,
        confidence_reasons=tuple(reasons),
        vehicles_count=len(vehicles),
        data_points_count=len(points),
    )


def estimate_consumption(
    data_points: Iterable[ConsumptionDataPoint],
    tank_configs: Iterable[CarTankConfig],
    thresholds: ConsumptionThresholds | None = None,
    logger: Logger | None = None,
) -> ConsumptionResult:
    """Estimate consumption per fuel type from aggregate totals.

    Distances and fuel are summed across every data point and vehicle of a
    fuel type before the ratio is taken, so vehicles that drive more weigh
    more.

    Args:
        data_points: Measured intervals for the scope and period.
        tank_configs: Tank configuration of the scope's vehicles.
        thresholds: Minimums used by the confidence model.
        logger: Optional logger for skipped data points.

    Returns:
        ConsumptionResult: Unformatted per-fuel-type figures sorted by fuel
        type.
    """
    resolved_thresholds = thresholds or ConsumptionThresholds()
    configs = {config.vehicle_id: config for config in tank_configs}
    partitions: dict[str, list[ConsumptionDataPoint]] = defaultdict(list)
    for point in data_points:
        if point.distance_km < 0:
            if logger is not None:
                logger.warning(
                    f"Skipping data point with negative distance for "
                    f"vehicle_id={point.vehicle_id}"
                )
            continue
        fuel_type = normalize_fuel_type(point.fuel_type)
        if fuel_type is None and point.vehicle_id in configs:
            fuel_type = normalize_fuel_type(
                configs[point.vehicle_id].fuel_type_for(point.tank)
            )
        if fuel_type is None:
            if logger is not None:
                logger.warning(
                    f"Skipping data point without fuel type for "
                    f"vehicle_id={point.vehicle_id}, tank={point.tank}"
                )
            continue
        partitions[fuel_type].append(point)

    by_fuel_type = [
        _rate_partition(fuel_type, partitions[fuel_type], resolved_thresholds)
        for fuel_type in sorted(partitions)
    ]
    vehicles = {
        point.vehicle_id for points in partitions.values() for point in points
    }
    return ConsumptionResult(
        by_fuel_type=by_fuel_type,
        total_distance_km=sum(
            (item.distance_km for item in by_fuel_type), Decimal("0")
        ),
        total_vehicles_count=len(vehicles),
    )


def summarize_consumption(
    result: ConsumptionResult,
    preferences: UserPreferences,
) -> ConsumptionSummary:
    """Render a consumption result in the user's units, rounded.

    Args:
        result: Metric consumption result.
        preferences: Units to render into.

    Returns:
        ConsumptionSummary: Report section ready for output.
    """
    views: list[FuelTypeConsumptionView] = []
    for item in result.by_fuel_type:
        rules = rules_for(item.fuel_type)
        consumption = None
        if item.consumption_per_100km is not None:
            consumption = rules.consumption(
                item.distance_km,
                item.fuel_consumed,
                preferences,
            )
        views.append(
            FuelTypeConsumptionView(
                fuel_type=item.fuel_type,
                propulsion=item.propulsion.value,
                consumption=quantize(consumption),
                consumption_unit=rules.consumption_unit(preferences),
                distance=round_money(
                    from_metric_distance(item.distance_km, preferences.distance_unit)
                ),
                fuel_consumed=round_money(
                    rules.fuel_amount(item.fuel_consumed, preferences)
                ),
                fuel_unit=rules.fuel_unit(preferences),
                confidence=item.confidence.value,
                confidence_reasons=list(item.confidence_reasons),
                vehicles_count=item.vehicles_count,
                data_points_count=item.data_points_count,
            )
        )
    return ConsumptionSummary(
        by_fuel_type=views,
        total_distance=round_money(
            from_metric_distance(result.total_distance_km, preferences.distance_unit)
        ),
        distance_unit=preferences.distance_unit,
        total_vehicles_count=result.total_vehicles_count,
    )


__all__ = [
    "REASON_INSUFFICIENT_DISTANCE",
    "REASON_INSUFFICIENT_FUEL",
    "REASON_TOO_FEW_DATA_POINTS",
    "REASON_SHORT_DISTANCE",
    "REASON_LOW_FUEL_VOLUME",
    "REASON_SINGLE_MEASUREMENT",
    "REASON_MULTIPLE_VEHICLES",
    "REASON_OUTLIER",
    "REASON_APPROXIMATION",
    "REASON_TANK_PERCENTAGE",
    "REASON_MIXED_SOURCES",
    "build_consumption_intervals",
    "estimate_consumption",
    "summarize_consumption",
]
