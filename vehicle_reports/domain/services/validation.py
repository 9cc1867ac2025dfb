"""Domain validation helpers."""

from decimal import Decimal
from logging import Logger


def validate_interval_distance(
    vehicle_id: str,
    distance_km: Decimal,
    logger: Logger,
) -> bool:
    """Return False and warn when a measured distance is negative.

    Args:
        vehicle_id: Vehicle the interval belongs to.
        distance_km: Computed interval distance.
        logger: Logger used for warnings.

    Returns:
        bool: True when the distance can be kept.
    """
    if distance_km < 0:
        logger.warning(
            f"Discarding negative interval distance for vehicle_id={vehicle_id}: "
            f"{distance_km}"
        )
        return False
    return True


def validate_odometer_range(
    vehicle_id: str,
    min_odometer_km: Decimal | None,
    max_odometer_km: Decimal | None,
    logger: Logger,
) -> Decimal:
    """Return the driven distance for an odometer range, never negative.

    Args:
        vehicle_id: Vehicle the range belongs to.
        min_odometer_km: Lowest reading, or None.
        max_odometer_km: Highest reading, or None.
        logger: Logger used for warnings.

    Returns:
        Decimal: ``max - min``, or zero when unknown or inverted.
    """
    if min_odometer_km is None or max_odometer_km is None:
        return Decimal("0")
    distance = max_odometer_km - min_odometer_km
    if distance < 0:
        logger.warning(
            f"Odometer range is inverted for vehicle_id={vehicle_id}: "
            f"min={min_odometer_km}, max={max_odometer_km}"
        )
        return Decimal("0")
    return distance


__all__ = ["validate_interval_distance", "validate_odometer_range"]
