"""Tiered mileage reimbursement calculation."""

from decimal import Decimal

from vehicle_reports.domain.models.reimbursement import (
    RateTier,
    ReimbursementRateConfig,
    ReimbursementResult,
    TierAmount,
)
from vehicle_reports.utils.decimal_utils import round_money


def _tier_order(tier: RateTier) -> tuple[bool, Decimal]:
    return (tier.threshold is None, tier.threshold or Decimal("0"))


def calculate_tiered(
    distance: Decimal,
    rate_config: ReimbursementRateConfig,
) -> ReimbursementResult:
    """Apply a progressive rate schedule to a distance.

    Tiers are consumed in ascending threshold order. Thresholds are
    cumulative, so a tier covers the distance between the previous threshold
    and its own. The last tier takes whatever distance remains.

    Args:
        distance: Distance in the schedule's distance unit.
        rate_config: Rate schedule to apply.

    Returns:
        ReimbursementResult: Total and per-tier amounts rounded to two
        decimals. Tiers that receive no distance are left out.
    """
    tiers = sorted(rate_config.tiers, key=_tier_order)
    remaining = max(distance, Decimal("0"))
    previous_threshold = Decimal("0")
    total = Decimal("0")
    breakdown: list[TierAmount] = []
    for index, tier in enumerate(tiers):
        if remaining <= 0:
            break
        is_last = index == len(tiers) - 1
        if tier.threshold is None or is_last:
            tier_distance = remaining
        else:
            capacity = max(tier.threshold - previous_threshold, Decimal("0"))
            tier_distance = min(remaining, capacity)
            previous_threshold = tier.threshold
        if tier_distance <= 0:
            continue
        amount = tier_distance * tier.rate
        breakdown.append(
            TierAmount(
                tier_index=index,
                tier_distance=round_money(tier_distance),
                tier_rate=tier.rate,
                tier_amount=round_money(amount),
            )
        )
        total += amount
        remaining -= tier_distance
    return ReimbursementResult(
        distance=round_money(max(distance, Decimal("0"))),
        currency=rate_config.currency,
        distance_unit=rate_config.distance_unit,
        total_reimbursement=round_money(total),
        breakdown=breakdown,
    )


__all__ = ["calculate_tiered"]
