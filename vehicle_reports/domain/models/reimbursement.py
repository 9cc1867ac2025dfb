"""Domain models for mileage reimbursement rates and results."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RateTier:
    """Rate applied up to a cumulative distance threshold.

    A ``threshold`` of None marks an unbounded tier.
    """

    threshold: Decimal | None
    rate: Decimal


@dataclass(frozen=True)
class ReimbursementRateConfig:
    """Tiered rate schedule for a jurisdiction, year and travel type."""

    year: int
    jurisdiction: str
    travel_type: str
    currency: str
    distance_unit: str
    tiers: tuple[RateTier, ...]


@dataclass(frozen=True)
class TierAmount:
    """Portion of a distance paid at a single tier."""

    tier_index: int
    tier_distance: Decimal
    tier_rate: Decimal
    tier_amount: Decimal


@dataclass(frozen=True)
class ReimbursementResult:
    """Tiered reimbursement for a distance."""

    distance: Decimal
    currency: str
    distance_unit: str
    total_reimbursement: Decimal
    breakdown: list[TierAmount]


__all__ = [
    "RateTier",
    "ReimbursementRateConfig",
    "TierAmount",
    "ReimbursementResult",
]
