"""Domain policies package."""

from .jurisdiction import resolve_jurisdiction
from .reimbursement_rates import (
    deductible_travel_types,
    get_rate_config,
    is_deductible_travel_type,
)

__all__ = [
    "resolve_jurisdiction",
    "deductible_travel_types",
    "get_rate_config",
    "is_deductible_travel_type",
]
