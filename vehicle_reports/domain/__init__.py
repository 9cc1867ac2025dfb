"""Domain package for report calculations and core models."""

from .constants import EXPENSE_TYPE_REFUEL, TRAVEL_TYPES
from .models import (
    ConsumptionResult,
    CurrencyAmount,
    ReportRequest,
    ReportScope,
    UserPreferences,
)
from .policies import get_rate_config, resolve_jurisdiction
from .services import (
    accumulate,
    calculate_tiered,
    estimate_consumption,
    to_user_unit,
    transform_currency_amounts,
)

__all__ = [
    "EXPENSE_TYPE_REFUEL",
    "TRAVEL_TYPES",
    "ConsumptionResult",
    "CurrencyAmount",
    "ReportRequest",
    "ReportScope",
    "UserPreferences",
    "get_rate_config",
    "resolve_jurisdiction",
    "accumulate",
    "calculate_tiered",
    "estimate_consumption",
    "to_user_unit",
    "transform_currency_amounts",
]
