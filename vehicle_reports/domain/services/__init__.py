"""Domain services package."""

from .consumption import (
    build_consumption_intervals,
    estimate_consumption,
    summarize_consumption,
)
from .currency import (
    CurrencyTotals,
    accumulate,
    merge_currency_amounts,
    split_foreign_amounts,
    sum_records_count,
    transform_currency_amounts,
)
from .normalization import (
    normalize_currency_code,
    normalize_fuel_type,
    normalize_preferences,
)
from .propulsion import propulsion_for, rules_for
from .reimbursement import calculate_tiered
from .units import (
    calculate_consumption,
    derive_consumption_unit,
    from_user_unit,
    to_user_unit,
)
from .validation import validate_interval_distance, validate_odometer_range

__all__ = [
    "build_consumption_intervals",
    "estimate_consumption",
    "summarize_consumption",
    "CurrencyTotals",
    "accumulate",
    "merge_currency_amounts",
    "split_foreign_amounts",
    "sum_records_count",
    "transform_currency_amounts",
    "normalize_currency_code",
    "normalize_fuel_type",
    "normalize_preferences",
    "propulsion_for",
    "rules_for",
    "calculate_tiered",
    "calculate_consumption",
    "derive_consumption_unit",
    "from_user_unit",
    "to_user_unit",
    "validate_interval_distance",
    "validate_odometer_range",
]
