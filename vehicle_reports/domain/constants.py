"""Domain-level constants for units, record types and travel types."""

from decimal import Decimal

MILES_TO_KM = Decimal("1.609344")
US_GALLON_TO_LITERS = Decimal("3.785411784")
UK_GALLON_TO_LITERS = Decimal("4.54609")

DISTANCE_UNITS = ("km", "mi")
VOLUME_UNITS = ("l", "gal-us", "gal-uk")
CONSUMPTION_UNITS = ("l100km", "km-l", "mpg-us", "mpg-uk", "mi-l")

DEFAULT_DISTANCE_UNIT = "km"
DEFAULT_VOLUME_UNIT = "l"
DEFAULT_CONSUMPTION_UNIT = "l100km"

EXPENSE_TYPE_REFUEL = 1
EXPENSE_TYPE_EXPENSE = 2
EXPENSE_TYPE_CHECKPOINT = 3
EXPENSE_TYPE_TRAVEL_POINT = 4
EXPENSE_TYPE_REVENUE = 5

TRAVEL_TYPES = ("business", "personal", "medical", "charity", "commute")
TRAVEL_STATUS_COMPLETED = 200

TANK_MAIN = "main"
TANK_ADDITIONAL = "addl"

__all__ = [
    "MILES_TO_KM",
    "US_GALLON_TO_LITERS",
    "UK_GALLON_TO_LITERS",
    "DISTANCE_UNITS",
    "VOLUME_UNITS",
    "CONSUMPTION_UNITS",
    "DEFAULT_DISTANCE_UNIT",
    "DEFAULT_VOLUME_UNIT",
    "DEFAULT_CONSUMPTION_UNIT",
    "EXPENSE_TYPE_REFUEL",
    "EXPENSE_TYPE_EXPENSE",
    "EXPENSE_TYPE_CHECKPOINT",
    "EXPENSE_TYPE_TRAVEL_POINT",
    "EXPENSE_TYPE_REVENUE",
    "TRAVEL_TYPES",
    "TRAVEL_STATUS_COMPLETED",
    "TANK_MAIN",
    "TANK_ADDITIONAL",
]
