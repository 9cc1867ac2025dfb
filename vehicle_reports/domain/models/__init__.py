"""Domain models package."""

from .consumption import (
    CarTankConfig,
    Confidence,
    ConsumptionDataPoint,
    ConsumptionResult,
    ConsumptionSummary,
    ConsumptionThresholds,
    FuelTypeConsumption,
    FuelTypeConsumptionView,
    IntervalSource,
    Propulsion,
)
from .preferences import UserPreferences
from .reimbursement import (
    RateTier,
    ReimbursementRateConfig,
    ReimbursementResult,
    TierAmount,
)
from .report_rows import (
    CategoryBreakdownRow,
    CurrencyAmount,
    ExpenseSummaryRawData,
    ForeignAmountRow,
    KindBreakdownRow,
    LinkedExpenseTotalRow,
    MonthlyRawRow,
    PeriodExpenseBreakdown,
    TankReading,
    TravelReportRawData,
    TravelRow,
    VehicleOdometerRange,
    YearlyRawData,
)
from .reports import (
    ActualExpenseMethod,
    CategoryBreakdownItem,
    ExpenseSummaryReport,
    ExpensesSection,
    KindBreakdownItem,
    LinkedTotals,
    MonthlyReportRow,
    RefuelsSection,
    StandardMileageDeduction,
    TravelReport,
    TravelTypeBreakdown,
    TravelTypeDeduction,
    TripDetail,
    TripsTotals,
    YearlyReport,
    YearTotals,
)
from .scope import ReportRequest, ReportScope

__all__ = [
    "CarTankConfig",
    "Confidence",
    "IntervalSource",
    "ConsumptionDataPoint",
    "ConsumptionResult",
    "ConsumptionSummary",
    "ConsumptionThresholds",
    "FuelTypeConsumption",
    "FuelTypeConsumptionView",
    "Propulsion",
    "UserPreferences",
    "RateTier",
    "ReimbursementRateConfig",
    "ReimbursementResult",
    "TierAmount",
    "CategoryBreakdownRow",
    "CurrencyAmount",
    "ExpenseSummaryRawData",
    "ForeignAmountRow",
    "KindBreakdownRow",
    "LinkedExpenseTotalRow",
    "MonthlyRawRow",
    "PeriodExpenseBreakdown",
    "TankReading",
    "TravelReportRawData",
    "TravelRow",
    "VehicleOdometerRange",
    "YearlyRawData",
    "ActualExpenseMethod",
    "CategoryBreakdownItem",
    "ExpenseSummaryReport",
    "ExpensesSection",
    "KindBreakdownItem",
    "LinkedTotals",
    "MonthlyReportRow",
    "RefuelsSection",
    "StandardMileageDeduction",
    "TravelReport",
    "TravelTypeBreakdown",
    "TravelTypeDeduction",
    "TripDetail",
    "TripsTotals",
    "YearlyReport",
    "YearTotals",
    "ReportRequest",
    "ReportScope",
]
