"""Report objects returned to callers.

Every numeric leaf is already rounded and expressed in the units named by the
attached ``UserPreferences``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from vehicle_reports.domain.models.consumption import ConsumptionSummary
from vehicle_reports.domain.models.preferences import UserPreferences
from vehicle_reports.domain.models.reimbursement import TierAmount
from vehicle_reports.domain.models.report_rows import CurrencyAmount


@dataclass(frozen=True)
class RefuelsSection:
    """Refuel totals for a period."""

    total_cost_hc: Decimal
    records_count_hc: int
    total_volume: Decimal
    avg_price_per_volume_hc: Decimal | None
    foreign_currencies: list[CurrencyAmount]
    total_foreign_records_count: int


@dataclass(frozen=True)
class ExpensesSection:
    """Non-refuel expense totals for a period."""

    total_cost_hc: Decimal
    records_count_hc: int
    foreign_currencies: list[CurrencyAmount]
    total_foreign_records_count: int


@dataclass(frozen=True)
class CategoryBreakdownItem:
    """Expense category share of the period's expenses."""

    category_id: int
    category_code: str
    category_name: str | None
    total_amount_hc: Decimal
    records_count_hc: int
    percentage_hc: Decimal | None
    foreign_currencies: list[CurrencyAmount]
    total_foreign_records_count: int


@dataclass(frozen=True)
class KindBreakdownItem:
    """Expense kind share of the period's expenses."""

    kind_id: int
    kind_code: str
    kind_name: str | None
    category_id: int
    category_code: str
    total_amount_hc: Decimal
    records_count_hc: int
    percentage_hc: Decimal | None
    foreign_currencies: list[CurrencyAmount]
    total_foreign_records_count: int


@dataclass(frozen=True)
class ExpenseSummaryReport:
    """Period expense summary."""

    date_from: date
    date_to: date
    period_days: int
    total_cost_hc: Decimal
    refuels_cost_hc: Decimal
    expenses_cost_hc: Decimal
    avg_total_cost_per_day_hc: Decimal | None
    avg_refuels_cost_per_day_hc: Decimal | None
    avg_expenses_cost_per_day_hc: Decimal | None
    foreign_currency_totals: list[CurrencyAmount]
    total_foreign_records_count: int
    refuels: RefuelsSection
    expenses: ExpensesSection
    fuel_purchased: Decimal
    refuels_count: int
    start_odometer: Decimal | None
    end_odometer: Decimal | None
    mileage: Decimal | None
    avg_mileage_per_day: Decimal | None
    cost_per_distance_hc: Decimal | None
    total_records_count: int
    vehicles_count: int
    expenses_by_category: list[CategoryBreakdownItem]
    expenses_by_kind: list[KindBreakdownItem]
    consumption: ConsumptionSummary
    preferences: UserPreferences


@dataclass(frozen=True)
class MonthlyReportRow:
    """One calendar month of the annual breakdown."""

    month: int
    refuels_cost_hc: Decimal
    expenses_cost_hc: Decimal
    total_cost_hc: Decimal
    refuels_count: int
    expenses_count: int
    refuels_volume: Decimal
    mileage: Decimal | None
    cost_per_distance_hc: Decimal | None
    foreign_refuels: list[CurrencyAmount]
    foreign_expenses: list[CurrencyAmount]
    foreign_currency_totals: list[CurrencyAmount]
    total_foreign_records_count: int
    consumption: ConsumptionSummary


@dataclass(frozen=True)
class YearTotals:
    """Totals accumulated over the twelve months."""

    refuels_cost_hc: Decimal
    expenses_cost_hc: Decimal
    total_cost_hc: Decimal
    refuels_count: int
    expenses_count: int
    refuels_volume: Decimal
    mileage: Decimal | None
    cost_per_distance_hc: Decimal | None
    foreign_refuels: list[CurrencyAmount]
    foreign_expenses: list[CurrencyAmount]
    foreign_currency_totals: list[CurrencyAmount]
    total_foreign_records_count: int


@dataclass(frozen=True)
class YearlyReport:
    """Twelve-month breakdown for a calendar year."""

    year: int
    months: list[MonthlyReportRow]
    totals: YearTotals
    consumption: ConsumptionSummary
    vehicles_count: int
    preferences: UserPreferences


@dataclass(frozen=True)
class TravelTypeBreakdown:
    """Trips and distance for one travel type."""

    travel_type: str
    trips_count: int
    total_distance: Decimal
    percentage_of_filtered: Decimal | None


@dataclass(frozen=True)
class TravelTypeDeduction:
    """Tiered mileage deduction for one deductible travel type."""

    travel_type: str
    distance: Decimal
    distance_unit: str
    currency: str
    deduction: Decimal
    tier_breakdown: list[TierAmount]


@dataclass(frozen=True)
class StandardMileageDeduction:
    """Standard mileage deduction across deductible travel types."""

    jurisdiction: str
    year: int
    eligible_distance: Decimal
    distance_unit: str
    currency: str
    by_type: list[TravelTypeDeduction]
    total_deduction: Decimal


@dataclass(frozen=True)
class ActualExpenseMethod:
    """Actual-expense deduction, prorated by business-use percentage."""

    total_refuels_cost_hc: Decimal
    total_refuels_volume: Decimal
    total_maintenance_cost_hc: Decimal
    total_other_expenses_cost_hc: Decimal
    total_all_expenses_cost_hc: Decimal
    business_use_percentage: Decimal | None
    deductible_refuels_cost_hc: Decimal | None
    deductible_maintenance_cost_hc: Decimal | None
    deductible_other_expenses_cost_hc: Decimal | None
    total_deductible_cost_hc: Decimal | None


@dataclass(frozen=True)
class LinkedTotals:
    """Totals of records linked to the filtered trips."""

    refuels_cost_hc: Decimal
    refuels_volume: Decimal
    refuels_count: int
    expenses_cost_hc: Decimal
    expenses_count: int
    revenues_hc: Decimal
    revenues_count: int


@dataclass(frozen=True)
class TripDetail:
    """One row of the trip table."""

    travel_id: str
    vehicle_id: str
    started_at: datetime | None
    ended_at: datetime | None
    travel_type: str
    purpose: str | None
    destination: str | None
    is_round_trip: bool
    distance: Decimal
    active_minutes: int | None
    total_minutes: int | None
    refuels_cost_hc: Decimal
    refuels_volume: Decimal
    expenses_cost_hc: Decimal
    revenues_hc: Decimal
    reimbursement_rate: Decimal | None
    reimbursement_rate_currency: str | None
    calculated_reimbursement: Decimal | None


@dataclass(frozen=True)
class TripsTotals:
    """Column totals of the trip table."""

    trips_count: int
    total_distance: Decimal
    total_active_minutes: int
    total_minutes: int
    refuels_cost_hc: Decimal
    refuels_volume: Decimal
    expenses_cost_hc: Decimal
    revenues_hc: Decimal
    calculated_reimbursement: Decimal


@dataclass(frozen=True)
class TravelReport:
    """Tax-oriented travel report."""

    date_from: date
    date_to: date
    period_days: int
    vehicle_ids: list[str]
    vehicles_count: int
    travel_types: list[str]
    total_distance_in_period: Decimal | None
    filtered_trips_distance: Decimal
    business_use_percentage: Decimal | None
    distance_unit: str
    trips_by_type: list[TravelTypeBreakdown]
    standard_mileage_deduction: StandardMileageDeduction | None
    actual_expense_method: ActualExpenseMethod
    linked_totals: LinkedTotals
    trips: list[TripDetail]
    trips_totals: TripsTotals
    consumption: ConsumptionSummary
    preferences: UserPreferences


__all__ = [
    "RefuelsSection",
    "ExpensesSection",
    "CategoryBreakdownItem",
    "KindBreakdownItem",
    "ExpenseSummaryReport",
    "MonthlyReportRow",
    "YearTotals",
    "YearlyReport",
    "TravelTypeBreakdown",
    "TravelTypeDeduction",
    "StandardMileageDeduction",
    "ActualExpenseMethod",
    "LinkedTotals",
    "TripDetail",
    "TripsTotals",
    "TravelReport",
]
