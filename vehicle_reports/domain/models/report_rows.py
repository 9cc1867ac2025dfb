"""Typed raw rows returned by report data collaborators.

All monetary amounts in home currency carry an ``_hc`` suffix. Distances are
kilometers and volumes are liters unless the field name says otherwise.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal


@dataclass(frozen=True)
class CurrencyAmount:
    """Amount and record count for a single currency."""

    currency: str
    amount: Decimal
    records_count: int


@dataclass(frozen=True)
class ForeignAmountRow:
    """Foreign-currency amount split by expense record type."""

    currency: str
    expense_type: int
    amount: Decimal
    records_count: int


@dataclass(frozen=True)
class CategoryBreakdownRow:
    """Expense totals for one expense category."""

    category_id: int
    category_code: str
    category_name: str | None
    total_amount_hc: Decimal
    records_count_hc: int
    foreign_amounts: list[CurrencyAmount] = field(default_factory=list)


@dataclass(frozen=True)
class KindBreakdownRow:
    """Expense totals for one expense kind."""

    kind_id: int
    kind_code: str
    kind_name: str | None
    category_id: int
    category_code: str
    total_amount_hc: Decimal
    records_count_hc: int
    foreign_amounts: list[CurrencyAmount] = field(default_factory=list)


@dataclass(frozen=True)
class ExpenseSummaryRawData:
    """Pre-aggregated rows for a period expense summary."""

    refuels_cost_hc: Decimal
    expenses_cost_hc: Decimal
    refuels_count_hc: int
    expenses_count_hc: int
    foreign_amounts: list[ForeignAmountRow]
    total_volume_liters: Decimal
    refuels_count: int
    min_odometer_km: Decimal | None
    max_odometer_km: Decimal | None
    total_records_count: int
    vehicles_count: int
    by_category: list[CategoryBreakdownRow] = field(default_factory=list)
    by_kind: list[KindBreakdownRow] = field(default_factory=list)
    total_distance_km: Decimal | None = None

    @classmethod
    def empty(cls) -> "ExpenseSummaryRawData":
        """Return zero-valued raw data."""
        return cls(
            refuels_cost_hc=Decimal("0"),
            expenses_cost_hc=Decimal("0"),
            refuels_count_hc=0,
            expenses_count_hc=0,
            foreign_amounts=[],
            total_volume_liters=Decimal("0"),
            refuels_count=0,
            min_odometer_km=None,
            max_odometer_km=None,
            total_records_count=0,
            vehicles_count=0,
        )


@dataclass(frozen=True)
class MonthlyRawRow:
    """Pre-aggregated rows for a single calendar month."""

    month: int
    refuels_cost_hc: Decimal
    expenses_cost_hc: Decimal
    refuels_count_hc: int
    expenses_count_hc: int
    refuels_volume_liters: Decimal
    mileage_km: Decimal | None
    foreign_amounts: list[ForeignAmountRow] = field(default_factory=list)

    @classmethod
    def empty(cls, month: int) -> "MonthlyRawRow":
        """Return a zero-valued row for ``month``."""
        return cls(
            month=month,
            refuels_cost_hc=Decimal("0"),
            expenses_cost_hc=Decimal("0"),
            refuels_count_hc=0,
            expenses_count_hc=0,
            refuels_volume_liters=Decimal("0"),
            mileage_km=None,
        )


@dataclass(frozen=True)
class YearlyRawData:
    """Monthly raw rows for a calendar year."""

    year: int
    months: list[MonthlyRawRow]
    vehicles_count: int


@dataclass(frozen=True)
class TravelRow:
    """Completed trip as stored."""

    travel_id: str
    vehicle_id: str
    first_dttm: datetime | None
    last_dttm: datetime | None
    first_odometer_km: Decimal | None
    last_odometer_km: Decimal | None
    distance_km: Decimal | None
    travel_type: str
    purpose: str | None = None
    destination: str | None = None
    is_round_trip: bool = False
    active_minutes: int | None = None
    total_minutes: int | None = None
    reimbursement_rate: Decimal | None = None
    reimbursement_rate_currency: str | None = None
    calculated_reimbursement: Decimal | None = None

    @property
    def effective_distance_km(self) -> Decimal:
        """Return the stored distance or the odometer difference."""
        if self.distance_km is not None:
            return self.distance_km
        if self.first_odometer_km is None or self.last_odometer_km is None:
            return Decimal("0")
        return max(self.last_odometer_km - self.first_odometer_km, Decimal("0"))


@dataclass(frozen=True)
class LinkedExpenseTotalRow:
    """Totals of records linked to a trip, per expense type."""

    travel_id: str
    expense_type: int
    total_price_hc: Decimal
    total_volume_liters: Decimal
    records_count: int


@dataclass(frozen=True)
class VehicleOdometerRange:
    """Lowest and highest odometer seen for a vehicle in a period."""

    vehicle_id: str
    min_odometer_km: Decimal | None
    max_odometer_km: Decimal | None


@dataclass(frozen=True)
class PeriodExpenseBreakdown:
    """Period totals used by the actual-expense method."""

    refuels_cost_hc: Decimal
    refuels_volume_liters: Decimal
    refuels_count: int
    maintenance_cost_hc: Decimal
    maintenance_count: int
    other_expenses_cost_hc: Decimal
    other_expenses_count: int
    revenues_hc: Decimal
    revenues_count: int

    @classmethod
    def empty(cls) -> "PeriodExpenseBreakdown":
        """Return a zero-valued breakdown."""
        return cls(
            refuels_cost_hc=Decimal("0"),
            refuels_volume_liters=Decimal("0"),
            refuels_count=0,
            maintenance_cost_hc=Decimal("0"),
            maintenance_count=0,
            other_expenses_cost_hc=Decimal("0"),
            other_expenses_count=0,
            revenues_hc=Decimal("0"),
            revenues_count=0,
        )


@dataclass(frozen=True)
class TravelReportRawData:
    """Raw rows for the travel report."""

    travels: list[TravelRow]
    linked_totals: list[LinkedExpenseTotalRow]
    odometer_ranges: list[VehicleOdometerRange]
    period_breakdown: PeriodExpenseBreakdown

    @classmethod
    def empty(cls) -> "TravelReportRawData":
        """Return raw data with no trips and zero totals."""
        return cls(
            travels=[],
            linked_totals=[],
            odometer_ranges=[],
            period_breakdown=PeriodExpenseBreakdown.empty(),
        )


@dataclass(frozen=True)
class TankReading:
    """Record with an odometer reading used to derive consumption intervals.

    Refuels carry the added volume and the full-tank flag; other records
    (checkpoints) only help when they carry a ``fuel_in_tank`` fraction.
    """

    vehicle_id: str
    record_id: str
    odometer_km: Decimal | None
    when_done: date | datetime
    volume_liters: Decimal
    is_full_tank: bool
    tank: str = "main"
    fuel_type: str | None = None
    is_refuel: bool = True
    fuel_in_tank: Decimal | None = None


__all__ = [
    "CurrencyAmount",
    "ForeignAmountRow",
    "CategoryBreakdownRow",
    "KindBreakdownRow",
    "ExpenseSummaryRawData",
    "MonthlyRawRow",
    "YearlyRawData",
    "TravelRow",
    "LinkedExpenseTotalRow",
    "VehicleOdometerRange",
    "PeriodExpenseBreakdown",
    "TravelReportRawData",
    "TankReading",
]
