"""Use case to build the tax-oriented travel report.

The report carries two alternative deductions: the standard mileage
deduction (tiered rate per deductible distance) and the actual-expense
method (period costs prorated by business-use percentage).
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal

from vehicle_reports.application.use_cases.report_scope import (
    ReportUseCase,
    fan_out,
    period_days,
)
from vehicle_reports.domain.constants import (
    EXPENSE_TYPE_EXPENSE,
    EXPENSE_TYPE_REFUEL,
    EXPENSE_TYPE_REVENUE,
    TRAVEL_TYPES,
)
from vehicle_reports.domain.models import (
    ActualExpenseMethod,
    ConsumptionResult,
    LinkedExpenseTotalRow,
    LinkedTotals,
    PeriodExpenseBreakdown,
    ReportRequest,
    StandardMileageDeduction,
    TravelReport,
    TravelReportRawData,
    TravelRow,
    TravelTypeBreakdown,
    TravelTypeDeduction,
    TripDetail,
    TripsTotals,
    UserPreferences,
    VehicleOdometerRange,
)
from vehicle_reports.domain.policies.jurisdiction import resolve_jurisdiction
from vehicle_reports.domain.policies.reimbursement_rates import (
    JURISDICTION_CURRENCIES,
    JURISDICTION_DISTANCE_UNITS,
    deductible_travel_types,
    get_rate_config,
)
from vehicle_reports.domain.services.consumption import (
    estimate_consumption,
    summarize_consumption,
)
from vehicle_reports.domain.services.reimbursement import calculate_tiered
from vehicle_reports.domain.services.units import (
    from_metric_distance,
    from_metric_volume,
)
from vehicle_reports.domain.services.validation import validate_odometer_range
from vehicle_reports.utils.decimal_utils import (
    percentage,
    quantize,
    round_money,
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def total_distance_in_period(
    odometer_ranges: list[VehicleOdometerRange],
    logger,
) -> Decimal | None:
    """Sum ``max - min`` odometer per vehicle over every record.

    Returns:
        Decimal | None: Kilometers driven, or None when no vehicle has a
        known range.
    """
    known = [
        item
        for item in odometer_ranges
        if item.min_odometer_km is not None and item.max_odometer_km is not None
    ]
    if not known:
        return None
    return sum(
        (
            validate_odometer_range(
                item.vehicle_id,
                item.min_odometer_km,
                item.max_odometer_km,
                logger,
            )
            for item in known
        ),
        _ZERO,
    )


def business_use_percentage(
    filtered_distance: Decimal,
    total_distance: Decimal | None,
) -> Decimal | None:
    """Return the unrounded share of distance driven on filtered trips.

    Args:
        filtered_distance: Distance of the filtered trips.
        total_distance: Distance driven in the period, all usage included.

    Returns:
        Decimal | None: Percentage clamped to 0..100, or None when the total
        is zero or unknown.
    """
    share = percentage(filtered_distance, total_distance)
    if share is None:
        return None
    return min(max(share, _ZERO), _HUNDRED)


def _trips_by_type(
    trips: list[TravelRow],
    filtered_km: Decimal,
    preferences: UserPreferences,
) -> list[TravelTypeBreakdown]:
    counts: dict[str, int] = defaultdict(int)
    distances: dict[str, Decimal] = defaultdict(Decimal)
    for trip in trips:
        counts[trip.travel_type] += 1
        distances[trip.travel_type] += trip.effective_distance_km
    order = {travel_type: index for index, travel_type in enumerate(TRAVEL_TYPES)}
    return [
        TravelTypeBreakdown(
            travel_type=travel_type,
            trips_count=counts[travel_type],
            total_distance=round_money(
                from_metric_distance(distances[travel_type], preferences.distance_unit)
            ),
            percentage_of_filtered=quantize(
                percentage(distances[travel_type], filtered_km)
            ),
        )
        for travel_type in sorted(counts, key=lambda item: (order.get(item, 99), item))
    ]


def standard_mileage_deduction(
    trips: list[TravelRow],
    jurisdiction: str | None,
    year: int,
    logger,
) -> StandardMileageDeduction | None:
    """Compute the tiered deduction per deductible travel type.

    Travel types without a rate table for the year are left out of
    ``by_type``; their distance still counts as eligible.

    Args:
        trips: Filtered trips.
        jurisdiction: Resolved jurisdiction, or None.
        year: Tax year used for the rate lookup.
        logger: Logger used to report missing rate tables.

    Returns:
        StandardMileageDeduction | None: Deduction section, or None when no
        jurisdiction applies.
    """
    if jurisdiction is None:
        return None
    distance_unit = JURISDICTION_DISTANCE_UNITS[jurisdiction]
    currency = JURISDICTION_CURRENCIES[jurisdiction]
    deductible = deductible_travel_types(jurisdiction)

    distances_km: dict[str, Decimal] = defaultdict(Decimal)
    for trip in trips:
        if trip.travel_type in deductible:
            distances_km[trip.travel_type] += trip.effective_distance_km

    eligible = _ZERO
    total = _ZERO
    by_type: list[TravelTypeDeduction] = []
    for travel_type in deductible:
        if travel_type not in distances_km:
            continue
        distance = from_metric_distance(distances_km[travel_type], distance_unit)
        eligible += distance
        rate_config = get_rate_config(year, jurisdiction, travel_type)
        if rate_config is None:
            logger.warning(
                f"No {jurisdiction} reimbursement rate for {travel_type} in {year}"
            )
            continue
        result = calculate_tiered(distance, rate_config)
        total += result.total_reimbursement
        by_type.append(
            TravelTypeDeduction(
                travel_type=travel_type,
                distance=result.distance,
                distance_unit=result.distance_unit,
                currency=result.currency,
                deduction=result.total_reimbursement,
                tier_breakdown=result.breakdown,
            )
        )
    return StandardMileageDeduction(
        jurisdiction=jurisdiction,
        year=year,
        eligible_distance=round_money(eligible),
        distance_unit=distance_unit,
        currency=currency,
        by_type=by_type,
        total_deduction=round_money(total),
    )


def actual_expense_method(
    breakdown: PeriodExpenseBreakdown,
    business_use: Decimal | None,
    preferences: UserPreferences,
) -> ActualExpenseMethod:
    """Prorate period costs by business-use percentage.

    Deductible amounts are None when the business-use percentage is
    unknown.
    """
    total_all = (
        breakdown.refuels_cost_hc
        + breakdown.maintenance_cost_hc
        + breakdown.other_expenses_cost_hc
    )
    deductible_refuels = deductible_maintenance = deductible_other = None
    total_deductible = None
    if business_use is not None:
        share = business_use / _HUNDRED
        deductible_refuels = round_money(breakdown.refuels_cost_hc * share)
        deductible_maintenance = round_money(breakdown.maintenance_cost_hc * share)
        deductible_other = round_money(breakdown.other_expenses_cost_hc * share)
        total_deductible = round_money(total_all * share)
    return ActualExpenseMethod(
        total_refuels_cost_hc=round_money(breakdown.refuels_cost_hc),
        total_refuels_volume=round_money(
            from_metric_volume(breakdown.refuels_volume_liters, preferences.volume_unit)
        ),
        total_maintenance_cost_hc=round_money(breakdown.maintenance_cost_hc),
        total_other_expenses_cost_hc=round_money(breakdown.other_expenses_cost_hc),
        total_all_expenses_cost_hc=round_money(total_all),
        business_use_percentage=quantize(business_use),
        deductible_refuels_cost_hc=deductible_refuels,
        deductible_maintenance_cost_hc=deductible_maintenance,
        deductible_other_expenses_cost_hc=deductible_other,
        total_deductible_cost_hc=total_deductible,
    )


class _LinkedAccumulator:
    """Per-trip totals of linked records."""

    def __init__(self) -> None:
        self.refuels_cost = _ZERO
        self.refuels_volume = _ZERO
        self.refuels_count = 0
        self.expenses_cost = _ZERO
        self.expenses_count = 0
        self.revenues = _ZERO
        self.revenues_count = 0

    def add(self, row: LinkedExpenseTotalRow) -> None:
        if row.expense_type == EXPENSE_TYPE_REFUEL:
            self.refuels_cost += row.total_price_hc
            self.refuels_volume += row.total_volume_liters
            self.refuels_count += row.records_count
        elif row.expense_type == EXPENSE_TYPE_EXPENSE:
            self.expenses_cost += row.total_price_hc
            self.expenses_count += row.records_count
        elif row.expense_type == EXPENSE_TYPE_REVENUE:
            self.revenues += row.total_price_hc
            self.revenues_count += row.records_count


def _trip_sort_key(trip: TravelRow) -> tuple[bool, datetime | None, str]:
    return (trip.first_dttm is None, trip.first_dttm, trip.travel_id)


def build_travel_report(
    date_from: date,
    date_to: date,
    vehicle_ids: list[str],
    travel_types: list[str],
    raw: TravelReportRawData,
    consumption: ConsumptionResult,
    preferences: UserPreferences,
    logger,
) -> TravelReport:
    """Assemble the travel report from raw rows.

    Args:
        date_from: First day of the period.
        date_to: Last day of the period.
        vehicle_ids: Vehicles in scope.
        travel_types: Travel types of the filtered trips; empty keeps all.
        raw: Raw travel rows.
        consumption: Consumption estimate for the period.
        preferences: Units and currency to render into.
        logger: Logger used for data warnings.

    Returns:
        TravelReport: Rounded report.
    """
    unit = preferences.distance_unit
    trips = sorted(
        (
            trip
            for trip in raw.travels
            if not travel_types or trip.travel_type in travel_types
        ),
        key=_trip_sort_key,
    )
    filtered_km = sum((trip.effective_distance_km for trip in trips), _ZERO)
    total_km = total_distance_in_period(raw.odometer_ranges, logger)
    business_use = business_use_percentage(filtered_km, total_km)
    jurisdiction = resolve_jurisdiction(preferences.home_currency)

    trip_ids = {trip.travel_id for trip in trips}
    per_trip: dict[str, _LinkedAccumulator] = defaultdict(_LinkedAccumulator)
    linked = _LinkedAccumulator()
    for row in raw.linked_totals:
        if row.travel_id not in trip_ids:
            continue
        per_trip[row.travel_id].add(row)
        linked.add(row)

    details: list[TripDetail] = []
    for trip in trips:
        trip_linked = per_trip[trip.travel_id]
        details.append(
            TripDetail(
                travel_id=trip.travel_id,
                vehicle_id=trip.vehicle_id,
                started_at=trip.first_dttm,
                ended_at=trip.last_dttm,
                travel_type=trip.travel_type,
                purpose=trip.purpose,
                destination=trip.destination,
                is_round_trip=trip.is_round_trip,
                distance=round_money(
                    from_metric_distance(trip.effective_distance_km, unit)
                ),
                active_minutes=trip.active_minutes,
                total_minutes=trip.total_minutes,
                refuels_cost_hc=round_money(trip_linked.refuels_cost),
                refuels_volume=round_money(
                    from_metric_volume(
                        trip_linked.refuels_volume, preferences.volume_unit
                    )
                ),
                expenses_cost_hc=round_money(trip_linked.expenses_cost),
                revenues_hc=round_money(trip_linked.revenues),
                reimbursement_rate=trip.reimbursement_rate,
                reimbursement_rate_currency=trip.reimbursement_rate_currency,
                calculated_reimbursement=(
                    None
                    if trip.calculated_reimbursement is None
                    else round_money(trip.calculated_reimbursement)
                ),
            )
        )

    trips_totals = TripsTotals(
        trips_count=len(trips),
        total_distance=round_money(from_metric_distance(filtered_km, unit)),
        total_active_minutes=sum(trip.active_minutes or 0 for trip in trips),
        total_minutes=sum(trip.total_minutes or 0 for trip in trips),
        refuels_cost_hc=round_money(linked.refuels_cost),
        refuels_volume=round_money(
            from_metric_volume(linked.refuels_volume, preferences.volume_unit)
        ),
        expenses_cost_hc=round_money(linked.expenses_cost),
        revenues_hc=round_money(linked.revenues),
        calculated_reimbursement=round_money(
            sum((trip.calculated_reimbursement or _ZERO for trip in trips), _ZERO)
        ),
    )
    linked_totals = LinkedTotals(
        refuels_cost_hc=trips_totals.refuels_cost_hc,
        refuels_volume=trips_totals.refuels_volume,
        refuels_count=linked.refuels_count,
        expenses_cost_hc=trips_totals.expenses_cost_hc,
        expenses_count=linked.expenses_count,
        revenues_hc=trips_totals.revenues_hc,
        revenues_count=linked.revenues_count,
    )
    total_distance = from_metric_distance(total_km, unit)
    return TravelReport(
        date_from=date_from,
        date_to=date_to,
        period_days=period_days(date_from, date_to),
        vehicle_ids=list(vehicle_ids),
        vehicles_count=len(vehicle_ids),
        travel_types=list(travel_types),
        total_distance_in_period=(
            None if total_distance is None else round_money(total_distance)
        ),
        filtered_trips_distance=round_money(from_metric_distance(filtered_km, unit)),
        business_use_percentage=quantize(business_use),
        distance_unit=unit,
        trips_by_type=_trips_by_type(trips, filtered_km, preferences),
        standard_mileage_deduction=standard_mileage_deduction(
            trips,
            jurisdiction,
            date_from.year,
            logger,
        ),
        actual_expense_method=actual_expense_method(
            raw.period_breakdown,
            business_use,
            preferences,
        ),
        linked_totals=linked_totals,
        trips=details,
        trips_totals=trips_totals,
        consumption=summarize_consumption(consumption, preferences),
        preferences=preferences,
    )


class GetTravelReportUseCase(ReportUseCase):
    """Build the travel report for a period and vehicle scope."""

    async def execute(self, request: ReportRequest) -> TravelReport:
        """Return the travel report for ``request``.

        Args:
            request: Account, period, optional vehicle and tag filters and
                the travel types to include (empty includes every type).

        Returns:
            TravelReport: Report with the same shape whether or not the scope
            holds data.

        Raises:
            ReportRequestError: If the request is invalid.
            ReportDataFetchError: If a collaborator fails.
        """
        preferences, scope = await self._resolve_scope(request)
        travel_types = [
            travel_type
            for travel_type in TRAVEL_TYPES
            if travel_type in request.travel_types
        ]
        if scope.is_empty:
            self._logger.info(
                f"No vehicles for account {scope.account_id}, "
                "returning empty travel report"
            )
            return build_travel_report(
                scope.date_from,
                scope.date_to,
                [],
                travel_types,
                TravelReportRawData.empty(),
                ConsumptionResult.empty(),
                preferences,
                self._logger,
            )

        raw, data_points, tank_configs = await fan_out(
            self._report_repository.fetch_travel_data(scope, travel_types),
            self._report_repository.fetch_consumption_data_points(scope),
            self._report_repository.fetch_tank_configs(
                scope.account_id,
                list(scope.vehicle_ids),
            ),
            logger=self._logger,
            description="travel report data",
        )
        consumption = estimate_consumption(
            data_points,
            tank_configs,
            thresholds=self._thresholds,
            logger=self._logger,
        )
        report = build_travel_report(
            scope.date_from,
            scope.date_to,
            list(scope.vehicle_ids),
            travel_types,
            raw,
            consumption,
            preferences,
            self._logger,
        )
        self._logger.info(
            f"Travel report built for account {scope.account_id}: "
            f"{report.trips_totals.trips_count} trips, "
            f"business use={report.business_use_percentage}"
        )
        return report


__all__ = [
    "GetTravelReportUseCase",
    "build_travel_report",
    "business_use_percentage",
    "total_distance_in_period",
    "standard_mileage_deduction",
    "actual_expense_method",
]
