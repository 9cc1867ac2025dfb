"""Use case to build the twelve-month breakdown of a calendar year."""

import calendar
from datetime import date
from decimal import Decimal

from vehicle_reports.application.errors import ReportRequestError
from vehicle_reports.application.use_cases.report_scope import (
    ReportUseCase,
    fan_out,
)
from vehicle_reports.domain.models import (
    CarTankConfig,
    ConsumptionDataPoint,
    ConsumptionResult,
    MonthlyRawRow,
    MonthlyReportRow,
    ReportRequest,
    ReportScope,
    UserPreferences,
    YearlyRawData,
    YearlyReport,
    YearTotals,
)
from vehicle_reports.domain.services.consumption import (
    estimate_consumption,
    summarize_consumption,
)
from vehicle_reports.domain.services.currency import (
    CurrencyTotals,
    split_foreign_amounts,
    sum_records_count,
    transform_currency_amounts,
)
from vehicle_reports.domain.services.units import (
    from_metric_distance,
    from_metric_volume,
)
from vehicle_reports.utils.decimal_utils import (
    quantize,
    round_money,
    round_whole,
    safe_divide,
)

MONTHS = range(1, 13)


def month_scope(scope: ReportScope, year: int, month: int) -> ReportScope:
    """Return ``scope`` narrowed to one calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return scope.for_period(date(year, month, 1), date(year, month, last_day))


def _complete_months(raw: YearlyRawData) -> list[MonthlyRawRow]:
    by_month = {row.month: row for row in raw.months if row.month in MONTHS}
    return [by_month.get(month) or MonthlyRawRow.empty(month) for month in MONTHS]


def build_yearly_report(
    year: int,
    raw: YearlyRawData,
    year_consumption: ConsumptionResult,
    monthly_consumption: dict[int, ConsumptionResult],
    preferences: UserPreferences,
) -> YearlyReport:
    """Assemble the annual breakdown.

    Months are emitted in calendar order whatever order the raw rows and
    consumption results arrived in; months without data are zero rows.

    Args:
        year: Calendar year.
        raw: Monthly raw rows.
        year_consumption: Consumption estimate for the whole year.
        monthly_consumption: Consumption estimate per month number.
        preferences: Units and currency to render into.

    Returns:
        YearlyReport: Rounded report.
    """
    refuels_totals = CurrencyTotals()
    expenses_totals = CurrencyTotals()
    combined_totals = CurrencyTotals()
    year_volume_liters = Decimal("0")
    year_mileage_km: Decimal | None = None
    months: list[MonthlyReportRow] = []

    for row in _complete_months(raw):
        foreign = split_foreign_amounts(row.foreign_amounts)
        refuels_totals.add_home(row.refuels_cost_hc, row.refuels_count_hc)
        refuels_totals.add_foreign(foreign.refuels)
        expenses_totals.add_home(row.expenses_cost_hc, row.expenses_count_hc)
        expenses_totals.add_foreign(foreign.expenses)
        combined_totals.add_foreign(foreign.totals)
        year_volume_liters += row.refuels_volume_liters
        if row.mileage_km is not None:
            year_mileage_km = (year_mileage_km or Decimal("0")) + row.mileage_km

        total_cost = row.refuels_cost_hc + row.expenses_cost_hc
        mileage = from_metric_distance(row.mileage_km, preferences.distance_unit)
        months.append(
            MonthlyReportRow(
                month=row.month,
                refuels_cost_hc=round_money(row.refuels_cost_hc),
                expenses_cost_hc=round_money(row.expenses_cost_hc),
                total_cost_hc=round_money(total_cost),
                refuels_count=row.refuels_count_hc,
                expenses_count=row.expenses_count_hc,
                refuels_volume=round_money(
                    from_metric_volume(
                        row.refuels_volume_liters, preferences.volume_unit
                    )
                ),
                mileage=round_whole(mileage),
                cost_per_distance_hc=quantize(safe_divide(total_cost, mileage)),
                foreign_refuels=transform_currency_amounts(foreign.refuels),
                foreign_expenses=transform_currency_amounts(foreign.expenses),
                foreign_currency_totals=transform_currency_amounts(foreign.totals),
                total_foreign_records_count=sum_records_count(foreign.totals),
                consumption=summarize_consumption(
                    monthly_consumption.get(row.month, ConsumptionResult.empty()),
                    preferences,
                ),
            )
        )

    year_cost = refuels_totals.home_amount + expenses_totals.home_amount
    year_mileage = from_metric_distance(year_mileage_km, preferences.distance_unit)
    totals = YearTotals(
        refuels_cost_hc=round_money(refuels_totals.home_amount),
        expenses_cost_hc=round_money(expenses_totals.home_amount),
        total_cost_hc=round_money(year_cost),
        refuels_count=refuels_totals.home_records_count,
        expenses_count=expenses_totals.home_records_count,
        refuels_volume=round_money(
            from_metric_volume(year_volume_liters, preferences.volume_unit)
        ),
        mileage=round_whole(year_mileage),
        cost_per_distance_hc=quantize(safe_divide(year_cost, year_mileage)),
        foreign_refuels=refuels_totals.foreign_amounts(),
        foreign_expenses=expenses_totals.foreign_amounts(),
        foreign_currency_totals=combined_totals.foreign_amounts(),
        total_foreign_records_count=combined_totals.foreign_records_count,
    )
    return YearlyReport(
        year=year,
        months=months,
        totals=totals,
        consumption=summarize_consumption(year_consumption, preferences),
        vehicles_count=raw.vehicles_count,
        preferences=preferences,
    )


class GetYearlyReportUseCase(ReportUseCase):
    """Build the annual breakdown for a vehicle scope."""

    async def execute(self, request: ReportRequest) -> YearlyReport:
        """Return the twelve-month breakdown of the request's year.

        Args:
            request: Request spanning one calendar year, usually built with
                ``ReportRequest.for_year``.

        Returns:
            YearlyReport: Report with twelve month rows.

        Raises:
            ReportRequestError: If the request is not exactly one calendar
                year.
            ReportDataFetchError: If a collaborator fails.
        """
        year = request.date_from.year
        if (request.date_from, request.date_to) != (
            date(year, 1, 1),
            date(year, 12, 31),
        ):
            raise ReportRequestError(
                f"Yearly report must cover January 1 to December 31, got "
                f"{request.date_from} to {request.date_to}"
            )
        preferences, scope = await self._resolve_scope(request)
        if scope.is_empty:
            self._logger.info(
                f"No vehicles for account {scope.account_id}, "
                f"returning empty yearly report for {year}"
            )
            return build_yearly_report(
                year,
                YearlyRawData(year=year, months=[], vehicles_count=0),
                ConsumptionResult.empty(),
                {},
                preferences,
            )

        repository = self._report_repository
        results = await fan_out(
            repository.fetch_yearly_data(scope, year),
            repository.fetch_consumption_data_points(scope),
            repository.fetch_tank_configs(scope.account_id, list(scope.vehicle_ids)),
            *(
                repository.fetch_consumption_data_points(
                    month_scope(scope, year, month)
                )
                for month in MONTHS
            ),
            logger=self._logger,
            description=f"yearly data for {year}",
        )
        raw: YearlyRawData = results[0]
        year_points: list[ConsumptionDataPoint] = results[1]
        tank_configs: list[CarTankConfig] = results[2]
        monthly_points: list[list[ConsumptionDataPoint]] = results[3:]

        year_consumption = estimate_consumption(
            year_points,
            tank_configs,
            thresholds=self._thresholds,
            logger=self._logger,
        )
        monthly_consumption = {
            month: estimate_consumption(
                points,
                tank_configs,
                thresholds=self._thresholds,
                logger=self._logger,
            )
            for month, points in zip(MONTHS, monthly_points)
        }
        report = build_yearly_report(
            year,
            raw,
            year_consumption,
            monthly_consumption,
            preferences,
        )
        self._logger.info(
            f"Yearly report built for account {scope.account_id}, year {year}: "
            f"total={report.totals.total_cost_hc} {preferences.home_currency}"
        )
        return report


__all__ = [
    "GetYearlyReportUseCase",
    "build_yearly_report",
    "month_scope",
]
