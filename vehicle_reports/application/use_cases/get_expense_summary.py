"""Use case to build the period expense summary."""

from datetime import date
from decimal import Decimal

from vehicle_reports.application.use_cases.report_scope import (
    ReportUseCase,
    fan_out,
    period_days,
)
from vehicle_reports.domain.models import (
    CategoryBreakdownItem,
    ConsumptionResult,
    ExpenseSummaryRawData,
    ExpenseSummaryReport,
    ExpensesSection,
    KindBreakdownItem,
    RefuelsSection,
    ReportRequest,
    UserPreferences,
)
from vehicle_reports.domain.services.consumption import (
    estimate_consumption,
    summarize_consumption,
)
from vehicle_reports.domain.services.currency import (
    merge_currency_amounts,
    split_foreign_amounts,
    sum_records_count,
    transform_currency_amounts,
)
from vehicle_reports.domain.services.units import (
    from_metric_distance,
    from_metric_volume,
)
from vehicle_reports.utils.decimal_utils import (
    percentage,
    quantize,
    round_money,
    round_price,
    round_whole,
    safe_divide,
)


def _mileage_km(raw: ExpenseSummaryRawData) -> Decimal | None:
    if raw.total_distance_km is not None:
        return raw.total_distance_km
    if raw.min_odometer_km is None or raw.max_odometer_km is None:
        return None
    return max(raw.max_odometer_km - raw.min_odometer_km, Decimal("0"))


def _category_items(
    raw: ExpenseSummaryRawData,
    expenses_cost_hc: Decimal,
) -> list[CategoryBreakdownItem]:
    items = []
    for row in sorted(
        raw.by_category,
        key=lambda item: (-item.total_amount_hc, item.category_code),
    ):
        foreign = merge_currency_amounts(row.foreign_amounts)
        items.append(
            CategoryBreakdownItem(
                category_id=row.category_id,
                category_code=row.category_code,
                category_name=row.category_name,
                total_amount_hc=round_money(row.total_amount_hc),
                records_count_hc=row.records_count_hc,
                percentage_hc=quantize(
                    percentage(row.total_amount_hc, expenses_cost_hc)
                ),
                foreign_currencies=transform_currency_amounts(foreign),
                total_foreign_records_count=sum_records_count(foreign),
            )
        )
    return items


def _kind_items(
    raw: ExpenseSummaryRawData,
    expenses_cost_hc: Decimal,
) -> list[KindBreakdownItem]:
    items = []
    for row in sorted(
        raw.by_kind,
        key=lambda item: (-item.total_amount_hc, item.kind_code),
    ):
        foreign = merge_currency_amounts(row.foreign_amounts)
        items.append(
            KindBreakdownItem(
                kind_id=row.kind_id,
                kind_code=row.kind_code,
                kind_name=row.kind_name,
                category_id=row.category_id,
                category_code=row.category_code,
                total_amount_hc=round_money(row.total_amount_hc),
                records_count_hc=row.records_count_hc,
                percentage_hc=quantize(
                    percentage(row.total_amount_hc, expenses_cost_hc)
                ),
                foreign_currencies=transform_currency_amounts(foreign),
                total_foreign_records_count=sum_records_count(foreign),
            )
        )
    return items


def build_expense_summary(
    date_from: date,
    date_to: date,
    raw: ExpenseSummaryRawData,
    consumption: ConsumptionResult,
    preferences: UserPreferences,
) -> ExpenseSummaryReport:
    """Assemble the expense summary from raw rows and a consumption result.

    Args:
        date_from: First day of the period.
        date_to: Last day of the period.
        raw: Pre-aggregated period rows.
        consumption: Consumption estimate for the period.
        preferences: Units and currency to render into.

    Returns:
        ExpenseSummaryReport: Rounded report.
    """
    days = Decimal(period_days(date_from, date_to))
    total_cost = raw.refuels_cost_hc + raw.expenses_cost_hc
    foreign = split_foreign_amounts(raw.foreign_amounts)

    volume = from_metric_volume(raw.total_volume_liters, preferences.volume_unit)
    mileage = from_metric_distance(_mileage_km(raw), preferences.distance_unit)

    refuels = RefuelsSection(
        total_cost_hc=round_money(raw.refuels_cost_hc),
        records_count_hc=raw.refuels_count_hc,
        total_volume=round_money(volume),
        avg_price_per_volume_hc=round_price(
            safe_divide(raw.refuels_cost_hc, volume)
        ),
        foreign_currencies=transform_currency_amounts(foreign.refuels),
        total_foreign_records_count=sum_records_count(foreign.refuels),
    )
    expenses = ExpensesSection(
        total_cost_hc=round_money(raw.expenses_cost_hc),
        records_count_hc=raw.expenses_count_hc,
        foreign_currencies=transform_currency_amounts(foreign.expenses),
        total_foreign_records_count=sum_records_count(foreign.expenses),
    )
    return ExpenseSummaryReport(
        date_from=date_from,
        date_to=date_to,
        period_days=int(days),
        total_cost_hc=round_money(total_cost),
        refuels_cost_hc=round_money(raw.refuels_cost_hc),
        expenses_cost_hc=round_money(raw.expenses_cost_hc),
        avg_total_cost_per_day_hc=quantize(safe_divide(total_cost, days)),
        avg_refuels_cost_per_day_hc=quantize(
            safe_divide(raw.refuels_cost_hc, days)
        ),
        avg_expenses_cost_per_day_hc=quantize(
            safe_divide(raw.expenses_cost_hc, days)
        ),
        foreign_currency_totals=transform_currency_amounts(foreign.totals),
        total_foreign_records_count=sum_records_count(foreign.totals),
        refuels=refuels,
        expenses=expenses,
        fuel_purchased=round_money(volume),
        refuels_count=raw.refuels_count,
        start_odometer=round_whole(
            from_metric_distance(raw.min_odometer_km, preferences.distance_unit)
        ),
        end_odometer=round_whole(
            from_metric_distance(raw.max_odometer_km, preferences.distance_unit)
        ),
        mileage=round_whole(mileage),
        avg_mileage_per_day=quantize(safe_divide(mileage, days)),
        cost_per_distance_hc=quantize(safe_divide(total_cost, mileage)),
        total_records_count=raw.total_records_count,
        vehicles_count=raw.vehicles_count,
        expenses_by_category=_category_items(raw, raw.expenses_cost_hc),
        expenses_by_kind=_kind_items(raw, raw.expenses_cost_hc),
        consumption=summarize_consumption(consumption, preferences),
        preferences=preferences,
    )


class GetExpenseSummaryUseCase(ReportUseCase):
    """Build the expense summary for a period and vehicle scope."""

    async def execute(self, request: ReportRequest) -> ExpenseSummaryReport:
        """Return the expense summary for ``request``.

        Args:
            request: Account, period and optional vehicle and tag filters.

        Returns:
            ExpenseSummaryReport: Report with the same shape whether or not
            the scope holds data.

        Raises:
            ReportRequestError: If the request is invalid.
            ReportDataFetchError: If a collaborator fails.
        """
        preferences, scope = await self._resolve_scope(request)
        if scope.is_empty:
            self._logger.info(
                f"No vehicles for account {scope.account_id}, "
                "returning empty expense summary"
            )
            return build_expense_summary(
                scope.date_from,
                scope.date_to,
                ExpenseSummaryRawData.empty(),
                ConsumptionResult.empty(),
                preferences,
            )

        raw, data_points, tank_configs = await fan_out(
            self._report_repository.fetch_expense_summary_data(scope),
            self._report_repository.fetch_consumption_data_points(scope),
            self._report_repository.fetch_tank_configs(
                scope.account_id,
                list(scope.vehicle_ids),
            ),
            logger=self._logger,
            description="expense summary data",
        )
        consumption = estimate_consumption(
            data_points,
            tank_configs,
            thresholds=self._thresholds,
            logger=self._logger,
        )
        report = build_expense_summary(
            scope.date_from,
            scope.date_to,
            raw,
            consumption,
            preferences,
        )
        self._logger.info(
            f"Expense summary built for account {scope.account_id}: "
            f"total={report.total_cost_hc} {preferences.home_currency}, "
            f"records={report.total_records_count}"
        )
        return report


__all__ = ["GetExpenseSummaryUseCase", "build_expense_summary"]
