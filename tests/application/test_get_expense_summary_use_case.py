"""Tests for the GetExpenseSummaryUseCase."""

import json
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from vehicle_reports.application.errors import ReportDataFetchError
from vehicle_reports.application.use_cases import GetExpenseSummaryUseCase
from vehicle_reports.domain.constants import EXPENSE_TYPE_REFUEL
from vehicle_reports.domain.models import (
    CategoryBreakdownRow,
    ConsumptionDataPoint,
    CurrencyAmount,
    ExpenseSummaryRawData,
    ForeignAmountRow,
    ReportRequest,
)
from vehicle_reports.utils.serialization import report_to_dict

_REQUEST = ReportRequest("acc", date(2024, 1, 1), date(2024, 1, 10))


def _raw() -> ExpenseSummaryRawData:
    return ExpenseSummaryRawData(
        refuels_cost_hc=Decimal("120.00"),
        expenses_cost_hc=Decimal("80.00"),
        refuels_count_hc=2,
        expenses_count_hc=1,
        foreign_amounts=[
            ForeignAmountRow("eur", EXPENSE_TYPE_REFUEL, Decimal("30"), 1),
        ],
        total_volume_liters=Decimal("80"),
        refuels_count=3,
        min_odometer_km=Decimal("10000"),
        max_odometer_km=Decimal("10800"),
        total_records_count=4,
        vehicles_count=1,
        by_category=[
            CategoryBreakdownRow(2, "fees", "Fees", Decimal("20"), 1),
            CategoryBreakdownRow(
                1,
                "maintenance",
                None,
                Decimal("60"),
                1,
                [CurrencyAmount("GBP", Decimal("12.5"), 1)],
            ),
        ],
    )


def _data_points() -> list[ConsumptionDataPoint]:
    return [
        ConsumptionDataPoint("car-1", "gasoline", Decimal("400"), Decimal("32"), 1),
        ConsumptionDataPoint("car-1", "gasoline", Decimal("400"), Decimal("32"), 2),
    ]


def _use_case(ports: dict) -> GetExpenseSummaryUseCase:
    ports["report_repository"].fetch_expense_summary_data = AsyncMock(
        return_value=_raw()
    )
    ports["report_repository"].fetch_consumption_data_points = AsyncMock(
        return_value=_data_points()
    )
    return GetExpenseSummaryUseCase(**ports)


@pytest.mark.asyncio
async def test_execute_builds_rounded_summary(ports):
    """Totals, averages and breakdowns should be derived and rounded."""
    report = await _use_case(ports).execute(_REQUEST)

    assert report.period_days == 10
    assert report.total_cost_hc == Decimal("200.00")
    assert report.avg_total_cost_per_day_hc == Decimal("20.00")
    assert report.refuels.avg_price_per_volume_hc == Decimal("1.500")
    assert report.mileage == Decimal("800")
    assert report.start_odometer == Decimal("10000")
    assert report.avg_mileage_per_day == Decimal("80.00")
    assert report.cost_per_distance_hc == Decimal("0.25")
    assert report.foreign_currency_totals == [
        CurrencyAmount("EUR", Decimal("30.00"), 1)
    ]
    assert report.refuels.total_foreign_records_count == 1
    assert report.expenses.total_foreign_records_count == 0
    assert [item.category_code for item in report.expenses_by_category] == [
        "maintenance",
        "fees",
    ]
    assert [item.percentage_hc for item in report.expenses_by_category] == [
        Decimal("75.00"),
        Decimal("25.00"),
    ]
    assert report.expenses_by_category[0].total_foreign_records_count == 1
    assert report.consumption.by_fuel_type[0].consumption == Decimal("8.00")


@pytest.mark.asyncio
async def test_execute_fetches_with_resolved_scope(ports):
    """Every fetch should receive the same resolved scope."""
    use_case = _use_case(ports)

    await use_case.execute(_REQUEST)

    repository = ports["report_repository"]
    (scope,) = repository.fetch_expense_summary_data.await_args.args
    assert scope.vehicle_ids == ("car-1",)
    repository.fetch_consumption_data_points.assert_awaited_once_with(scope)
    repository.fetch_tank_configs.assert_awaited_once_with("acc", ["car-1"])


@pytest.mark.asyncio
async def test_empty_scope_returns_zero_report_without_fetching(ports):
    """An account without vehicles should get a zeroed report of the same shape."""
    ports["vehicle_repository"].list_vehicle_ids = AsyncMock(return_value=[])
    use_case = _use_case(ports)

    report = await use_case.execute(_REQUEST)

    assert report.total_cost_hc == Decimal("0.00")
    assert report.mileage is None
    assert report.cost_per_distance_hc is None
    assert report.refuels.avg_price_per_volume_hc is None
    assert report.expenses_by_category == []
    assert report.consumption.by_fuel_type == []
    ports["report_repository"].fetch_expense_summary_data.assert_not_called()


@pytest.mark.asyncio
async def test_fetch_failure_raises_without_partial_report(ports):
    """A collaborator error should surface as a fetch error."""
    use_case = _use_case(ports)
    ports["report_repository"].fetch_expense_summary_data = AsyncMock(
        side_effect=RuntimeError("timeout")
    )

    with pytest.raises(ReportDataFetchError):
        await use_case.execute(_REQUEST)


@pytest.mark.asyncio
async def test_identical_inputs_serialize_identically(ports):
    """Running the same request twice should give byte-identical output."""
    use_case = _use_case(ports)

    first = json.dumps(report_to_dict(await use_case.execute(_REQUEST)))
    second = json.dumps(report_to_dict(await use_case.execute(_REQUEST)))

    assert first == second
    assert json.loads(first)["total_cost_hc"] == "200.00"
