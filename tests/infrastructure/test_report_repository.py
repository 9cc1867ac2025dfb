"""Tests for the SQLAlchemy report repository."""

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from vehicle_reports.domain.constants import EXPENSE_TYPE_EXPENSE, EXPENSE_TYPE_REFUEL
from vehicle_reports.domain.models import CurrencyAmount, IntervalSource, ReportScope
from vehicle_reports.infrastructure.report_repository import (
    SqlAlchemyReportRepository,
)


class _FakeResult:
    def __init__(self, rows: list[SimpleNamespace]) -> None:
        self._rows = rows

    def all(self):
        return self._rows

    def first(self):
        return self._rows[0] if self._rows else None


class _FakeConnection:
    def __init__(self, routes, calls) -> None:
        self._routes = routes
        self._calls = calls

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def execute(self, query, params=None):
        sql = str(query)
        self._calls.append((sql, params))
        for predicate, rows in self._routes:
            if predicate(sql):
                return _FakeResult(rows)
        raise AssertionError(f"Unexpected query: {sql}")


def _build_db_port(routes) -> tuple[MagicMock, list]:
    calls: list = []
    engine = MagicMock()
    engine.connect.side_effect = lambda: _FakeConnection(routes, calls)
    db_port = MagicMock()
    db_port.get_reports_engine.return_value = engine
    return db_port, calls


def _scope(tag_ids: tuple[str, ...] = ()) -> ReportScope:
    return ReportScope(
        account_id="acc",
        vehicle_ids=("car-1", "car-2"),
        date_from=date(2024, 1, 1),
        date_to=date(2024, 1, 31),
        tag_ids=tag_ids,
    )


def _summary_routes():
    return [
        (
            lambda sql: "AS refuels_count_hc" in sql,
            [
                SimpleNamespace(
                    refuels_cost_hc=Decimal("120"),
                    expenses_cost_hc=Decimal("60"),
                    refuels_count_hc=2,
                    expenses_count_hc=1,
                )
            ],
        ),
        (
            lambda sql: "expense_category_l10n" in sql and "AS currency" in sql,
            [
                SimpleNamespace(
                    category_id=1,
                    category_code="maintenance",
                    category_name="Maintenance",
                    currency="GBP",
                    amount=Decimal("12"),
                    records_count=1,
                ),
                SimpleNamespace(
                    category_id=2,
                    category_code="fees",
                    category_name=None,
                    currency="EUR",
                    amount=Decimal("7"),
                    records_count=2,
                ),
            ],
        ),
        (
            lambda sql: "expense_category_l10n" in sql,
            [
                SimpleNamespace(
                    category_id=1,
                    category_code="maintenance",
                    category_name="Maintenance",
                    amount=Decimal("60"),
                    records_count=1,
                )
            ],
        ),
        (
            lambda sql: "expense_kind_l10n" in sql and "AS currency" in sql,
            [],
        ),
        (
            lambda sql: "expense_kind_l10n" in sql,
            [
                SimpleNamespace(
                    kind_id=11,
                    kind_code="oil",
                    kind_name="Oil change",
                    category_id=1,
                    category_code="maintenance",
                    amount=Decimal("60"),
                    records_count=1,
                )
            ],
        ),
        (
            lambda sql: "AS currency" in sql,
            [
                SimpleNamespace(
                    currency="EUR",
                    expense_type=EXPENSE_TYPE_REFUEL,
                    amount=Decimal("40"),
                    records_count=1,
                )
            ],
        ),
        (
            lambda sql: "total_volume_liters" in sql,
            [SimpleNamespace(total_volume_liters=Decimal("90.5"), refuels_count=3)],
        ),
        (
            lambda sql: "min_odometer_km" in sql,
            [
                SimpleNamespace(
                    vehicle_id="car-1",
                    min_odometer_km=Decimal("1000"),
                    max_odometer_km=Decimal("1800"),
                ),
                SimpleNamespace(
                    vehicle_id="car-2",
                    min_odometer_km=Decimal("500"),
                    max_odometer_km=Decimal("700"),
                ),
            ],
        ),
        (
            lambda sql: "total_records_count" in sql,
            [SimpleNamespace(total_records_count=7, vehicles_count=2)],
        ),
    ]


@pytest.mark.asyncio
async def test_fetch_expense_summary_data_maps_rows():
    """Summary rows should be mapped and merged into domain rows."""
    db_port, _ = _build_db_port(_summary_routes())
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    raw = await repository.fetch_expense_summary_data(_scope())

    assert raw.refuels_cost_hc == Decimal("120")
    assert raw.expenses_count_hc == 1
    assert raw.foreign_amounts[0].currency == "EUR"
    assert raw.total_volume_liters == Decimal("90.5")
    assert raw.min_odometer_km == Decimal("500")
    assert raw.max_odometer_km == Decimal("1800")
    assert raw.total_distance_km == Decimal("1000")
    assert raw.total_records_count == 7
    assert raw.vehicles_count == 2
    assert [row.category_id for row in raw.by_category] == [1, 2]
    assert raw.by_category[0].foreign_amounts == [
        CurrencyAmount("GBP", Decimal("12"), 1)
    ]
    assert raw.by_category[1].total_amount_hc == Decimal("0")
    assert raw.by_category[1].records_count_hc == 0
    assert raw.by_kind[0].kind_name == "Oil change"


@pytest.mark.asyncio
async def test_tag_filter_adds_exists_clause():
    """Tag filters should restrict records through the tag link table."""
    db_port, calls = _build_db_port(_summary_routes())
    repository = SqlAlchemyReportRepository(
        db_port,
        schema="reports",
        logger=MagicMock(),
    )

    await repository.fetch_expense_summary_data(_scope(tag_ids=("t1",)))

    for sql, params in calls:
        assert "reports.expense_expense_tags" in sql
        assert params["tag_ids"] == ["t1"]
        assert params["vehicle_ids"] == ["car-1", "car-2"]
        assert params["date_to"] == datetime(2024, 2, 1)


@pytest.mark.asyncio
async def test_fetch_yearly_data_merges_foreign_only_months():
    """Months with only foreign rows should still be returned."""
    routes = [
        (
            lambda sql: "EXTRACT(MONTH" in sql,
            [
                SimpleNamespace(
                    month=5,
                    currency="EUR",
                    expense_type=EXPENSE_TYPE_EXPENSE,
                    amount=Decimal("15"),
                    records_count=1,
                )
            ],
        ),
        (
            lambda sql: "COUNT(DISTINCT cms.car_id)" in sql,
            [SimpleNamespace(vehicles_count=2)],
        ),
        (
            lambda sql: "car_monthly_summaries" in sql,
            [
                SimpleNamespace(
                    month=2,
                    refuels_cost_hc=Decimal("80"),
                    expenses_cost_hc=Decimal("20"),
                    refuels_count_hc=2,
                    expenses_count_hc=1,
                    refuels_volume_liters=Decimal("55"),
                    mileage_km=None,
                )
            ],
        ),
    ]
    db_port, calls = _build_db_port(routes)
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    raw = await repository.fetch_yearly_data(_scope(), 2024)

    assert [row.month for row in raw.months] == [2, 5]
    assert raw.months[0].mileage_km is None
    assert raw.months[1].foreign_amounts[0].amount == Decimal("15")
    assert raw.vehicles_count == 2
    summary_params = [params for sql, params in calls if "cms.year" in sql]
    assert summary_params[0]["year"] == 2024


@pytest.mark.asyncio
async def test_fetch_yearly_data_ignores_tags_for_foreign_rows():
    """Foreign rows should match the untagged monthly summaries."""
    routes = [
        (lambda sql: "EXTRACT(MONTH" in sql, []),
        (
            lambda sql: "COUNT(DISTINCT cms.car_id)" in sql,
            [SimpleNamespace(vehicles_count=0)],
        ),
        (lambda sql: "car_monthly_summaries" in sql, []),
    ]
    db_port, calls = _build_db_port(routes)
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    await repository.fetch_yearly_data(_scope(tag_ids=("t1",)), 2024)

    sql, params = next(item for item in calls if "EXTRACT(MONTH" in item[0])
    assert "expense_expense_tags" not in sql
    assert "tag_ids" not in params


@pytest.mark.asyncio
async def test_fetch_travel_data_loads_linked_totals_for_trips():
    """Linked totals should be fetched for the returned trips only."""
    routes = [
        (
            lambda sql: "FROM carexpenses.travels" in sql,
            [
                SimpleNamespace(
                    travel_id=42,
                    vehicle_id="car-1",
                    first_dttm=datetime(2024, 1, 5, 8),
                    last_dttm=datetime(2024, 1, 5, 17),
                    first_odometer=Decimal("1000"),
                    last_odometer=Decimal("1250"),
                    distance_km=None,
                    travel_type="business",
                    purpose="Client visit",
                    destination="Boston",
                    is_round_trip=True,
                    active_minutes=200,
                    total_minutes=540,
                    reimbursement_rate=None,
                    reimbursement_rate_currency=None,
                    calculated_reimbursement=None,
                )
            ],
        ),
        (
            lambda sql: "eb.travel_id IN" in sql,
            [
                SimpleNamespace(
                    travel_id=42,
                    expense_type=EXPENSE_TYPE_REFUEL,
                    total_price_hc=Decimal("55"),
                    total_volume_liters=Decimal("35"),
                    records_count=1,
                )
            ],
        ),
        (
            lambda sql: "min_odometer_km" in sql,
            [
                SimpleNamespace(
                    vehicle_id="car-1",
                    min_odometer_km=Decimal("900"),
                    max_odometer_km=Decimal("1900"),
                )
            ],
        ),
        (
            lambda sql: "maintenance_cost_hc" in sql,
            [
                SimpleNamespace(
                    refuels_cost_hc=Decimal("100"),
                    refuels_volume_liters=Decimal("60"),
                    refuels_count=2,
                    maintenance_cost_hc=Decimal("80"),
                    maintenance_count=1,
                    other_expenses_cost_hc=Decimal("20"),
                    other_expenses_count=1,
                    revenues_hc=Decimal("0"),
                    revenues_count=0,
                )
            ],
        ),
    ]
    db_port, calls = _build_db_port(routes)
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    raw = await repository.fetch_travel_data(_scope(tag_ids=("t1",)), ["business"])

    trip = raw.travels[0]
    assert trip.travel_id == "42"
    assert trip.effective_distance_km == Decimal("250")
    assert raw.linked_totals[0].travel_id == "42"
    assert raw.odometer_ranges[0].max_odometer_km == Decimal("1900")
    assert raw.period_breakdown.maintenance_cost_hc == Decimal("80")
    travels_params = next(params for sql, params in calls if "travels t" in sql)
    assert travels_params["travel_types"] == ["business"]
    assert travels_params["status"] == 200
    linked_params = next(params for sql, params in calls if "eb.travel_id IN" in sql)
    assert linked_params == {"travel_ids": ["42"]}
    odometer_params = next(params for sql, params in calls if "min_odometer_km" in sql)
    assert "tag_ids" not in odometer_params


def _reading_row(record_id, odometer, when_done, **overrides) -> SimpleNamespace:
    values = {
        "record_id": record_id,
        "vehicle_id": "car-1",
        "odometer_km": Decimal(odometer),
        "when_done": when_done,
        "expense_type": EXPENSE_TYPE_REFUEL,
        "fuel_in_tank": None,
        "volume_liters": Decimal("0"),
        "is_full_tank": False,
        "tank": "main",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _tank_config_route(capacity: Decimal | None = Decimal("50")):
    return (
        lambda sql: "main_tank_fuel_type" in sql,
        [
            SimpleNamespace(
                vehicle_id="car-1",
                main_tank_fuel_type="gasoline",
                main_tank_volume=capacity,
                addl_tank_fuel_type=None,
                addl_tank_volume=None,
            )
        ],
    )


@pytest.mark.asyncio
async def test_fetch_consumption_data_points_keeps_intervals_in_period():
    """Intervals closing before the period should be left out."""
    routes = [
        (
            lambda sql: "r.is_full_tank" in sql,
            [
                _reading_row(
                    1,
                    "1000",
                    datetime(2023, 12, 1),
                    volume_liters=Decimal("40"),
                    is_full_tank=True,
                ),
                _reading_row(
                    2,
                    "1500",
                    datetime(2023, 12, 20),
                    volume_liters=Decimal("35"),
                    is_full_tank=True,
                ),
                _reading_row(
                    3,
                    "2000",
                    datetime(2024, 1, 10),
                    volume_liters=Decimal("38"),
                    is_full_tank=True,
                ),
            ],
        ),
        _tank_config_route(),
    ]
    db_port, _ = _build_db_port(routes)
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    points = await repository.fetch_consumption_data_points(_scope())

    assert len(points) == 1
    assert points[0].distance_km == Decimal("500")
    assert points[0].fuel_consumed == Decimal("38")


@pytest.mark.asyncio
async def test_fetch_consumption_data_points_uses_checkpoint_tank_levels():
    """Checkpoints with a tank level should split intervals using the capacity."""
    routes = [
        (
            lambda sql: "r.is_full_tank" in sql,
            [
                _reading_row(
                    1,
                    "1000",
                    datetime(2024, 1, 2),
                    volume_liters=Decimal("40"),
                    is_full_tank=True,
                ),
                _reading_row(
                    2,
                    "1300",
                    datetime(2024, 1, 5),
                    expense_type=EXPENSE_TYPE_EXPENSE,
                    fuel_in_tank=Decimal("0.5"),
                    volume_liters=None,
                    is_full_tank=None,
                ),
                _reading_row(
                    3,
                    "1600",
                    datetime(2024, 1, 9),
                    volume_liters=Decimal("40"),
                    is_full_tank=True,
                ),
            ],
        ),
        _tank_config_route(),
    ]
    db_port, _ = _build_db_port(routes)
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    points = await repository.fetch_consumption_data_points(_scope())

    assert [point.fuel_consumed for point in points] == [
        Decimal("25.0"),
        Decimal("15.0"),
    ]
    assert all(point.source is IntervalSource.TANK_PERCENTAGE for point in points)
    assert all(point.mixed_sources for point in points)


@pytest.mark.asyncio
async def test_fetch_consumption_data_points_starts_at_last_known_level():
    """Readings should be bounded below by the last known level before the period."""
    routes = [
        (lambda sql: "r.is_full_tank" in sql, []),
        _tank_config_route(),
    ]
    db_port, calls = _build_db_port(routes)
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    points = await repository.fetch_consumption_data_points(_scope())

    assert points == []
    sql, params = next(item for item in calls if "r.is_full_tank" in item[0])
    assert "MAX(prev.when_done)" in sql
    assert "prev.when_done < :date_from" in sql
    assert "LEFT JOIN carexpenses.refuels r ON r.id = eb.id" in sql
    assert params["date_from"] == datetime(2024, 1, 1)
    assert params["date_to"] == datetime(2024, 2, 1)


@pytest.mark.asyncio
async def test_fetch_tank_configs_maps_rows_and_skips_empty_scope():
    """Tank configs should map columns and not query without vehicles."""
    routes = [
        (
            lambda sql: "main_tank_fuel_type" in sql,
            [
                SimpleNamespace(
                    vehicle_id="car-1",
                    main_tank_fuel_type="gasoline",
                    main_tank_volume=Decimal("50"),
                    addl_tank_fuel_type=None,
                    addl_tank_volume=None,
                )
            ],
        )
    ]
    db_port, calls = _build_db_port(routes)
    repository = SqlAlchemyReportRepository(db_port, logger=MagicMock())

    configs = await repository.fetch_tank_configs("acc", ["car-1"])
    empty = await repository.fetch_tank_configs("acc", [])

    assert configs[0].fuel_type_for("main") == "gasoline"
    assert configs[0].main_capacity == Decimal("50")
    assert empty == []
    assert len(calls) == 1
