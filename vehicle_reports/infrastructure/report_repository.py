"""SQLAlchemy repository returning pre-aggregated report rows."""

import asyncio
from collections import defaultdict
from datetime import date, datetime, time, timedelta

from sqlalchemy import bindparam, text
from sqlalchemy.sql.elements import TextClause

from vehicle_reports.application.ports.database import DatabaseEnginePort
from vehicle_reports.application.ports.report_repository import (
    ReportRepositoryPort,
)
from vehicle_reports.domain.constants import (
    EXPENSE_TYPE_EXPENSE,
    EXPENSE_TYPE_REFUEL,
    EXPENSE_TYPE_REVENUE,
    TRAVEL_STATUS_COMPLETED,
)
from vehicle_reports.domain.models import (
    CarTankConfig,
    CategoryBreakdownRow,
    ConsumptionDataPoint,
    CurrencyAmount,
    ExpenseSummaryRawData,
    ForeignAmountRow,
    KindBreakdownRow,
    LinkedExpenseTotalRow,
    MonthlyRawRow,
    PeriodExpenseBreakdown,
    ReportScope,
    TankReading,
    TravelReportRawData,
    TravelRow,
    VehicleOdometerRange,
    YearlyRawData,
)
from vehicle_reports.domain.services.consumption import build_consumption_intervals
from vehicle_reports.infrastructure.logging.logger import get_app_logger
from vehicle_reports.utils.decimal_utils import (
    coerce_decimal,
    coerce_optional_decimal,
)


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _end_exclusive(day: date) -> datetime:
    return datetime.combine(day + timedelta(days=1), time.min)


class SqlAlchemyReportRepository(ReportRepositoryPort):
    """Repository backed by the expenses database.

    Every read filters on the account, the scope's vehicles and records not
    marked as removed. Amounts with a home-currency price are home-currency
    rows; the others are grouped by the currency they were paid in.
    """

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        schema: str = "carexpenses",
        logger=None,
    ) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the async engine.
            schema: Schema holding the expense tables.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._schema = schema
        self._logger = logger or get_app_logger()

    async def _fetch_all(self, query: TextClause, params: dict) -> list:
        engine = self._db_port.get_reports_engine()
        async with engine.connect() as conn:
            result = await conn.execute(query, params)
            return list(result.all())

    async def _fetch_one(self, query: TextClause, params: dict):
        rows = await self._fetch_all(query, params)
        return rows[0] if rows else None

    @staticmethod
    def _text(sql: str, params: dict) -> TextClause:
        query = text(sql)
        expanding = [
            bindparam(name, expanding=True)
            for name, value in params.items()
            if isinstance(value, list)
        ]
        if expanding:
            query = query.bindparams(*expanding)
        return query

    def _base_where(self, scope: ReportScope) -> tuple[str, dict]:
        """Return the expense_bases filter for a scope and its parameters."""
        conditions = [
            "eb.account_id = :account_id",
            "eb.car_id IN :vehicle_ids",
            "eb.when_done >= :date_from",
            "eb.when_done < :date_to",
            "eb.removed_at IS NULL",
        ]
        params = {
            "account_id": scope.account_id,
            "vehicle_ids": list(scope.vehicle_ids),
            "date_from": _start_of(scope.date_from),
            "date_to": _end_exclusive(scope.date_to),
        }
        if scope.tag_ids:
            conditions.append(
                f"""EXISTS (
                    SELECT 1 FROM {self._schema}.expense_expense_tags eet
                    WHERE eet.expense_id = eb.id
                    AND eet.expense_tag_id IN :tag_ids
                )"""
            )
            params["tag_ids"] = list(scope.tag_ids)
        return "WHERE " + " AND ".join(conditions), params

    async def fetch_expense_summary_data(
        self,
        scope: ReportScope,
    ) -> ExpenseSummaryRawData:
        (
            totals,
            foreign,
            fuel,
            mileage,
            counts,
            category_hc,
            category_foreign,
            kind_hc,
            kind_foreign,
        ) = await asyncio.gather(
            self._fetch_one(*self._totals_hc_query(scope)),
            self._fetch_all(*self._foreign_totals_query(scope)),
            self._fetch_one(*self._fuel_totals_query(scope)),
            self._fetch_all(*self._odometer_ranges_query(scope)),
            self._fetch_one(*self._record_counts_query(scope)),
            self._fetch_all(*self._category_query(scope, foreign=False)),
            self._fetch_all(*self._category_query(scope, foreign=True)),
            self._fetch_all(*self._kind_query(scope, foreign=False)),
            self._fetch_all(*self._kind_query(scope, foreign=True)),
        )
        ranges = [self._map_odometer_range(row) for row in mileage]
        known = [
            item
            for item in ranges
            if item.min_odometer_km is not None and item.max_odometer_km is not None
        ]
        return ExpenseSummaryRawData(
            refuels_cost_hc=coerce_decimal(totals.refuels_cost_hc if totals else 0),
            expenses_cost_hc=coerce_decimal(totals.expenses_cost_hc if totals else 0),
            refuels_count_hc=int(totals.refuels_count_hc if totals else 0),
            expenses_count_hc=int(totals.expenses_count_hc if totals else 0),
            foreign_amounts=[self._map_foreign(row) for row in foreign],
            total_volume_liters=coerce_decimal(fuel.total_volume_liters if fuel else 0),
            refuels_count=int(fuel.refuels_count if fuel else 0),
            min_odometer_km=min(
                (item.min_odometer_km for item in known), default=None
            ),
            max_odometer_km=max(
                (item.max_odometer_km for item in known), default=None
            ),
            total_records_count=int(counts.total_records_count if counts else 0),
            vehicles_count=int(counts.vehicles_count if counts else 0),
            by_category=self._merge_categories(category_hc, category_foreign),
            by_kind=self._merge_kinds(kind_hc, kind_foreign),
            total_distance_km=(
                sum(
                    (
                        max(item.max_odometer_km - item.min_odometer_km, 0)
                        for item in known
                    ),
                    coerce_decimal(0),
                )
                if known
                else None
            ),
        )

    def _totals_hc_query(self, scope: ReportScope) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope)
        sql = f"""
            SELECT
                COALESCE(SUM(CASE WHEN eb.expense_type = {EXPENSE_TYPE_REFUEL}
                    THEN eb.total_price_in_hc ELSE 0 END), 0) AS refuels_cost_hc,
                COALESCE(SUM(CASE WHEN eb.expense_type = {EXPENSE_TYPE_EXPENSE}
                    THEN eb.total_price_in_hc ELSE 0 END), 0) AS expenses_cost_hc,
                COUNT(CASE WHEN eb.expense_type = {EXPENSE_TYPE_REFUEL}
                    THEN 1 END) AS refuels_count_hc,
                COUNT(CASE WHEN eb.expense_type = {EXPENSE_TYPE_EXPENSE}
                    THEN 1 END) AS expenses_count_hc
            FROM {self._schema}.expense_bases eb
            {where}
              AND eb.total_price_in_hc IS NOT NULL
        """
        return self._text(sql, params), params

    def _foreign_totals_query(self, scope: ReportScope) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope)
        sql = f"""
            SELECT
                eb.paid_in_currency AS currency,
                eb.expense_type AS expense_type,
                COALESCE(SUM(eb.total_price), 0) AS amount,
                COUNT(*) AS records_count
            FROM {self._schema}.expense_bases eb
            {where}
              AND eb.total_price_in_hc IS NULL
              AND eb.paid_in_currency IS NOT NULL
            GROUP BY eb.paid_in_currency, eb.expense_type
        """
        return self._text(sql, params), params

    def _fuel_totals_query(self, scope: ReportScope) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope)
        sql = f"""
            SELECT
                COALESCE(SUM(r.refuel_volume), 0) AS total_volume_liters,
                COUNT(*) AS refuels_count
            FROM {self._schema}.expense_bases eb
            INNER JOIN {self._schema}.refuels r ON r.id = eb.id
            {where}
              AND eb.expense_type = {EXPENSE_TYPE_REFUEL}
        """
        return self._text(sql, params), params

    def _odometer_ranges_query(
        self,
        scope: ReportScope,
        with_tags: bool = True,
    ) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope if with_tags else scope.without_tags())
        sql = f"""
            SELECT
                eb.car_id AS vehicle_id,
                MIN(eb.odometer) AS min_odometer_km,
                MAX(eb.odometer) AS max_odometer_km
            FROM {self._schema}.expense_bases eb
            {where}
              AND eb.odometer IS NOT NULL
            GROUP BY eb.car_id
        """
        return self._text(sql, params), params

    def _record_counts_query(self, scope: ReportScope) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope)
        sql = f"""
            SELECT
                COUNT(*) AS total_records_count,
                COUNT(DISTINCT eb.car_id) AS vehicles_count
            FROM {self._schema}.expense_bases eb
            {where}
        """
        return self._text(sql, params), params

    def _category_query(
        self,
        scope: ReportScope,
        foreign: bool,
    ) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope)
        params["lang"] = scope.lang
        currency_column = "eb.paid_in_currency AS currency," if foreign else ""
        amount = "eb.total_price" if foreign else "eb.total_price_in_hc"
        price_filter = "IS NULL" if foreign else "IS NOT NULL"
        group_currency = ", eb.paid_in_currency" if foreign else ""
        sql = f"""
            SELECT
                ek.expense_category_id AS category_id,
                ec.code AS category_code,
                COALESCE(ecl.name, ec.code) AS category_name,
                {currency_column}
                COALESCE(SUM({amount}), 0) AS amount,
                COUNT(*) AS records_count
            FROM {self._schema}.expense_bases eb
            INNER JOIN {self._schema}.expenses e ON e.id = eb.id
            INNER JOIN {self._schema}.expense_kinds ek ON ek.id = e.kind_id
            INNER JOIN {self._schema}.expense_categories ec
                ON ec.id = ek.expense_category_id
            LEFT JOIN {self._schema}.expense_category_l10n ecl
                ON ecl.expense_category_id = ec.id AND ecl.lang = :lang
            {where}
              AND eb.expense_type = {EXPENSE_TYPE_EXPENSE}
              AND eb.total_price_in_hc {price_filter}
            GROUP BY ek.expense_category_id, ec.code, ecl.name{group_currency}
        """
        return self._text(sql, params), params

    def _kind_query(
        self,
        scope: ReportScope,
        foreign: bool,
    ) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope)
        params["lang"] = scope.lang
        currency_column = "eb.paid_in_currency AS currency," if foreign else ""
        amount = "eb.total_price" if foreign else "eb.total_price_in_hc"
        price_filter = "IS NULL" if foreign else "IS NOT NULL"
        group_currency = ", eb.paid_in_currency" if foreign else ""
        sql = f"""
            SELECT
                ek.id AS kind_id,
                ek.code AS kind_code,
                COALESCE(ekl.name, ek.code) AS kind_name,
                ek.expense_category_id AS category_id,
                ec.code AS category_code,
                {currency_column}
                COALESCE(SUM({amount}), 0) AS amount,
                COUNT(*) AS records_count
            FROM {self._schema}.expense_bases eb
            INNER JOIN {self._schema}.expenses e ON e.id = eb.id
            INNER JOIN {self._schema}.expense_kinds ek ON ek.id = e.kind_id
            INNER JOIN {self._schema}.expense_categories ec
                ON ec.id = ek.expense_category_id
            LEFT JOIN {self._schema}.expense_kind_l10n ekl
                ON ekl.expense_kind_id = ek.id AND ekl.lang = :lang
            {where}
              AND eb.expense_type = {EXPENSE_TYPE_EXPENSE}
              AND eb.total_price_in_hc {price_filter}
            GROUP BY ek.id, ek.code, ekl.name, ek.expense_category_id, ec.code
                {group_currency}
        """
        return self._text(sql, params), params

    @staticmethod
    def _map_foreign(row) -> ForeignAmountRow:
        return ForeignAmountRow(
            currency=row.currency,
            expense_type=int(row.expense_type),
            amount=coerce_decimal(row.amount),
            records_count=int(row.records_count),
        )

    @staticmethod
    def _map_odometer_range(row) -> VehicleOdometerRange:
        return VehicleOdometerRange(
            vehicle_id=str(row.vehicle_id),
            min_odometer_km=coerce_optional_decimal(row.min_odometer_km),
            max_odometer_km=coerce_optional_decimal(row.max_odometer_km),
        )

    @staticmethod
    def _merge_categories(hc_rows, foreign_rows) -> list[CategoryBreakdownRow]:
        """Combine home-currency and foreign rows per category."""
        meta: dict[int, tuple[str, str | None]] = {}
        totals: dict[int, tuple] = {}
        foreign: dict[int, list[CurrencyAmount]] = defaultdict(list)
        for row in hc_rows:
            category_id = int(row.category_id)
            meta[category_id] = (row.category_code, row.category_name)
            totals[category_id] = (coerce_decimal(row.amount), int(row.records_count))
        for row in foreign_rows:
            category_id = int(row.category_id)
            meta.setdefault(category_id, (row.category_code, row.category_name))
            foreign[category_id].append(
                CurrencyAmount(
                    currency=row.currency,
                    amount=coerce_decimal(row.amount),
                    records_count=int(row.records_count),
                )
            )
        merged = []
        for category_id in sorted(meta):
            code, name = meta[category_id]
            amount, count = totals.get(category_id, (coerce_decimal(0), 0))
            merged.append(
                CategoryBreakdownRow(
                    category_id=category_id,
                    category_code=code,
                    category_name=name,
                    total_amount_hc=amount,
                    records_count_hc=count,
                    foreign_amounts=foreign.get(category_id, []),
                )
            )
        return merged

    @staticmethod
    def _merge_kinds(hc_rows, foreign_rows) -> list[KindBreakdownRow]:
        """Combine home-currency and foreign rows per expense kind."""
        meta: dict[int, tuple[str, str | None, int, str]] = {}
        totals: dict[int, tuple] = {}
        foreign: dict[int, list[CurrencyAmount]] = defaultdict(list)
        for row in hc_rows:
            kind_id = int(row.kind_id)
            meta[kind_id] = (
                row.kind_code,
                row.kind_name,
                int(row.category_id),
                row.category_code,
            )
            totals[kind_id] = (coerce_decimal(row.amount), int(row.records_count))
        for row in foreign_rows:
            kind_id = int(row.kind_id)
            meta.setdefault(
                kind_id,
                (
                    row.kind_code,
                    row.kind_name,
                    int(row.category_id),
                    row.category_code,
                ),
            )
            foreign[kind_id].append(
                CurrencyAmount(
                    currency=row.currency,
                    amount=coerce_decimal(row.amount),
                    records_count=int(row.records_count),
                )
            )
        merged = []
        for kind_id in sorted(meta):
            code, name, category_id, category_code = meta[kind_id]
            amount, count = totals.get(kind_id, (coerce_decimal(0), 0))
            merged.append(
                KindBreakdownRow(
                    kind_id=kind_id,
                    kind_code=code,
                    kind_name=name,
                    category_id=category_id,
                    category_code=category_code,
                    total_amount_hc=amount,
                    records_count_hc=count,
                    foreign_amounts=foreign.get(kind_id, []),
                )
            )
        return merged

    async def fetch_yearly_data(
        self,
        scope: ReportScope,
        year: int,
    ) -> YearlyRawData:
        params = {
            "account_id": scope.account_id,
            "vehicle_ids": list(scope.vehicle_ids),
            "year": year,
        }
        summary_where = """
            WHERE c.account_id = :account_id
              AND cms.car_id IN :vehicle_ids
              AND cms.year = :year
              AND c.removed_at IS NULL
        """
        monthly_sql = f"""
            SELECT
                cms.month AS month,
                COALESCE(SUM(cms.refuels_cost), 0) AS refuels_cost_hc,
                COALESCE(SUM(cms.expenses_cost), 0) AS expenses_cost_hc,
                COALESCE(SUM(cms.refuels_count), 0) AS refuels_count_hc,
                COALESCE(SUM(cms.expenses_count), 0) AS expenses_count_hc,
                COALESCE(SUM(cms.refuels_volume), 0) AS refuels_volume_liters,
                SUM(CASE
                    WHEN cms.start_mileage IS NOT NULL AND cms.end_mileage IS NOT NULL
                    THEN cms.end_mileage - cms.start_mileage
                END) AS mileage_km
            FROM {self._schema}.car_monthly_summaries cms
            INNER JOIN {self._schema}.cars c ON c.id = cms.car_id
            {summary_where}
            GROUP BY cms.month
            ORDER BY cms.month
        """
        vehicles_sql = f"""
            SELECT COUNT(DISTINCT cms.car_id) AS vehicles_count
            FROM {self._schema}.car_monthly_summaries cms
            INNER JOIN {self._schema}.cars c ON c.id = cms.car_id
            {summary_where}
        """
        # Monthly summaries are not tagged, so foreign rows ignore tags too.
        where, foreign_params = self._base_where(scope.without_tags())
        foreign_sql = f"""
            SELECT
                EXTRACT(MONTH FROM eb.when_done)::INTEGER AS month,
                eb.paid_in_currency AS currency,
                eb.expense_type AS expense_type,
                COALESCE(SUM(eb.total_price), 0) AS amount,
                COUNT(*) AS records_count
            FROM {self._schema}.expense_bases eb
            {where}
              AND eb.total_price_in_hc IS NULL
              AND eb.paid_in_currency IS NOT NULL
            GROUP BY EXTRACT(MONTH FROM eb.when_done), eb.paid_in_currency,
                eb.expense_type
        """
        monthly_rows, vehicles_row, foreign_rows = await asyncio.gather(
            self._fetch_all(self._text(monthly_sql, params), params),
            self._fetch_one(self._text(vehicles_sql, params), params),
            self._fetch_all(self._text(foreign_sql, foreign_params), foreign_params),
        )
        foreign_by_month: dict[int, list[ForeignAmountRow]] = defaultdict(list)
        for row in foreign_rows:
            foreign_by_month[int(row.month)].append(self._map_foreign(row))
        months = {
            int(row.month): MonthlyRawRow(
                month=int(row.month),
                refuels_cost_hc=coerce_decimal(row.refuels_cost_hc),
                expenses_cost_hc=coerce_decimal(row.expenses_cost_hc),
                refuels_count_hc=int(row.refuels_count_hc),
                expenses_count_hc=int(row.expenses_count_hc),
                refuels_volume_liters=coerce_decimal(row.refuels_volume_liters),
                mileage_km=coerce_optional_decimal(row.mileage_km),
                foreign_amounts=foreign_by_month.get(int(row.month), []),
            )
            for row in monthly_rows
        }
        for month, foreign in foreign_by_month.items():
            if month not in months:
                empty = MonthlyRawRow.empty(month)
                months[month] = MonthlyRawRow(
                    month=month,
                    refuels_cost_hc=empty.refuels_cost_hc,
                    expenses_cost_hc=empty.expenses_cost_hc,
                    refuels_count_hc=0,
                    expenses_count_hc=0,
                    refuels_volume_liters=empty.refuels_volume_liters,
                    mileage_km=None,
                    foreign_amounts=foreign,
                )
        return YearlyRawData(
            year=year,
            months=[months[month] for month in sorted(months)],
            vehicles_count=int(vehicles_row.vehicles_count if vehicles_row else 0),
        )

    async def fetch_travel_data(
        self,
        scope: ReportScope,
        travel_types: list[str],
    ) -> TravelReportRawData:
        travels, odometer_rows, breakdown_row = await asyncio.gather(
            self._fetch_all(*self._travels_query(scope, travel_types)),
            self._fetch_all(*self._odometer_ranges_query(scope, with_tags=False)),
            self._fetch_one(*self._period_breakdown_query(scope)),
        )
        travel_rows = [self._map_travel(row) for row in travels]
        linked_rows = []
        if travel_rows:
            linked_rows = await self._fetch_all(
                *self._linked_totals_query([row.travel_id for row in travel_rows])
            )
        self._logger.info(
            f"Fetched {len(travel_rows)} trips for account {scope.account_id}"
        )
        return TravelReportRawData(
            travels=travel_rows,
            linked_totals=[
                LinkedExpenseTotalRow(
                    travel_id=str(row.travel_id),
                    expense_type=int(row.expense_type),
                    total_price_hc=coerce_decimal(row.total_price_hc),
                    total_volume_liters=coerce_decimal(row.total_volume_liters),
                    records_count=int(row.records_count),
                )
                for row in linked_rows
            ],
            odometer_ranges=[self._map_odometer_range(row) for row in odometer_rows],
            period_breakdown=self._map_breakdown(breakdown_row),
        )

    def _travels_query(
        self,
        scope: ReportScope,
        travel_types: list[str],
    ) -> tuple[TextClause, dict]:
        conditions = [
            "t.account_id = :account_id",
            "t.car_id IN :vehicle_ids",
            "t.removed_at IS NULL",
            "t.status = :status",
            "t.first_dttm >= :date_from",
            "t.first_dttm < :date_to",
        ]
        params = {
            "account_id": scope.account_id,
            "vehicle_ids": list(scope.vehicle_ids),
            "status": TRAVEL_STATUS_COMPLETED,
            "date_from": _start_of(scope.date_from),
            "date_to": _end_exclusive(scope.date_to),
        }
        if travel_types:
            conditions.append("t.travel_type IN :travel_types")
            params["travel_types"] = list(travel_types)
        if scope.tag_ids:
            conditions.append(
                f"""EXISTS (
                    SELECT 1 FROM {self._schema}.travel_expense_tags tet
                    WHERE tet.travel_id = t.id
                    AND tet.expense_tag_id IN :tag_ids
                )"""
            )
            params["tag_ids"] = list(scope.tag_ids)
        sql = f"""
            SELECT
                t.id AS travel_id,
                t.car_id AS vehicle_id,
                t.first_dttm,
                t.last_dttm,
                t.first_odometer,
                t.last_odometer,
                t.distance_km,
                t.travel_type,
                t.purpose,
                t.destination,
                t.is_round_trip,
                t.active_minutes,
                t.total_minutes,
                t.reimbursement_rate,
                t.reimbursement_rate_currency,
                t.calculated_reimbursement
            FROM {self._schema}.travels t
            WHERE {" AND ".join(conditions)}
            ORDER BY t.first_dttm, t.id
        """
        return self._text(sql, params), params

    def _linked_totals_query(self, travel_ids: list[str]) -> tuple[TextClause, dict]:
        params = {"travel_ids": travel_ids}
        sql = f"""
            SELECT
                eb.travel_id AS travel_id,
                eb.expense_type AS expense_type,
                COALESCE(SUM(eb.total_price_in_hc), 0) AS total_price_hc,
                COALESCE(SUM(r.refuel_volume), 0) AS total_volume_liters,
                COUNT(*) AS records_count
            FROM {self._schema}.expense_bases eb
            LEFT JOIN {self._schema}.refuels r ON r.id = eb.id
            WHERE eb.travel_id IN :travel_ids
              AND eb.removed_at IS NULL
              AND eb.expense_type IN (
                  {EXPENSE_TYPE_REFUEL}, {EXPENSE_TYPE_EXPENSE}, {EXPENSE_TYPE_REVENUE}
              )
            GROUP BY eb.travel_id, eb.expense_type
        """
        return self._text(sql, params), params

    def _period_breakdown_query(self, scope: ReportScope) -> tuple[TextClause, dict]:
        where, params = self._base_where(scope.without_tags())
        sql = f"""
            SELECT
                COALESCE(SUM(CASE WHEN eb.expense_type = {EXPENSE_TYPE_REFUEL}
                    THEN eb.total_price_in_hc ELSE 0 END), 0) AS refuels_cost_hc,
                COALESCE(SUM(CASE WHEN eb.expense_type = {EXPENSE_TYPE_REFUEL}
                    THEN r.refuel_volume ELSE 0 END), 0) AS refuels_volume_liters,
                COUNT(CASE WHEN eb.expense_type = {EXPENSE_TYPE_REFUEL}
                    THEN 1 END) AS refuels_count,
                COALESCE(SUM(CASE WHEN eb.expense_type = {EXPENSE_TYPE_EXPENSE}
                    AND ek.is_it_maintenance THEN eb.total_price_in_hc ELSE 0 END), 0)
                    AS maintenance_cost_hc,
                COUNT(CASE WHEN eb.expense_type = {EXPENSE_TYPE_EXPENSE}
                    AND ek.is_it_maintenance THEN 1 END) AS maintenance_count,
                COALESCE(SUM(CASE WHEN eb.expense_type = {EXPENSE_TYPE_EXPENSE}
                    AND NOT COALESCE(ek.is_it_maintenance, FALSE)
                    THEN eb.total_price_in_hc ELSE 0 END), 0) AS other_expenses_cost_hc,
                COUNT(CASE WHEN eb.expense_type = {EXPENSE_TYPE_EXPENSE}
                    AND NOT COALESCE(ek.is_it_maintenance, FALSE)
                    THEN 1 END) AS other_expenses_count,
                COALESCE(SUM(CASE WHEN eb.expense_type = {EXPENSE_TYPE_REVENUE}
                    THEN eb.total_price_in_hc ELSE 0 END), 0) AS revenues_hc,
                COUNT(CASE WHEN eb.expense_type = {EXPENSE_TYPE_REVENUE}
                    THEN 1 END) AS revenues_count
            FROM {self._schema}.expense_bases eb
            LEFT JOIN {self._schema}.refuels r ON r.id = eb.id
            LEFT JOIN {self._schema}.expenses e ON e.id = eb.id
            LEFT JOIN {self._schema}.expense_kinds ek ON ek.id = e.kind_id
            {where}
        """
        return self._text(sql, params), params

    @staticmethod
    def _map_travel(row) -> TravelRow:
        return TravelRow(
            travel_id=str(row.travel_id),
            vehicle_id=str(row.vehicle_id),
            first_dttm=row.first_dttm,
            last_dttm=row.last_dttm,
            first_odometer_km=coerce_optional_decimal(row.first_odometer),
            last_odometer_km=coerce_optional_decimal(row.last_odometer),
            distance_km=coerce_optional_decimal(row.distance_km),
            travel_type=row.travel_type,
            purpose=row.purpose,
            destination=row.destination,
            is_round_trip=bool(row.is_round_trip),
            active_minutes=row.active_minutes,
            total_minutes=row.total_minutes,
            reimbursement_rate=coerce_optional_decimal(row.reimbursement_rate),
            reimbursement_rate_currency=row.reimbursement_rate_currency,
            calculated_reimbursement=coerce_optional_decimal(
                row.calculated_reimbursement
            ),
        )

    @staticmethod
    def _map_breakdown(row) -> PeriodExpenseBreakdown:
        if row is None:
            return PeriodExpenseBreakdown.empty()
        return PeriodExpenseBreakdown(
            refuels_cost_hc=coerce_decimal(row.refuels_cost_hc),
            refuels_volume_liters=coerce_decimal(row.refuels_volume_liters),
            refuels_count=int(row.refuels_count),
            maintenance_cost_hc=coerce_decimal(row.maintenance_cost_hc),
            maintenance_count=int(row.maintenance_count),
            other_expenses_cost_hc=coerce_decimal(row.other_expenses_cost_hc),
            other_expenses_count=int(row.other_expenses_count),
            revenues_hc=coerce_decimal(row.revenues_hc),
            revenues_count=int(row.revenues_count),
        )

    async def fetch_consumption_data_points(
        self,
        scope: ReportScope,
    ) -> list[ConsumptionDataPoint]:
        """Return consumption intervals closing within the scope's period.

        Readings start at the last known tank level before the period, so the
        first interval of the period has its opening level without reading
        the vehicle's whole history.
        """
        params = {
            "account_id": scope.account_id,
            "vehicle_ids": list(scope.vehicle_ids),
            "date_from": _start_of(scope.date_from),
            "date_to": _end_exclusive(scope.date_to),
        }
        sql = f"""
            SELECT
                eb.id AS record_id,
                eb.car_id AS vehicle_id,
                eb.odometer AS odometer_km,
                eb.when_done AS when_done,
                eb.expense_type AS expense_type,
                eb.fuel_in_tank AS fuel_in_tank,
                r.refuel_volume AS volume_liters,
                r.is_full_tank AS is_full_tank,
                COALESCE(r.tank_type, 'main') AS tank
            FROM {self._schema}.expense_bases eb
            LEFT JOIN {self._schema}.refuels r ON r.id = eb.id
            WHERE eb.account_id = :account_id
              AND eb.car_id IN :vehicle_ids
              AND eb.when_done < :date_to
              AND eb.removed_at IS NULL
              AND eb.odometer IS NOT NULL
              AND (eb.expense_type = {EXPENSE_TYPE_REFUEL}
                   OR eb.fuel_in_tank IS NOT NULL)
              AND eb.when_done >= COALESCE((
                  SELECT MAX(prev.when_done)
                  FROM {self._schema}.expense_bases prev
                  LEFT JOIN {self._schema}.refuels pr ON pr.id = prev.id
                  WHERE prev.car_id = eb.car_id
                    AND prev.account_id = :account_id
                    AND prev.removed_at IS NULL
                    AND prev.odometer IS NOT NULL
                    AND prev.when_done < :date_from
                    AND COALESCE(pr.tank_type, 'main') = COALESCE(r.tank_type, 'main')
                    AND (pr.is_full_tank IS TRUE OR prev.fuel_in_tank IS NOT NULL)
              ), :date_from)
            ORDER BY eb.car_id, eb.odometer, eb.when_done
        """
        rows, tank_configs = await asyncio.gather(
            self._fetch_all(self._text(sql, params), params),
            self.fetch_tank_configs(scope.account_id, list(scope.vehicle_ids)),
        )
        readings = [
            TankReading(
                vehicle_id=str(row.vehicle_id),
                record_id=str(row.record_id),
                odometer_km=coerce_optional_decimal(row.odometer_km),
                when_done=row.when_done,
                volume_liters=coerce_decimal(row.volume_liters or 0),
                is_full_tank=bool(row.is_full_tank),
                tank=row.tank or "main",
                is_refuel=row.expense_type == EXPENSE_TYPE_REFUEL,
                fuel_in_tank=coerce_optional_decimal(row.fuel_in_tank),
            )
            for row in rows
        ]
        first_ordinal = scope.date_from.toordinal()
        return [
            point
            for point in build_consumption_intervals(
                readings, tank_configs, self._logger
            )
            if point.timestamp_ordinal >= first_ordinal
        ]

    async def fetch_tank_configs(
        self,
        account_id: str,
        vehicle_ids: list[str],
    ) -> list[CarTankConfig]:
        if not vehicle_ids:
            return []
        params = {"account_id": account_id, "vehicle_ids": list(vehicle_ids)}
        sql = f"""
            SELECT
                c.id AS vehicle_id,
                c.main_tank_fuel_type,
                c.main_tank_volume,
                c.addl_tank_fuel_type,
                c.addl_tank_volume
            FROM {self._schema}.cars c
            WHERE c.account_id = :account_id
              AND c.id IN :vehicle_ids
            ORDER BY c.id
        """
        rows = await self._fetch_all(self._text(sql, params), params)
        return [
            CarTankConfig(
                vehicle_id=str(row.vehicle_id),
                main_fuel_type=row.main_tank_fuel_type,
                main_capacity=coerce_optional_decimal(row.main_tank_volume),
                addl_fuel_type=row.addl_tank_fuel_type,
                addl_capacity=coerce_optional_decimal(row.addl_tank_volume),
            )
            for row in rows
        ]


__all__ = ["SqlAlchemyReportRepository"]
