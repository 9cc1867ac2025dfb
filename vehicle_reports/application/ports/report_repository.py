"""Port for pre-aggregated report reads."""

from typing import Protocol

from vehicle_reports.domain.models import (
    CarTankConfig,
    ConsumptionDataPoint,
    ExpenseSummaryRawData,
    ReportScope,
    TravelReportRawData,
    YearlyRawData,
)


class ReportRepositoryPort(Protocol):
    """Port exposing the raw rows every report is assembled from.

    Implementations return zero-valued structures, never None, when the scope
    holds no records.
    """

    async def fetch_expense_summary_data(
        self,
        scope: ReportScope,
    ) -> ExpenseSummaryRawData:
        """Return period totals and breakdown rows."""

    async def fetch_yearly_data(
        self,
        scope: ReportScope,
        year: int,
    ) -> YearlyRawData:
        """Return monthly totals for a calendar year."""

    async def fetch_travel_data(
        self,
        scope: ReportScope,
        travel_types: list[str],
    ) -> TravelReportRawData:
        """Return completed trips of the given types and period totals."""

    async def fetch_consumption_data_points(
        self,
        scope: ReportScope,
    ) -> list[ConsumptionDataPoint]:
        """Return measured consumption intervals closed within the scope."""

    async def fetch_tank_configs(
        self,
        account_id: str,
        vehicle_ids: list[str],
    ) -> list[CarTankConfig]:
        """Return tank configuration for the given vehicles."""


__all__ = ["ReportRepositoryPort"]
