"""Composition root for wiring infrastructure adapters."""

from vehicle_reports.application.ports.database import DatabaseEnginePort
from vehicle_reports.application.ports.preferences_repository import (
    UserPreferencesPort,
)
from vehicle_reports.application.ports.report_repository import (
    ReportRepositoryPort,
)
from vehicle_reports.application.ports.vehicles_repository import (
    VehicleRepositoryPort,
)
from vehicle_reports.application.use_cases import (
    GetExpenseSummaryUseCase,
    GetTravelReportUseCase,
    GetYearlyReportUseCase,
)
from vehicle_reports.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from vehicle_reports.infrastructure.logging.logger import get_app_logger
from vehicle_reports.infrastructure.preferences_repository import (
    SqlAlchemyUserPreferencesRepository,
)
from vehicle_reports.infrastructure.report_repository import (
    SqlAlchemyReportRepository,
)
from vehicle_reports.infrastructure.settings import ReportSettings
from vehicle_reports.infrastructure.vehicles_repository import (
    SqlAlchemyVehicleRepository,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_report_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: ReportSettings | None = None,
) -> ReportRepositoryPort:
    """Return the repository serving pre-aggregated report rows."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or ReportSettings.from_env()
    return SqlAlchemyReportRepository(
        resolved_db,
        schema=resolved_settings.db_schema,
        logger=get_app_logger(),
    )


def build_vehicle_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: ReportSettings | None = None,
) -> VehicleRepositoryPort:
    """Return the account vehicles repository."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or ReportSettings.from_env()
    return SqlAlchemyVehicleRepository(resolved_db, schema=resolved_settings.db_schema)


def build_preferences_repository(
    db_port: DatabaseEnginePort | None = None,
    settings: ReportSettings | None = None,
) -> UserPreferencesPort:
    """Return the user preferences repository."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or ReportSettings.from_env()
    return SqlAlchemyUserPreferencesRepository(
        resolved_db,
        schema=resolved_settings.db_schema,
        logger=get_app_logger(),
    )


def _use_case_dependencies(
    db_port: DatabaseEnginePort | None,
    settings: ReportSettings | None,
) -> dict:
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or ReportSettings.from_env()
    return {
        "report_repository": build_report_repository(resolved_db, resolved_settings),
        "vehicle_repository": build_vehicle_repository(resolved_db, resolved_settings),
        "preferences_repository": build_preferences_repository(
            resolved_db, resolved_settings
        ),
        "logger": get_app_logger(),
        "thresholds": resolved_settings.thresholds,
    }


def build_expense_summary_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ReportSettings | None = None,
) -> GetExpenseSummaryUseCase:
    """Return the expense summary use case wired to the database."""
    return GetExpenseSummaryUseCase(**_use_case_dependencies(db_port, settings))


def build_yearly_report_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ReportSettings | None = None,
) -> GetYearlyReportUseCase:
    """Return the yearly report use case wired to the database."""
    return GetYearlyReportUseCase(**_use_case_dependencies(db_port, settings))


def build_travel_report_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: ReportSettings | None = None,
) -> GetTravelReportUseCase:
    """Return the travel report use case wired to the database."""
    return GetTravelReportUseCase(**_use_case_dependencies(db_port, settings))


__all__ = [
    "build_database_adapter",
    "build_report_repository",
    "build_vehicle_repository",
    "build_preferences_repository",
    "build_expense_summary_use_case",
    "build_yearly_report_use_case",
    "build_travel_report_use_case",
]
