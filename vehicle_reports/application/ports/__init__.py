"""Application ports package."""

from .database import DatabaseEnginePort
from .preferences_repository import UserPreferencesPort
from .report_repository import ReportRepositoryPort
from .vehicles_repository import VehicleRepositoryPort

__all__ = [
    "DatabaseEnginePort",
    "UserPreferencesPort",
    "ReportRepositoryPort",
    "VehicleRepositoryPort",
]
