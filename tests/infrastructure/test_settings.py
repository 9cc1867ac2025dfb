"""Tests for infrastructure settings."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from vehicle_reports.infrastructure import settings as settings_module
from vehicle_reports.infrastructure.settings import ReportSettings

_VARIABLES = (
    "REPORTS_DB_SCHEMA",
    "CONSUMPTION_MIN_DATA_POINTS",
    "CONSUMPTION_MIN_DISTANCE_KM",
    "CONSUMPTION_MIN_FUEL_UNITS",
)


@pytest.fixture
def logger(monkeypatch) -> MagicMock:
    fake_logger = MagicMock()
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)
    monkeypatch.setattr(settings_module, "get_app_logger", lambda: fake_logger)
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return fake_logger


def test_from_env_uses_defaults(logger) -> None:
    """Unset variables should fall back to the documented defaults."""
    settings = ReportSettings.from_env()

    assert settings == ReportSettings()
    assert settings.thresholds.min_data_points == 2
    assert settings.thresholds.min_distance_km == Decimal("100")


def test_from_env_reads_thresholds(monkeypatch, logger) -> None:
    """Configured thresholds and schema should be honoured."""
    monkeypatch.setenv("REPORTS_DB_SCHEMA", "expenses_v2")
    monkeypatch.setenv("CONSUMPTION_MIN_DATA_POINTS", "3")
    monkeypatch.setenv("CONSUMPTION_MIN_DISTANCE_KM", "250.5")
    monkeypatch.setenv("CONSUMPTION_MIN_FUEL_UNITS", "10")

    settings = ReportSettings.from_env()

    assert settings.db_schema == "expenses_v2"
    assert settings.min_data_points == 3
    assert settings.min_distance_km == Decimal("250.5")
    assert settings.min_fuel_units == Decimal("10")


def test_invalid_numbers_fall_back_with_warning(monkeypatch, logger) -> None:
    """Garbage or negative thresholds should be replaced by defaults."""
    monkeypatch.setenv("CONSUMPTION_MIN_DISTANCE_KM", "far")
    monkeypatch.setenv("CONSUMPTION_MIN_FUEL_UNITS", "-1")

    settings = ReportSettings.from_env()

    assert settings.min_distance_km == Decimal("100")
    assert settings.min_fuel_units == Decimal("5")
    assert logger.warning.call_count == 2


def test_schema_must_be_an_identifier(monkeypatch, logger) -> None:
    """Schema names are interpolated into SQL and must be plain identifiers."""
    monkeypatch.setenv("REPORTS_DB_SCHEMA", "bad; DROP")

    with pytest.raises(RuntimeError):
        ReportSettings.from_env()
