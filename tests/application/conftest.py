"""Shared fixtures for report use case tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from vehicle_reports.domain.models import UserPreferences


def metric_preferences(home_currency: str = "USD") -> UserPreferences:
    return UserPreferences(
        distance_unit="km",
        volume_unit="l",
        consumption_unit="l100km",
        home_currency=home_currency,
    )


def build_ports(
    preferences: UserPreferences | None = None,
    vehicle_ids: list[str] | None = None,
) -> dict:
    """Return keyword arguments wiring a use case to async mocks."""
    report_repository = MagicMock()
    report_repository.fetch_consumption_data_points = AsyncMock(return_value=[])
    report_repository.fetch_tank_configs = AsyncMock(return_value=[])
    vehicle_repository = MagicMock()
    vehicle_repository.list_vehicle_ids = AsyncMock(
        return_value=["car-1"] if vehicle_ids is None else vehicle_ids
    )
    preferences_repository = MagicMock()
    preferences_repository.fetch_preferences = AsyncMock(
        return_value=preferences or metric_preferences()
    )
    return {
        "report_repository": report_repository,
        "vehicle_repository": vehicle_repository,
        "preferences_repository": preferences_repository,
        "logger": MagicMock(),
    }


@pytest.fixture
def preferences() -> UserPreferences:
    return metric_preferences()


@pytest.fixture
def ports() -> dict:
    return build_ports()
