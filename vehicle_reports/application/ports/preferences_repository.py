"""Port for user unit and currency preferences."""

from typing import Protocol

from vehicle_reports.domain.models import UserPreferences


class UserPreferencesPort(Protocol):
    """Port returning the preferences reports are rendered in."""

    async def fetch_preferences(self, account_id: str) -> UserPreferences:
        """Return distance, volume, consumption units and home currency."""


__all__ = ["UserPreferencesPort"]
