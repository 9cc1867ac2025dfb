"""SQLAlchemy-backed repository for user preferences."""

from sqlalchemy import text

from vehicle_reports.application.ports.database import DatabaseEnginePort
from vehicle_reports.application.ports.preferences_repository import (
    UserPreferencesPort,
)
from vehicle_reports.domain.models import UserPreferences
from vehicle_reports.domain.services.normalization import normalize_preferences
from vehicle_reports.infrastructure.logging.logger import get_app_logger


class SqlAlchemyUserPreferencesRepository(UserPreferencesPort):
    """Repository reading unit and currency preferences from user profiles."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        schema: str = "carexpenses",
        logger=None,
    ) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the expenses engine.
            schema: Schema holding the user profiles table.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._schema = schema
        self._logger = logger or get_app_logger()

    async def fetch_preferences(self, account_id: str) -> UserPreferences:
        """Return the account's normalized preferences.

        Raises:
            RuntimeError: If the account has no profile or no home currency.
        """
        query = text(
            f"""
            SELECT distance_in, volume_in, consumption_in, home_currency
            FROM {self._schema}.user_profiles
            WHERE account_id = :account_id
            LIMIT 1
            """
        )
        engine = self._db_port.get_reports_engine()
        async with engine.connect() as conn:
            row = (await conn.execute(query, {"account_id": account_id})).first()
        if row is None:
            raise RuntimeError(f"No user profile for account {account_id}")
        try:
            return normalize_preferences(
                row.distance_in,
                row.volume_in,
                row.consumption_in,
                row.home_currency,
                logger=self._logger,
            )
        except ValueError as exc:
            raise RuntimeError(
                f"Invalid preferences for account {account_id}: {exc}"
            ) from exc


__all__ = ["SqlAlchemyUserPreferencesRepository"]
