"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import os

import dotenv

from vehicle_reports.domain.models import ConsumptionThresholds
from vehicle_reports.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class ReportSettings:
    """Settings for report repositories and the consumption model.

    Attributes:
        db_schema: Schema holding the expense tables.
        min_data_points: Data points needed before consumption is trusted.
        min_distance_km: Distance needed before consumption is trusted.
        min_fuel_units: Fuel or energy needed before consumption is trusted.
    """

    db_schema: str = "carexpenses"
    min_data_points: int = 2
    min_distance_km: Decimal = Decimal("100")
    min_fuel_units: Decimal = Decimal("5")

    @classmethod
    def from_env(cls) -> "ReportSettings":
        """Build settings from environment variables.

        Returns:
            ReportSettings: Settings sourced from environment variables.

        Raises:
            RuntimeError: If the schema name is not a plain identifier.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        schema = os.getenv("REPORTS_DB_SCHEMA", "carexpenses").strip()
        if not schema.isidentifier():
            raise RuntimeError(f"Invalid REPORTS_DB_SCHEMA value: {schema!r}")
        return cls(
            db_schema=schema,
            min_data_points=int(
                cls._read_decimal("CONSUMPTION_MIN_DATA_POINTS", Decimal("2"), logger)
            ),
            min_distance_km=cls._read_decimal(
                "CONSUMPTION_MIN_DISTANCE_KM", Decimal("100"), logger
            ),
            min_fuel_units=cls._read_decimal(
                "CONSUMPTION_MIN_FUEL_UNITS", Decimal("5"), logger
            ),
        )

    @staticmethod
    def _read_decimal(name: str, default: Decimal, logger) -> Decimal:
        """Read a non-negative number, falling back to ``default``.

        Args:
            name: Environment variable name.
            default: Value used when unset or invalid.
            logger: Logger used for warnings.

        Returns:
            Decimal: Parsed value.
        """
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            logger.warning(f"Invalid {name} value {raw!r}, using {default}")
            return default
        if value < 0:
            logger.warning(f"Negative {name} value {raw!r}, using {default}")
            return default
        return value

    @property
    def thresholds(self) -> ConsumptionThresholds:
        """Return the consumption confidence thresholds."""
        return ConsumptionThresholds(
            min_data_points=self.min_data_points,
            min_distance_km=self.min_distance_km,
            min_fuel_units=self.min_fuel_units,
        )


__all__ = ["ReportSettings"]
