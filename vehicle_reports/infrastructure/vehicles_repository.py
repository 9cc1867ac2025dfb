"""SQLAlchemy-backed repository for account vehicles."""

from sqlalchemy import text

from vehicle_reports.application.ports.database import DatabaseEnginePort
from vehicle_reports.application.ports.vehicles_repository import (
    VehicleRepositoryPort,
)


class SqlAlchemyVehicleRepository(VehicleRepositoryPort):
    """Repository backed by SQLAlchemy for account vehicles."""

    def __init__(self, db_port: DatabaseEnginePort, schema: str = "carexpenses") -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the expenses engine.
            schema: Schema holding the cars table.
        """
        self._db_port = db_port
        self._schema = schema

    async def list_vehicle_ids(self, account_id: str) -> list[str]:
        """Return ids of the account's vehicles that are not removed."""
        query = text(
            f"""
            SELECT id
            FROM {self._schema}.cars
            WHERE account_id = :account_id
              AND removed_at IS NULL
            ORDER BY id
            """
        )
        engine = self._db_port.get_reports_engine()
        async with engine.connect() as conn:
            rows = (await conn.execute(query, {"account_id": account_id})).all()
        return [str(row.id) for row in rows]


__all__ = ["SqlAlchemyVehicleRepository"]
