"""Port for resolving the vehicles visible to an account."""

from typing import Protocol


class VehicleRepositoryPort(Protocol):
    """Port listing vehicles owned by an account."""

    async def list_vehicle_ids(self, account_id: str) -> list[str]:
        """Return ids of the account's active vehicles."""


__all__ = ["VehicleRepositoryPort"]
