"""Database ports for the reporting engine.

This module defines the application-layer protocol for accessing the async
database engine. Infrastructure implementations provide concrete adapters
that satisfy it.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncEngine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine of the expenses database."""

    def get_reports_engine(self) -> AsyncEngine:
        """Get the engine for the expenses database.

        Returns:
            AsyncEngine: SQLAlchemy async engine.
        """


__all__ = ["DatabaseEnginePort"]
