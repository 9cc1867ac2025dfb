"""Database infrastructure for the reporting engine.

This module exposes helpers to create and reuse the SQLAlchemy async engine
connected to the expenses database. It belongs to the infrastructure layer
because it deals with an external system (PostgreSQL through asyncpg).
"""

import os
from typing import Optional

import dotenv
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from vehicle_reports.application.ports.database import DatabaseEnginePort


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> AsyncEngine:
    """Create a configured async engine for a PostgreSQL database.

    Args:
        db_url: Database URL using the ``postgresql+asyncpg`` driver.

    Returns:
        AsyncEngine: Engine with a small connection pool and health checks.
    """
    return create_async_engine(
        db_url,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_reports_engine: Optional[AsyncEngine] = None


def get_reports_engine() -> AsyncEngine:
    """Get a singleton async engine for the expenses database.

    Returns:
        AsyncEngine: Lazily initialized engine.
    """
    global _reports_engine
    if _reports_engine is None:
        db_url = _get_env_var("REPORTS_DB_URL")
        _reports_engine = _create_engine(db_url)
    return _reports_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy async engine."""

    def get_reports_engine(self) -> AsyncEngine:
        """Get the engine for the expenses database.

        Returns:
            AsyncEngine: SQLAlchemy async engine.
        """
        return get_reports_engine()


__all__ = [
    "get_reports_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
