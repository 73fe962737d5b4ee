# src/storage/database_factory.py - v1
"""Factory: instantiate the configured database backend."""

from __future__ import annotations

import logging

from meshsearch.config.settings import Settings
from meshsearch.storage.base_database import BaseDatabase

logger = logging.getLogger(__name__)


class UnsupportedDatabaseError(ValueError):
    """Raised when a database backend is not supported."""


def create_database(settings: Settings) -> BaseDatabase:
    """Instantiate (but do not connect) the configured database.

    Raises:
        UnsupportedDatabaseError: If DATABASE_BACKEND is unknown.
    """
    backend = settings.database_backend

    if backend == "postgres":
        from meshsearch.storage.postgres_database import PostgresDatabase

        return PostgresDatabase(
            dsn=settings.database_url,
            dimensions=settings.embedding_dimensions,
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            command_timeout=settings.database_command_timeout,
        )

    if backend == "memory":
        from meshsearch.storage.memory_database import MemoryDatabase

        logger.warning("Using in-memory database: data is lost on exit")
        return MemoryDatabase()

    raise UnsupportedDatabaseError(
        f"Unsupported database backend: {backend!r}. Available: memory, postgres"
    )
