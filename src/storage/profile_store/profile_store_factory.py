# src/storage/profile_store/profile_store_factory.py - v1
"""Factory: profile store matching the database backend."""

from __future__ import annotations

from meshsearch.storage.base_database import BaseDatabase
from meshsearch.storage.profile_store.base_profile_store import BaseProfileStore


def create_profile_store(database: BaseDatabase) -> BaseProfileStore:
    """Instantiate the profile store for ``database.backend_name``."""
    backend = database.backend_name

    if backend == "postgres":
        from meshsearch.storage.profile_store.postgres_profile_store import (
            PostgresProfileStore,
        )
        return PostgresProfileStore(database)  # type: ignore[arg-type]

    if backend == "memory":
        from meshsearch.storage.profile_store.memory_profile_store import (
            MemoryProfileStore,
        )
        return MemoryProfileStore(database)  # type: ignore[arg-type]

    raise ValueError(f"No profile store for database backend {backend!r}")
