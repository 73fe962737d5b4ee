# src/rag/vector_store/vector_store_factory.py - v1
"""Factory: instantiate the vector store matching the database backend."""

from __future__ import annotations

import logging

from meshsearch.rag.vector_store.base_vector_store import BaseVectorStore
from meshsearch.storage.base_database import BaseDatabase

logger = logging.getLogger(__name__)


class UnsupportedVectorStoreError(ValueError):
    """Raised when no vector store exists for a database backend."""


def create_vector_store(database: BaseDatabase, dimensions: int) -> BaseVectorStore:
    """Instantiate the vector store sharing ``database``.

    Sharing the database handle is what lets a profile update and its chunk
    replacement commit in one transaction.

    Raises:
        UnsupportedVectorStoreError: If the backend has no vector store.
    """
    backend = database.backend_name

    if backend == "postgres":
        from meshsearch.rag.vector_store.pgvector_store import PgVectorStore
        return PgVectorStore(database, dimensions=dimensions)  # type: ignore[arg-type]

    if backend == "memory":
        from meshsearch.rag.vector_store.memory_store import MemoryVectorStore
        return MemoryVectorStore(database, dimensions=dimensions)  # type: ignore[arg-type]

    raise UnsupportedVectorStoreError(
        f"Unsupported vector store backend: {backend!r}. Available: memory, postgres"
    )
