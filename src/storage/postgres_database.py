# src/storage/postgres_database.py - v1
"""PostgreSQL + pgvector backend (asyncpg pool).

Vectors travel as pgvector text literals (``'[0.1,0.2,...]'``) cast with
``::vector``, so no custom codec registration is needed.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import asyncpg

from meshsearch.storage.base_database import BaseDatabase

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS: tuple[str, ...] = (
    "CREATE EXTENSION IF NOT EXISTS vector",
    """
    CREATE TABLE IF NOT EXISTS users (
        id               VARCHAR(191) PRIMARY KEY,
        name             TEXT,
        mail             TEXT,
        content          TEXT NOT NULL DEFAULT '',
        x_handle         TEXT,
        telegram_handle  TEXT,
        instagram_handle TEXT,
        source_hash      TEXT,
        created_at       TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at       TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    "ALTER TABLE users ADD COLUMN IF NOT EXISTS source_hash TEXT",
    """
    CREATE TABLE IF NOT EXISTS workspaces (
        id          VARCHAR(191) PRIMARY KEY,
        name        TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        created_at  TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workspaces_users (
        workspace_id VARCHAR(191) NOT NULL REFERENCES workspaces(id) ON DELETE CASCADE,
        user_id      VARCHAR(191) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        status       TEXT NOT NULL DEFAULT 'invited'
                     CHECK (status IN ('invited', 'active', 'admin', 'rejected')),
        created_at   TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (workspace_id, user_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS embeddings (
        id        BIGSERIAL PRIMARY KEY,
        user_id   VARCHAR(191) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        content   TEXT NOT NULL,
        embedding vector({dimensions}) NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS embeddings_user_id_idx ON embeddings (user_id)",
    """
    CREATE INDEX IF NOT EXISTS embedding_index
        ON embeddings USING hnsw (embedding vector_cosine_ops)
    """,
)

_EMBEDDING_DIMENSION_QUERY = """
    SELECT a.atttypmod
    FROM pg_attribute a
    JOIN pg_class c ON a.attrelid = c.oid
    JOIN pg_namespace n ON c.relnamespace = n.oid
    WHERE n.nspname = current_schema()
      AND c.relname = 'embeddings'
      AND a.attname = 'embedding'
      AND a.attnum > 0
      AND NOT a.attisdropped
"""


def to_vector_literal(vector: list[float]) -> str:
    """Format a vector as a pgvector text literal."""
    return "[" + ",".join(repr(float(x)) for x in vector) + "]"


def parse_vector_literal(value: str) -> list[float]:
    """Parse pgvector text output ('[1,2,3]') back into floats."""
    body = value.strip().lstrip("[").rstrip("]")
    if not body:
        return []
    return [float(x) for x in body.split(",")]


class PostgresDatabase(BaseDatabase):
    """asyncpg pool over a pgvector-enabled PostgreSQL database."""

    def __init__(
        self,
        dsn: str,
        dimensions: int = 1536,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 15.0,
    ) -> None:
        self._dsn = dsn
        self._dimensions = dimensions
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("PostgresDatabase.connect() has not been called")
        return self._pool

    async def connect(self) -> None:
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            self._dsn,
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )
        logger.info(
            "PostgreSQL pool open (min=%d, max=%d)", self._min_size, self._max_size,
        )

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL pool closed")

    async def init_schema(self) -> None:
        async with self.transaction() as conn:
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement.format(dimensions=self._dimensions))
        await self.check_embedding_dimension()
        logger.info("Schema ready (vector dimension %d)", self._dimensions)

    async def check_embedding_dimension(self) -> None:
        """Raise ValueError when the embeddings column dimension differs.

        A missing or unconstrained column only logs a warning.
        """
        async with self.session() as conn:
            row = await conn.fetchrow(_EMBEDDING_DIMENSION_QUERY)
        typmod = row["atttypmod"] if row else None
        db_dimension = int(typmod) if typmod is not None and typmod > 0 else None
        if db_dimension is None:
            logger.warning(
                "Could not determine embeddings.embedding dimension; skipping check"
            )
            return
        if db_dimension != self._dimensions:
            raise ValueError(
                f"Embedding dimension mismatch: settings={self._dimensions}, "
                f"embeddings.embedding=vector({db_dimension}). "
                "Use a matching embedding model or migrate the column."
            )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    @asynccontextmanager
    async def session(self) -> AsyncIterator[asyncpg.Connection]:
        async with self.pool.acquire() as conn:
            yield conn

    @property
    def backend_name(self) -> str:
        return "postgres"
