# src/rag/vector_store/pgvector_store.py - v1
"""pgvector-backed chunk store.

Similarity is ``1 - (embedding <=> query)`` (pgvector cosine distance).
The workspace filter is an EXISTS join on eligible memberships inside the
WHERE clause, so out-of-scope chunks never consume the LIMIT.
"""

from __future__ import annotations

import logging
from typing import Any

from meshsearch.core.models import ELIGIBLE_STATUSES, Chunk
from meshsearch.rag.models import VectorHit
from meshsearch.rag.vector_store.base_vector_store import BaseVectorStore
from meshsearch.storage.postgres_database import (
    PostgresDatabase,
    parse_vector_literal,
    to_vector_literal,
)

logger = logging.getLogger(__name__)

_ELIGIBLE = [s.value for s in sorted(ELIGIBLE_STATUSES, key=lambda s: s.value)]

DELETE_OWNER = "DELETE FROM embeddings WHERE user_id = $1"

INSERT_CHUNK = """
    INSERT INTO embeddings (user_id, content, embedding)
    VALUES ($1, $2, $3::vector)
"""

SEARCH_QUERY = """
    SELECT e.user_id, e.content,
           1 - (e.embedding <=> $1::vector) AS similarity
    FROM embeddings e
    WHERE 1 - (e.embedding <=> $1::vector) > $2
    ORDER BY e.embedding <=> $1::vector
    LIMIT $3
"""

SEARCH_QUERY_IN_WORKSPACE = """
    SELECT e.user_id, e.content,
           1 - (e.embedding <=> $1::vector) AS similarity
    FROM embeddings e
    WHERE 1 - (e.embedding <=> $1::vector) > $2
      AND EXISTS (
          SELECT 1 FROM workspaces_users wu
          WHERE wu.user_id = e.user_id
            AND wu.workspace_id = $4
            AND wu.status = ANY($5::text[])
      )
    ORDER BY e.embedding <=> $1::vector
    LIMIT $3
"""

LIST_CHUNKS = """
    SELECT user_id, content, embedding::text AS embedding
    FROM embeddings
    WHERE user_id = $1
    ORDER BY id
"""


class PgVectorStore(BaseVectorStore):
    """asyncpg + pgvector chunk store."""

    def __init__(self, database: PostgresDatabase, dimensions: int = 1536) -> None:
        self._db = database
        self._dimensions = dimensions

    async def upsert_chunks(
        self, owner_id: str, chunks: list[Chunk], session: Any = None
    ) -> None:
        self._validate_chunks(owner_id, chunks, self._dimensions)
        async with self._db.scope(session, write=True) as conn:
            await conn.execute(DELETE_OWNER, owner_id)
            if chunks:
                await conn.executemany(
                    INSERT_CHUNK,
                    [(owner_id, c.text, to_vector_literal(c.vector)) for c in chunks],
                )
        logger.debug("Replaced chunks for %s (%d)", owner_id, len(chunks))

    async def search(
        self,
        query_vector: list[float],
        *,
        min_similarity: float,
        limit: int,
        workspace_id: str | None = None,
    ) -> list[VectorHit]:
        if limit <= 0:
            return []
        literal = to_vector_literal(query_vector)
        async with self._db.session() as conn:
            if workspace_id is None:
                rows = await conn.fetch(SEARCH_QUERY, literal, min_similarity, limit)
            else:
                rows = await conn.fetch(
                    SEARCH_QUERY_IN_WORKSPACE,
                    literal, min_similarity, limit, workspace_id, _ELIGIBLE,
                )
        return [
            VectorHit(
                owner_id=row["user_id"],
                chunk_text=row["content"],
                similarity=float(row["similarity"]),
            )
            for row in rows
        ]

    async def list_chunks(self, owner_id: str, session: Any = None) -> list[Chunk]:
        async with self._db.scope(session) as conn:
            rows = await conn.fetch(LIST_CHUNKS, owner_id)
        return [
            Chunk(
                owner_id=row["user_id"],
                text=row["content"],
                vector=parse_vector_literal(row["embedding"]),
            )
            for row in rows
        ]

    async def count(self, owner_id: str | None = None) -> int:
        async with self._db.session() as conn:
            if owner_id is None:
                return await conn.fetchval("SELECT count(*) FROM embeddings")
            return await conn.fetchval(
                "SELECT count(*) FROM embeddings WHERE user_id = $1", owner_id
            )

    @property
    def provider_name(self) -> str:
        return "pgvector"
