# src/rag/vector_store/memory_store.py - v1
"""Brute-force cosine search over MemoryDatabase (numpy).

Same contract as the pgvector store: workspace pre-filter on eligible
memberships, strict ``similarity > min_similarity`` and descending order.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from meshsearch.core.models import Chunk
from meshsearch.core.similarity import cosine_similarity_to_query
from meshsearch.rag.models import VectorHit
from meshsearch.rag.vector_store.base_vector_store import BaseVectorStore
from meshsearch.storage.memory_database import MemoryDatabase

logger = logging.getLogger(__name__)


class MemoryVectorStore(BaseVectorStore):
    """In-process vector store."""

    def __init__(self, database: MemoryDatabase, dimensions: int = 1536) -> None:
        self._db = database
        self._dimensions = dimensions

    async def upsert_chunks(
        self, owner_id: str, chunks: list[Chunk], session: Any = None
    ) -> None:
        self._validate_chunks(owner_id, chunks, self._dimensions)
        async with self._db.scope(session, write=True) as state:
            state.chunks.pop(owner_id, None)
            if chunks:
                state.chunks[owner_id] = [c.model_copy(deep=True) for c in chunks]
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
        async with self._db.session() as state:
            candidates: list[Chunk] = []
            for owner_id, owner_chunks in state.chunks.items():
                if workspace_id is not None:
                    profile = state.profiles.get(owner_id)
                    if profile is None or not profile.is_eligible_in(workspace_id):
                        continue
                candidates.extend(owner_chunks)

        if not candidates:
            return []

        matrix = np.asarray([c.vector for c in candidates], dtype=np.float64)
        scores = cosine_similarity_to_query(
            matrix, np.asarray(query_vector, dtype=np.float64)
        )
        # Stable sort keeps insertion order among equal scores.
        order = np.argsort(-scores, kind="stable")
        hits: list[VectorHit] = []
        for idx in order:
            score = float(scores[idx])
            if score <= min_similarity:
                break
            chunk = candidates[idx]
            hits.append(
                VectorHit(owner_id=chunk.owner_id, chunk_text=chunk.text, similarity=score)
            )
            if len(hits) >= limit:
                break
        return hits

    async def list_chunks(self, owner_id: str, session: Any = None) -> list[Chunk]:
        async with self._db.scope(session) as state:
            return [c.model_copy(deep=True) for c in state.chunks.get(owner_id, [])]

    async def count(self, owner_id: str | None = None) -> int:
        async with self._db.session() as state:
            if owner_id is not None:
                return len(state.chunks.get(owner_id, []))
            return sum(len(chunks) for chunks in state.chunks.values())

    @property
    def provider_name(self) -> str:
        return "memory"
