# src/rag/vector_store/base_vector_store.py - v1
"""Abstract vector store interface over profile chunks.

Chunks are never partially patched: ``upsert_chunks`` replaces the whole
chunk set of an owner inside one transaction, so concurrent readers see
either the old generation or the new one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from meshsearch.core.models import Chunk
from meshsearch.rag.models import VectorHit


class BaseVectorStore(ABC):
    """Unified interface for vector store backends."""

    @abstractmethod
    async def upsert_chunks(
        self, owner_id: str, chunks: list[Chunk], session: Any = None
    ) -> None:
        """Delete every chunk owned by owner_id, then insert ``chunks``.

        Raises:
            ValueError: If a chunk belongs to another owner or has the wrong
                dimension.
        """

    @abstractmethod
    async def search(
        self,
        query_vector: list[float],
        *,
        min_similarity: float,
        limit: int,
        workspace_id: str | None = None,
    ) -> list[VectorHit]:
        """Chunks with similarity > min_similarity, best first, at most ``limit``.

        With ``workspace_id``, only chunks whose owner has an eligible
        membership there are ranked (filter applied before the limit).
        """

    @abstractmethod
    async def list_chunks(self, owner_id: str, session: Any = None) -> list[Chunk]:
        """Chunks of one owner in insertion order."""

    @abstractmethod
    async def count(self, owner_id: str | None = None) -> int:
        """Number of stored chunks (for one owner, or overall)."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (pgvector, memory)."""

    @staticmethod
    def _validate_chunks(owner_id: str, chunks: list[Chunk], dimensions: int) -> None:
        for chunk in chunks:
            if chunk.owner_id != owner_id:
                raise ValueError(
                    f"Chunk owner {chunk.owner_id!r} does not match {owner_id!r}"
                )
            if len(chunk.vector) != dimensions:
                raise ValueError(
                    f"Chunk vector has {len(chunk.vector)} dims, expected {dimensions}"
                )
