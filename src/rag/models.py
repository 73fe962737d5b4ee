# src/rag/models.py - v1
"""Retrieval types shared by vector store backends and the search path."""

from __future__ import annotations

from pydantic import BaseModel


class VectorHit(BaseModel):
    """One chunk returned by a similarity search."""

    owner_id: str
    chunk_text: str
    similarity: float  # 1 - cosine distance
