# src/rag/embeddings/embedding_service.py - v1
"""Embedding service: provider calls with retries and vector checks.

Any failure (provider error after retries, wrong vector count, wrong
dimension) raises EmbeddingFailure. No embedding is better than a silently
wrong one, so callers must not persist chunks when this raises.
"""

from __future__ import annotations

import logging

from meshsearch.core.errors import EmbeddingFailure
from meshsearch.llm.retry import LLMRetryExhausted, RetryConfig, with_retry
from meshsearch.rag.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)

_COMPONENT = "embedding"


def normalize_single_text(text: str) -> str:
    """Newlines are replaced with spaces before single-text embedding calls."""
    return text.replace("\n", " ")


class EmbeddingService:
    """Order-preserving embedding of one or many texts."""

    def __init__(
        self,
        embedder: BaseEmbedder,
        batch_size: int = 256,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        self._embedder = embedder
        self._batch_size = batch_size
        self._retry_configs = retry_configs

    @property
    def dimensions(self) -> int:
        return self._embedder.dimensions

    @property
    def model_name(self) -> str:
        return self._embedder.model_name

    async def embed_one(self, text: str) -> list[float]:
        """Embed a single text (query or chunk)."""
        if not text or not text.strip():
            raise EmbeddingFailure("Cannot embed empty text")
        try:
            vector = await with_retry(
                self._embedder.embed_query,
                normalize_single_text(text),
                component=_COMPONENT,
                retry_configs=self._retry_configs,
            )
        except LLMRetryExhausted as exc:
            logger.error("Embedding call failed: %s", exc)
            raise EmbeddingFailure(f"Embedding provider failed: {exc.error_type}") from exc
        self._check_dimension(vector)
        return list(vector)

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed texts in order, one vector per input."""
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise EmbeddingFailure("Cannot embed empty text")

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            batch = texts[start:start + self._batch_size]
            try:
                result = await with_retry(
                    self._embedder.embed_texts,
                    batch,
                    component=_COMPONENT,
                    retry_configs=self._retry_configs,
                )
            except LLMRetryExhausted as exc:
                logger.error("Batch embedding call failed: %s", exc)
                raise EmbeddingFailure(
                    f"Embedding provider failed: {exc.error_type}"
                ) from exc
            if len(result) != len(batch):
                raise EmbeddingFailure(
                    f"Provider returned {len(result)} vectors for {len(batch)} texts"
                )
            for vector in result:
                self._check_dimension(vector)
            vectors.extend(list(v) for v in result)

        logger.debug("Embedded %d texts with %s", len(texts), self.model_name)
        return vectors

    def _check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self.dimensions:
            raise EmbeddingFailure(
                f"Expected {self.dimensions}-dim vector, got {len(vector)}"
            )
