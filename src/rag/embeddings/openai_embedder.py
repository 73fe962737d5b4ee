# src/rag/embeddings/openai_embedder.py - v1
"""OpenAI embedding adapter.

Default model: text-embedding-ada-002 (1536 dimensions). The
``dimensions`` request parameter is only sent to text-embedding-3
models, which support shortening.
"""

from __future__ import annotations

import logging
from typing import Any

from meshsearch.rag.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)


class OpenAIEmbedder(BaseEmbedder):
    """Embeddings via OpenAI API."""

    def __init__(
        self,
        model: str = "text-embedding-ada-002",
        api_key: str | None = None,
        dimensions: int = 1536,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._dimensions = dimensions
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            import openai

            self.__client = openai.AsyncOpenAI(api_key=self._api_key or None)
        return self.__client

    def _request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": self._model}
        if self._model.startswith("text-embedding-3"):
            kwargs["dimensions"] = self._dimensions
        return kwargs

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed document texts via OpenAI API."""
        if not texts:
            return []
        response = await self._client.embeddings.create(
            input=texts, **self._request_kwargs()
        )
        # The API reports an index per item; do not rely on list order.
        items = sorted(response.data, key=lambda item: item.index)
        return [item.embedding for item in items]

    async def embed_query(self, query: str) -> list[float]:
        response = await self._client.embeddings.create(
            input=[query], **self._request_kwargs()
        )
        return response.data[0].embedding

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model
