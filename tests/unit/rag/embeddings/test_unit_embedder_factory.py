# tests/unit/rag/embeddings/test_unit_embedder_factory.py - v1
"""Tests for rag/embeddings/embedder_factory.py."""

from __future__ import annotations

import pytest

from meshsearch.config.settings import Settings
from meshsearch.rag.embeddings.embedder_factory import (
    UnsupportedEmbeddingProviderError,
    create_embedder,
    register_embedding_provider,
)


class TestCreateEmbedder:
    def test_default_openai(self):
        embedder = create_embedder(Settings(_env_file=None))
        assert embedder.provider_name == "openai"
        assert embedder.model_name == "text-embedding-ada-002"
        assert embedder.dimensions == 1536

    def test_model_from_settings(self):
        s = Settings(
            _env_file=None,
            embedding_model="text-embedding-3-small",
            embedding_dimensions=512,
        )
        embedder = create_embedder(s)
        assert embedder.model_name == "text-embedding-3-small"
        assert embedder.dimensions == 512

    def test_unsupported_provider(self):
        s = Settings(_env_file=None, embedding_provider="nonexistent")
        with pytest.raises(UnsupportedEmbeddingProviderError, match="nonexistent"):
            create_embedder(s)

    def test_registered_provider(self):
        from meshsearch.rag.embeddings import embedder_factory

        register_embedding_provider(
            "azure_openai", "meshsearch.rag.embeddings.openai_embedder.OpenAIEmbedder",
        )
        try:
            s = Settings(_env_file=None, embedding_provider="azure_openai")
            embedder = create_embedder(s)
            assert embedder.provider_name == "openai"
        finally:
            embedder_factory._PROVIDER_REGISTRY.pop("azure_openai", None)
