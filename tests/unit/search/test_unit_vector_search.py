# tests/unit/search/test_unit_vector_search.py - v1
"""Tests for search/vector_search.py."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from meshsearch.core.errors import SearchPipelineFailure
from meshsearch.search.assembler import ResultAssembler
from meshsearch.search.keyword_extractor import KeywordExtractor
from meshsearch.search.query_expander import QueryExpander
from meshsearch.search.summarizer import RelevanceSummarizer
from meshsearch.search.vector_search import VectorSearchPipeline
from tests.conftest import MockLLMClient

RENDER = json.dumps({"summary": "juega al ajedrez", "shouldRender": True, "reason": None})
HIDE = json.dumps({"summary": "x", "shouldRender": False, "reason": "no coincide"})


@pytest.fixture
def summarizer_llm() -> MockLLMClient:
    return MockLLMClient(default_response=RENDER)


@pytest.fixture
def keyword_llm() -> MockLLMClient:
    return MockLLMClient(default_response="ajedrez, torneos, cocina, mesa, domingos")


@pytest.fixture
def build(embeddings, vector_store, profile_store, summarizer_llm, keyword_llm):
    def _build(expander=None, **kwargs):
        return VectorSearchPipeline(
            embeddings,
            vector_store,
            profile_store,
            RelevanceSummarizer(summarizer_llm),
            KeywordExtractor(keyword_llm),
            ResultAssembler(),
            expander,
            **kwargs,
        )
    return _build


class TestVectorSearchPipeline:
    @pytest.mark.asyncio
    async def test_finds_matching_member(self, seeded_db, build):
        matches = await build().search("quien juega al ajedrez", "w1")
        assert [m.id for m in matches] == ["ana"]
        match = matches[0]
        assert match.summary == "juega al ajedrez"
        assert match.keywords == ["ajedrez", "torneos", "cocina", "mesa", "domingos"]
        assert match.similarity > 0.3
        assert match.raw_content == "Juego al ajedrez. Me gusta cocinar."

    @pytest.mark.asyncio
    async def test_workspace_and_status_isolation(self, seeded_db, build):
        ids = {m.id for m in await build().search("ajedrez", "w1")}
        assert "carla" not in ids  # invited
        assert "eva" not in ids  # other workspace

    @pytest.mark.asyncio
    async def test_any_workspace(self, seeded_db, build):
        ids = {m.id for m in await build().search("ajedrez", None)}
        assert ids == {"ana", "eva"}

    @pytest.mark.asyncio
    async def test_nothing_above_threshold(self, seeded_db, build, summarizer_llm):
        assert await build().search("quien toca la guitarra", "w1") == []
        assert summarizer_llm.calls == []

    @pytest.mark.asyncio
    async def test_gate_drops_candidate(self, seeded_db, build, summarizer_llm):
        summarizer_llm.set_default(HIDE)
        assert await build().search("ajedrez", "w1") == []

    @pytest.mark.asyncio
    async def test_gate_kept_when_configured(self, seeded_db, build, summarizer_llm):
        summarizer_llm.set_default(HIDE)
        [match] = await build(include_gated=True).search("ajedrez", "w1")
        assert match.summary == "no coincide"
        assert match.match_reason == "no coincide"

    @pytest.mark.asyncio
    async def test_summarizer_failure_fails_open(self, seeded_db, build, summarizer_llm):
        summarizer_llm.set_responses(RuntimeError("down"))
        [match] = await build().search("ajedrez", "w1")
        assert match.needs_review
        assert match.summary == "Juego al ajedrez. Me gusta cocinar."

    @pytest.mark.asyncio
    async def test_expansion_adds_branches(self, seeded_db, build):
        expander_llm = MockLLMClient(
            default_response=json.dumps({"questions": ["¿Quién juega al tenis?"]})
        )
        pipeline = build(expander=QueryExpander(expander_llm))
        ids = {m.id for m in await pipeline.search("quien juega al ajedrez", "w1")}
        assert ids == {"ana", "bruno"}

    @pytest.mark.asyncio
    async def test_expansion_failure_keeps_original(self, seeded_db, build):
        expander_llm = MockLLMClient()
        expander_llm.set_responses(RuntimeError("down"))
        pipeline = build(expander=QueryExpander(expander_llm))
        assert [m.id for m in await pipeline.search("ajedrez", "w1")] == ["ana"]

    @pytest.mark.asyncio
    async def test_max_results(self, seeded_db, build):
        assert await build(max_results=0).search("ajedrez", "w1") == []

    @pytest.mark.asyncio
    async def test_embedding_failure(self, seeded_db, build, mock_embedder):
        mock_embedder.fail_with = RuntimeError("down")
        with pytest.raises(SearchPipelineFailure) as exc_info:
            await build().search("ajedrez", "w1")
        assert exc_info.value.stage == "embed_query"

    @pytest.mark.asyncio
    async def test_store_failure(self, seeded_db, build, vector_store):
        vector_store.search = AsyncMock(side_effect=RuntimeError("db gone"))
        with pytest.raises(SearchPipelineFailure) as exc_info:
            await build().search("ajedrez", "w1")
        assert exc_info.value.stage == "vector_search"
