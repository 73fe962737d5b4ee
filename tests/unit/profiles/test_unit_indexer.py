# tests/unit/profiles/test_unit_indexer.py - v1
"""Tests for profiles/indexer.py."""

from __future__ import annotations

import pytest

from meshsearch.chunking.sentence_chunker import SentenceChunker
from meshsearch.core.errors import EmbeddingFailure, ProfileNotFoundError
from meshsearch.core.models import SocialHandles
from meshsearch.profiles.describer import ProfileDescriber
from meshsearch.profiles.form_content import FormAnswer
from meshsearch.profiles.indexer import ProfileIndexer
from tests.conftest import make_profile


@pytest.fixture
def indexer(memory_db, profile_store, vector_store, embeddings):
    return ProfileIndexer(memory_db, profile_store, vector_store, embeddings, SentenceChunker())


class TestIndexProfile:
    @pytest.mark.asyncio
    async def test_index_new_profile(self, indexer, vector_store, profile_store):
        result = await indexer.index_profile(
            make_profile("ana", "Me apasiona el ajedrez. Juego torneos todos los fines de semana.")
        )
        assert result.chunks_indexed == 2
        chunks = await vector_store.list_chunks("ana")
        assert [c.text for c in chunks] == [
            "Me apasiona el ajedrez",
            "Juego torneos todos los fines de semana",
        ]
        assert await profile_store.get_profile("ana") is not None

    @pytest.mark.asyncio
    async def test_empty_content_no_chunks(self, indexer, vector_store):
        result = await indexer.index_profile(make_profile("ana", ""))
        assert result.chunks_indexed == 0
        assert await vector_store.count("ana") == 0


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_content_a_to_b(self, indexer, vector_store, profile_store):
        await indexer.index_profile(make_profile("ana", "Juego al ajedrez. Me gusta cocinar."))
        result = await indexer.update_profile("ana", content="Juego al tenis.")

        assert result.content_changed
        assert result.chunks_indexed == 1
        assert [c.text for c in await vector_store.list_chunks("ana")] == ["Juego al tenis"]
        assert (await profile_store.get_profile("ana")).raw_content == "Juego al tenis."

    @pytest.mark.asyncio
    async def test_unchanged_content_keeps_chunks(self, indexer, mock_embedder):
        await indexer.index_profile(make_profile("ana", "Juego al ajedrez. Me gusta cocinar."))
        calls = mock_embedder.call_count
        result = await indexer.update_profile(
            "ana",
            content="Juego al ajedrez. Me gusta cocinar.",
            display_name="Ana María",
            social_handles=SocialHandles(x="@anam"),
        )
        assert not result.content_changed
        assert result.chunks_indexed == 2
        assert mock_embedder.call_count == calls

    @pytest.mark.asyncio
    async def test_name_and_handles_updated(self, indexer, profile_store):
        await indexer.index_profile(make_profile("ana", "Ajedrez."))
        await indexer.update_profile(
            "ana", display_name="Ana María", social_handles=SocialHandles(x="@anam")
        )
        profile = await profile_store.get_profile("ana")
        assert profile.display_name == "Ana María"
        assert profile.social_handles.x == "@anam"
        assert [m.workspace_id for m in profile.memberships] == ["w1"]

    @pytest.mark.asyncio
    async def test_answers(self, indexer, vector_store):
        await indexer.index_profile(make_profile("ana", "Ajedrez."))
        result = await indexer.update_profile(
            "ana",
            answers=[
                FormAnswer(key="hobby", value="ajedrez"),
                FormAnswer(key="intereses", value=["cocina", "música"]),
            ],
        )
        assert result.chunks_indexed == 2
        texts = [c.text for c in await vector_store.list_chunks("ana")]
        assert texts == ["hobby: ajedrez", "intereses: cocina, música"]

    @pytest.mark.asyncio
    async def test_unknown_profile(self, indexer):
        with pytest.raises(ProfileNotFoundError):
            await indexer.update_profile("ghost", content="x")

    @pytest.mark.asyncio
    async def test_embedding_failure_writes_nothing(
        self, indexer, mock_embedder, vector_store, profile_store
    ):
        await indexer.index_profile(make_profile("ana", "Juego al ajedrez."))
        mock_embedder.fail_with = RuntimeError("provider down")

        with pytest.raises(EmbeddingFailure):
            await indexer.update_profile("ana", content="Juego al tenis.", display_name="Otra")

        profile = await profile_store.get_profile("ana")
        assert profile.raw_content == "Juego al ajedrez."
        assert profile.display_name == "Ana"
        assert [c.text for c in await vector_store.list_chunks("ana")] == ["Juego al ajedrez"]

    @pytest.mark.asyncio
    async def test_describer_applied_on_change(
        self, memory_db, profile_store, vector_store, embeddings, mock_llm
    ):
        mock_llm.set_responses("Le gusta el ajedrez. Cocina los domingos.")
        indexer = ProfileIndexer(
            memory_db, profile_store, vector_store, embeddings,
            SentenceChunker(), ProfileDescriber(mock_llm),
        )
        await profile_store.save_profile(make_profile("ana", ""))
        result = await indexer.update_profile("ana", content="hobby: ajedrez. cocina: domingos.")
        assert result.chunks_indexed == 2
        assert (await profile_store.get_profile("ana")).raw_content.startswith("Le gusta")

    @pytest.mark.asyncio
    async def test_describer_resubmit_same_content_unchanged(
        self, memory_db, profile_store, vector_store, embeddings, mock_llm, mock_embedder
    ):
        mock_llm.set_responses("Le gusta el ajedrez y juega torneos.")
        indexer = ProfileIndexer(
            memory_db, profile_store, vector_store, embeddings,
            SentenceChunker(), ProfileDescriber(mock_llm),
        )
        await profile_store.save_profile(make_profile("ana", ""))
        first = await indexer.update_profile("ana", content="ajedrez y torneos")
        assert first.content_changed
        calls = mock_embedder.call_count

        second = await indexer.update_profile("ana", content="ajedrez y torneos")
        assert not second.content_changed
        assert second.chunks_indexed == first.chunks_indexed
        assert len(mock_llm.calls) == 1
        assert mock_embedder.call_count == calls
        profile = await profile_store.get_profile("ana")
        assert profile.raw_content == "Le gusta el ajedrez y juega torneos."

    @pytest.mark.asyncio
    async def test_reindex(self, indexer, vector_store):
        await indexer.index_profile(make_profile("ana", "Juego al ajedrez. Cocino."))
        await vector_store.upsert_chunks("ana", [])
        result = await indexer.reindex("ana")
        assert result.chunks_indexed == 2
        assert await vector_store.count("ana") == 2
