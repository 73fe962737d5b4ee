# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides a scripted mock LLM client, a deterministic topic embedder and a
seeded in-memory database. No network access; all providers are mocked.
"""

from __future__ import annotations

import hashlib
import math
from typing import Any

import pytest
from pydantic import BaseModel

from meshsearch.config.settings import Settings
from meshsearch.core.models import (
    MembershipStatus,
    Profile,
    SocialHandles,
    WorkspaceMembership,
)
from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import LLMResponse, Message
from meshsearch.rag.embeddings.base_embedder import BaseEmbedder
from meshsearch.rag.embeddings.embedding_service import EmbeddingService
from meshsearch.rag.vector_store.memory_store import MemoryVectorStore
from meshsearch.storage.memory_database import MemoryDatabase
from meshsearch.storage.profile_store.memory_profile_store import MemoryProfileStore

# Word stems mapped to one axis each; the last axis is a small bias so
# no vector is all zeros.
TOPICS: tuple[str, ...] = (
    "ajedrez", "tenis", "cocin", "guitarra", "padel", "bail", "músic",
)


# === MOCK LLM ===


class MockLLMClient(BaseLLMClient):
    """Scripted LLM client.

    Queued entries are returned in order; an Exception entry is raised
    instead. When the queue is empty the default response is returned.
    """

    def __init__(self, default_response: str = '{"result": "mock"}') -> None:
        self._default_response = default_response
        self._response_queue: list[str | Exception] = []
        self.calls: list[dict[str, Any]] = []

    def set_responses(self, *responses: str | Exception) -> None:
        self._response_queue = list(responses)

    def set_default(self, response: str) -> None:
        self._default_response = response

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        self.calls.append({
            "messages": messages, "system": system,
            "max_tokens": max_tokens, "temperature": temperature,
            "response_format": response_format,
        })
        item = self._response_queue.pop(0) if self._response_queue else self._default_response
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item, input_tokens=50, output_tokens=len(item) // 4,
            model="mock-model", provider="mock", latency_ms=10,
        )

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model_name(self) -> str:
        return "mock-model"


# === MOCK EMBEDDER ===


class MockEmbedder(BaseEmbedder):
    """Deterministic embedder.

    With ``topics`` (default) each vector counts topic stems in the text,
    so texts about the same topic are close. With ``topics=()`` vectors
    are derived from a hash of the text.
    """

    def __init__(self, topics: tuple[str, ...] = TOPICS, dimensions: int | None = None) -> None:
        self._topics = topics
        self._dims = dimensions or (len(topics) + 1 if topics else 16)
        self.call_count = 0
        self.fail_with: Exception | None = None

    def _text_to_vec(self, text: str) -> list[float]:
        if self._topics:
            lowered = text.lower()
            raw = [float(lowered.count(t)) for t in self._topics] + [0.01]
            raw.extend([0.0] * (self._dims - len(raw)))
        else:
            digest = hashlib.sha256(text.encode()).digest()
            raw = [digest[i % len(digest)] / 255.0 - 0.5 for i in range(self._dims)]
        norm = math.sqrt(sum(x * x for x in raw)) or 1.0
        return [x / norm for x in raw]

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if self.fail_with is not None:
            raise self.fail_with
        self.call_count += len(texts)
        return [self._text_to_vec(t) for t in texts]

    async def embed_query(self, query: str) -> list[float]:
        if self.fail_with is not None:
            raise self.fail_with
        self.call_count += 1
        return self._text_to_vec(query)

    @property
    def dimensions(self) -> int:
        return self._dims

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model_name(self) -> str:
        return "mock-embedder"


# === FIXTURES ===


@pytest.fixture
def mock_llm() -> MockLLMClient:
    return MockLLMClient()


@pytest.fixture
def mock_embedder() -> MockEmbedder:
    return MockEmbedder()


@pytest.fixture
def embeddings(mock_embedder: MockEmbedder) -> EmbeddingService:
    return EmbeddingService(mock_embedder)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        database_backend="memory",
        embedding_dimensions=len(TOPICS) + 1,
        log_format="text",
    )


@pytest.fixture
def memory_db() -> MemoryDatabase:
    return MemoryDatabase()


@pytest.fixture
def profile_store(memory_db: MemoryDatabase) -> MemoryProfileStore:
    return MemoryProfileStore(memory_db)


@pytest.fixture
def vector_store(memory_db: MemoryDatabase) -> MemoryVectorStore:
    return MemoryVectorStore(memory_db, dimensions=len(TOPICS) + 1)


def make_profile(
    profile_id: str,
    content: str,
    workspace_id: str = "w1",
    status: MembershipStatus = MembershipStatus.ACTIVE,
    name: str | None = None,
    **handles: str,
) -> Profile:
    return Profile(
        id=profile_id,
        display_name=name or profile_id.title(),
        raw_content=content,
        social_handles=SocialHandles(**handles),
        memberships=[WorkspaceMembership(workspace_id=workspace_id, status=status)],
    )


SEED_PROFILES: tuple[Profile, ...] = (
    make_profile("ana", "Juego al ajedrez. Me gusta cocinar.", telegram="@ana"),
    make_profile("bruno", "Juego al tenis los sábados.", status=MembershipStatus.ADMIN),
    make_profile("carla", "Juego al ajedrez en torneos.", status=MembershipStatus.INVITED),
    make_profile("dario", ""),
    make_profile("eva", "Juego al ajedrez online.", workspace_id="w2"),
    make_profile("fede", "Juego al padel.", status=MembershipStatus.REJECTED),
)


@pytest.fixture
async def seeded_db(
    memory_db: MemoryDatabase,
    profile_store: MemoryProfileStore,
    vector_store: MemoryVectorStore,
    embeddings: EmbeddingService,
) -> MemoryDatabase:
    """Memory database with workspaces w1/w2, profiles and their chunks."""
    from meshsearch.chunking.sentence_chunker import split_sentences
    from meshsearch.core.models import Chunk

    await profile_store.save_workspace("w1", "Comunidad")
    await profile_store.save_workspace("w2", "Otra")
    for profile in SEED_PROFILES:
        await profile_store.save_profile(profile)
        texts = split_sentences(profile.raw_content)
        vectors = await embeddings.embed_many(texts)
        await vector_store.upsert_chunks(
            profile.id,
            [Chunk(owner_id=profile.id, text=t, vector=v) for t, v in zip(texts, vectors)],
        )
    return memory_db
