# src/api/facade.py - v1
"""Runtime assembly: the single place where components are wired together.

Usage:
    async with build_runtime(settings) as runtime:
        response = await runtime.search.search(SearchQuery(text="ajedrez"))

Every dependency can be injected (tests pass mock LLM clients, a mock
embedder and a memory database). Nothing is cached at module level; each
runtime owns its clients and connections and releases them on exit.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Mapping

from meshsearch.chunking.sentence_chunker import SentenceChunker
from meshsearch.config.settings import Settings
from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.client_factory import create_component_client
from meshsearch.profiles.describer import ProfileDescriber
from meshsearch.profiles.indexer import ProfileIndexer
from meshsearch.rag.embeddings.base_embedder import BaseEmbedder
from meshsearch.rag.embeddings.embedder_factory import create_embedder
from meshsearch.rag.embeddings.embedding_service import EmbeddingService
from meshsearch.rag.vector_store.base_vector_store import BaseVectorStore
from meshsearch.rag.vector_store.vector_store_factory import create_vector_store
from meshsearch.search.assembler import ResultAssembler
from meshsearch.search.context_search import ContextSearchCurator
from meshsearch.search.keyword_extractor import KeywordExtractor
from meshsearch.search.query_expander import QueryExpander
from meshsearch.search.service import SearchEngine, SearchService
from meshsearch.search.summarizer import RelevanceSummarizer
from meshsearch.search.vector_search import VectorSearchPipeline
from meshsearch.storage.base_database import BaseDatabase
from meshsearch.storage.database_factory import create_database
from meshsearch.storage.profile_store.base_profile_store import BaseProfileStore
from meshsearch.storage.profile_store.profile_store_factory import create_profile_store

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Live components of one application instance."""

    settings: Settings
    database: BaseDatabase
    profile_store: BaseProfileStore
    vector_store: BaseVectorStore
    embeddings: EmbeddingService
    search: SearchService
    indexer: ProfileIndexer


@asynccontextmanager
async def build_runtime(
    settings: Settings,
    *,
    llm_clients: Mapping[str, BaseLLMClient] | None = None,
    embedder: BaseEmbedder | None = None,
    database: BaseDatabase | None = None,
    init_schema: bool = False,
) -> AsyncIterator[Runtime]:
    """Connect the database and wire every component from ``settings``.

    Args:
        settings: Validated settings.
        llm_clients: Component name -> client overrides. Components not
            listed get a client from their configured provider.
        embedder: Embedding provider override.
        database: Database override (must not be connected yet).
        init_schema: Create tables and indexes before serving.
    """
    overrides = dict(llm_clients or {})

    def llm_for(component: str) -> BaseLLMClient:
        if component in overrides:
            return overrides[component]
        return create_component_client(component, settings)

    db = database or create_database(settings)
    await db.connect()
    try:
        if init_schema:
            await db.init_schema()

        profile_store = create_profile_store(db)
        vector_store = create_vector_store(db, settings.embedding_dimensions)
        embeddings = EmbeddingService(embedder or create_embedder(settings))
        temperature = settings.llm_default_temperature

        describer = None
        if settings.profile_rewrite_enabled:
            describer = ProfileDescriber(llm_for("profile_describer"), temperature)
        indexer = ProfileIndexer(
            db, profile_store, vector_store, embeddings, SentenceChunker(), describer,
        )

        engine: SearchEngine
        if settings.search_mode == "vector":
            expander = None
            if settings.query_expansion_enabled and settings.query_expansion_max > 0:
                expander = QueryExpander(
                    llm_for("query_expander"),
                    max_expansions=settings.query_expansion_max,
                    temperature=temperature,
                )
            engine = VectorSearchPipeline(
                embeddings,
                vector_store,
                profile_store,
                RelevanceSummarizer(
                    llm_for("summarizer"),
                    max_chars=settings.summary_max_chars,
                    temperature=temperature,
                ),
                KeywordExtractor(llm_for("keyword_extractor"), temperature),
                ResultAssembler(settings.keyword_count, settings.summary_max_chars),
                expander,
                min_similarity=settings.vector_min_similarity,
                top_k=settings.vector_top_k,
                max_results=settings.search_max_results,
                keyword_count=settings.keyword_count,
                concurrency=settings.enrichment_concurrency,
                include_gated=settings.vector_include_gated,
            )
        else:
            engine = ContextSearchCurator(
                llm_for("curator"),
                profile_store,
                ResultAssembler(settings.keyword_count, settings.match_summary_max_chars),
                max_results=settings.search_max_results,
                temperature=temperature,
                max_tokens=settings.llm_max_tokens,
            )

        search = SearchService(
            engine, mode=settings.search_mode, timeout_seconds=settings.search_timeout_seconds,
        )
        logger.info(
            "Runtime ready: mode=%s, database=%s, embeddings=%s",
            settings.search_mode, db.backend_name, embeddings.model_name,
        )
        yield Runtime(
            settings=settings,
            database=db,
            profile_store=profile_store,
            vector_store=vector_store,
            embeddings=embeddings,
            search=search,
            indexer=indexer,
        )
    finally:
        await db.close()
        logger.debug("Runtime closed")
