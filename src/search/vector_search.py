# src/search/vector_search.py - v1
"""Vector search path (alternative to the context-search curator).

    query -> expansion -> embed + search per branch (concurrent)
          -> de-dup by owner -> per-candidate summary/gate + keywords
             (concurrent, bounded) -> assembler

De-duplication keeps the first-seen occurrence of each owner in branch
completion order. Branches finish in a non-deterministic order, so the
relative order of candidates found by different branches can differ
between identical requests.

Embedding the query and running the similarity search are fatal stages;
summarizer and keyword failures are recovered per candidate.
"""

from __future__ import annotations

import asyncio
import logging

from meshsearch.core.errors import EmbeddingFailure, SearchPipelineFailure
from meshsearch.core.models import CandidateMatch, Profile
from meshsearch.logging.context import set_component_context, set_stage
from meshsearch.rag.embeddings.embedding_service import EmbeddingService
from meshsearch.rag.models import VectorHit
from meshsearch.rag.vector_store.base_vector_store import BaseVectorStore
from meshsearch.search.assembler import ResultAssembler
from meshsearch.search.keyword_extractor import KeywordExtractor
from meshsearch.search.query_expander import QueryExpander
from meshsearch.search.summarizer import RelevanceSummarizer
from meshsearch.storage.profile_store.base_profile_store import BaseProfileStore

logger = logging.getLogger(__name__)


class VectorSearchPipeline:
    """Embedding retrieval plus per-candidate LLM enrichment."""

    def __init__(
        self,
        embeddings: EmbeddingService,
        vector_store: BaseVectorStore,
        profile_store: BaseProfileStore,
        summarizer: RelevanceSummarizer,
        keyword_extractor: KeywordExtractor,
        assembler: ResultAssembler,
        expander: QueryExpander | None = None,
        *,
        min_similarity: float = 0.3,
        top_k: int = 8,
        max_results: int = 5,
        keyword_count: int = 5,
        concurrency: int = 5,
        include_gated: bool = False,
    ) -> None:
        self._embeddings = embeddings
        self._store = vector_store
        self._profiles = profile_store
        self._summarizer = summarizer
        self._keywords = keyword_extractor
        self._assembler = assembler
        self._expander = expander
        self._min_similarity = min_similarity
        self._top_k = top_k
        self._max_results = max_results
        self._keyword_count = keyword_count
        self._concurrency = concurrency
        self._include_gated = include_gated

    async def search(self, query: str, workspace_id: str | None) -> list[CandidateMatch]:
        """Run the full vector path.

        Raises:
            SearchPipelineFailure: Query embedding, similarity search or
                profile loading failed.
        """
        set_component_context("vector_search", stage="expand")
        branches = [query]
        if self._expander is not None:
            branches.extend(await self._expander.expand(query))
        logger.debug("Searching %d branch(es)", len(branches))

        set_stage("retrieve")
        hits = await self._retrieve(branches, query, workspace_id)
        best = _best_similarity_by_owner(hits)
        if not best:
            logger.info("No chunk above similarity %.2f", self._min_similarity)
            return []

        set_stage("load_profiles")
        try:
            profiles = await self._profiles.get_profiles(list(best))
        except Exception as exc:
            raise SearchPipelineFailure(
                f"Could not load profiles: {type(exc).__name__}",
                stage="load_profiles", query=query, workspace_id=workspace_id,
            ) from exc
        live = {
            pid: p for pid, p in profiles.items()
            if p.has_content and p.is_eligible_in(workspace_id)
        }

        set_stage("enrich")
        semaphore = asyncio.Semaphore(self._concurrency)
        enriched = await asyncio.gather(
            *(
                self._enrich(live[pid], query, similarity, semaphore)
                for pid, similarity in best.items()
                if pid in live
            )
        )
        candidates = [c for c in enriched if c is not None]

        set_stage("assemble")
        return self._assembler.assemble(candidates, live, limit=self._max_results)

    async def _retrieve(
        self, branches: list[str], query: str, workspace_id: str | None
    ) -> list[VectorHit]:
        tasks = [asyncio.create_task(self._search_branch(b, workspace_id)) for b in branches]
        hits: list[VectorHit] = []
        try:
            for next_done in asyncio.as_completed(tasks):
                hits.extend(await next_done)
        except EmbeddingFailure as exc:
            raise SearchPipelineFailure(
                f"Query embedding failed: {exc}",
                stage="embed_query", query=query, workspace_id=workspace_id,
            ) from exc
        except SearchPipelineFailure:
            raise
        except Exception as exc:
            raise SearchPipelineFailure(
                f"Similarity search failed: {type(exc).__name__}",
                stage="vector_search", query=query, workspace_id=workspace_id,
            ) from exc
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
        return hits

    async def _search_branch(self, text: str, workspace_id: str | None) -> list[VectorHit]:
        vector = await self._embeddings.embed_one(text)
        return await self._store.search(
            vector,
            min_similarity=self._min_similarity,
            limit=self._top_k,
            workspace_id=workspace_id,
        )

    async def _enrich(
        self,
        profile: Profile,
        query: str,
        similarity: float,
        semaphore: asyncio.Semaphore,
    ) -> CandidateMatch | None:
        async with semaphore:
            verdict, keywords = await asyncio.gather(
                self._summarizer.summarize(profile.raw_content, query),
                self._keywords.extract(profile.raw_content, self._keyword_count),
            )
        if not verdict.should_render:
            logger.info("Candidate %s gated out: %s", profile.id, verdict.reason)
            if not self._include_gated:
                return None
        return CandidateMatch(
            id=profile.id,
            summary=verdict.display_text,
            keywords=keywords,
            match_reason=verdict.reason if not verdict.should_render else None,
            similarity=similarity,
            needs_review=verdict.needs_review,
        )


def _best_similarity_by_owner(hits: list[VectorHit]) -> dict[str, float]:
    """Owner -> best similarity, keyed in first-seen order."""
    best: dict[str, float] = {}
    for hit in hits:
        if hit.owner_id not in best or hit.similarity > best[hit.owner_id]:
            best[hit.owner_id] = hit.similarity
    return best
