# src/search/service.py - v1
"""Search entry point shared by the HTTP API and the CLI.

Wraps the configured engine (context curator or vector pipeline) with a
request deadline and structured failure logging. Fatal errors surface as
SearchPipelineFailure so callers can answer with a generic error body.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Protocol

from meshsearch.core.errors import SearchPipelineFailure, SearchTimeout
from meshsearch.core.models import CandidateMatch, SearchQuery, SearchResponse
from meshsearch.logging.context import set_component_context, set_request_context

logger = logging.getLogger(__name__)


class SearchEngine(Protocol):
    """Anything that turns a query into explained matches."""

    async def search(self, query: str, workspace_id: str | None) -> list[CandidateMatch]:
        ...


class SearchService:
    """Runs one search per request under a deadline."""

    def __init__(
        self,
        engine: SearchEngine,
        mode: str = "context",
        timeout_seconds: float = 30.0,
    ) -> None:
        self._engine = engine
        self._mode = mode
        self._timeout = timeout_seconds

    @property
    def mode(self) -> str:
        return self._mode

    async def search(self, query: SearchQuery, request_id: str | None = None) -> SearchResponse:
        """Execute ``query`` and wrap the matches.

        Raises:
            SearchTimeout: The deadline elapsed.
            SearchPipelineFailure: Any other fatal pipeline error.
        """
        set_request_context(request_id or uuid.uuid4().hex[:12], query.workspace_id)
        set_component_context("search", stage="start")
        start = time.monotonic()
        logger.info("Search started (mode=%s)", self._mode)

        try:
            matches = await asyncio.wait_for(
                self._engine.search(query.text, query.workspace_id),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Search timed out after %.1fs",
                self._timeout,
                extra={"data": {"query": query.text, "workspace_id": query.workspace_id}},
            )
            raise SearchTimeout(
                f"Search exceeded {self._timeout:.1f}s",
                stage="timeout", query=query.text, workspace_id=query.workspace_id,
            ) from exc
        except SearchPipelineFailure as exc:
            logger.error(
                "Search failed: %s",
                exc,
                extra={
                    "data": {
                        "query": query.text,
                        "workspace_id": query.workspace_id,
                        "stage": exc.stage,
                    }
                },
            )
            raise
        except Exception as exc:
            stage = "unexpected"
            logger.exception(
                "Unexpected search error",
                extra={
                    "data": {
                        "query": query.text,
                        "workspace_id": query.workspace_id,
                        "stage": stage,
                    }
                },
            )
            raise SearchPipelineFailure(
                f"Unexpected error: {type(exc).__name__}",
                stage=stage, query=query.text, workspace_id=query.workspace_id,
            ) from exc

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("Search finished: %d matches in %dms", len(matches), elapsed_ms)
        return SearchResponse(matches=matches)
