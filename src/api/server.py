# src/api/server.py - v1
"""HTTP surface (FastAPI).

Endpoints:
- POST /search: "people like X" search within a workspace
- PUT /profiles/{profile_id}/content: update a profile and re-index it
- GET /health: liveness and active search mode

Failure bodies are always ``{"error": <generic message>}``; details go to
the logs only.
"""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from meshsearch.api.facade import Runtime, build_runtime
from meshsearch.api.models import (
    ErrorBody,
    MatchBody,
    ProfileContentRequest,
    ProfileContentResponse,
    SearchRequest,
    SearchResponseBody,
)
from meshsearch.config.settings import Settings
from meshsearch.core.errors import (
    EmbeddingFailure,
    ProfileNotFoundError,
    SearchPipelineFailure,
    SearchTimeout,
)
from meshsearch.core.models import SearchQuery
from meshsearch.version import __version__

logger = logging.getLogger(__name__)

RuntimeFactory = Callable[[Settings], AbstractAsyncContextManager[Runtime]]


def _error(status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorBody().model_dump())


def create_app(
    settings: Settings | None = None,
    runtime_factory: RuntimeFactory | None = None,
) -> FastAPI:
    """Build the application. The runtime lives for the app's lifespan."""
    settings = settings or Settings()
    factory = runtime_factory or build_runtime

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting meshsearch API (mode=%s)", settings.search_mode)
        async with factory(settings) as runtime:
            app.state.runtime = runtime
            yield
        logger.info("meshsearch API stopped")

    app = FastAPI(title="meshsearch", version=__version__, lifespan=lifespan)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return _error(422)

    @app.get("/health")
    async def health(request: Request) -> dict:
        runtime: Runtime = request.app.state.runtime
        return {"status": "ok", "mode": runtime.search.mode}

    @app.post("/search")
    async def search(body: SearchRequest, request: Request) -> JSONResponse:
        runtime: Runtime = request.app.state.runtime
        query = SearchQuery(text=body.query, workspace_id=body.workspace_scope)
        try:
            response = await runtime.search.search(query)
        except SearchTimeout:
            return _error(504)
        except SearchPipelineFailure:
            return _error(500)

        payload = SearchResponseBody(
            matches=[MatchBody.from_match(m) for m in response.matches]
        )
        return JSONResponse(content=payload.model_dump(by_alias=True))

    @app.put("/profiles/{profile_id}/content")
    async def update_profile_content(
        profile_id: str, body: ProfileContentRequest, request: Request
    ) -> JSONResponse:
        runtime: Runtime = request.app.state.runtime
        try:
            result = await runtime.indexer.update_profile(
                profile_id,
                content=body.content,
                answers=body.answers,
                display_name=body.display_name,
                social_handles=body.social_handles.to_domain() if body.social_handles else None,
            )
        except ProfileNotFoundError:
            return _error(404)
        except ValidationError as exc:
            logger.info("Rejected answers for %s: %s", profile_id, exc.errors())
            return _error(422)
        except EmbeddingFailure as exc:
            logger.error("Profile %s not re-indexed: %s", profile_id, exc)
            return _error(502)

        payload = ProfileContentResponse(
            profile_id=result.profile_id,
            chunks_indexed=result.chunks_indexed,
            content_changed=result.content_changed,
        )
        return JSONResponse(content=payload.model_dump(by_alias=True))

    return app
