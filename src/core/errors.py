# src/core/errors.py - v1
"""Error taxonomy for the search and indexing pipelines.

Fatal errors (embedding, retrieval, curation) propagate to the request
boundary; per-candidate enrichment errors are recovered locally.
An empty candidate pool is not an error.
"""

from __future__ import annotations


class MeshSearchError(Exception):
    """Base class for all meshsearch domain errors."""


class EmbeddingFailure(MeshSearchError):
    """Underlying embedding call failed or returned malformed vectors.

    Fatal for the current request; nothing is indexed.
    """


class SearchPipelineFailure(MeshSearchError):
    """Retrieval or curation failed; the request gets no partial result list."""

    def __init__(
        self,
        message: str,
        stage: str,
        query: str | None = None,
        workspace_id: str | None = None,
    ) -> None:
        self.stage = stage
        self.query = query
        self.workspace_id = workspace_id
        super().__init__(f"[{stage}] {message}")


class SearchTimeout(SearchPipelineFailure):
    """The search did not finish within the configured deadline."""


class SummarizationParseFailure(MeshSearchError):
    """Summarizer output could not be parsed into the expected structure."""

    def __init__(self, raw_text: str, reason: str) -> None:
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"Unparseable summarizer output: {reason}")


class ProfileNotFoundError(MeshSearchError):
    """Profile to index or update does not exist."""

    def __init__(self, profile_id: str) -> None:
        self.profile_id = profile_id
        super().__init__(f"Profile not found: {profile_id}")
