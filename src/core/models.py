# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


# === WORKSPACE MEMBERSHIP ===


class MembershipStatus(str, Enum):
    """State of a profile's membership in a workspace."""

    INVITED = "invited"
    ACTIVE = "active"
    ADMIN = "admin"
    REJECTED = "rejected"


# Only these states make a profile a search candidate.
ELIGIBLE_STATUSES: frozenset[MembershipStatus] = frozenset(
    {MembershipStatus.ACTIVE, MembershipStatus.ADMIN}
)


class WorkspaceMembership(BaseModel):
    """Link between a profile and a workspace."""

    workspace_id: str
    status: MembershipStatus = MembershipStatus.ACTIVE

    @property
    def is_eligible(self) -> bool:
        return self.status in ELIGIBLE_STATUSES


# === PROFILE ===


class SocialHandles(BaseModel):
    """Optional social network handles attached to a profile."""

    x: str | None = None
    telegram: str | None = None
    instagram: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Return only the handles that are present."""
        return {k: v for k, v in self.model_dump().items() if v}


class Profile(BaseModel):
    """Community member profile. Content is the sole input to embedding and curation."""

    id: str
    display_name: str | None = None
    raw_content: str = ""
    social_handles: SocialHandles = Field(default_factory=SocialHandles)
    memberships: list[WorkspaceMembership] = Field(default_factory=list)
    # Fingerprint of the submitted text before any rewrite.
    source_hash: str | None = None

    @property
    def has_content(self) -> bool:
        return bool(self.raw_content and self.raw_content.strip())

    def is_eligible_in(self, workspace_id: str | None) -> bool:
        """Whether this profile is a candidate for a search in workspace_id.

        workspace_id=None means "any workspace": at least one eligible membership.
        """
        for membership in self.memberships:
            if not membership.is_eligible:
                continue
            if workspace_id is None or membership.workspace_id == workspace_id:
                return True
        return False


# === CHUNKS ===


class Chunk(BaseModel):
    """Sentence-level fragment of a profile's content with its embedding."""

    owner_id: str
    text: str
    vector: list[float]


# === SEARCH ===


class SearchQuery(BaseModel):
    """Ephemeral search request."""

    text: str
    workspace_id: str | None = None

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:  # noqa: N805
        if not v or not v.strip():
            raise ValueError("query text must not be blank")
        return v.strip()


class CandidateMatch(BaseModel):
    """One explained search result. Constructed per search, never persisted."""

    id: str
    display_name: str | None = None
    raw_content: str = ""
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)
    match_reason: str | None = None
    social_handles: SocialHandles = Field(default_factory=SocialHandles)
    similarity: float | None = None
    needs_review: bool = False


class SearchResponse(BaseModel):
    """Result envelope of one search."""

    matches: list[CandidateMatch] = Field(default_factory=list)
