# src/api/models.py - v1
"""HTTP request and response bodies (camelCase on the wire)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from meshsearch.core.models import CandidateMatch, SocialHandles
from meshsearch.profiles.form_content import FormAnswer

GENERIC_ERROR_MESSAGE = "No se pudo procesar tu solicitud"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SearchRequest(_CamelModel):
    query: str
    workspace_scope: str | None = Field(default=None, alias="workspaceScope")

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:  # noqa: N805
        if not v.strip():
            raise ValueError("query must not be blank")
        return v.strip()


class SocialHandlesBody(_CamelModel):
    x: str | None = None
    telegram: str | None = None
    instagram: str | None = None

    @classmethod
    def from_domain(cls, handles: SocialHandles) -> SocialHandlesBody:
        return cls(x=handles.x, telegram=handles.telegram, instagram=handles.instagram)

    def to_domain(self) -> SocialHandles:
        return SocialHandles(x=self.x, telegram=self.telegram, instagram=self.instagram)


class MatchBody(_CamelModel):
    """One rendered person card."""

    id: str
    name: str | None = None
    content: str = ""
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)
    match_reason: str | None = Field(default=None, alias="matchReason")
    social_handles: SocialHandlesBody = Field(
        default_factory=SocialHandlesBody, alias="socialHandles",
    )
    needs_review: bool = Field(default=False, alias="needsReview")

    @classmethod
    def from_match(cls, match: CandidateMatch) -> MatchBody:
        return cls(
            id=match.id,
            name=match.display_name,
            content=match.raw_content,
            summary=match.summary,
            keywords=match.keywords,
            match_reason=match.match_reason,
            social_handles=SocialHandlesBody.from_domain(match.social_handles),
            needs_review=match.needs_review,
        )


class SearchResponseBody(_CamelModel):
    matches: list[MatchBody] = Field(default_factory=list)


class ProfileContentRequest(_CamelModel):
    """Profile edit. ``answers`` wins over ``content`` when both are sent."""

    answers: list[FormAnswer] | None = None
    content: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    social_handles: SocialHandlesBody | None = Field(default=None, alias="socialHandles")


class ProfileContentResponse(_CamelModel):
    profile_id: str = Field(alias="profileId")
    chunks_indexed: int = Field(alias="chunksIndexed")
    content_changed: bool = Field(alias="contentChanged")


class ErrorBody(BaseModel):
    error: str = GENERIC_ERROR_MESSAGE
