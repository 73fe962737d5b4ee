# tests/unit/api/test_unit_models.py - v1
"""Tests for api/models.py (wire format)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from meshsearch.api.models import (
    MatchBody,
    ProfileContentRequest,
    ProfileContentResponse,
    SearchRequest,
)
from meshsearch.core.models import CandidateMatch, SocialHandles


class TestSearchRequest:
    def test_camel_case(self):
        req = SearchRequest.model_validate({"query": " ajedrez ", "workspaceScope": "w1"})
        assert req.query == "ajedrez"
        assert req.workspace_scope == "w1"

    def test_workspace_optional(self):
        assert SearchRequest.model_validate({"query": "ajedrez"}).workspace_scope is None

    def test_blank_query(self):
        with pytest.raises(ValidationError):
            SearchRequest.model_validate({"query": "  "})


class TestMatchBody:
    def test_from_match(self):
        match = CandidateMatch(
            id="ana", display_name="Ana", raw_content="Ajedrez.", summary="juega",
            keywords=["ajedrez"], match_reason="juega al ajedrez",
            social_handles=SocialHandles(x="@ana"),
        )
        body = MatchBody.from_match(match).model_dump(by_alias=True)
        assert body["name"] == "Ana"
        assert body["content"] == "Ajedrez."
        assert body["matchReason"] == "juega al ajedrez"
        assert body["socialHandles"]["x"] == "@ana"
        assert body["needsReview"] is False


class TestProfileContent:
    def test_request(self):
        req = ProfileContentRequest.model_validate({
            "answers": [{"key": "hobby", "value": "ajedrez"}],
            "displayName": "Ana",
            "socialHandles": {"telegram": "@ana"},
        })
        assert req.answers[0].key == "hobby"
        assert req.social_handles.to_domain().telegram == "@ana"

    def test_response_aliases(self):
        body = ProfileContentResponse(
            profile_id="ana", chunks_indexed=2, content_changed=True,
        ).model_dump(by_alias=True)
        assert body == {"profileId": "ana", "chunksIndexed": 2, "contentChanged": True}
