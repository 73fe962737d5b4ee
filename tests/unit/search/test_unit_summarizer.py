# tests/unit/search/test_unit_summarizer.py - v1
"""Tests for search/summarizer.py."""

from __future__ import annotations

import json

import pytest

from meshsearch.core.errors import SummarizationParseFailure
from meshsearch.search.summarizer import (
    DEFAULT_GATED_REASON,
    SUMMARIZER_SYSTEM_PROMPT,
    RelevanceSummarizer,
    parse_summary,
)

CONTENT = "Juego al ajedrez los domingos. Me gusta cocinar."


def _payload(summary: str, render: bool = True, reason: str | None = None) -> str:
    return json.dumps({"summary": summary, "shouldRender": render, "reason": reason})


class TestParseSummary:
    def test_valid(self):
        payload = parse_summary(_payload("juega al ajedrez"))
        assert payload.should_render is True

    def test_hidden_without_reason(self):
        payload = parse_summary(json.dumps({"summary": "le gusta el padel", "shouldRender": False}))
        assert payload.should_render is False
        assert payload.reason is None

    def test_garbage(self):
        with pytest.raises(SummarizationParseFailure) as exc_info:
            parse_summary("le gusta el ajedrez")
        assert exc_info.value.raw_text == "le gusta el ajedrez"


class TestRelevanceSummarizer:
    def test_prompt_policy(self):
        assert "padel" in SUMMARIZER_SYSTEM_PROMPT
        assert "shouldRender" in SUMMARIZER_SYSTEM_PROMPT
        assert "español" in SUMMARIZER_SYSTEM_PROMPT

    @pytest.mark.asyncio
    async def test_summary(self, mock_llm):
        mock_llm.set_responses(_payload("juega al ajedrez los domingos"))
        result = await RelevanceSummarizer(mock_llm).summarize(CONTENT, "ajedrez")
        assert result.summary == "juega al ajedrez los domingos"
        assert result.should_render
        assert not result.needs_review
        assert "ajedrez" in mock_llm.calls[0]["messages"][0].content

    @pytest.mark.asyncio
    async def test_gate_closed(self, mock_llm):
        mock_llm.set_responses(_payload("juega al padel", False, "juega al padel, no al tenis"))
        result = await RelevanceSummarizer(mock_llm).summarize("Juego al padel.", "tenis")
        assert not result.should_render
        assert result.display_text == "juega al padel, no al tenis"

    @pytest.mark.asyncio
    async def test_gate_closed_without_reason(self, mock_llm):
        mock_llm.set_responses(
            json.dumps({"summary": "le gusta el padel", "shouldRender": False})
        )
        result = await RelevanceSummarizer(mock_llm).summarize("Juego al padel.", "tenis")
        assert result.should_render is False
        assert not result.needs_review
        assert result.summary == "le gusta el padel"
        assert result.display_text == DEFAULT_GATED_REASON

    @pytest.mark.asyncio
    async def test_summary_bounded(self, mock_llm):
        mock_llm.set_responses(_payload("palabra " * 100))
        result = await RelevanceSummarizer(mock_llm, max_chars=60).summarize(CONTENT, "x")
        assert len(result.summary) <= 60

    @pytest.mark.asyncio
    async def test_unparseable_fails_open(self, mock_llm):
        mock_llm.set_responses("le gusta mucho el ajedrez")
        result = await RelevanceSummarizer(mock_llm).summarize(CONTENT, "ajedrez")
        assert result.should_render
        assert result.needs_review
        assert result.summary == "le gusta mucho el ajedrez"

    @pytest.mark.asyncio
    async def test_provider_failure_shows_content(self, mock_llm):
        mock_llm.set_responses(RuntimeError("down"))
        result = await RelevanceSummarizer(mock_llm).summarize(CONTENT, "ajedrez")
        assert result.should_render
        assert result.needs_review
        assert result.summary == CONTENT
