# tests/unit/search/test_unit_keyword_extractor.py - v1
"""Tests for search/keyword_extractor.py."""

from __future__ import annotations

import pytest

from meshsearch.search.keyword_extractor import KeywordExtractor, parse_keyword_list

CONTENT = "Juego al ajedrez. Juego torneos de ajedrez. Me gusta cocinar."


class TestParseKeywordList:
    def test_split_and_clean(self):
        assert parse_keyword_list("ajedrez, torneos , cocina.", 5) == ["ajedrez", "torneos", "cocina"]

    def test_drops_multiword(self):
        assert parse_keyword_list("ajedrez, juegos de mesa, cocina", 5) == ["ajedrez", "cocina"]


class TestKeywordExtractor:
    @pytest.mark.asyncio
    async def test_extract(self, mock_llm):
        mock_llm.set_responses("ajedrez, torneos, cocina, estrategia, domingos, extra")
        keywords = await KeywordExtractor(mock_llm).extract(CONTENT, 5)
        assert keywords == ["ajedrez", "torneos", "cocina", "estrategia", "domingos"]
        assert "5" in mock_llm.calls[0]["system"]

    @pytest.mark.asyncio
    async def test_failure_uses_frequency(self, mock_llm):
        mock_llm.set_responses(RuntimeError("down"))
        keywords = await KeywordExtractor(mock_llm).extract(CONTENT, 2)
        assert keywords == ["juego", "ajedrez"]

    @pytest.mark.asyncio
    async def test_unusable_output_uses_frequency(self, mock_llm):
        mock_llm.set_responses("juegos de mesa")
        keywords = await KeywordExtractor(mock_llm).extract(CONTENT, 5)
        assert keywords
        assert all(" " not in k for k in keywords)

    @pytest.mark.asyncio
    async def test_empty_content(self, mock_llm):
        assert await KeywordExtractor(mock_llm).extract("  ", 5) == []
        assert mock_llm.calls == []
