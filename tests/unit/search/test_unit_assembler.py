# tests/unit/search/test_unit_assembler.py - v1
"""Tests for search/assembler.py."""

from __future__ import annotations

from meshsearch.core.models import CandidateMatch
from meshsearch.search.assembler import ResultAssembler
from tests.conftest import make_profile

PROFILES = {
    "ana": make_profile("ana", "Juego al ajedrez.", name="Ana", x="@ana"),
    "bruno": make_profile("bruno", "Juego al tenis.", name="Bruno"),
}


class TestResultAssembler:
    def test_canonical_fields_override_llm(self):
        proposed = CandidateMatch(
            id="ana", display_name="Ana Inventada", raw_content="contenido falso",
            summary="juega ajedrez", keywords=["ajedrez"],
        )
        [match] = ResultAssembler().assemble([proposed], PROFILES)
        assert match.display_name == "Ana"
        assert match.raw_content == "Juego al ajedrez."
        assert match.social_handles.x == "@ana"
        assert match.summary == "juega ajedrez"

    def test_unknown_ids_discarded(self):
        result = ResultAssembler().assemble(
            [CandidateMatch(id="ghost"), CandidateMatch(id="bruno")], PROFILES
        )
        assert [m.id for m in result] == ["bruno"]

    def test_first_occurrence_wins(self):
        result = ResultAssembler().assemble(
            [
                CandidateMatch(id="ana", summary="primero"),
                CandidateMatch(id="ana", summary="segundo"),
            ],
            PROFILES,
        )
        assert len(result) == 1
        assert result[0].summary == "primero"

    def test_limit(self):
        result = ResultAssembler().assemble(
            [CandidateMatch(id="ana"), CandidateMatch(id="bruno")], PROFILES, limit=1
        )
        assert [m.id for m in result] == ["ana"]

    def test_bounds_applied(self):
        proposed = CandidateMatch(
            id="ana",
            summary="palabra " * 50,
            keywords=["uno", "dos tres", "cuatro", "cinco", "seis", "siete", "ocho"],
            match_reason="   ",
        )
        [match] = ResultAssembler(keyword_count=5, summary_max_chars=40).assemble(
            [proposed], PROFILES
        )
        assert len(match.summary) <= 40
        assert len(match.keywords) == 5
        assert "dos tres" not in match.keywords
        assert match.match_reason is None
