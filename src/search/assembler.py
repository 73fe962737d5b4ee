# src/search/assembler.py - v1
"""Result assembler: merge LLM output with canonical profile records.

Identity fields (name, content, social handles) always come from the
profile store; LLM output is advisory for summary, keywords and reason
only. Matches whose id resolves to no live profile are discarded.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from meshsearch.core.models import CandidateMatch, Profile
from meshsearch.search.text_utils import normalize_keywords, truncate_text

logger = logging.getLogger(__name__)


class ResultAssembler:
    """De-duplicate, re-attach canonical fields and enforce output bounds."""

    def __init__(self, keyword_count: int = 5, summary_max_chars: int = 150) -> None:
        self._keyword_count = keyword_count
        self._summary_max_chars = summary_max_chars

    def assemble(
        self,
        candidates: Iterable[CandidateMatch],
        profiles: Mapping[str, Profile],
        limit: int | None = None,
    ) -> list[CandidateMatch]:
        """Return at most ``limit`` matches, first occurrence of each id wins."""
        assembled: list[CandidateMatch] = []
        seen: set[str] = set()

        for candidate in candidates:
            if limit is not None and len(assembled) >= limit:
                break
            if candidate.id in seen:
                continue
            profile = profiles.get(candidate.id)
            if profile is None:
                logger.warning("Discarding match for unknown profile %r", candidate.id)
                continue
            seen.add(candidate.id)
            assembled.append(self._merge(candidate, profile))

        return assembled

    def _merge(self, candidate: CandidateMatch, profile: Profile) -> CandidateMatch:
        reason = candidate.match_reason.strip() if candidate.match_reason else None
        return candidate.model_copy(
            update={
                "display_name": profile.display_name,
                "raw_content": profile.raw_content,
                "social_handles": profile.social_handles.model_copy(),
                "summary": truncate_text(candidate.summary, self._summary_max_chars),
                "keywords": normalize_keywords(candidate.keywords, self._keyword_count),
                "match_reason": reason or None,
            }
        )
