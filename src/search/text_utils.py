# src/search/text_utils.py - v1
"""Text helpers shared by the summarizer, keyword extractor and assembler."""

from __future__ import annotations

import re
from collections import Counter

_ELLIPSIS = "..."
_NON_WORD = re.compile(r"[^\w\s]")
_KEYWORD_EDGE_PUNCT = ".,;:!?¡¿\"'`()[]{}#*-"
MIN_FALLBACK_WORD_LENGTH = 4


def truncate_text(text: str, max_chars: int) -> str:
    """Truncate to at most ``max_chars``, cutting at a word boundary.

    Truncated text ends with '...'; text within the budget is returned as is.
    """
    text = text.strip()
    if len(text) <= max_chars:
        return text
    if max_chars <= len(_ELLIPSIS):
        return text[:max_chars]
    cut = text[: max_chars - len(_ELLIPSIS)]
    if " " in cut:
        cut = cut[: cut.rfind(" ")]
    return cut.rstrip(" ,;:") + _ELLIPSIS


def clean_keyword(raw: str) -> str:
    return raw.strip().strip(_KEYWORD_EDGE_PUNCT).strip()


def normalize_keywords(keywords: list[str], count: int) -> list[str]:
    """Single-token keywords, de-duplicated case-insensitively, at most ``count``."""
    result: list[str] = []
    seen: set[str] = set()
    for raw in keywords:
        keyword = clean_keyword(raw)
        if not keyword or any(ch.isspace() for ch in keyword):
            continue
        folded = keyword.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        result.append(keyword)
        if len(result) >= count:
            break
    return result


def frequency_keywords(content: str, count: int) -> list[str]:
    """Deterministic fallback: most frequent words longer than 3 characters.

    Lowercased, punctuation removed; ties keep first-occurrence order.
    """
    words = _NON_WORD.sub("", content.lower()).split()
    counts = Counter(w for w in words if len(w) >= MIN_FALLBACK_WORD_LENGTH)
    # most_common() orders equal counts by first insertion.
    return [word for word, _ in counts.most_common(count)]
