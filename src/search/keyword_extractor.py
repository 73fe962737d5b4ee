# src/search/keyword_extractor.py - v1
"""Keyword badges: ``count`` single-word tags describing a profile.

The model answers with comma-separated words. Entries that still contain
whitespace after trimming are dropped. When the call fails or yields
nothing usable, a deterministic word-frequency fallback is used.
"""

from __future__ import annotations

import logging

from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import Message
from meshsearch.llm.retry import LLMRetryExhausted, with_retry
from meshsearch.search.text_utils import frequency_keywords, normalize_keywords

logger = logging.getLogger(__name__)

KEYWORDS_SYSTEM_PROMPT = """You are an expert at identifying the most relevant keywords from text.
Your task is to extract exactly {count} single-word keywords that best represent the content.
Each keyword must be a single word - no phrases, no multi-word terms.
Choose words that are specific, descriptive, and relevant to the main topics in the content.
The keywords should cover different aspects of the content when possible.
Return only the keywords, separated by commas, with no additional text. Generar todo en español"""

KEYWORDS_USER_PROMPT = """Content: "{content}"
Please extract exactly {count} single-word keywords from this content. Separate each keyword with a comma:"""


def parse_keyword_list(text: str, count: int) -> list[str]:
    """Split comma-separated model output into at most ``count`` single tokens."""
    return normalize_keywords(text.split(","), count)


class KeywordExtractor:
    """LLM keyword extraction with a frequency fallback."""

    def __init__(self, llm: BaseLLMClient, temperature: float = 0.2) -> None:
        self._llm = llm
        self._temperature = temperature

    async def extract(self, content: str, count: int = 5) -> list[str]:
        """Return at most ``count`` whitespace-free keywords. Never raises
        for provider errors.
        """
        if count <= 0 or not content.strip():
            return []
        try:
            response = await with_retry(
                self._llm.complete,
                messages=[
                    Message(
                        role="user",
                        content=KEYWORDS_USER_PROMPT.format(content=content, count=count),
                    )
                ],
                system=KEYWORDS_SYSTEM_PROMPT.format(count=count),
                max_tokens=100,
                temperature=self._temperature,
                component="keyword_extractor",
            )
        except LLMRetryExhausted as exc:
            logger.warning("Keyword call failed, using frequency fallback: %s", exc)
            return frequency_keywords(content, count)

        keywords = parse_keyword_list(response.content, count)
        if not keywords:
            logger.info("Keyword output empty, using frequency fallback")
            return frequency_keywords(content, count)
        return keywords
