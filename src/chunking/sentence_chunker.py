# src/chunking/sentence_chunker.py - v1
"""Sentence chunking: one chunk per period-delimited segment.

Profile content is written one aspect per sentence, so each sentence is
embedded on its own. Example::

    "Me apasiona el ajedrez. Juego torneos todos los fines de semana."
    -> ["Me apasiona el ajedrez", "Juego torneos todos los fines de semana"]

Segments are stripped; empty segments produced by consecutive or
trailing periods are dropped. Input without a period yields a single
chunk equal to the stripped input.
"""

from __future__ import annotations

from meshsearch.chunking.base_chunker import BaseChunker

SENTENCE_DELIMITER = "."


class SentenceChunker(BaseChunker):
    """Split profile content on the period character."""

    @property
    def strategy_name(self) -> str:
        return "sentence"

    def split(self, text: str) -> list[str]:
        if not text:
            return []
        segments = (segment.strip() for segment in text.split(SENTENCE_DELIMITER))
        return [segment for segment in segments if segment]


def split_sentences(text: str) -> list[str]:
    """Module-level shortcut for SentenceChunker().split(text)."""
    return SentenceChunker().split(text)
