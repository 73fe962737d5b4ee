# src/chunking/base_chunker.py - v1
"""Abstract chunker interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseChunker(ABC):
    """Unified interface for profile content chunking strategies.

    Chunkers are pure: no I/O, deterministic, synchronous.
    """

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Strategy identifier (e.g., 'sentence')."""

    @abstractmethod
    def split(self, text: str) -> list[str]:
        """Split text into ordered, non-empty, trimmed segments."""
