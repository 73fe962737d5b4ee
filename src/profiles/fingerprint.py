# src/profiles/fingerprint.py - v1
"""Content fingerprints used to detect unchanged profile submissions.

The hash is taken over the member's own text, before any LLM rewrite, so
resubmitting the same answers is recognised even when the stored content
is a rewritten version of them.
"""

from __future__ import annotations

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def content_fingerprint(text: str) -> str:
    """SHA-256 over whitespace-normalized text."""
    normalized = _WHITESPACE.sub(" ", text).strip()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
