# src/llm/structured.py - v1
"""Strict validation of structured LLM output against a pydantic model.

One normalization step is applied (a single surrounding code fence is
removed), then the text must validate against the schema. There is no
repair loop: failure raises StructuredOutputError and the caller applies
its own fallback.
"""

from __future__ import annotations

import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n(?P<body>.*?)\n?```$", re.DOTALL)


class StructuredOutputError(ValueError):
    """Model output did not validate against the expected schema."""

    def __init__(self, schema: str, raw_text: str, detail: str) -> None:
        self.schema = schema
        self.raw_text = raw_text
        self.detail = detail
        super().__init__(f"Output does not match {schema}: {detail}")


def strip_code_fence(text: str) -> str:
    """Remove one surrounding markdown code fence, if present."""
    stripped = text.strip()
    match = _FENCE.match(stripped)
    if match:
        return match.group("body").strip()
    return stripped


def parse_structured(content: str, model_cls: type[T]) -> T:
    """Validate raw model output as ``model_cls``.

    Raises:
        StructuredOutputError: If the output is not valid JSON for the schema.
    """
    text = strip_code_fence(content)
    if not text:
        raise StructuredOutputError(model_cls.__name__, content, "empty output")
    try:
        return model_cls.model_validate_json(text)
    except ValidationError as exc:
        raise StructuredOutputError(
            model_cls.__name__, content, f"{exc.error_count()} validation error(s)"
        ) from exc
