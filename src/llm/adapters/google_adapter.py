# src/llm/adapters/google_adapter.py - v1
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. Structured output is requested with
``response_mime_type="application/json"`` plus a response schema.
"""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel

from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import LLMResponse, Message

# Gemini's schema dialect rejects these JSON-schema keys.
_UNSUPPORTED_SCHEMA_KEYS = {"title", "default", "additionalProperties", "$defs"}


def _gemini_schema(model_cls: type[BaseModel]) -> dict[str, Any]:
    """Inline $refs and drop keys Gemini does not accept."""
    schema = model_cls.model_json_schema()
    defs = schema.get("$defs", {})

    def _clean(node: Any) -> Any:
        if isinstance(node, dict):
            if "$ref" in node:
                return _clean(defs[node["$ref"].rsplit("/", 1)[-1]])
            return {
                k: _clean(v) for k, v in node.items()
                if k not in _UNSUPPORTED_SCHEMA_KEYS
            }
        if isinstance(node, list):
            return [_clean(item) for item in node]
        return node

    return _clean(schema)


class GoogleAdapter(BaseLLMClient):
    """Google Gemini adapter."""

    def __init__(self, model: str = "gemini-2.0-flash", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        gen_config: dict[str, Any] = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if response_format is not None:
            gen_config["response_mime_type"] = "application/json"
            gen_config["response_schema"] = _gemini_schema(response_format)

        contents = []
        for m in messages:
            role = "model" if m.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})

        t0 = time.monotonic()
        resp = await model.generate_content_async(
            contents, generation_config=gen_config,
        )
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=resp.text or "",
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="google",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "google"

    @property
    def model_name(self) -> str:
        return self._model
