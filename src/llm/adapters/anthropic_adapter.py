# src/llm/adapters/anthropic_adapter.py - v1
"""Anthropic Claude adapter implementing BaseLLMClient.

Structured output is obtained with a single forced tool whose input
schema is the requested pydantic model; the tool input is returned as
the JSON content.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from pydantic import BaseModel

from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

_STRUCTURED_TOOL = "structured_output"


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            import anthropic

            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key or None)
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion via Anthropic Messages API."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            # System messages travel in the dedicated parameter.
            "messages": [
                {"role": m.role, "content": m.content}
                for m in messages if m.role != "system"
            ],
        }
        if system:
            kwargs["system"] = system

        if response_format is not None:
            kwargs["tools"] = [
                {
                    "name": _STRUCTURED_TOOL,
                    "description": "Return structured data matching the schema",
                    "input_schema": response_format.model_json_schema(),
                }
            ]
            kwargs["tool_choice"] = {"type": "tool", "name": _STRUCTURED_TOOL}

        start = time.monotonic()
        response = await self._client.messages.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_content(response, response_format is not None),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            raw_response=response,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def model_name(self) -> str:
        return self._model

    @staticmethod
    def _extract_content(response: Any, structured: bool) -> str:
        """Extract text (or forced tool input) from response content blocks."""
        for block in response.content:
            block_type = getattr(block, "type", None)
            if structured and block_type == "tool_use":
                return json.dumps(block.input, ensure_ascii=False)
            if block_type == "text":
                return block.text
        logger.warning("Anthropic response without text or tool_use block")
        return ""
