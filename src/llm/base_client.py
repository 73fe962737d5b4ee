# src/llm/base_client.py - v1
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from meshsearch.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers.

    ``response_format`` requests provider-side structured output constrained
    to the model's JSON schema. The returned ``LLMResponse.content`` is then
    a JSON document that callers validate with ``llm.structured``.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.2,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic, google)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier."""
