# src/search/summarizer.py - v1
"""Relevance summarizer for the vector search path.

One free-text LLM call per candidate returns a JSON object with a short
summary of how the profile relates to the query and a render gate. The
output goes through one strict schema validation; anything else fails
open: the candidate is shown with the raw model text (or its content)
and flagged ``needs_review``. One bad candidate never fails the search.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from meshsearch.core.errors import SummarizationParseFailure
from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import Message
from meshsearch.llm.retry import LLMRetryExhausted, with_retry
from meshsearch.llm.structured import StructuredOutputError, parse_structured
from meshsearch.search.text_utils import truncate_text

logger = logging.getLogger(__name__)

SUMMARIZER_SYSTEM_PROMPT = """Eres un experto en crear resúmenes breves y claros de perfiles de personas.
Tu tarea es condensar la descripción proporcionada en un resumen conciso que explique cómo se relaciona la persona con la consulta de búsqueda.
Concéntrate solo en la información esencial. Usa un lenguaje simple y directo y oraciones completas.
No agregues información que no esté presente en la descripción.
Además debes decidir si la persona debe mostrarse como resultado (shouldRender):
- shouldRender es true solo si la descripción coincide exactamente con la actividad o el interés de la consulta.
- Los intereses parecidos o cercanos NO cuentan. Si la consulta es "quien juega al tenis", alguien que solo juega al padel no coincide. Si la consulta es "quien le gusta bailar", alguien a quien solo le gusta la música no coincide.
- Si shouldRender es false, explica brevemente en reason por qué no coincide.
Responde únicamente con un objeto JSON con las claves "summary" (texto), "shouldRender" (booleano) y "reason" (texto o null), sin texto adicional.
Generar todo en español. todo en minusculas."""

SUMMARIZER_USER_PROMPT = """Consulta de búsqueda: "{query}"
Descripción: "{content}"
Escribe el resumen en {max_chars} caracteres o menos y responde con el objeto JSON:"""

# Shown when the model hides a candidate without explaining why.
DEFAULT_GATED_REASON = "no coincide exactamente con la búsqueda"


class SummaryPayload(BaseModel):
    """Schema of the summarizer's JSON answer."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    should_render: bool = Field(alias="shouldRender")
    reason: str | None = None


class RelevanceSummary(BaseModel):
    """Summarizer verdict for one candidate."""

    summary: str
    should_render: bool = True
    reason: str | None = None
    needs_review: bool = False

    @property
    def display_text(self) -> str:
        """User-facing text: the reason replaces the summary when gated."""
        if not self.should_render and self.reason:
            return self.reason
        return self.summary


def parse_summary(content: str) -> SummaryPayload:
    """Validate summarizer output.

    Raises:
        SummarizationParseFailure: If the text is not a valid payload.
    """
    try:
        return parse_structured(content, SummaryPayload)
    except StructuredOutputError as exc:
        raise SummarizationParseFailure(content, exc.detail) from exc


class RelevanceSummarizer:
    """Per-candidate summary plus render gate."""

    def __init__(
        self,
        llm: BaseLLMClient,
        max_chars: int = 150,
        temperature: float = 0.2,
    ) -> None:
        self._llm = llm
        self._max_chars = max_chars
        self._temperature = temperature

    async def summarize(self, content: str, query: str) -> RelevanceSummary:
        """Summarize ``content`` for ``query``. Never raises for provider or
        parse errors.
        """
        prompt = SUMMARIZER_USER_PROMPT.format(
            query=query, content=content, max_chars=self._max_chars,
        )
        try:
            response = await with_retry(
                self._llm.complete,
                messages=[Message(role="user", content=prompt)],
                system=SUMMARIZER_SYSTEM_PROMPT,
                max_tokens=400,
                temperature=self._temperature,
                component="summarizer",
            )
        except LLMRetryExhausted as exc:
            logger.warning("Summarizer call failed, showing content: %s", exc)
            return RelevanceSummary(
                summary=truncate_text(content, self._max_chars), needs_review=True,
            )

        try:
            payload = parse_summary(response.content)
        except SummarizationParseFailure as exc:
            logger.warning("Summarizer output unparseable (%s), failing open", exc.reason)
            raw = exc.raw_text.strip() or content
            return RelevanceSummary(
                summary=truncate_text(raw, self._max_chars), needs_review=True,
            )

        reason = payload.reason.strip() if payload.reason else ""
        if not payload.should_render and not reason:
            reason = DEFAULT_GATED_REASON
        return RelevanceSummary(
            summary=truncate_text(payload.summary, self._max_chars),
            should_render=payload.should_render,
            reason=truncate_text(reason, self._max_chars) if reason else None,
        )
