# src/search/query_expander.py - v1
"""Query expansion: short third-person paraphrases of a search query.

Paraphrases must keep the literal scope of the query. "personas que
juegan tenis" may become "¿Quién juega al tenis?", never "tenistas
profesionales". Expansion is optional recall; when it fails the search
continues with the original query only.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import Message
from meshsearch.llm.retry import LLMRetryExhausted, with_retry
from meshsearch.llm.structured import StructuredOutputError, parse_structured

logger = logging.getLogger(__name__)

EXPANDER_SYSTEM_PROMPT = (
    "Eres un asistente de busqueda de personas a partir de una consulta sobre intereses. "
    "Analiza la consulta del usuario y genera preguntas/frases similares. "
    "Las preguntas deben ser simples y directas, sin agregar calificativos o condiciones "
    "que no estén en la consulta original. Por ejemplo, si alguien busca personas que "
    "juegan tenis, no agregues términos como 'profesional' o 'famoso'."
)

EXPANDER_USER_PROMPT = (
    'Analiza esta consulta: "{query}". Proporciona lo siguiente:\n'
    "{count} preguntas similares que podrían ayudar a responder la consulta del usuario. "
    "Hacer preguntas que sean en tercera persona, por ejemplo: "
    '"¿A quién le gusta viajar?", "¿Quien le gusta el fútbol?", '
    '"¿Quien le gusta el ajedrez?", etc.'
)


class ExpandedQueries(BaseModel):
    """Structured output schema of the expansion call."""

    questions: list[str] = Field(
        default_factory=list,
        description="preguntas similares a la consulta del usuario. sé conciso.",
        json_schema_extra={"maxItems": 3},
    )


class QueryExpander:
    """Generate up to ``max_expansions`` paraphrases of a query."""

    def __init__(
        self,
        llm: BaseLLMClient,
        max_expansions: int = 3,
        temperature: float = 0.2,
    ) -> None:
        self._llm = llm
        self._max = max_expansions
        self._temperature = temperature

    async def expand(self, query: str) -> list[str]:
        """Return 0..max_expansions paraphrases, distinct from each other and
        from the query. Never raises for provider or parse errors.
        """
        if self._max <= 0:
            return []
        try:
            response = await with_retry(
                self._llm.complete,
                messages=[
                    Message(
                        role="user",
                        content=EXPANDER_USER_PROMPT.format(query=query, count=self._max),
                    )
                ],
                system=EXPANDER_SYSTEM_PROMPT,
                max_tokens=512,
                temperature=self._temperature,
                response_format=ExpandedQueries,
                component="query_expander",
            )
            result = parse_structured(response.content, ExpandedQueries)
        except (LLMRetryExhausted, StructuredOutputError) as exc:
            logger.warning("Query expansion failed, using original query only: %s", exc)
            return []

        return self._dedupe(query, result.questions)

    def _dedupe(self, query: str, questions: list[str]) -> list[str]:
        seen = {_fold(query)}
        expansions: list[str] = []
        for question in questions:
            text = question.strip()
            if not text or _fold(text) in seen:
                continue
            seen.add(_fold(text))
            expansions.append(text)
            if len(expansions) >= self._max:
                break
        return expansions


def _fold(text: str) -> str:
    return " ".join(text.casefold().strip(" ¿?¡!.").split())
