# src/search/context_search.py - v1
"""Context-search curator: the primary search path.

All eligible profiles of the workspace are placed in a single context
block and one structured-output LLM call picks the matches (context
augmented generation). Exactly one LLM call is made per request; an empty
candidate pool returns [] without calling the model.

The prompts below are part of the product contract: output language
(Spanish), the strictness policy (an adjacent interest is not a match)
and the output shape must not be loosened.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from meshsearch.core.errors import SearchPipelineFailure
from meshsearch.core.models import CandidateMatch, Profile
from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import Message
from meshsearch.llm.retry import LLMRetryExhausted, with_retry
from meshsearch.llm.structured import StructuredOutputError, parse_structured
from meshsearch.logging.context import set_component_context, set_stage
from meshsearch.search.assembler import ResultAssembler
from meshsearch.storage.profile_store.base_profile_store import BaseProfileStore

logger = logging.getLogger(__name__)

MAX_MATCHES = 5

CURATOR_SYSTEM_PROMPT = """Eres un asistente de búsqueda que ayuda a encontrar los usuarios más relevantes según una consulta.
Se te proporcionará un contexto que contiene múltiples perfiles de usuarios y una consulta de búsqueda.
Analiza el contexto e identifica qué usuarios son más relevantes para la consulta.
Enfócate en el significado semántico y la relevancia, no solo en la coincidencia de palabras clave.
Devuelve los usuarios más relevantes (máximo 5) con:
- userId: El identificador único del usuario
- name: El nombre del usuario
- content: El contenido original del usuario
- contentSummary: Un breve resumen (1-3 oraciones) de cómo se relacionan con la consulta de búsqueda
- keywords: Un array de 5 etiquetas de una sola palabra que representan su experiencia o intereses
- matchReason (opcional): Una breve razón por la que coinciden con la consulta

TODAS las respuestas generadas deben estar en ESPAÑOL.
Si no hay usuarios relevantes, devuelve un array vacío."""

CURATOR_USER_PROMPT = """CONSULTA DE BÚSQUEDA: {query}

CONTEXTO DE PERFILES DE USUARIOS:
{context}

Basado en la consulta de búsqueda, identifica los usuarios más relevantes del contexto. Tiene que estar completamente centrado en la consulta de búsqueda. Si no hay usuarios relevantes o hay algunos que solo se parecen un poquito pero no son relevantes, devuelve un array vacío.
Por ejemplo, si la consulta es "quien le gusta bailar", no deberías devolver alguien que le guste solo la música, sino alguien que le guste bailar. Si alguien dice alguien que juegue al tenis, no deberías devolver alguien que juegue al padel.
Para cada usuario relevante:
1. Devuelve su userId, name y content
2. Crea un contentSummary conciso (1-3 oraciones) que explique cómo se relacionan con la consulta de búsqueda
3. Genera 5 palabras clave individuales (keywords) que mejor representen su experiencia o intereses
4. Añade una breve razón por la que coincide con la consulta (matchReason)

IMPORTANTE: Toda la información generada (contentSummary, keywords, matchReason) DEBE estar en español."""


class CuratorMatch(BaseModel):
    """One match as returned by the model (wire names are camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    name: str | None = None
    content: str | None = None
    content_summary: str = Field(alias="contentSummary")
    keywords: list[str] = Field(default_factory=list)
    match_reason: str | None = Field(default=None, alias="matchReason")


class CuratorResult(BaseModel):
    """Structured output schema of the curator call."""

    matches: list[CuratorMatch]


def format_profile_context(profile: Profile) -> str:
    """Render one profile as a context entry.

    The SOCIAL line is present only when the profile has at least one handle.
    """
    handles = profile.social_handles
    social_parts = [
        f"X: {handles.x}" if handles.x else "",
        f"Telegram: {handles.telegram}" if handles.telegram else "",
        f"Instagram: {handles.instagram}" if handles.instagram else "",
    ]
    social_info = ", ".join(part for part in social_parts if part)
    social_section = f"\nSOCIAL: {social_info}" if social_info else ""
    return (
        f"USER_ID: {profile.id}\n"
        f"NAME: {profile.display_name or 'Unknown'}\n"
        f"CONTENT: {profile.raw_content}{social_section}\n---\n"
    )


def build_context_block(profiles: list[Profile]) -> str:
    """Concatenate the context entries of all profiles with content."""
    return "\n".join(format_profile_context(p) for p in profiles if p.has_content)


class ContextSearchCurator:
    """Single-call LLM curation over the whole workspace."""

    def __init__(
        self,
        llm: BaseLLMClient,
        profile_store: BaseProfileStore,
        assembler: ResultAssembler,
        max_results: int = MAX_MATCHES,
        temperature: float = 0.2,
        max_tokens: int = 2048,
    ) -> None:
        self._llm = llm
        self._profiles = profile_store
        self._assembler = assembler
        self._max_results = min(max_results, MAX_MATCHES)
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def search(self, query: str, workspace_id: str | None) -> list[CandidateMatch]:
        """Return at most 5 curated matches, or [] when nobody qualifies.

        Raises:
            SearchPipelineFailure: Candidate loading, the LLM call or output
                validation failed. No partial list is returned.
        """
        set_component_context("curator", stage="load_candidates")
        try:
            profiles = await self._profiles.list_workspace_profiles(workspace_id)
        except Exception as exc:
            raise SearchPipelineFailure(
                f"Could not load candidates: {type(exc).__name__}",
                stage="load_candidates", query=query, workspace_id=workspace_id,
            ) from exc

        candidates = [p for p in profiles if p.has_content]
        if not candidates:
            logger.info("No eligible candidates in workspace %s", workspace_id)
            return []

        set_stage("curate")
        context = build_context_block(candidates)
        logger.debug(
            "Curating %d candidates (%d context chars)", len(candidates), len(context),
        )
        try:
            response = await with_retry(
                self._llm.complete,
                messages=[
                    Message(
                        role="user",
                        content=CURATOR_USER_PROMPT.format(query=query, context=context),
                    )
                ],
                system=CURATOR_SYSTEM_PROMPT,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                response_format=CuratorResult,
                component="curator",
            )
        except LLMRetryExhausted as exc:
            raise SearchPipelineFailure(
                f"Curator LLM call failed ({exc.error_type})",
                stage="curate", query=query, workspace_id=workspace_id,
            ) from exc

        set_stage("parse_matches")
        try:
            result = parse_structured(response.content, CuratorResult)
        except StructuredOutputError as exc:
            raise SearchPipelineFailure(
                f"Curator output invalid: {exc.detail}",
                stage="parse_matches", query=query, workspace_id=workspace_id,
            ) from exc

        set_stage("assemble")
        proposed = [
            CandidateMatch(
                id=m.user_id,
                display_name=m.name or None,
                raw_content=m.content or "",
                summary=m.content_summary,
                keywords=m.keywords,
                match_reason=m.match_reason,
            )
            for m in result.matches
        ]
        matches = self._assembler.assemble(
            proposed, {p.id: p for p in candidates}, limit=self._max_results,
        )
        logger.info(
            "Curator proposed %d matches, kept %d", len(proposed), len(matches),
        )
        return matches
