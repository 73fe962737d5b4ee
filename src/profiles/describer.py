# src/profiles/describer.py - v1
"""Optional rewrite of questionnaire content into descriptive sentences.

The rewrite keeps every fact of the answers and writes one aspect per
sentence, which suits sentence-level chunking. It is off by default
(``PROFILE_REWRITE_ENABLED``). On failure the content is kept unchanged,
so a provider outage never loses what the member wrote.
"""

from __future__ import annotations

import logging

from meshsearch.llm.base_client import BaseLLMClient
from meshsearch.llm.models import Message
from meshsearch.llm.retry import LLMRetryExhausted, with_retry

logger = logging.getLogger(__name__)

DESCRIBER_SYSTEM_PROMPT = """Eres un experto en analizar y estructurar la descripción de los intereses de las personas.
La entrada consiste en una serie de preguntas y respuestas que revelan sus pasiones.
Tu tarea es extraer los temas clave de sus respuestas y generar una descripción coherente y detallada que resalte sus intereses, motivaciones y posibles aplicaciones de sus pasiones NUNCA DEBES REMOVER O AGREGAR INFORMACION EXTRA.
MANTENER LUGARES, NOMBRES Y CUALQUIER DETALLE RELEVANTE DE LA PERSONA.
Bajo ninguna circunstancia debes inventar información que no esté presente en la entrada.
Escribe el texto respetando la forma en que la persona lo redactó.
No mencionar "esta persona bla bla" todo el tiempo, sino utilizar "Tiene", "Es", "Le gusta" o la estructura que mejor se adapte.
Esta mejora de la descripción tiene como objetivo ser utilizada para generar embeddings después de fragmentarla en oraciones separadas por punto. Por lo tanto, debes aprovechar cada oración para describir un aspecto diferente del interés. Cada aspecto debe tener su propia oracion."""

DESCRIBER_USER_PROMPT = """Estas son las respuestas de la persona al formulario : "{answers}".
Descripción de la persona:"""


class ProfileDescriber:
    """LLM rewrite of raw answers into profile content."""

    def __init__(self, llm: BaseLLMClient, temperature: float = 0.2) -> None:
        self._llm = llm
        self._temperature = temperature

    async def describe(self, content: str) -> str:
        """Return the rewritten description, or ``content`` on failure."""
        try:
            response = await with_retry(
                self._llm.complete,
                messages=[
                    Message(role="user", content=DESCRIBER_USER_PROMPT.format(answers=content))
                ],
                system=DESCRIBER_SYSTEM_PROMPT,
                temperature=self._temperature,
                component="profile_describer",
            )
        except LLMRetryExhausted as exc:
            logger.warning("Profile rewrite failed, keeping answers: %s", exc)
            return content

        text = response.content.strip()
        if not text:
            logger.warning("Profile rewrite returned nothing, keeping answers")
            return content
        return text
