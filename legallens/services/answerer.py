"""Context-grounded question answering with an extractive fallback.

The generative path sends the question and (truncated) context to the
backend with instructions to quote supporting text and to admit when the
answer is absent.  On any failure the answer is produced extractively; when
the failure was a quota or rate condition the user is also told the
service is under high demand.
"""

from __future__ import annotations

import asyncio

import structlog

from legallens.interfaces.llm_provider import ILLMProvider
from legallens.services.extractive import generate_extractive_answer
from legallens.utils.errors import CapabilityError, LLMError, RateLimitError
from legallens.utils.logging import get_logger
from legallens.utils.text import truncate

logger: structlog.BoundLogger = get_logger(__name__)

HIGH_DEMAND_PREFIX = "I'm currently experiencing high demand. Based on the document content: "


class Answerer:
    """Answers a question from a context string; never raises."""

    _SYSTEM_PROMPT = (
        "You are a helpful document assistant. Answer the question based only on the "
        "provided document context."
    )

    _USER_PROMPT_TEMPLATE = (
        "Instructions:\n"
        "- Answer directly and concisely based on the document content\n"
        '- If you find specific information, quote the relevant part using "quotes"\n'
        '- If the information is not in the document, say "This information is not '
        'available in the document"\n'
        "- Use **bold** for important terms or amounts\n"
        "- Be accurate and helpful\n\n"
        "Document Context:\n{context}\n\n"
        "Question: {question}\n\n"
        "Answer:"
    )

    def __init__(
        self,
        llm: ILLMProvider | None,
        max_context_chars: int = 12000,
        timeout: float = 30.0,
        max_tokens: int = 500,
        temperature: float = 0.3,
    ) -> None:
        self._llm = llm
        self._max_context_chars = max_context_chars
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def answer(self, question: str, context: str) -> str:
        truncated = truncate(context or "", self._max_context_chars)
        if self._llm is None:
            logger.info("answer_extractive_no_provider")
            return generate_extractive_answer(question, truncated)

        try:
            response = await asyncio.wait_for(
                self._llm.complete(
                    system_prompt=self._SYSTEM_PROMPT,
                    user_prompt=self._USER_PROMPT_TEMPLATE.format(
                        context=truncated, question=question
                    ),
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                ),
                timeout=self._timeout,
            )
            text = (response or "").strip()
            if not text:
                raise LLMError(
                    message="Empty answer from generation backend",
                    provider_name=self._llm.get_provider_name(),
                )
        except RateLimitError as exc:
            logger.warning("answer_rate_limited", error=str(exc))
            return HIGH_DEMAND_PREFIX + generate_extractive_answer(question, context)
        except (CapabilityError, asyncio.TimeoutError) as exc:
            logger.warning(
                "answer_generation_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return generate_extractive_answer(question, context)
        except Exception as exc:  # noqa: BLE001 -- answers must never fail the caller
            logger.error(
                "answer_generation_unexpected_error",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return generate_extractive_answer(question, context)

        logger.info("answer_generated", chars=len(text))
        return text
