"""Document summaries with a generative path and an extractive fallback.

Request flow for :meth:`Summarizer.summarize`:

  1. CACHE CHECK  -- A non-expired cached summary is returned verbatim.
  2. RATE LIMIT   -- Over-quota callers get an extractive summary; the
                     generation backend is not called.  Without a backend
                     no quota is consumed.
  3. GENERATE     -- Truncate the text, prompt the backend for a structured
                     plain-language summary, cache the trimmed result.
  4. FALLBACK     -- Any failure (no backend, timeout, quota, empty output)
                     yields an extractive summary.  Nothing is raised.

Extractive summaries are not put in this cache.  The caller decides whether
to persist them: the orchestrator stores whichever summary it receives on the
document, and ``DocumentService.get_summary`` serves that stored summary from
then on, extractive or not.
"""

from __future__ import annotations

import asyncio
from typing import Literal

import structlog

from legallens.interfaces.cache_provider import ICacheProvider
from legallens.interfaces.llm_provider import ILLMProvider
from legallens.services.extractive import generate_extractive_summary
from legallens.services.rate_limiter import SlidingWindowRateLimiter
from legallens.utils.errors import CapabilityError, LLMError
from legallens.utils.logging import get_logger
from legallens.utils.text import truncate

logger: structlog.BoundLogger = get_logger(__name__)

SummaryStrategy = Literal["stuff", "map-reduce"]


class Summarizer:
    """Produces whole-document summaries.

    Parameters
    ----------
    llm:
        Generation backend, or ``None`` to always summarise extractively.
    cache:
        Summary cache.  Entries are keyed by document (or by document and
        caller when *cache_scope* is ``"caller"``).
    rate_limiter:
        Per-caller quota on generative calls.
    """

    _SYSTEM_PROMPT = (
        "You are a careful assistant that explains documents to people without legal "
        "training. Summarise faithfully: do not invent parties, dates, amounts or terms "
        "that are not in the document."
    )

    _USER_PROMPT_TEMPLATE = (
        "Please provide a comprehensive summary of {document_name}.\n\n"
        "Document content:\n{content}\n\n"
        "Create a well-structured summary that includes:\n"
        "- Main purpose and type of document\n"
        "- Key parties involved (if applicable)\n"
        "- Important terms, conditions, or requirements\n"
        "- Critical dates, deadlines, or timeframes\n"
        "- Financial information (amounts, payments, etc.)\n"
        "- Key obligations and responsibilities\n"
        "- Any important legal or regulatory information\n\n"
        "Format your response using markdown:\n"
        "- Use **bold** for important terms and headings\n"
        "- Use bullet points with * for lists\n"
        "- Use clear paragraph breaks\n"
        "- Keep it in plain language, professional and easy to read"
    )

    def __init__(
        self,
        llm: ILLMProvider | None,
        cache: ICacheProvider,
        rate_limiter: SlidingWindowRateLimiter,
        max_chars: int = 8000,
        timeout: float = 30.0,
        cache_scope: Literal["document", "caller"] = "document",
        max_tokens: int = 600,
        temperature: float = 0.4,
    ) -> None:
        self._llm = llm
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._max_chars = max_chars
        self._timeout = timeout
        self._cache_scope = cache_scope
        self._max_tokens = max_tokens
        self._temperature = temperature

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def summarize(
        self,
        text: str,
        document_id: str,
        caller_identity: str,
        file_name: str | None = None,
    ) -> str:
        """Return a summary of *text*; never raises."""
        cache_key = self._cache_key(document_id, caller_identity)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.info("summary_cache_hit", document_id=document_id)
            return cached

        if self._llm is None:
            logger.info("summary_extractive_no_provider", document_id=document_id)
            return generate_extractive_summary(text)

        if not self._rate_limiter.try_acquire(caller_identity):
            logger.info("summary_rate_limited", document_id=document_id)
            return generate_extractive_summary(text)

        try:
            summary = await self._generate(text, file_name)
        except (CapabilityError, asyncio.TimeoutError) as exc:
            logger.warning(
                "summary_generation_failed",
                document_id=document_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return generate_extractive_summary(text)
        except Exception as exc:  # noqa: BLE001 -- summaries must never fail the caller
            logger.error(
                "summary_generation_unexpected_error",
                document_id=document_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return generate_extractive_summary(text)

        await self._cache.set(cache_key, summary)
        logger.info("summary_generated", document_id=document_id, chars=len(summary))
        return summary

    async def summarize_many(
        self,
        texts: list[str],
        caller_identity: str,
        strategy: SummaryStrategy = "stuff",
        batch_id: str = "batch",
    ) -> str:
        """Summarise several documents into one summary.

        ``stuff`` joins the texts and summarises once.  ``map-reduce``
        summarises each text, then summarises the joined partial summaries.
        """
        if strategy == "stuff":
            joined = "\n\n---\n\n".join(texts)
            return await self.summarize(joined, f"stuff-{batch_id}", caller_identity)
        if strategy == "map-reduce":
            partials = await asyncio.gather(*(
                self.summarize(text, f"map-{batch_id}-{i}", caller_identity)
                for i, text in enumerate(texts)
            ))
            combined = "\n\n".join(partials)
            return await self.summarize(combined, f"reduce-{batch_id}", caller_identity)
        raise ValueError(f"Unknown summary strategy: {strategy!r}")

    async def invalidate(self, document_id: str) -> None:
        """Drop every cached summary for *document_id*."""
        await self._cache.delete_prefix(f"summary:{document_id}:")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cache_key(self, document_id: str, caller_identity: str) -> str:
        if self._cache_scope == "caller":
            return f"summary:{document_id}:{caller_identity}"
        return f"summary:{document_id}:"

    async def _generate(self, text: str, file_name: str | None) -> str:
        document_name = f'"{file_name}"' if file_name else "this document"
        prompt = self._USER_PROMPT_TEMPLATE.format(
            document_name=document_name,
            content=truncate(text, self._max_chars),
        )
        response = await asyncio.wait_for(
            self._llm.complete(
                system_prompt=self._SYSTEM_PROMPT,
                user_prompt=prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            ),
            timeout=self._timeout,
        )
        summary = (response or "").strip()
        if not summary:
            raise LLMError(
                message="Empty summary from generation backend",
                provider_name=self._llm.get_provider_name(),
            )
        return summary
