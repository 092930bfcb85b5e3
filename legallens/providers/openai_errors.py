"""Translation of OpenAI-SDK exceptions into the LegalLens error hierarchy.

The OpenAI, Ollama and Nomic adapters all talk through ``openai.AsyncOpenAI``
and share this mapping:

    openai.RateLimitError      -> RateLimitError           (quota)
    openai.APIConnectionError  -> ProviderUnavailableError (incl. timeouts)
    openai.InternalServerError -> ProviderUnavailableError (5xx)
    any other openai.APIError  -> *fallback_cls*           (LLMError / EmbeddingError)
"""

from __future__ import annotations

import openai

from legallens.utils.errors import (
    CapabilityError,
    LLMError,
    ProviderUnavailableError,
    RateLimitError,
)


def translate_openai_error(
    exc: openai.APIError,
    provider_name: str,
    label: str,
    fallback_cls: type[CapabilityError] = LLMError,
) -> CapabilityError:
    """Return the LegalLens exception matching *exc*; the caller raises it ``from exc``."""
    if isinstance(exc, openai.RateLimitError):
        return RateLimitError(
            message=f"{label} rate limit or quota exceeded",
            provider_name=provider_name,
        )
    if isinstance(exc, openai.APITimeoutError):
        return ProviderUnavailableError(
            message=f"{label} request timed out",
            provider_name=provider_name,
        )
    if isinstance(exc, (openai.APIConnectionError, openai.InternalServerError)):
        return ProviderUnavailableError(
            message=f"{label} is unavailable: {exc}",
            provider_name=provider_name,
        )
    return fallback_cls(message=f"{label} API error: {exc}", provider_name=provider_name)
