"""Abstract base class for text-generation service providers.

Defines the contract for the generative backend used to write document
summaries and answer questions.  Implementations may wrap the Anthropic API,
an OpenAI-compatible endpoint, or a local Ollama server.  Call-sites depend
only on this interface, so the backend can be swapped or omitted entirely
(the summarizer and answerer then fall back to extractive output).
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: AnthropicLLMProvider, OpenAILLMProvider, OllamaLLMProvider
# Located in: legallens/providers/llm/
class ILLMProvider(ABC):
    """Contract for text-generation services used by the summarizer and answerer."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 600,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The system/instruction message that sets the model's behaviour.
        user_prompt:
            The user-facing prompt containing the document text or question.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.

        Returns
        -------
        str
            The model's text response.

        Raises
        ------
        legallens.utils.errors.RateLimitError
            If the provider reports quota or rate-limit exhaustion.
        legallens.utils.errors.ProviderUnavailableError
            On timeouts and connection failures.
        legallens.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"anthropic"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured.

        Implementations check that credentials or a base URL are present
        without making an inference call.
        """
