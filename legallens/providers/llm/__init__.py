"""Text-generation provider adapters."""

from legallens.providers.llm.anthropic_provider import AnthropicLLMProvider
from legallens.providers.llm.ollama_provider import OllamaLLMProvider
from legallens.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OllamaLLMProvider", "OpenAILLMProvider"]
