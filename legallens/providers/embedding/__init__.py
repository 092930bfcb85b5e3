"""Text-embedding provider adapters."""

from legallens.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from legallens.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["NomicEmbeddingProvider", "OpenAIEmbeddingProvider"]
