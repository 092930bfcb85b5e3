"""Vector index implementations."""

from legallens.providers.vector_store.memory_vector_index import InMemoryVectorIndex

__all__ = ["InMemoryVectorIndex"]
