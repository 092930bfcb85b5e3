"""Cache provider adapters."""

from legallens.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
