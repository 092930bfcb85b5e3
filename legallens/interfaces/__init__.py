"""Public interface definitions for all pluggable backends.

Generation, embedding, caching and storage are accessed exclusively through
the abstract base classes defined in this package.  Concrete adapters live
in ``legallens/providers/`` and are wired together in ``legallens/main.py``.

CONCRETE PROVIDER MAP:
    Interface               ->  Concrete implementations
    ---------------------------------------------------------------
    ILLMProvider            ->  AnthropicLLMProvider, OpenAILLMProvider,
                                OllamaLLMProvider
    IEmbeddingProvider      ->  OpenAIEmbeddingProvider, NomicEmbeddingProvider
    ICacheProvider          ->  MemoryCacheProvider
    IStorageBackend         ->  LocalDiskStorage, MemoryStorage
    IDocumentRepository     ->  JsonDocumentRepository
"""

from legallens.interfaces.cache_provider import ICacheProvider
from legallens.interfaces.document_repository import IDocumentRepository
from legallens.interfaces.embedding_provider import IEmbeddingProvider
from legallens.interfaces.llm_provider import ILLMProvider
from legallens.interfaces.storage_backend import IStorageBackend

__all__ = [
    "ICacheProvider",
    "IDocumentRepository",
    "IEmbeddingProvider",
    "ILLMProvider",
    "IStorageBackend",
]
