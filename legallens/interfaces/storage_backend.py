"""Abstract base class for durable blob storage.

Every persisted artifact -- original uploads, extracted text, chunk sets and
per-user document metadata -- is addressed by a relative ``/``-separated
key such as ``user-42/content-<doc_id>.txt``.  Keys never start with a
slash and never contain ``..``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: LocalDiskStorage, MemoryStorage
# Located in: legallens/providers/storage/
class IStorageBackend(ABC):
    """Contract for key-addressed byte storage.

    Implementations must make :meth:`write` atomic from a reader's point of
    view: a concurrent :meth:`read` returns either the old or the new bytes,
    never a partial write.
    """

    @abstractmethod
    async def write(self, key: str, data: bytes) -> None:
        """Store *data* under *key*, replacing any existing value.

        Raises
        ------
        legallens.utils.errors.PersistenceError
            If the bytes cannot be stored.
        """

    @abstractmethod
    async def read(self, key: str) -> bytes | None:
        """Return the bytes stored under *key*, or ``None`` if absent.

        Raises
        ------
        legallens.utils.errors.PersistenceError
            If the key exists but cannot be read.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*.  No-op if absent."""

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> None:
        """Remove every key under *prefix* (e.g. an index directory)."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is stored."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"local-disk"``."""
