"""Durable store for extracted document text.

Two layers: a process-local dict in front of an :class:`IStorageBackend`.
``load`` checks the dict, then storage, and fills the dict on a storage hit.
Nothing is ever invented -- a miss in both layers returns ``None`` and the
caller decides whether to re-extract from the original upload.
"""

from __future__ import annotations

import structlog

from legallens.interfaces.storage_backend import IStorageBackend
from legallens.providers.storage import keys

logger = structlog.get_logger(logger_name=__name__)


class ContentStore:
    """Extracted text keyed by ``(user_id, document_id)``."""

    def __init__(self, storage: IStorageBackend) -> None:
        self._storage = storage
        self._cache: dict[tuple[str, str], str] = {}

    async def save(self, user_id: str, document_id: str, text: str) -> None:
        """Persist *text*, replacing any earlier content (last writer wins).

        Raises
        ------
        PersistenceError
            If the durable write fails.  The cache is left untouched.
        """
        await self._storage.write(keys.content_key(user_id, document_id), text.encode("utf-8"))
        self._cache[(user_id, document_id)] = text
        logger.info("content_saved", user_id=user_id, document_id=document_id, chars=len(text))

    async def load(self, user_id: str, document_id: str) -> str | None:
        cached = self._cache.get((user_id, document_id))
        if cached is not None:
            return cached

        raw = await self._storage.read(keys.content_key(user_id, document_id))
        if raw is None:
            logger.debug("content_not_found", user_id=user_id, document_id=document_id)
            return None
        text = raw.decode("utf-8", errors="replace")
        self._cache[(user_id, document_id)] = text
        return text

    async def delete(self, user_id: str, document_id: str) -> None:
        self._cache.pop((user_id, document_id), None)
        await self._storage.delete(keys.content_key(user_id, document_id))
        logger.info("content_deleted", user_id=user_id, document_id=document_id)

    def evict(self, user_id: str, document_id: str) -> None:
        """Drop the cached copy only; the durable copy stays."""
        self._cache.pop((user_id, document_id), None)
