"""Build, persist and load per-document retrieval indexes.

A retrieval index has a durable half and an in-memory half:

* :meth:`ChunkIndexer.build` splits the extracted text and persists only the
  chunk texts (``user-<id>/index-<doc_id>/chunks.json``).  Vectors are never
  written to disk, so switching embedding backends needs no migration.
* :meth:`ChunkIndexer.load` embeds the persisted chunks on first use and
  keeps the resulting :class:`InMemoryVectorIndex` for the life of the
  process.  Concurrent loads of the same document share a single build.

``load`` never raises: a missing chunk set, a missing embedding backend or a
failed embedding call all yield ``None`` and retrieval degrades to
truncated context.
"""

from __future__ import annotations

import asyncio
import json
from collections import defaultdict

import structlog
from pydantic import ValidationError

from legallens.interfaces.embedding_provider import IEmbeddingProvider
from legallens.interfaces.storage_backend import IStorageBackend
from legallens.models.rag import ChunkSet
from legallens.providers.storage import keys
from legallens.providers.vector_store.memory_vector_index import InMemoryVectorIndex
from legallens.services.indexing.chunker import RecursiveTextChunker
from legallens.utils.errors import (
    CapabilityError,
    EmptyContentError,
    NoChunksProducedError,
)

logger = structlog.get_logger(logger_name=__name__)


class ChunkIndexer:
    """Owns chunk-set persistence and the in-process vector index cache."""

    def __init__(
        self,
        storage: IStorageBackend,
        embedding_provider: IEmbeddingProvider | None = None,
        chunk_size: int = 1000,
        overlap: int = 150,
        min_chunk_length: int = 20,
        embedding_timeout: float = 30.0,
    ) -> None:
        self._storage = storage
        self._embedding_provider = embedding_provider
        self._chunk_size = chunk_size
        self._overlap = overlap
        self._min_chunk_length = min_chunk_length
        self._embedding_timeout = embedding_timeout
        self._indexes: dict[tuple[str, str], InMemoryVectorIndex] = {}
        self._build_locks: defaultdict[tuple[str, str], asyncio.Lock] = defaultdict(asyncio.Lock)
        # Bumped by build/delete; a load that straddles a bump is not cached.
        self._generations: defaultdict[tuple[str, str], int] = defaultdict(int)

    @property
    def embedding_provider(self) -> IEmbeddingProvider | None:
        return self._embedding_provider

    # ------------------------------------------------------------------
    # Build / persist
    # ------------------------------------------------------------------

    async def build(
        self,
        user_id: str,
        document_id: str,
        text: str,
        chunk_size: int | None = None,
        overlap: int | None = None,
    ) -> ChunkSet:
        """Split *text* into chunks and persist them, replacing any earlier set.

        Raises
        ------
        EmptyContentError
            If *text* is blank.
        NoChunksProducedError
            If no chunk survives the minimum-length filter.
        PersistenceError
            If the chunk set cannot be written.
        """
        if not text or not text.strip():
            raise EmptyContentError()

        chunker = RecursiveTextChunker(
            chunk_size=chunk_size or self._chunk_size,
            overlap=self._overlap if overlap is None else overlap,
            min_length=self._min_chunk_length,
        )
        chunks = chunker.split(text)
        if not chunks:
            raise NoChunksProducedError()

        chunk_set = ChunkSet(
            user_id=user_id,
            document_id=document_id,
            chunk_size=chunker.chunk_size,
            overlap=chunker.overlap,
            chunks=chunks,
        )
        payload = chunk_set.model_dump(mode="json")
        payload["total_chunks"] = chunk_set.total_chunks
        await self._storage.write(
            keys.chunks_key(user_id, document_id),
            json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8"),
        )
        # A rebuilt chunk set invalidates any vectors built from the old one.
        self._invalidate((user_id, document_id))
        logger.info(
            "index_built",
            user_id=user_id,
            document_id=document_id,
            total_chunks=chunk_set.total_chunks,
        )
        return chunk_set

    async def load_chunk_set(self, user_id: str, document_id: str) -> ChunkSet | None:
        """Return the persisted chunk set, or ``None`` if absent or unreadable."""
        raw = await self._storage.read(keys.chunks_key(user_id, document_id))
        if raw is None:
            return None
        try:
            return ChunkSet.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "chunk_set_unreadable",
                user_id=user_id,
                document_id=document_id,
                error=str(exc),
            )
            return None

    async def exists(self, user_id: str, document_id: str) -> bool:
        return await self._storage.exists(keys.chunks_key(user_id, document_id))

    async def delete(self, user_id: str, document_id: str) -> None:
        """Remove the persisted chunk set and any cached vectors."""
        cache_key = (user_id, document_id)
        self._invalidate(cache_key)
        lock = self._build_locks.get(cache_key)
        if lock is None or not lock.locked():
            # No load in flight, so the bumped generation is not needed either.
            self._build_locks.pop(cache_key, None)
            self._generations.pop(cache_key, None)
        await self._storage.delete_prefix(keys.index_prefix(user_id, document_id))
        logger.info("index_deleted", user_id=user_id, document_id=document_id)

    # ------------------------------------------------------------------
    # Load (embed on first use)
    # ------------------------------------------------------------------

    async def load(self, user_id: str, document_id: str) -> InMemoryVectorIndex | None:
        """Return the document's vector index, embedding its chunks if needed."""
        cache_key = (user_id, document_id)
        cached = self._indexes.get(cache_key)
        if cached is not None:
            return cached

        async with self._build_locks[cache_key]:
            # Another caller may have finished the build while we waited.
            cached = self._indexes.get(cache_key)
            if cached is not None:
                return cached
            generation = self._generations[cache_key]
            index = await self._build_vectors(user_id, document_id)
            if index is not None and self._generations.get(cache_key, 0) == generation:
                self._indexes[cache_key] = index
            elif index is not None:
                logger.info("index_load_discarded_stale", user_id=user_id, document_id=document_id)
            return index

    def _invalidate(self, cache_key: tuple[str, str]) -> None:
        self._indexes.pop(cache_key, None)
        self._generations[cache_key] += 1

    async def _build_vectors(self, user_id: str, document_id: str) -> InMemoryVectorIndex | None:
        try:
            chunk_set = await self.load_chunk_set(user_id, document_id)
        except Exception as exc:  # noqa: BLE001 -- retrieval degrades, never fails
            logger.warning("chunk_set_read_failed", document_id=document_id, error=str(exc))
            return None
        if chunk_set is None or not chunk_set.chunks:
            logger.debug("index_not_found", user_id=user_id, document_id=document_id)
            return None
        if self._embedding_provider is None:
            logger.info("index_load_skipped_no_embeddings", document_id=document_id)
            return None

        try:
            vectors = await asyncio.wait_for(
                self._embedding_provider.embed(chunk_set.chunks),
                timeout=self._embedding_timeout,
            )
            index = InMemoryVectorIndex(chunk_set.as_chunks(), vectors)
        except (CapabilityError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning(
                "index_embedding_failed",
                user_id=user_id,
                document_id=document_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        logger.info(
            "index_loaded",
            user_id=user_id,
            document_id=document_id,
            total_chunks=len(index),
        )
        return index
