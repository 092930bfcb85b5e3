"""Document metadata repository persisted as one JSON file per user.

Each user's records live in ``user-<id>/documents.json`` as a JSON array.
Every mutation is a read-modify-write of that file, serialised per user by an
``asyncio.Lock`` so concurrent status updates from background workers cannot
lose each other's changes.  Records are decoded through
:func:`document_from_record`, so older files with camelCase keys still load.
"""

from __future__ import annotations

import asyncio
import json
from collections import defaultdict
from typing import Any

import structlog
from pydantic import ValidationError

from legallens.interfaces.document_repository import IDocumentRepository
from legallens.interfaces.storage_backend import IStorageBackend
from legallens.models.document import Document, document_from_record
from legallens.providers.storage import keys
from legallens.utils.errors import PersistenceError

logger = structlog.get_logger(logger_name=__name__)


class JsonDocumentRepository(IDocumentRepository):
    """Per-user JSON document store on top of an :class:`IStorageBackend`."""

    def __init__(self, storage: IStorageBackend) -> None:
        self._storage = storage
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    # ------------------------------------------------------------------
    # IDocumentRepository implementation
    # ------------------------------------------------------------------

    async def list(self, user_id: str) -> list[Document]:
        async with self._locks[user_id]:
            documents = await self._load(user_id)
        return sorted(documents, key=lambda d: d.uploaded_at, reverse=True)

    async def get(self, user_id: str, document_id: str) -> Document | None:
        async with self._locks[user_id]:
            documents = await self._load(user_id)
        return next((d for d in documents if d.document_id == document_id), None)

    async def upsert(self, document: Document) -> Document:
        async with self._locks[document.user_id]:
            documents = await self._load(document.user_id)
            for i, existing in enumerate(documents):
                if existing.document_id == document.document_id:
                    documents[i] = document
                    break
            else:
                documents.append(document)
            await self._save(document.user_id, documents)
        return document

    async def update_if_exists(
        self, user_id: str, document_id: str, changes: dict[str, Any]
    ) -> Document | None:
        async with self._locks[user_id]:
            documents = await self._load(user_id)
            for i, existing in enumerate(documents):
                if existing.document_id == document_id:
                    updated = existing.model_copy(update=changes)
                    documents[i] = updated
                    await self._save(user_id, documents)
                    return updated
        logger.info("document_update_skipped_missing", user_id=user_id, document_id=document_id)
        return None

    async def remove(self, user_id: str, document_id: str) -> bool:
        async with self._locks[user_id]:
            documents = await self._load(user_id)
            remaining = [d for d in documents if d.document_id != document_id]
            if len(remaining) == len(documents):
                return False
            await self._save(user_id, remaining)
        logger.info("document_record_removed", user_id=user_id, document_id=document_id)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load(self, user_id: str) -> list[Document]:
        raw = await self._storage.read(keys.documents_key(user_id))
        if raw is None:
            return []
        try:
            records = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("document_metadata_corrupted", user_id=user_id, error=str(exc))
            raise PersistenceError(
                message=f"Document metadata for user {user_id} is unreadable",
                provider_name=self._storage.get_provider_name(),
            ) from exc
        if not isinstance(records, list):
            raise PersistenceError(
                message=f"Document metadata for user {user_id} is not a list",
                provider_name=self._storage.get_provider_name(),
            )
        documents: list[Document] = []
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                documents.append(document_from_record(record, user_id=user_id))
            except ValidationError as exc:
                # Invalid records are skipped here and dropped on the next save.
                logger.warning(
                    "document_record_skipped_invalid",
                    user_id=user_id,
                    record_id=record.get("document_id") or record.get("id"),
                    error=str(exc),
                )
        return documents

    async def _save(self, user_id: str, documents: list[Document]) -> None:
        payload = json.dumps(
            [d.model_dump(mode="json") for d in documents],
            indent=2,
            ensure_ascii=False,
        )
        await self._storage.write(keys.documents_key(user_id), payload.encode("utf-8"))
