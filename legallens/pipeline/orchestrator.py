"""Ingestion orchestrator: upload -> extract -> store -> index -> summarise.

Coordinates the per-document pipeline.  Each stage advances a frozen
:class:`Document` via ``model_copy(update={...})`` and upserts it, so the
document's ``status`` is always the externally visible progress signal:

    accept_upload()      uploading -> processing   (returns immediately)
    process_document()   processing -> completed | error   (queue worker)

Failure policy:
    - InputError (empty, corrupted, unsupported) -> ``error`` with the
      error's message and code.
    - Index build failure -> logged, processing continues.
    - Summary failure -> cannot happen; the summarizer falls back.
    - Anything else -> ``error`` with a generic message.  The worker
      never crashes.

A process crash mid-pipeline leaves the document in ``processing``.  There
is no automatic recovery.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import PurePath

import structlog

from legallens.interfaces.document_repository import IDocumentRepository
from legallens.interfaces.storage_backend import IStorageBackend
from legallens.models.document import Document, DocumentStatus
from legallens.pipeline.processing_queue import ProcessingQueue
from legallens.providers.storage import keys
from legallens.services.content_store import ContentStore
from legallens.services.extraction.text_extractor import (
    MEDIA_TYPE_EXTENSIONS,
    TextExtractor,
    normalize_media_type,
)
from legallens.services.indexing.chunk_indexer import ChunkIndexer
from legallens.services.summarizer import Summarizer
from legallens.utils.errors import InputError, LegalLensError
from legallens.utils.files import file_extension, generate_id
from legallens.utils.logging import get_logger

GENERIC_PROCESSING_ERROR = "An unexpected error occurred while processing the document"


def original_file_key(document: Document) -> str:
    """Storage key of a document's original upload."""
    return keys.original_key(
        document.user_id, document.document_id, PurePath(document.stored_name).suffix
    )


class IngestionOrchestrator:
    """Runs the ingestion pipeline for uploaded documents.

    All collaborators are injected; the orchestrator never creates them.
    """

    def __init__(
        self,
        storage: IStorageBackend,
        repository: IDocumentRepository,
        extractor: TextExtractor,
        content_store: ContentStore,
        indexer: ChunkIndexer,
        summarizer: Summarizer,
        queue: ProcessingQueue,
    ) -> None:
        self._storage = storage
        self._repository = repository
        self._extractor = extractor
        self._content_store = content_store
        self._indexer = indexer
        self._summarizer = summarizer
        self._queue = queue
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    async def accept_upload(
        self,
        user_id: str,
        original_name: str,
        media_type: str,
        data: bytes,
    ) -> Document:
        """Store the original bytes and queue the document for processing.

        Returns the document in ``processing`` state without waiting for
        extraction.  Storage failures propagate as ``PersistenceError``.
        """
        document_id = generate_id()
        normalized_type = normalize_media_type(media_type) or "application/octet-stream"
        extension = file_extension(original_name) or MEDIA_TYPE_EXTENSIONS.get(normalized_type, "")
        document = Document(
            document_id=document_id,
            user_id=user_id,
            original_name=original_name or "Untitled",
            stored_name=PurePath(keys.original_key(user_id, document_id, extension)).name,
            media_type=normalized_type,
            size=len(data),
            status=DocumentStatus.UPLOADING,
        )
        await self._storage.write(original_file_key(document), data)
        await self._repository.upsert(document)

        processing = await self._repository.update_if_exists(
            user_id, document_id, {"status": DocumentStatus.PROCESSING}
        )
        if processing is None:
            # Deleted before it could be queued.
            return document.model_copy(update={"status": DocumentStatus.PROCESSING})
        document = processing

        self._queue.submit(
            lambda: self.process_document(user_id, document_id),
            label=f"process:{document_id}",
        )
        self._logger.info(
            "upload_accepted",
            user_id=user_id,
            document_id=document_id,
            media_type=normalized_type,
            size=len(data),
        )
        return document

    # ------------------------------------------------------------------
    # Background processing
    # ------------------------------------------------------------------

    async def process_document(self, user_id: str, document_id: str) -> Document | None:
        """Run extraction, indexing and summarisation for one document.

        Returns the final document state, or ``None`` if the document was
        deleted before or during processing.  Content and index written for
        a document deleted mid-pipeline are removed again.
        """
        document = await self._repository.get(user_id, document_id)
        if document is None:
            self._logger.info("processing_skipped_deleted", document_id=document_id)
            return None

        log = self._logger.bind(user_id=user_id, document_id=document_id)
        try:
            data = await self._storage.read(original_file_key(document))
            if data is None:
                data = b""
            text = await self._extractor.extract_async(data, document.media_type)
            if await self._repository.get(user_id, document_id) is None:
                log.info("processing_abandoned_deleted", stage="extract")
                return None
            await self._content_store.save(user_id, document_id, text)

            await self._build_index(user_id, document_id, text, log)

            summary = await self._summarizer.summarize(
                text,
                document_id,
                caller_identity=user_id,
                file_name=document.original_name,
            )
            changes = {
                "status": DocumentStatus.COMPLETED,
                "summary": summary,
                "content_length": len(text),
                "error": None,
                "error_code": None,
                "processed_at": datetime.now(tz=timezone.utc),  # noqa: UP017
            }
            log.info("document_processed", chars=len(text))
        except InputError as exc:
            log.warning("document_input_rejected", code=exc.code, error=exc.message)
            changes = {
                "status": DocumentStatus.ERROR,
                "error": exc.message,
                "error_code": exc.code,
                "processed_at": datetime.now(tz=timezone.utc),  # noqa: UP017
            }
        except Exception as exc:  # noqa: BLE001 -- record the failure, keep the worker alive
            log.error(
                "document_processing_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            changes = {
                "status": DocumentStatus.ERROR,
                "error": GENERIC_PROCESSING_ERROR,
                "error_code": "processing_failed",
                "processed_at": datetime.now(tz=timezone.utc),  # noqa: UP017
            }

        updated = await self._repository.update_if_exists(user_id, document_id, changes)
        if updated is None:
            log.info("processing_result_discarded_deleted")
            await self._discard_artifacts(user_id, document_id)
        return updated

    async def _discard_artifacts(self, user_id: str, document_id: str) -> None:
        """Remove content, index and cached summary of a deleted document."""
        await self._content_store.delete(user_id, document_id)
        await self._indexer.delete(user_id, document_id)
        await self._summarizer.invalidate(document_id)

    async def _build_index(
        self, user_id: str, document_id: str, text: str, log: structlog.BoundLogger
    ) -> bool:
        try:
            await self._indexer.build(user_id, document_id, text)
            return True
        except LegalLensError as exc:
            log.warning("index_build_failed", error=str(exc), error_type=type(exc).__name__)
        except Exception as exc:  # noqa: BLE001 -- indexing is best-effort
            log.error("index_build_unexpected_error", error=str(exc))
        return False

    # ------------------------------------------------------------------
    # Lazy recovery
    # ------------------------------------------------------------------

    async def ensure_content(self, document: Document) -> str | None:
        """Return the document's extracted text, re-extracting it if missing.

        Re-extracted text is saved back to the content store.  Returns
        ``None`` when neither the content nor a readable original exists.
        """
        text = await self._content_store.load(document.user_id, document.document_id)
        if text is not None:
            return text

        data = await self._storage.read(original_file_key(document))
        if not data:
            self._logger.warning(
                "content_unrecoverable_no_original",
                user_id=document.user_id,
                document_id=document.document_id,
            )
            return None
        try:
            text = await self._extractor.extract_async(data, document.media_type)
        except InputError as exc:
            self._logger.warning(
                "content_reextraction_failed",
                document_id=document.document_id,
                code=exc.code,
            )
            return None

        await self._content_store.save(document.user_id, document.document_id, text)
        self._logger.info("content_reextracted", document_id=document.document_id)
        return text

    async def ensure_index(self, document: Document, text: str) -> bool:
        """Build the chunk index if none is persisted yet."""
        if await self._indexer.exists(document.user_id, document.document_id):
            return True
        log = self._logger.bind(user_id=document.user_id, document_id=document.document_id)
        return await self._build_index(document.user_id, document.document_id, text, log)
