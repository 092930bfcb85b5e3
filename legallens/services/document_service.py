"""Document facade: the one interface collaborators use.

Callers (an HTTP layer, the CLI, tests) authenticate the user elsewhere and
pass an ``owner_id``.  Every lookup is scoped to that owner, so one user can
never read, summarise, query or delete another user's documents.

Operations
----------
upload                Store bytes, queue processing, return immediately.
list_documents        The owner's documents, newest first.
get_document          One document or ``NotFoundError``.
get_content           Extracted text, re-extracting lazily if it went missing.
get_summary           Cached or freshly generated summary with status.
ask                   Retrieval-grounded answer, rebuilding a missing index first.
summarize_documents   One summary across several documents.
delete                Remove metadata, original, content and index.
"""

from __future__ import annotations

import re

import structlog

from legallens.interfaces.document_repository import IDocumentRepository
from legallens.interfaces.storage_backend import IStorageBackend
from legallens.models.document import Document, DocumentStatus
from legallens.models.qa import Answer, AnswerKind, MultiDocumentSummary, SummaryResult
from legallens.pipeline.orchestrator import IngestionOrchestrator, original_file_key
from legallens.services.answerer import Answerer
from legallens.services.content_store import ContentStore
from legallens.services.indexing.chunk_indexer import ChunkIndexer
from legallens.services.retriever import Retriever
from legallens.services.summarizer import Summarizer, SummaryStrategy
from legallens.utils.errors import InputError, NotFoundError
from legallens.utils.files import generate_id
from legallens.utils.logging import get_logger
from legallens.utils.text import truncate

logger: structlog.BoundLogger = get_logger(__name__)

_GREETING_RE = re.compile(r"^(hi|hello|hey|hola|namaste)[!.\s]*$", re.IGNORECASE)
_IDENTITY_RE = re.compile(r"who\s+are\s+you\??", re.IGNORECASE)

GREETING_RESPONSE = "Hello! How can I help you with your document?"
IDENTITY_RESPONSE = (
    "I am the LegalLens assistant bot. Ask me anything about your document."
)


class DocumentService:
    """Pipeline-facing operations for one process."""

    def __init__(
        self,
        repository: IDocumentRepository,
        storage: IStorageBackend,
        orchestrator: IngestionOrchestrator,
        content_store: ContentStore,
        indexer: ChunkIndexer,
        retriever: Retriever,
        summarizer: Summarizer,
        answerer: Answerer,
        top_k: int = 4,
        fallback_context_chars: int = 8000,
    ) -> None:
        self._repository = repository
        self._storage = storage
        self._orchestrator = orchestrator
        self._content_store = content_store
        self._indexer = indexer
        self._retriever = retriever
        self._summarizer = summarizer
        self._answerer = answerer
        self._top_k = top_k
        self._fallback_context_chars = fallback_context_chars

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def upload(
        self, owner_id: str, filename: str, media_type: str, data: bytes
    ) -> Document:
        return await self._orchestrator.accept_upload(owner_id, filename, media_type, data)

    async def list_documents(self, owner_id: str) -> list[Document]:
        return await self._repository.list(owner_id)

    async def get_document(self, owner_id: str, document_id: str) -> Document:
        document = await self._repository.get(owner_id, document_id)
        if document is None:
            raise NotFoundError(message=f"Document {document_id} not found")
        return document

    async def get_content(self, owner_id: str, document_id: str) -> str:
        """Return the extracted text.

        Raises
        ------
        NotFoundError
            If the document does not exist, or its content is missing and
            cannot be re-extracted from the original upload.
        """
        document = await self.get_document(owner_id, document_id)
        text = await self._orchestrator.ensure_content(document)
        if text is None:
            raise NotFoundError(message="Document content is not available")
        return text

    async def delete(self, owner_id: str, document_id: str) -> None:
        """Remove every trace of the document.

        Raises
        ------
        NotFoundError
            If the owner has no such document.
        """
        document = await self.get_document(owner_id, document_id)
        await self._repository.remove(owner_id, document_id)
        await self._content_store.delete(owner_id, document_id)
        await self._indexer.delete(owner_id, document_id)
        await self._storage.delete(original_file_key(document))
        await self._summarizer.invalidate(document_id)
        logger.info("document_deleted", user_id=owner_id, document_id=document_id)

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    async def get_summary(
        self, owner_id: str, document_id: str, caller_identity: str | None = None
    ) -> SummaryResult:
        """Return the document's summary, generating and persisting it if needed.

        Documents still ``processing`` or in ``error`` are reported through
        ``status`` with ``summary=None``.
        """
        document = await self.get_document(owner_id, document_id)
        if document.status in (DocumentStatus.UPLOADING, DocumentStatus.PROCESSING):
            return SummaryResult(document_id=document_id, status=DocumentStatus.PROCESSING)
        if document.status == DocumentStatus.ERROR:
            return SummaryResult(
                document_id=document_id,
                status=DocumentStatus.ERROR,
                error=document.error,
            )
        if document.summary:
            return SummaryResult(
                document_id=document_id,
                status=DocumentStatus.COMPLETED,
                summary=document.summary,
                is_cached=True,
            )

        text = await self.get_content(owner_id, document_id)
        await self._orchestrator.ensure_index(document, text)
        summary = await self._summarizer.summarize(
            text,
            document_id,
            caller_identity=caller_identity or owner_id,
            file_name=document.original_name,
        )
        updated = await self._repository.update_if_exists(
            owner_id, document_id, {"summary": summary}
        )
        if updated is None:
            raise NotFoundError(message=f"Document {document_id} not found")
        return SummaryResult(
            document_id=document_id,
            status=DocumentStatus.COMPLETED,
            summary=summary,
            is_cached=False,
        )

    async def summarize_documents(
        self,
        owner_id: str,
        document_ids: list[str],
        caller_identity: str | None = None,
        strategy: SummaryStrategy = "stuff",
    ) -> MultiDocumentSummary:
        """Summarise several of the owner's documents together.

        Documents that are missing or have no recoverable content are
        skipped.

        Raises
        ------
        NotFoundError
            If none of the documents has content.
        ValueError
            If *strategy* is unknown.
        """
        if strategy not in ("stuff", "map-reduce"):
            raise ValueError(f"Unknown summary strategy: {strategy!r}")

        texts: list[str] = []
        for document_id in dict.fromkeys(document_ids):
            document = await self._repository.get(owner_id, document_id)
            if document is None:
                continue
            text = await self._orchestrator.ensure_content(document)
            if text and text.strip():
                texts.append(text)
        if not texts:
            raise NotFoundError(message="No content found for the selected documents")

        summary = await self._summarizer.summarize_many(
            texts,
            caller_identity=caller_identity or owner_id,
            strategy=strategy,
            batch_id=generate_id(),
        )
        return MultiDocumentSummary(
            summary=summary,
            strategy=strategy,
            documents_summarized=len(texts),
        )

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    async def ask(self, owner_id: str, document_id: str, question: str) -> Answer:
        """Answer *question* about one of the owner's documents.

        Raises
        ------
        InputError
            With code ``invalid_question`` if the question is blank.
        NotFoundError
            If the document does not exist or its content is unavailable.
        """
        if not question or not question.strip():
            raise InputError(message="Question is required", code="invalid_question")
        question = question.strip()
        document = await self.get_document(owner_id, document_id)

        small_talk = _small_talk(question)
        if small_talk is not None:
            kind, response = small_talk
            return Answer(
                document_id=document_id,
                document_name=document.original_name,
                user_id=owner_id,
                question=question,
                response=response,
                kind=kind,
            )

        text = await self.get_content(owner_id, document_id)
        await self._orchestrator.ensure_index(document, text)
        context = await self._retriever.retrieve_top_k(
            owner_id, document_id, question, k=self._top_k
        )
        if not context:
            context = truncate(text, self._fallback_context_chars)
            logger.info("answer_context_truncated", document_id=document_id)

        response = await self._answerer.answer(question, context)
        return Answer(
            document_id=document_id,
            document_name=document.original_name,
            user_id=owner_id,
            question=question,
            response=response,
        )


def _small_talk(question: str) -> tuple[AnswerKind, str] | None:
    if _GREETING_RE.match(question):
        return AnswerKind.GREETING, GREETING_RESPONSE
    if _IDENTITY_RE.search(question):
        return AnswerKind.IDENTITY, IDENTITY_RESPONSE
    return None
