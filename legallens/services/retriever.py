"""Top-k chunk retrieval for question answering.

Turns a question into a context string: the ``k`` chunks most similar to the
question, most relevant first, separated by blank lines.  Every failure mode
(blank question, no index, embedding error, timeout) returns ``""`` so the
caller can fall back to truncated document content.
"""

from __future__ import annotations

import asyncio

import structlog

from legallens.services.indexing.chunk_indexer import ChunkIndexer
from legallens.utils.errors import CapabilityError

logger = structlog.get_logger(logger_name=__name__)

_CONTEXT_SEPARATOR = "\n\n"


class Retriever:
    def __init__(self, indexer: ChunkIndexer, embedding_timeout: float = 30.0) -> None:
        self._indexer = indexer
        self._embedding_timeout = embedding_timeout

    async def retrieve_top_k(
        self,
        user_id: str,
        document_id: str,
        question: str,
        k: int = 4,
    ) -> str:
        """Return the concatenated text of the top-*k* chunks, or ``""``.

        Only the given document's index is consulted, so the context never
        contains another document's chunks.
        """
        if not question or not question.strip():
            logger.debug("retrieval_skipped_empty_question", document_id=document_id)
            return ""

        index = await self._indexer.load(user_id, document_id)
        if index is None or len(index) == 0:
            logger.info("retrieval_no_index", user_id=user_id, document_id=document_id)
            return ""

        provider = self._indexer.embedding_provider
        if provider is None:
            return ""

        try:
            query_vector = await asyncio.wait_for(
                provider.embed_single(question.strip()),
                timeout=self._embedding_timeout,
            )
            results = index.search(query_vector, k=max(1, k))
        except (CapabilityError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning(
                "retrieval_failed",
                user_id=user_id,
                document_id=document_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return ""

        logger.info(
            "chunks_retrieved",
            document_id=document_id,
            requested=k,
            returned=len(results),
            top_score=round(results[0].similarity_score, 4) if results else None,
        )
        return _CONTEXT_SEPARATOR.join(r.chunk.text for r in results)
