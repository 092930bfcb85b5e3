"""Pydantic v2 data models for the LegalLens pipeline.

- **document** -- :class:`Document`, :class:`DocumentStatus` and the
  ``document_from_record`` boundary adapter.
- **rag** -- chunk sets and retrieval results.
- **qa** -- answers and summary results handed back to collaborators.
"""

from legallens.models.document import Document, DocumentStatus, document_from_record
from legallens.models.qa import Answer, AnswerKind, MultiDocumentSummary, SummaryResult
from legallens.models.rag import ChunkSet, DocumentChunk, RetrievedChunk

__all__ = [
    "Answer",
    "AnswerKind",
    "ChunkSet",
    "Document",
    "DocumentChunk",
    "DocumentStatus",
    "MultiDocumentSummary",
    "RetrievedChunk",
    "SummaryResult",
    "document_from_record",
]
