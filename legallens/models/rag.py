"""Retrieval index data models.

A document's retrieval index has two halves:

1. A persisted :class:`ChunkSet` -- the chunk texts plus the parameters
   used to cut them.  Written once by the chunk indexer, rebuilt on demand.
2. An in-memory vector representation built from those chunks at query
   time (see ``legallens.providers.vector_store``).  Never persisted.

Query results are returned as :class:`RetrievedChunk` objects.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class DocumentChunk(BaseModel):
    """A contiguous slice of a document's extracted text."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Position of the chunk within its chunk set.")
    text: str = Field(description="The chunk's textual content.")


class ChunkSet(BaseModel):
    """The persisted half of a retrieval index for one (user, document)."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    document_id: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
    chunk_size: int = Field(ge=1)
    overlap: int = Field(ge=0)
    chunks: list[str] = Field(default_factory=list)

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    def as_chunks(self) -> list[DocumentChunk]:
        return [DocumentChunk(index=i, text=t) for i, t in enumerate(self.chunks)]


class RetrievedChunk(BaseModel):
    """A chunk returned from a similarity search with its score."""

    model_config = ConfigDict(frozen=True)

    chunk: DocumentChunk
    similarity_score: float = Field(
        default=0.0,
        ge=-1.0,
        le=1.0,
        description="Cosine similarity between the query and this chunk.",
    )
