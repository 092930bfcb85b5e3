"""Abstract base class for per-user document metadata persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from legallens.models.document import Document


class IDocumentRepository(ABC):
    """Contract for storing :class:`Document` records.

    Records are partitioned by owner: every method takes the ``user_id`` and
    never returns another user's documents.
    """

    @abstractmethod
    async def list(self, user_id: str) -> list[Document]:
        """Return the user's documents, newest upload first."""

    @abstractmethod
    async def get(self, user_id: str, document_id: str) -> Document | None:
        """Return one document, or ``None`` if the user has no such document."""

    @abstractmethod
    async def upsert(self, document: Document) -> Document:
        """Insert or replace *document* (matched on ``document_id``)."""

    @abstractmethod
    async def update_if_exists(
        self, user_id: str, document_id: str, changes: dict[str, Any]
    ) -> Document | None:
        """Apply *changes* to the stored record in one atomic step.

        Returns the updated document, or ``None`` (writing nothing) when the
        record no longer exists.
        """

    @abstractmethod
    async def remove(self, user_id: str, document_id: str) -> bool:
        """Delete a document record.  Returns ``True`` if one was removed."""
