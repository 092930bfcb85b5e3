"""Document metadata repositories."""

from legallens.providers.repository.json_document_repository import JsonDocumentRepository

__all__ = ["JsonDocumentRepository"]
