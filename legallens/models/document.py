"""Document lifecycle models for the LegalLens pipeline.

Defines the :class:`Document` record and its :class:`DocumentStatus` state
machine.  All models use frozen config -- the orchestrator advances a
document through its lifecycle by producing new copies via
``model_copy(update={...})`` and upserting them into the repository.

Lifecycle:
    UPLOADING -> PROCESSING -> COMPLETED
                            \\-> ERROR

``document_from_record`` is the single adapter that turns whatever shape a
persisted or external record has into the canonical :class:`Document`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from legallens.utils.files import file_type_label, format_file_size


class DocumentStatus(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Processing states of an uploaded document.

    The status field is the only externally observable progress signal for
    background processing.
    """

    UPLOADING = "uploading"    # Bytes being written to storage
    PROCESSING = "processing"  # Extraction / indexing / summary in progress
    COMPLETED = "completed"    # Content persisted, summary available
    ERROR = "error"            # Extraction failed, see Document.error


class Document(BaseModel):
    """Metadata for one uploaded document, owned by exactly one user.

    Immutable -- use model_copy(update={...}) to produce new states.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str = Field(description="Opaque identifier, unique per user.")
    user_id: str = Field(description="Owning user.")
    original_name: str = Field(description="Filename as uploaded.")
    stored_name: str = Field(default="", description="Name of the original file in storage.")
    media_type: str = Field(default="application/octet-stream")
    size: int = Field(default=0, ge=0, description="Upload size in bytes.")
    status: DocumentStatus = DocumentStatus.UPLOADING
    error: str | None = Field(default=None, description="Human-readable failure reason.")
    error_code: str | None = Field(default=None, description="Stable failure classification.")
    summary: str | None = Field(default=None, description="Durable cached summary.")
    content_length: int = Field(default=0, ge=0)
    uploaded_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )
    processed_at: datetime | None = None

    @property
    def file_type(self) -> str:
        return file_type_label(self.media_type)

    @property
    def formatted_size(self) -> str:
        return format_file_size(self.size)

    @property
    def has_content(self) -> bool:
        return self.content_length > 0


# Accepted spellings for each canonical field, in priority order.  Older
# metadata files and upstream collaborators use camelCase or short names.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "document_id": ("document_id", "id", "documentId", "fileId"),
    "user_id": ("user_id", "userId", "owner_id", "ownerId"),
    "original_name": ("original_name", "originalName", "name", "filename", "fileName"),
    "stored_name": ("stored_name", "storedName", "file_name"),
    "media_type": ("media_type", "mediaType", "mimeType", "mime_type", "content_type"),
    "size": ("size", "byte_size", "bytes"),
    "status": ("status", "state"),
    "error": ("error", "error_message", "errorMessage"),
    "error_code": ("error_code", "errorCode"),
    "summary": ("summary",),
    "content_length": ("content_length", "contentLength"),
    "uploaded_at": ("uploaded_at", "uploadedAt", "created_at", "createdAt"),
    "processed_at": ("processed_at", "processedAt"),
}


def document_from_record(raw: dict[str, Any], user_id: str | None = None) -> Document:
    """Map a heterogeneous document record onto the canonical :class:`Document`.

    Parameters
    ----------
    raw:
        A dict decoded from storage or received from a collaborator.  Field
        names may use any spelling listed in ``_FIELD_ALIASES``.
    user_id:
        Owner to assume when the record does not carry one.

    Returns
    -------
    Document
        The validated canonical record.  Unknown status values map to
        ``error`` so a damaged record never masquerades as completed.
    """
    values: dict[str, Any] = {}
    for field, aliases in _FIELD_ALIASES.items():
        for alias in aliases:
            if raw.get(alias) is not None:
                values[field] = raw[alias]
                break

    if user_id is not None:
        values.setdefault("user_id", user_id)
    values.setdefault("original_name", "Untitled")

    status = str(values.get("status", DocumentStatus.UPLOADING.value)).lower()
    try:
        values["status"] = DocumentStatus(status)
    except ValueError:
        values["status"] = DocumentStatus.ERROR
        values.setdefault("error", f"Unknown document status: {status}")

    return Document.model_validate(values)
