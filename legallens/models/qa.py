"""Result models returned to collaborators by the document service."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from legallens.models.document import DocumentStatus
from legallens.utils.files import generate_id


class AnswerKind(str, Enum):  # noqa: UP042
    """How an answer was produced."""

    ANSWER = "answer"      # Grounded in document content
    GREETING = "greeting"  # Small talk, document not consulted
    IDENTITY = "identity"  # "Who are you?", document not consulted


class Answer(BaseModel):
    """One question/answer exchange about a document."""

    model_config = ConfigDict(frozen=True)

    answer_id: str = Field(default_factory=generate_id)
    document_id: str
    document_name: str = ""
    user_id: str
    question: str
    response: str
    kind: AnswerKind = AnswerKind.ANSWER
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )


class SummaryResult(BaseModel):
    """Outcome of a summary request.

    ``status`` mirrors the document status so callers can tell "still
    processing" and "processing failed" apart from a real summary.
    ``summary`` is ``None`` in those two cases.
    """

    model_config = ConfigDict(frozen=True)

    document_id: str
    status: DocumentStatus
    summary: str | None = None
    is_cached: bool = False
    error: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.status == DocumentStatus.COMPLETED and self.summary is not None


class MultiDocumentSummary(BaseModel):
    """Combined summary across several documents."""

    model_config = ConfigDict(frozen=True)

    summary: str
    strategy: str
    documents_summarized: int = Field(ge=0)
