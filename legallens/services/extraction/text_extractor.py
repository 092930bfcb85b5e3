"""Text extraction for uploaded documents.

Dispatches purely on the declared media type -- the bytes are never sniffed
to guess a different format:

    application/pdf                        -> PDFProcessor (PyMuPDF)
    application/vnd.openxml...document     -> DocxProcessor (python-docx)
    application/rtf, text/rtf              -> RTFProcessor (striprtf)
    text/plain, text/markdown, text/csv,
    application/json                       -> PlainTextProcessor (lenient)
    anything else                          -> PlainTextProcessor (strict)

Extraction is pure: no state survives a call.  PDF and DOCX parsing are
CPU-bound, so async callers use :meth:`TextExtractor.extract_async`, which
runs the parse in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog

from legallens.services.extraction.processors import (
    DocxProcessor,
    PDFProcessor,
    PlainTextProcessor,
    RTFProcessor,
)
from legallens.utils.errors import EmptyInputError

logger = structlog.get_logger(logger_name=__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_MEDIA_TYPES: frozenset[str] = frozenset({
    "application/pdf",
    "text/plain",
    "text/markdown",
    "text/csv",
    "application/json",
    "application/rtf",
    "text/rtf",
    DOCX_MEDIA_TYPE,
})

# Used when a collaborator hands over a file without a media type.
EXTENSION_MEDIA_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".csv": "text/csv",
    ".json": "application/json",
    ".rtf": "application/rtf",
    ".docx": DOCX_MEDIA_TYPE,
}

MEDIA_TYPE_EXTENSIONS: dict[str, str] = {
    "application/pdf": ".pdf",
    "text/plain": ".txt",
    "text/markdown": ".md",
    "text/csv": ".csv",
    "application/json": ".json",
    "application/rtf": ".rtf",
    "text/rtf": ".rtf",
    DOCX_MEDIA_TYPE: ".docx",
}


class _Processor(Protocol):
    def extract(self, data: bytes) -> str: ...


def normalize_media_type(media_type: str | None) -> str:
    """Lowercase and drop parameters: ``"Text/Plain; charset=utf-8" -> "text/plain"``."""
    return (media_type or "").split(";", 1)[0].strip().lower()


def is_supported(media_type: str | None) -> bool:
    return normalize_media_type(media_type) in ALLOWED_MEDIA_TYPES


def media_type_for_filename(filename: str) -> str:
    """Guess a media type from a file extension, defaulting to octet-stream."""
    lowered = filename.lower()
    for extension, media_type in EXTENSION_MEDIA_TYPES.items():
        if lowered.endswith(extension):
            return media_type
    return "application/octet-stream"


class TextExtractor:
    """Converts raw uploaded bytes into plain text.

    Errors are all :class:`~legallens.utils.errors.InputError` subclasses
    carrying a stable ``code``:

    * zero bytes -> ``EmptyInputError`` (``empty_file``)
    * unknown type that is not UTF-8 text -> ``UnsupportedFormatError``
      (``unknown_type``)
    * PDF/DOCX/RTF that fails to parse -> ``UnsupportedFormatError``
      (``corrupted_or_unsupported``)
    * a parsed document with no text -> ``EmptyInputError`` (``empty_file``)
    """

    def __init__(self) -> None:
        text = PlainTextProcessor(strict=False)
        rtf = RTFProcessor()
        self._processors: dict[str, _Processor] = {
            "application/pdf": PDFProcessor(),
            DOCX_MEDIA_TYPE: DocxProcessor(),
            "application/rtf": rtf,
            "text/rtf": rtf,
            "text/plain": text,
            "text/markdown": text,
            "text/csv": text,
            "application/json": text,
        }
        self._fallback = PlainTextProcessor(strict=True)

    def extract(self, data: bytes, media_type: str) -> str:
        """Return the text of *data*, read as *media_type*.

        Raises
        ------
        EmptyInputError
            If *data* is empty or contains no extractable text.
        UnsupportedFormatError
            If *data* cannot be read as its declared type.
        """
        if not data:
            raise EmptyInputError(message="The uploaded file is empty")

        normalized = normalize_media_type(media_type)
        processor = self._processors.get(normalized, self._fallback)
        text = processor.extract(data)

        if not text.strip():
            logger.info("extraction_empty", media_type=normalized, size=len(data))
            raise EmptyInputError(message="No readable text was found in the document")

        logger.info("text_extracted", media_type=normalized, size=len(data), chars=len(text))
        return text

    async def extract_async(self, data: bytes, media_type: str) -> str:
        """Run :meth:`extract` in a worker thread."""
        return await asyncio.to_thread(self.extract, data, media_type)
