"""File naming and display helpers for uploaded documents."""

from __future__ import annotations

import re
import uuid
from pathlib import PurePath

# Human-readable labels shown next to documents in listings.
_FILE_TYPE_LABELS: dict[str, str] = {
    "application/pdf": "PDF",
    "text/plain": "Text",
    "text/markdown": "Markdown",
    "text/csv": "CSV",
    "application/json": "JSON",
    "application/rtf": "RTF",
    "text/rtf": "RTF",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "Word",
}

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def generate_id() -> str:
    """Return a new opaque document identifier."""
    return uuid.uuid4().hex


def file_type_label(media_type: str) -> str:
    return _FILE_TYPE_LABELS.get(media_type, "Unknown")


def format_file_size(size: int) -> str:
    """Format a byte count for display, e.g. ``1536 -> "1.5 KB"``."""
    if not size or size <= 0:
        return "0 Bytes"
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[exponent]}"


def sanitize_filename(filename: str) -> str:
    """Strip directory components and replace unsafe characters with ``_``."""
    if not filename:
        return ""
    basename = PurePath(filename.replace("\\", "/")).name
    return re.sub(r"[^a-zA-Z0-9\-_.]", "_", basename)


def file_extension(filename: str) -> str:
    """Return the lowercase extension of *filename* including the dot."""
    return PurePath(sanitize_filename(filename)).suffix.lower()
