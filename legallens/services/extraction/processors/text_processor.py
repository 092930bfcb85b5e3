"""Plain-text reader for text, Markdown, CSV and JSON uploads."""

from __future__ import annotations

from legallens.utils.errors import UnsupportedFormatError


class PlainTextProcessor:
    """Decodes UTF-8 text, tolerating a byte-order mark.

    Parameters
    ----------
    strict:
        When ``True`` undecodable bytes raise :class:`UnsupportedFormatError`
        with code ``unknown_type``; when ``False`` they are replaced.
    """

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    def extract(self, data: bytes) -> str:
        if not self._strict:
            return data.decode("utf-8-sig", errors="replace")
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise UnsupportedFormatError(
                message="This file type is not supported",
                code="unknown_type",
            ) from exc
        # Binary formats often decode as UTF-8 but are full of control bytes.
        if "\x00" in text:
            raise UnsupportedFormatError(
                message="This file type is not supported",
                code="unknown_type",
            )
        return text
