"""RTF reader built on striprtf.

striprtf parses RTF control words and returns the plain text.  RTF files are
7-bit ASCII with escapes for everything else, so a Latin-1 decode of the raw
bytes is lossless.
"""

from __future__ import annotations

import structlog
from striprtf.striprtf import rtf_to_text

from legallens.utils.errors import UnsupportedFormatError

logger = structlog.get_logger(logger_name=__name__)


class RTFProcessor:
    def extract(self, data: bytes) -> str:
        raw = data.removeprefix(b"\xef\xbb\xbf").decode("latin-1").lstrip()
        if not raw.startswith("{\\rtf"):
            raise UnsupportedFormatError(
                message="The RTF file appears to be corrupted or unreadable",
            )
        try:
            text = rtf_to_text(raw, errors="ignore")
        except Exception as exc:  # noqa: BLE001
            logger.warning("rtf_parse_failed", error=str(exc))
            raise UnsupportedFormatError(
                message="The RTF file appears to be corrupted or unreadable",
            ) from exc
        logger.debug("rtf_processed", chars=len(text))
        return text
