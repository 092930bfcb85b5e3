"""Word (.docx) reader built on python-docx.

python-docx reads the XML inside the DOCX zip archive.  Body paragraphs come
first, then table cells row by row, so contracts laid out as tables are not
lost.
"""

from __future__ import annotations

import io

import structlog
from docx import Document

from legallens.utils.errors import UnsupportedFormatError

logger = structlog.get_logger(logger_name=__name__)


class DocxProcessor:
    """Turns DOCX bytes into plain text, one paragraph per line."""

    def extract(self, data: bytes) -> str:
        try:
            doc = Document(io.BytesIO(data))
        except Exception as exc:  # noqa: BLE001 -- zipfile, lxml and docx errors
            logger.warning("docx_open_failed", error=str(exc))
            raise UnsupportedFormatError(
                message="The Word document appears to be corrupted or unreadable",
            ) from exc

        lines = [p.text for p in doc.paragraphs if p.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))

        logger.debug("docx_processed", paragraphs=len(doc.paragraphs), tables=len(doc.tables))
        return "\n".join(lines)
