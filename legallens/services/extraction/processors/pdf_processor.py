"""PDF reader built on PyMuPDF (fitz).

Extracts text page by page from an in-memory PDF.  Pages with no text layer
are skipped; a PDF where every page is empty yields an empty string and the
caller decides what that means.
"""

from __future__ import annotations

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from legallens.utils.errors import UnsupportedFormatError

logger = structlog.get_logger(logger_name=__name__)


class PDFProcessor:
    """Turns PDF bytes into plain text, one blank line between pages."""

    def extract(self, data: bytes) -> str:
        pages = self._extract_pages(data)
        logger.debug("pdf_processed", pages=len(pages))
        return "\n\n".join(text for _, text in pages)

    @staticmethod
    def _extract_pages(data: bytes) -> list[tuple[int, str]]:
        """Return ``(page_number, page_text)`` tuples; page numbers are 1-based."""
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:  # noqa: BLE001 -- PyMuPDF raises several unrelated types
            logger.warning("pdf_open_failed", error=str(exc))
            raise UnsupportedFormatError(
                message="The PDF file appears to be corrupted or unreadable",
            ) from exc

        pages: list[tuple[int, str]] = []
        try:
            if doc.page_count == 0:
                raise UnsupportedFormatError(message="The PDF file has no pages")
            for page_num in range(len(doc)):
                text = doc[page_num].get_text("text").strip()
                if text:
                    pages.append((page_num + 1, text))
        except UnsupportedFormatError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.warning("pdf_page_read_failed", error=str(exc))
            raise UnsupportedFormatError(
                message="The PDF file appears to be corrupted or unreadable",
            ) from exc
        finally:
            doc.close()

        if not pages:
            logger.warning("pdf_no_text_extracted")
        return pages
