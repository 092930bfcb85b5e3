"""Per-format readers used by :class:`~legallens.services.extraction.text_extractor.TextExtractor`.

Each processor exposes ``extract(data: bytes) -> str`` and raises
:class:`~legallens.utils.errors.UnsupportedFormatError` when the bytes cannot
be read as its format.
"""

from legallens.services.extraction.processors.docx_processor import DocxProcessor
from legallens.services.extraction.processors.pdf_processor import PDFProcessor
from legallens.services.extraction.processors.rtf_processor import RTFProcessor
from legallens.services.extraction.processors.text_processor import PlainTextProcessor

__all__ = ["DocxProcessor", "PDFProcessor", "PlainTextProcessor", "RTFProcessor"]
