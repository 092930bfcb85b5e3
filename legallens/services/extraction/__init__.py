"""Text extraction from uploaded documents."""

from legallens.services.extraction.text_extractor import (
    ALLOWED_MEDIA_TYPES,
    TextExtractor,
    is_supported,
    media_type_for_filename,
)

__all__ = ["ALLOWED_MEDIA_TYPES", "TextExtractor", "is_supported", "media_type_for_filename"]
