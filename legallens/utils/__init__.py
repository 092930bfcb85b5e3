"""Utility modules for LegalLens.

- **errors** -- Exception hierarchy rooted at LegalLensError; each pipeline
  stage raises its own subclass so callers can handle failures granularly.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text** -- whitespace normalization, sentence splitting and prompt
  truncation shared by the extractive algorithms.
- **files** -- identifiers, filename sanitizing and display helpers.
"""

# -- Exception hierarchy ---------------------------------------------------
from legallens.utils.errors import (
    CapabilityError,
    ConfigurationError,
    EmbeddingError,
    EmptyContentError,
    EmptyInputError,
    IndexingError,
    InputError,
    LegalLensError,
    LLMError,
    NoChunksProducedError,
    NotFoundError,
    PersistenceError,
    ProviderUnavailableError,
    RateLimitError,
    UnsupportedFormatError,
)

# -- File helpers ----------------------------------------------------------
from legallens.utils.files import file_type_label, format_file_size, generate_id

# -- Structured logging setup ----------------------------------------------
from legallens.utils.logging import configure_logging, get_logger

__all__ = [
    "CapabilityError",
    "ConfigurationError",
    "EmbeddingError",
    "EmptyContentError",
    "EmptyInputError",
    "IndexingError",
    "InputError",
    "LLMError",
    "LegalLensError",
    "NoChunksProducedError",
    "NotFoundError",
    "PersistenceError",
    "ProviderUnavailableError",
    "RateLimitError",
    "UnsupportedFormatError",
    "configure_logging",
    "file_type_label",
    "format_file_size",
    "generate_id",
    "get_logger",
]
