"""Custom exception hierarchy for LegalLens.

All application exceptions inherit from :class:`LegalLensError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai", "ollama", "local-disk") caused the failure.

The hierarchy is organized by pipeline concern:

    LegalLensError  (base -- catch-all for any LegalLens error)
    +-- InputError                (bad upload or bad question, user-visible)
    |   +-- EmptyInputError       (zero-length upload / no readable text)
    |   +-- UnsupportedFormatError (corrupted or unknown document type)
    +-- NotFoundError             (document, content or index absent)
    +-- IndexingError             (chunk index could not be built)
    |   +-- EmptyContentError
    |   +-- NoChunksProducedError
    +-- CapabilityError           (generation / embedding backend failure)
    |   +-- RateLimitError        (quota or rate exceeded)
    |   +-- ProviderUnavailableError (timeout, connection, 5xx)
    |   +-- LLMError              (empty or unusable completion)
    |   +-- EmbeddingError        (empty or unusable embedding response)
    +-- PersistenceError          (storage read/write failure)
    +-- ConfigurationError        (startup / missing config)

Capability errors are always absorbed by the summarizer and answerer, which
fall back to extractive output.  Input and indexing errors are recorded on
the Document.  Persistence errors propagate: there is no safe fallback for
durability.
"""


class LegalLensError(Exception):
    """Base exception for all LegalLens errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[openai] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Input errors -- surfaced to the user, document moves to ``error``
# ---------------------------------------------------------------------------

class InputError(LegalLensError):
    """Raised when an upload or a question cannot be processed as given.

    ``code`` is a stable machine-readable classification (``empty_file``,
    ``unknown_type``, ``corrupted_or_unsupported``, ``invalid_question``)
    that the orchestrator stores next to the human-readable message.
    """

    def __init__(
        self,
        message: str = "The input could not be processed",
        code: str = "invalid_input",
        provider_name: str | None = None,
    ) -> None:
        self._code = code
        super().__init__(message=message, provider_name=provider_name)

    @property
    def code(self) -> str:
        return self._code


class EmptyInputError(InputError):
    """Raised for zero-length uploads or documents with no readable text."""

    def __init__(
        self,
        message: str = "The uploaded file is empty",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, code="empty_file", provider_name=provider_name)


class UnsupportedFormatError(InputError):
    """Raised when a document cannot be read as its declared type."""

    def __init__(
        self,
        message: str = "The file appears to be corrupted or in an unsupported format",
        code: str = "corrupted_or_unsupported",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, code=code, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Lookup errors
# ---------------------------------------------------------------------------

class NotFoundError(LegalLensError):
    """Raised when a document, its content or its index does not exist."""

    def __init__(
        self,
        message: str = "The requested document was not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Indexing errors
# ---------------------------------------------------------------------------

class IndexingError(LegalLensError):
    """Raised when a retrieval index cannot be built for a document."""

    def __init__(
        self,
        message: str = "Retrieval index could not be built",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmptyContentError(IndexingError):
    """Raised when the text handed to the indexer is blank."""

    def __init__(
        self,
        message: str = "No content provided for indexing",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NoChunksProducedError(IndexingError):
    """Raised when splitting yields no chunk above the minimum length."""

    def __init__(
        self,
        message: str = "No chunks created from content",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External capability errors (generation / embedding)
# ---------------------------------------------------------------------------

class CapabilityError(LegalLensError):
    """Base class for failures of the pluggable generation/embedding backends."""

    def __init__(
        self,
        message: str = "External capability call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(CapabilityError):
    """Raised when a provider reports quota or rate-limit exhaustion.

    The answerer distinguishes this case from other failures and tells the
    user the service is under high demand.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(CapabilityError):
    """Raised when an external service times out or is unreachable."""

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(CapabilityError):
    """Raised when an LLM API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmbeddingError(CapabilityError):
    """Raised when an embedding call fails or returns unusable vectors."""

    def __init__(
        self,
        message: str = "Embedding API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Storage / configuration errors
# ---------------------------------------------------------------------------

class PersistenceError(LegalLensError):
    """Raised when durable storage cannot be read or written."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(LegalLensError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
