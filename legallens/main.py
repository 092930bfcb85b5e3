"""LegalLens composition root.

Wires providers and services together via constructor injection.  Loads
configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.  The CLI and any embedding application (an HTTP layer,
a notebook, tests) obtain a ready :class:`Application` from
:func:`build_application`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from legallens.config.loader import load_config, settings_from_config
from legallens.config.settings import Settings
from legallens.interfaces.embedding_provider import IEmbeddingProvider
from legallens.interfaces.llm_provider import ILLMProvider
from legallens.interfaces.storage_backend import IStorageBackend
from legallens.pipeline.orchestrator import IngestionOrchestrator
from legallens.pipeline.processing_queue import ProcessingQueue
from legallens.providers.cache.memory_cache import MemoryCacheProvider
from legallens.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from legallens.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from legallens.providers.llm.anthropic_provider import AnthropicLLMProvider
from legallens.providers.llm.ollama_provider import OllamaLLMProvider
from legallens.providers.llm.openai_provider import OpenAILLMProvider
from legallens.providers.repository.json_document_repository import JsonDocumentRepository
from legallens.providers.storage.local_disk_storage import LocalDiskStorage
from legallens.services.answerer import Answerer
from legallens.services.content_store import ContentStore
from legallens.services.document_service import DocumentService
from legallens.services.extraction.text_extractor import TextExtractor
from legallens.services.indexing.chunk_indexer import ChunkIndexer
from legallens.services.rate_limiter import SlidingWindowRateLimiter
from legallens.services.retriever import Retriever
from legallens.services.summarizer import Summarizer
from legallens.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# Distinguishes "not passed" from an explicit ``None`` (= no provider).
_AUTO: Any = object()


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Select the first configured generation provider.

    Priority order: Anthropic -> OpenAI -> Ollama.  Returns ``None`` when
    nothing is configured; summaries and answers are then extractive.
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.ollama_base_url:
        return OllamaLLMProvider(settings=app_settings)
    return None


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider | None:
    """Select the first configured embedding provider.

    Priority: OpenAI/OpenAI-compatible (if API key set) -> Nomic/Ollama
    (if a base URL is set).  Returns ``None`` if neither is configured;
    retrieval then degrades to truncated content.
    """
    provider: IEmbeddingProvider
    if app_settings.openai_api_key:
        provider = OpenAIEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider
    if app_settings.ollama_base_url:
        provider = NomicEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider
    return None


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


@dataclass
class Application:
    """Every long-lived component of one LegalLens process."""

    settings: Settings
    documents: DocumentService
    orchestrator: IngestionOrchestrator
    queue: ProcessingQueue
    summarizer: Summarizer
    answerer: Answerer
    retriever: Retriever
    indexer: ChunkIndexer
    content_store: ContentStore
    storage: IStorageBackend
    llm: ILLMProvider | None
    embeddings: IEmbeddingProvider | None

    async def drain(self) -> None:
        """Wait for every queued processing job to finish."""
        await self.queue.join()

    async def shutdown(self) -> None:
        await self.queue.stop()


def build_application(
    custom_settings: Settings | None = None,
    *,
    storage: IStorageBackend | None = None,
    llm_provider: ILLMProvider | None = _AUTO,
    embedding_provider: IEmbeddingProvider | None = _AUTO,
    config_path: str | None = None,
    configure_logs: bool = False,
) -> Application:
    """Construct all providers and services with injected dependencies.

    Parameters
    ----------
    custom_settings:
        Application settings.  When omitted, ``Settings()`` is merged with
        ``config/config.yaml`` (or *config_path*).
    storage:
        Durable storage backend.  Defaults to :class:`LocalDiskStorage`
        rooted at ``settings.data_dir``.
    llm_provider, embedding_provider:
        Override the automatic provider selection.  Pass ``None`` to run
        without that capability.
    configure_logs:
        Configure structlog from the settings (the CLI does this).
    """
    if custom_settings is None:
        config = load_config(config_path or "config/config.yaml")
        app_settings = settings_from_config(config)
    else:
        app_settings = custom_settings

    if configure_logs:
        configure_logging(
            log_level=app_settings.log_level,
            json_output=(app_settings.app_env == "production"),
        )

    llm = _build_llm_provider(app_settings) if llm_provider is _AUTO else llm_provider
    embeddings = (
        _build_embedding_provider(app_settings)
        if embedding_provider is _AUTO
        else embedding_provider
    )
    if storage is None:
        storage = LocalDiskStorage(app_settings.data_dir)

    repository = JsonDocumentRepository(storage)
    content_store = ContentStore(storage)
    indexer = ChunkIndexer(
        storage,
        embedding_provider=embeddings,
        chunk_size=app_settings.chunk_size,
        overlap=app_settings.chunk_overlap,
        min_chunk_length=app_settings.min_chunk_length,
        embedding_timeout=app_settings.embedding_timeout,
    )
    retriever = Retriever(indexer, embedding_timeout=app_settings.embedding_timeout)
    summarizer = Summarizer(
        llm,
        cache=MemoryCacheProvider(
            max_size=app_settings.summary_cache_max_size,
            ttl=app_settings.summary_cache_ttl,
        ),
        rate_limiter=SlidingWindowRateLimiter(
            max_requests=app_settings.summary_rate_limit,
            window_seconds=app_settings.summary_rate_window,
        ),
        max_chars=app_settings.summary_max_chars,
        timeout=app_settings.generation_timeout,
        cache_scope=app_settings.summary_cache_scope,
    )
    answerer = Answerer(
        llm,
        max_context_chars=app_settings.answer_max_context_chars,
        timeout=app_settings.generation_timeout,
    )
    queue = ProcessingQueue(workers=app_settings.processing_workers)
    orchestrator = IngestionOrchestrator(
        storage=storage,
        repository=repository,
        extractor=TextExtractor(),
        content_store=content_store,
        indexer=indexer,
        summarizer=summarizer,
        queue=queue,
    )
    documents = DocumentService(
        repository=repository,
        storage=storage,
        orchestrator=orchestrator,
        content_store=content_store,
        indexer=indexer,
        retriever=retriever,
        summarizer=summarizer,
        answerer=answerer,
        top_k=app_settings.retrieval_top_k,
        fallback_context_chars=app_settings.fallback_context_chars,
    )

    _logger.info(
        "application_built",
        llm_provider=llm.get_provider_name() if llm else None,
        embedding_provider=embeddings.get_provider_name() if embeddings else None,
        storage=storage.get_provider_name(),
    )
    return Application(
        settings=app_settings,
        documents=documents,
        orchestrator=orchestrator,
        queue=queue,
        summarizer=summarizer,
        answerer=answerer,
        retriever=retriever,
        indexer=indexer,
        content_store=content_store,
        storage=storage,
        llm=llm,
        embeddings=embeddings,
    )
