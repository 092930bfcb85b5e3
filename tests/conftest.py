"""Shared pytest fixtures for the LegalLens test suite."""

from __future__ import annotations

import hashlib
import re
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from legallens.config.settings import Settings
from legallens.interfaces.embedding_provider import IEmbeddingProvider
from legallens.interfaces.llm_provider import ILLMProvider
from legallens.main import build_application
from legallens.providers.storage.memory_storage import MemoryStorage

_EMBEDDING_DIM = 256
_WORD_RE = re.compile(r"[a-z0-9]+")


def _bag_of_words_vector(text: str) -> list[float]:
    """Deterministic vector: one hashed bucket per lowercase word.

    Texts sharing words get a positive cosine similarity, which is enough
    for retrieval tests to be meaningful.
    """
    vector = [0.0] * _EMBEDDING_DIM
    for word in _WORD_RE.findall(text.lower()):
        bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % _EMBEDDING_DIM
        vector[bucket] += 1.0
    return vector


# ---------------------------------------------------------------------------
# Capability fakes
# ---------------------------------------------------------------------------


class FakeEmbeddingProvider(IEmbeddingProvider):
    """In-memory deterministic embedding provider for tests."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [_bag_of_words_vector(t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        return _bag_of_words_vector(text)

    def get_dimension(self) -> int:
        return _EMBEDDING_DIM

    def get_provider_name(self) -> str:
        return "fake-embedding"

    def is_available(self) -> bool:
        return True


class FakeLLMProvider(ILLMProvider):
    """Records prompts and returns a fixed reply, or raises ``error``."""

    def __init__(self, reply: str = "Generated text.", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 600,
    ) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply

    def get_provider_name(self) -> str:
        return "fake-llm"

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings with no providers configured and data under tmp_path."""
    return Settings(
        openai_api_key="",
        anthropic_api_key="",
        ollama_base_url="",
        data_dir=str(tmp_path / "uploads"),
        processing_workers=1,
        chunk_size=200,
        chunk_overlap=30,
    )


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def fake_llm() -> FakeLLMProvider:
    return FakeLLMProvider()


@pytest.fixture
def fake_embeddings() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def mock_llm_provider() -> ILLMProvider:
    """MagicMock ILLMProvider; override ``complete`` per test."""
    mock = MagicMock(spec=ILLMProvider)
    mock.get_provider_name.return_value = "mock-llm"
    mock.is_available.return_value = True
    mock.complete = AsyncMock(return_value="Mock completion.")
    return mock


@pytest_asyncio.fixture
async def app(test_settings, memory_storage, fake_llm, fake_embeddings):
    """Fully wired application on in-memory storage with fake capabilities."""
    application = build_application(
        test_settings,
        storage=memory_storage,
        llm_provider=fake_llm,
        embedding_provider=fake_embeddings,
    )
    yield application
    await application.shutdown()


@pytest_asyncio.fixture
async def offline_app(test_settings, memory_storage):
    """Application with no generation or embedding backend."""
    application = build_application(
        test_settings,
        storage=memory_storage,
        llm_provider=None,
        embedding_provider=None,
    )
    yield application
    await application.shutdown()


@pytest.fixture
def contract_text() -> str:
    """A short service agreement used across extraction and QA tests."""
    return (
        "SERVICE AGREEMENT\n\n"
        "This Service Agreement is entered into between Acme Corporation and "
        "Jane Smith for consulting services.\n\n"
        "The consultant shall deliver the final report to Acme Corporation. "
        "The submission deadline for the final report is April 5, 2024.\n\n"
        "Acme Corporation shall pay a total fee of $12,500.00 upon acceptance "
        "of the deliverables.\n\n"
        "Either party may terminate this agreement with thirty days written notice. "
        "Termination does not affect payment obligations for services already rendered.\n\n"
        "All information exchanged under this agreement is confidential and may not "
        "be disclosed to third parties without prior written consent.\n\n"
        "This agreement is governed by the laws of the State of New York and any "
        "dispute shall be resolved by binding arbitration."
    )
