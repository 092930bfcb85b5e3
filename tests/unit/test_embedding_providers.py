"""Unit tests for embedding provider adapters -- OpenAI and Nomic/Ollama."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from legallens.config.settings import Settings
from legallens.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from legallens.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from legallens.utils.errors import EmbeddingError, ProviderUnavailableError, RateLimitError


def _settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "sk-test",
        "openai_base_url": "",
        "openai_embedding_model": "",
        "ollama_base_url": "http://localhost:11434",
    }
    defaults.update(overrides)
    return Settings(**defaults)


_REQUEST = httpx.Request("POST", "https://api.example.com/v1/embeddings")


def _embedding_response(vectors: list[list[float]]) -> MagicMock:
    response = MagicMock()
    response.data = [MagicMock(embedding=v) for v in vectors]
    response.usage = MagicMock(total_tokens=10)
    return response


class TestOpenAIEmbeddingProvider:
    def test_defaults(self) -> None:
        provider = OpenAIEmbeddingProvider(_settings())
        assert provider.get_dimension() == 1536
        assert provider.get_provider_name() == "openai_embedding"
        assert provider.is_available() is True

    def test_known_model_dimension(self) -> None:
        provider = OpenAIEmbeddingProvider(_settings(openai_embedding_model="text-embedding-3-large"))
        assert provider.get_dimension() == 3072

    @pytest.mark.asyncio
    async def test_embed(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(
            return_value=_embedding_response([[0.1, 0.2], [0.3, 0.4]])
        )
        with patch("legallens.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI", return_value=mock_client):
            provider = OpenAIEmbeddingProvider(_settings())
            assert await provider.embed(["a", "b"]) == [[0.1, 0.2], [0.3, 0.4]]
            assert await provider.embed([]) == []

        assert mock_client.embeddings.create.await_count == 1

    @pytest.mark.asyncio
    async def test_embed_single(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(return_value=_embedding_response([[1.0, 0.0]]))
        with patch("legallens.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI", return_value=mock_client):
            assert await OpenAIEmbeddingProvider(_settings()).embed_single("q") == [1.0, 0.0]

    @pytest.mark.asyncio
    async def test_vector_count_mismatch(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(return_value=_embedding_response([[1.0]]))
        with patch("legallens.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI", return_value=mock_client):
            with pytest.raises(EmbeddingError):
                await OpenAIEmbeddingProvider(_settings()).embed(["a", "b"])

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "sdk_error, expected",
        [
            (openai.RateLimitError("quota", response=httpx.Response(429, request=_REQUEST), body=None), RateLimitError),
            (openai.APIConnectionError(request=_REQUEST), ProviderUnavailableError),
            (openai.AuthenticationError("nope", response=httpx.Response(401, request=_REQUEST), body=None), EmbeddingError),
        ],
    )
    async def test_error_mapping(self, sdk_error, expected) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(side_effect=sdk_error)
        with patch("legallens.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI", return_value=mock_client):
            with pytest.raises(expected):
                await OpenAIEmbeddingProvider(_settings()).embed(["a"])


class TestNomicEmbeddingProvider:
    def test_defaults(self) -> None:
        provider = NomicEmbeddingProvider(_settings())
        assert provider.get_dimension() == 768
        assert provider.get_provider_name() == "nomic_embedding"
        assert provider.is_available() is True
        assert NomicEmbeddingProvider(_settings(ollama_base_url="")).is_available() is False

    @pytest.mark.asyncio
    async def test_embed_uses_nomic_model(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(return_value=_embedding_response([[0.5] * 3]))
        with patch("legallens.providers.embedding.nomic_embedding_provider.openai.AsyncOpenAI", return_value=mock_client):
            result = await NomicEmbeddingProvider(_settings()).embed(["text"])

        assert result == [[0.5, 0.5, 0.5]]
        assert mock_client.embeddings.create.call_args.kwargs["model"] == "nomic-embed-text"

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        mock_client = AsyncMock()
        mock_client.embeddings.create = AsyncMock(
            side_effect=openai.InternalServerError(
                "boom", response=httpx.Response(500, request=_REQUEST), body=None
            )
        )
        with patch("legallens.providers.embedding.nomic_embedding_provider.openai.AsyncOpenAI", return_value=mock_client):
            with pytest.raises(ProviderUnavailableError):
                await NomicEmbeddingProvider(_settings()).embed(["text"])
