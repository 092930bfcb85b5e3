"""Unit tests for Answerer."""

from __future__ import annotations

import pytest

from legallens.services.answerer import HIGH_DEMAND_PREFIX, Answerer
from legallens.services.extractive import generate_extractive_answer
from legallens.utils.errors import LLMError, ProviderUnavailableError, RateLimitError
from tests.conftest import FakeLLMProvider

_CONTEXT = (
    "The consultant shall deliver the final report. "
    "The submission deadline for the final report is April 5, 2024."
)
_QUESTION = "When is the deadline?"


class TestAnswerer:
    @pytest.mark.asyncio
    async def test_generated_answer(self) -> None:
        llm = FakeLLMProvider(reply=' The deadline is **April 5, 2024** ("...is April 5, 2024"). ')
        result = await Answerer(llm).answer(_QUESTION, _CONTEXT)
        assert result.startswith("The deadline is **April 5, 2024**")
        user_prompt = llm.calls[0][1]
        assert _CONTEXT in user_prompt
        assert f"Question: {_QUESTION}" in user_prompt

    @pytest.mark.asyncio
    async def test_context_truncated(self) -> None:
        llm = FakeLLMProvider()
        await Answerer(llm, max_context_chars=50).answer(_QUESTION, "x" * 49 + "TAIL-MARKER")
        assert "TAIL-MARKER" not in llm.calls[0][1]

    @pytest.mark.asyncio
    async def test_no_provider(self) -> None:
        result = await Answerer(None).answer(_QUESTION, _CONTEXT)
        assert result == generate_extractive_answer(_QUESTION, _CONTEXT)

    @pytest.mark.asyncio
    async def test_rate_limit_adds_high_demand_prefix(self) -> None:
        llm = FakeLLMProvider(error=RateLimitError(message="quota"))
        result = await Answerer(llm).answer(_QUESTION, _CONTEXT)
        assert result == HIGH_DEMAND_PREFIX + generate_extractive_answer(_QUESTION, _CONTEXT)
        assert "April 5, 2024" in result

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [ProviderUnavailableError(message="down"), LLMError(message="bad"), ValueError("bug")],
    )
    async def test_other_failures_fall_back_silently(self, error: Exception) -> None:
        llm = FakeLLMProvider(error=error)
        result = await Answerer(llm).answer(_QUESTION, _CONTEXT)
        assert result == generate_extractive_answer(_QUESTION, _CONTEXT)
        assert not result.startswith(HIGH_DEMAND_PREFIX)

    @pytest.mark.asyncio
    async def test_empty_generation(self) -> None:
        result = await Answerer(FakeLLMProvider(reply="")).answer(_QUESTION, _CONTEXT)
        assert result == generate_extractive_answer(_QUESTION, _CONTEXT)

    @pytest.mark.asyncio
    async def test_empty_context_without_provider(self) -> None:
        result = await Answerer(None).answer(_QUESTION, "")
        assert result == "No answer available from the provided context."
