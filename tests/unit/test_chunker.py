"""Unit tests for RecursiveTextChunker -- separator-aware overlapping chunking."""

from __future__ import annotations

import pytest

from legallens.services.indexing.chunker import RecursiveTextChunker

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_chunker(chunk_size: int = 100, overlap: int = 20, min_length: int = 20) -> RecursiveTextChunker:
    return RecursiveTextChunker(chunk_size=chunk_size, overlap=overlap, min_length=min_length)


def _token_text(count: int) -> str:
    return " ".join(f"token{i:03d}" for i in range(count))


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestBasicChunking:
    def test_short_text_is_single_chunk(self) -> None:
        text = "  A short clause that fits comfortably in one chunk.  "
        assert _make_chunker().split(text) == [text.strip()]

    def test_long_text_produces_bounded_chunks(self) -> None:
        chunks = _make_chunker(chunk_size=100, overlap=20).split(_token_text(60))
        assert len(chunks) > 1
        assert all(len(chunk) <= 100 for chunk in chunks)

    def test_chunks_preserve_source_order(self) -> None:
        chunks = _make_chunker().split(_token_text(60))
        assert chunks[0].startswith("token000")
        assert chunks[-1].endswith("token059")
        firsts = [int(chunk.split()[0][5:]) for chunk in chunks]
        assert firsts == sorted(firsts)

    def test_every_token_is_kept(self) -> None:
        chunks = _make_chunker().split(_token_text(60))
        seen = {word for chunk in chunks for word in chunk.split()}
        assert seen == {f"token{i:03d}" for i in range(60)}


class TestOverlap:
    def test_consecutive_chunks_overlap(self) -> None:
        chunks = _make_chunker(chunk_size=100, overlap=20).split(_token_text(60))
        for previous, current in zip(chunks, chunks[1:]):
            assert current.split()[0] in previous.split()

    def test_zero_overlap_hard_cut(self) -> None:
        chunks = _make_chunker(chunk_size=100, overlap=0).split("x" * 250)
        assert [len(c) for c in chunks] == [100, 100, 50]


class TestSeparators:
    def test_paragraphs_are_not_split(self) -> None:
        paragraphs = [f"Paragraph {i} talks about clause number {i} in some detail." for i in range(8)]
        chunks = _make_chunker(chunk_size=150, overlap=0).split("\n\n".join(paragraphs))
        for paragraph in paragraphs:
            assert any(paragraph in chunk for chunk in chunks)

    def test_long_paragraph_falls_back_to_sentences(self) -> None:
        sentences = [f"Sentence {i} of the single long paragraph." for i in range(10)]
        chunks = _make_chunker(chunk_size=120, overlap=0).split(" ".join(sentences))
        assert len(chunks) > 1
        assert all(len(chunk) <= 120 for chunk in chunks)

    def test_sentence_terminators_stay_with_their_sentence(self) -> None:
        text = " ".join(
            f"Clause {i} requires the tenant to pay the monthly rent on time." for i in range(40)
        )
        chunks = _make_chunker(chunk_size=300, overlap=50).split(text)
        assert len(chunks) > 1
        for chunk in chunks:
            assert chunk.startswith("Clause ")
            assert chunk.endswith("on time.")

    def test_question_and_exclamation_marks_end_sentences(self) -> None:
        sentences = [
            "Is the deposit refundable at the end of the lease term?",
            "Yes, within thirty days of the tenant moving out!",
            "Deductions cover unpaid rent and damage beyond normal wear.",
        ] * 6
        chunks = _make_chunker(chunk_size=130, overlap=0).split(" ".join(sentences))
        assert len(chunks) > 1
        for chunk in chunks:
            assert chunk[0].isalpha()
            assert chunk[-1] in ".!?"

    def test_pieces_rejoin_to_source(self) -> None:
        text = "First sentence here.  Second one follows!\nThird line?\n\nNew paragraph."
        pieces = RecursiveTextChunker._split_keeping_separator(text, r"(?<=[.!?])\s+")
        assert "".join(pieces) == text
        assert pieces[0] == "First sentence here.  "


class TestFiltering:
    def test_blank_text(self) -> None:
        assert _make_chunker().split("   \n\n ") == []

    def test_below_min_length_dropped(self) -> None:
        assert _make_chunker(min_length=20).split("Too short.") == []


class TestValidation:
    def test_non_positive_chunk_size(self) -> None:
        with pytest.raises(ValueError):
            RecursiveTextChunker(chunk_size=0)

    def test_overlap_must_be_smaller_than_chunk_size(self) -> None:
        with pytest.raises(ValueError):
            RecursiveTextChunker(chunk_size=100, overlap=100)
