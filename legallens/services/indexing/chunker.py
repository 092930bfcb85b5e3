"""Recursive character text splitting with overlapping windows.

Splits document text into chunks of at most ``chunk_size`` characters that
overlap their neighbours by up to ``overlap`` characters.  Boundaries are
chosen from a ranked list of separators:

    paragraph  blank line
    line       newline
    sentence   whitespace after ".", "!" or "?"
    word       space
    character  hard cut

The coarsest separator present in the text is used first.  Pieces that are
still too long are split again with the next separator down the list, so a
chunk only breaks mid-sentence when a single sentence exceeds the budget.
Separators are regular expressions.  The matched separator stays attached to
the end of the piece before it, so sentence terminators remain with their
sentence and joining consecutive pieces reproduces the source text.
"""

from __future__ import annotations

import re

import structlog

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_SEPARATORS: tuple[str, ...] = (r"\n\n", r"\n", r"(?<=[.!?])\s+", r" ", "")


class RecursiveTextChunker:
    """Splits text into overlapping character windows.

    Parameters
    ----------
    chunk_size:
        Maximum characters per chunk (default 1000).
    overlap:
        Maximum characters shared between consecutive chunks (default 150).
    min_length:
        Chunks whose stripped text is this long or shorter are discarded.
    separators:
        Boundary patterns (regular expressions), coarsest first.  Should end
        with ``""``, the hard cut.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        overlap: int = 150,
        min_length: int = 20,
        separators: tuple[str, ...] = DEFAULT_SEPARATORS,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if overlap < 0 or overlap >= chunk_size:
            raise ValueError("overlap must be >= 0 and smaller than chunk_size")
        self._chunk_size = chunk_size
        self._overlap = overlap
        self._min_length = min_length
        self._separators = tuple(separators)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def split(self, text: str) -> list[str]:
        """Split *text* into chunks in source order.

        Returns an empty list for blank input or when every chunk falls under
        the minimum length.
        """
        if not text or not text.strip():
            return []
        raw_chunks = self._split_text(text, list(self._separators))
        chunks = [c for c in raw_chunks if len(c.strip()) > self._min_length]
        logger.debug(
            "chunking_complete",
            num_chunks=len(chunks),
            discarded=len(raw_chunks) - len(chunks),
            chars=len(text),
        )
        return chunks

    # ------------------------------------------------------------------
    # Recursive splitting
    # ------------------------------------------------------------------

    def _split_text(self, text: str, separators: list[str]) -> list[str]:
        separator = separators[-1] if separators else ""
        remaining: list[str] = []
        for i, candidate in enumerate(separators):
            if candidate == "":
                separator = candidate
                break
            if re.search(candidate, text):
                separator = candidate
                remaining = separators[i + 1 :]
                break

        final_chunks: list[str] = []
        good_splits: list[str] = []
        for piece in self._split_keeping_separator(text, separator):
            if len(piece) < self._chunk_size:
                good_splits.append(piece)
                continue
            if good_splits:
                final_chunks.extend(self._merge_splits(good_splits))
                good_splits = []
            if remaining:
                final_chunks.extend(self._split_text(piece, remaining))
            else:
                final_chunks.append(piece)

        if good_splits:
            final_chunks.extend(self._merge_splits(good_splits))
        return final_chunks

    @staticmethod
    def _split_keeping_separator(text: str, separator: str) -> list[str]:
        """Split on the *separator* pattern, attaching each match to the preceding piece."""
        if not separator:
            return list(text)
        # One capture group: parts alternate text, separator, text, ... text.
        parts = re.split(f"({separator})", text)
        pieces = [parts[i] + parts[i + 1] for i in range(0, len(parts) - 1, 2)]
        pieces.append(parts[-1])
        return [p for p in pieces if p]

    # ------------------------------------------------------------------
    # Window accumulation
    # ------------------------------------------------------------------

    def _merge_splits(self, splits: list[str]) -> list[str]:
        """Greedily pack *splits* into windows, carrying up to *overlap* chars forward.

        Pieces are joined with no extra separator because each piece already
        carries its trailing separator.
        """
        docs: list[str] = []
        current: list[str] = []
        total = 0

        for piece in splits:
            length = len(piece)
            if total + length > self._chunk_size and current:
                doc = "".join(current).strip()
                if doc:
                    docs.append(doc)
                # Drop leading pieces until the carried tail fits the overlap
                # and leaves room for the incoming piece.
                while current and (
                    total > self._overlap or total + length > self._chunk_size
                ):
                    total -= len(current.pop(0))
            current.append(piece)
            total += length

        doc = "".join(current).strip()
        if doc:
            docs.append(doc)
        return docs
