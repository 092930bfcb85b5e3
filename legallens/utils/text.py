"""Text helpers shared by the extractive summarizer, answerer and retriever.

Three small concerns live here:

1. **Whitespace normalization** -- collapses runs of spaces, tabs and
   newlines so sentence scoring is not skewed by PDF line wrapping.

2. **Sentence splitting** -- a punctuation-lookbehind splitter that breaks
   after ``.``, ``!`` or ``?`` followed by whitespace.

3. **Prompt truncation** -- hard character caps applied before text is
   sent to a generation backend.
"""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s([.,;:!?])")


def normalize_whitespace(text: str) -> str:
    """Collapse all whitespace runs to single spaces and strip the ends.

    Args:
        text: Raw text, possibly containing newlines from PDF extraction.

    Returns:
        Single-line text.
    """
    return _WHITESPACE_RE.sub(" ", str(text or "")).strip()


def split_sentences(text: str, min_length: int = 0) -> list[str]:
    """Split normalized text into sentences.

    Args:
        text: Text to split.  Whitespace is normalized first.
        min_length: Sentences with this many characters or fewer are dropped.

    Returns:
        Sentences in document order.
    """
    cleaned = normalize_whitespace(text)
    if not cleaned:
        return []
    sentences = (s.strip() for s in _SENTENCE_BOUNDARY_RE.split(cleaned))
    return [s for s in sentences if s and len(s) > min_length]


def tidy_punctuation(text: str) -> str:
    """Remove stray spaces before punctuation ("end ." -> "end.")."""
    return _SPACE_BEFORE_PUNCT_RE.sub(r"\1", normalize_whitespace(text))


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut *text* to *limit* characters, appending *suffix* when cut."""
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + suffix


def word_count(text: str) -> int:
    return len(text.split())
