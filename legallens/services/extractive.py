"""Extractive summaries and answers that need no generation backend.

These are the fallbacks behind :mod:`legallens.services.summarizer` and
:mod:`legallens.services.answerer`.  Both functions are pure, deterministic
and total: any internal failure degrades to a fixed message instead of
raising.

Summary algorithm
-----------------
1. Normalise whitespace and split into sentences longer than 20 characters.
2. Score each sentence: 2 points per priority keyword it contains, up to 1
   point for length (``words / 18``), and 0.2 for the first or last sentence.
3. Cut the sentence list into 6 positional buckets and take the best
   sentence of each, so the summary spans the whole document.
4. Top up with the best remaining sentences until 8 are selected.
5. Emit up to ``target_words`` words of the selected sentences in selection
   order, tidy the punctuation and ensure the paragraph ends with ``.``,
   ``!`` or ``?``.

Answer algorithm
----------------
Deadline and amount questions are answered by pattern matching; everything
else by term-overlap scoring over sentences.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

import structlog

from legallens.utils.text import normalize_whitespace, split_sentences, tidy_punctuation

logger = structlog.get_logger(logger_name=__name__)

SUMMARY_UNAVAILABLE = "Document processed successfully. Summary not available."
NO_CONTEXT_ANSWER = "No answer available from the provided context."
NOT_FOUND_ANSWER = "This information is not clearly available in the provided document."
FAILED_ANSWER = "Unable to find a relevant answer in the document."

# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

PRIORITY_KEYWORDS: tuple[str, ...] = (
    "obligation", "obligations", "right", "rights", "responsibility",
    "responsibilities", "payment", "fee", "fees", "deadline", "date", "term",
    "termination", "expire", "expiry", "renewal", "notice", "liability",
    "indemnity", "confidential", "confidentiality", "privacy", "data", "scope",
    "deliverable", "deliverables", "service", "services", "warranty",
    "warranties", "governing law", "jurisdiction", "dispute", "arbitration",
    "compliance", "breach", "penalty",
)

_SUMMARY_MIN_SENTENCE = 20
_BUCKET_COUNT = 6
_EXTRA_SENTENCES = 2


@dataclass(frozen=True)
class _ScoredSentence:
    text: str
    index: int
    score: float


def _score_summary_sentence(sentence: str, index: int, total: int) -> float:
    lower = sentence.lower()
    keyword_hits = sum(1 for keyword in PRIORITY_KEYWORDS if keyword in lower)
    length_score = min(len(sentence.split()) / 18, 1.0)
    position_boost = 0.2 if index in (0, total - 1) else 0.0
    return keyword_hits * 2 + length_score + position_boost


def generate_extractive_summary(text: str, target_words: int = 180) -> str:
    """Return a single-paragraph extractive summary of *text*.

    Returns :data:`SUMMARY_UNAVAILABLE` for blank input, when no sentence is
    long enough to score, or on any internal failure.
    """
    try:
        if not normalize_whitespace(text):
            return SUMMARY_UNAVAILABLE

        sentences = split_sentences(text, min_length=_SUMMARY_MIN_SENTENCE)
        if not sentences:
            return SUMMARY_UNAVAILABLE

        total = len(sentences)
        scored = [
            _ScoredSentence(s, i, _score_summary_sentence(s, i, total))
            for i, s in enumerate(sentences)
        ]

        selected: list[str] = []
        bucket_size = math.ceil(total / _BUCKET_COUNT)
        for bucket in range(_BUCKET_COUNT):
            start = bucket * bucket_size
            if start >= total:
                break
            best = max(scored[start : start + bucket_size], key=lambda s: s.score)
            selected.append(best.text)

        # sorted() is stable, so equal scores keep document order.
        for candidate in sorted(scored, key=lambda s: -s.score):
            if candidate.text in selected:
                continue
            selected.append(candidate.text)
            if len(selected) >= _BUCKET_COUNT + _EXTRA_SENTENCES:
                break

        words: list[str] = []
        for sentence in selected:
            for word in sentence.split():
                if len(words) >= target_words:
                    break
                words.append(word)
            if len(words) >= target_words:
                break

        paragraph = tidy_punctuation(" ".join(words))
        if not paragraph:
            return SUMMARY_UNAVAILABLE
        if paragraph[-1] not in ".!?":
            paragraph += "."
        return paragraph
    except Exception as exc:  # noqa: BLE001 -- fallback must never raise
        logger.error("extractive_summary_failed", error=str(exc))
        return SUMMARY_UNAVAILABLE


# ---------------------------------------------------------------------------
# Answer
# ---------------------------------------------------------------------------

_DEADLINE_QUERY_RE = re.compile(
    r"(deadline|due\s+date|due\b|last\s+date|submission|submit|submitted\s+on"
    r"|expiry|expires|expiration|valid\s+until|when)",
    re.IGNORECASE,
)
_AMOUNT_QUERY_RE = re.compile(
    r"(amount|cost|price|fee|payment|salary|rent|total|sum|money|dollar|\$)",
    re.IGNORECASE,
)
_WHO_QUERY_RE = re.compile(r"(who|person|people|party|parties|name|contact)", re.IGNORECASE)
_WHAT_QUERY_RE = re.compile(r"(what|describe|definition|type|kind)", re.IGNORECASE)

_DATE_RE = re.compile(
    r"(\b(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?"
    r"|Aug(?:ust)?|Sep(?:t|tember)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
    r"\s+\d{1,2},?\s+\d{4})"
    r"|(\b\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}\b)"
    r"|(\b\d{4}[/\-]\d{1,2}[/\-]\d{1,2}\b)",
    re.IGNORECASE,
)
_DEADLINE_KEYWORD_RE = re.compile(r"(deadline|due|expir|valid|until|before|by|end)", re.IGNORECASE)
_AMOUNT_RE = re.compile(
    r"(\$[\d,]+(?:\.\d{2})?)|(\d+(?:,\d{3})*(?:\.\d{2})?\s*(?:dollars?|USD|\$))",
    re.IGNORECASE,
)
# Letters and digits in any script survive; everything else becomes a space.
_NON_ALNUM_RE = re.compile(r"[^\w\s]|_")

_ANSWER_MIN_SENTENCE = 10
_ANSWER_MAX_WORDS = 100
_ANSWER_SENTENCES = 2


@dataclass(frozen=True)
class QuestionIntent:
    """Question categories detected by keyword.  Several may be true at once."""

    deadline: bool
    amount: bool
    who: bool
    what: bool


def normalize_question(question: str) -> str:
    return _NON_ALNUM_RE.sub(" ", str(question).lower()).strip()


def detect_intent(normalized_question: str) -> QuestionIntent:
    return QuestionIntent(
        deadline=bool(_DEADLINE_QUERY_RE.search(normalized_question)),
        amount=bool(_AMOUNT_QUERY_RE.search(normalized_question)),
        who=bool(_WHO_QUERY_RE.search(normalized_question)),
        what=bool(_WHAT_QUERY_RE.search(normalized_question)),
    )


def _find_deadline(sentences: list[str]) -> str | None:
    for i, sentence in enumerate(sentences):
        if not _DEADLINE_KEYWORD_RE.search(sentence):
            continue
        window = " ".join(sentences[max(0, i - 1) : i + 2])
        match = _DATE_RE.search(window)
        if match:
            return f'The deadline appears to be: {match.group(0)}. Source: "{sentence.strip()}"'
    return None


def _find_amount(sentences: list[str]) -> str | None:
    for sentence in sentences:
        match = _AMOUNT_RE.search(sentence)
        if match:
            return f'The amount mentioned is: {match.group(0)}. Source: "{sentence.strip()}"'
    return None


def _overlap_score(sentence: str, index: int, terms: list[str]) -> float:
    lower = sentence.lower()
    overlap = 0
    exact = 0
    for term in terms:
        if term in lower:
            overlap += 1
            if re.search(rf"\b{re.escape(term)}\b", lower):
                exact += 1
    length_penalty = max(1.0, len(sentence.split()) / 30)
    position_bonus = 0.2 if index < 3 else 0.0
    structure_bonus = 0.3 if any(mark in sentence for mark in (":", "•", "-")) else 0.0
    return (overlap + exact * 0.5) / length_penalty + position_bonus + structure_bonus


def generate_extractive_answer(question: str, context: str) -> str:
    """Answer *question* from *context* without a generation backend.

    Deadline questions return the first date near a deadline keyword,
    amount questions the first currency amount, and anything else the one
    or two sentences that best overlap the question's terms.
    """
    try:
        if not question or not context:
            return NO_CONTEXT_ANSWER

        normalized = normalize_question(question)
        intent = detect_intent(normalized)
        sentences = [
            s for s in re.split(r"(?<=[.!?])\s+", normalize_whitespace(context))
            if s and len(s) > _ANSWER_MIN_SENTENCE
        ]

        if intent.deadline:
            found = _find_deadline(sentences)
            if found:
                return found
        if intent.amount:
            found = _find_amount(sentences)
            if found:
                return found

        terms = [t for t in normalized.split() if len(t) > 2]
        scored = [
            _ScoredSentence(s, i, _overlap_score(s, i, terms))
            for i, s in enumerate(sentences)
        ]
        scored.sort(key=lambda s: (-s.score, s.index))
        if not scored or scored[0].score == 0:
            return NOT_FOUND_ANSWER

        top = [s.text.strip() for s in scored[:_ANSWER_SENTENCES] if s.score > 0]
        words = " ".join(top).split()
        if len(words) > _ANSWER_MAX_WORDS:
            return " ".join(words[:_ANSWER_MAX_WORDS]) + "..."
        return " ".join(words)
    except Exception as exc:  # noqa: BLE001 -- fallback must never raise
        logger.error("extractive_answer_failed", error=str(exc))
        return FAILED_ANSWER
