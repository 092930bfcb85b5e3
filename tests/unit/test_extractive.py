"""Unit tests for the extractive summary and answer fallbacks."""

from __future__ import annotations

from legallens.services.extractive import (
    NO_CONTEXT_ANSWER,
    NOT_FOUND_ANSWER,
    SUMMARY_UNAVAILABLE,
    detect_intent,
    generate_extractive_answer,
    generate_extractive_summary,
    normalize_question,
)

_TWELVE_SENTENCES = " ".join(
    f"Sentence number {i} describes a plain fact about the matter." for i in range(12)
)


class TestExtractiveSummary:
    def test_blank_input(self) -> None:
        assert generate_extractive_summary("") == SUMMARY_UNAVAILABLE
        assert generate_extractive_summary("   \n ") == SUMMARY_UNAVAILABLE

    def test_no_scorable_sentences(self) -> None:
        assert generate_extractive_summary("Too short. Also short.") == SUMMARY_UNAVAILABLE

    def test_covers_whole_document(self) -> None:
        summary = generate_extractive_summary(_TWELVE_SENTENCES)
        assert summary.startswith("Sentence number 0 describes")
        assert "number 11 describes" in summary
        assert "number 6 describes" in summary
        assert "number 5 describes" not in summary

    def test_selects_eight_sentences(self) -> None:
        summary = generate_extractive_summary(_TWELVE_SENTENCES)
        assert summary.count("Sentence number") == 8

    def test_keyword_sentence_wins_its_bucket(self) -> None:
        text = (
            "The weather on the signing day was pleasant and mild. "
            "The tenant must make each payment before the monthly deadline. "
            "Everyone enjoyed a light lunch after the meeting ended."
        )
        summary = generate_extractive_summary(text)
        assert summary.startswith("The weather")
        assert "payment before the monthly deadline" in summary

    def test_respects_word_budget(self) -> None:
        text = " ".join(
            f"Clause {i} sets out a long list of duties that each party owes under this deal."
            for i in range(100)
        )
        summary = generate_extractive_summary(text, target_words=50)
        assert len(summary.split()) <= 50
        assert summary[-1] in ".!?"

    def test_deterministic(self) -> None:
        assert generate_extractive_summary(_TWELVE_SENTENCES) == generate_extractive_summary(
            _TWELVE_SENTENCES
        )


class TestQuestionIntent:
    def test_normalize_question(self) -> None:
        assert normalize_question("When's the DUE-date?") == "when s the due date"

    def test_detect_deadline_and_amount(self) -> None:
        intent = detect_intent(normalize_question("When is the payment due?"))
        assert intent.deadline is True
        assert intent.amount is True
        assert intent.who is False

    def test_detect_who_and_what(self) -> None:
        intent = detect_intent(normalize_question("Who are the parties and what type of contract?"))
        assert intent.who is True
        assert intent.what is True


class TestExtractiveAnswer:
    def test_missing_inputs(self) -> None:
        assert generate_extractive_answer("", "Some context here.") == NO_CONTEXT_ANSWER
        assert generate_extractive_answer("What?", "") == NO_CONTEXT_ANSWER

    def test_deadline_answer(self) -> None:
        context = (
            "The consultant shall deliver the final report. "
            "The submission deadline for the final report is April 5, 2024. "
            "Payment follows acceptance."
        )
        assert generate_extractive_answer("When is the deadline?", context) == (
            'The deadline appears to be: April 5, 2024. '
            'Source: "The submission deadline for the final report is April 5, 2024."'
        )

    def test_deadline_date_in_neighbouring_sentence(self) -> None:
        context = "Rent must be paid before the due date. That date is 03/01/2025. Thanks again."
        answer = generate_extractive_answer("What is the due date?", context)
        assert answer.startswith("The deadline appears to be: 03/01/2025.")

    def test_amount_answer(self) -> None:
        context = (
            "The work starts in May. "
            "Acme Corporation shall pay a total fee of $12,500.00 upon acceptance."
        )
        assert generate_extractive_answer("What is the total fee?", context) == (
            "The amount mentioned is: $12,500.00. "
            'Source: "Acme Corporation shall pay a total fee of $12,500.00 upon acceptance."'
        )

    def test_term_overlap_answer(self, contract_text: str) -> None:
        answer = generate_extractive_answer("Can either party terminate the agreement?", contract_text)
        assert answer.startswith(
            "Either party may terminate this agreement with thirty days written notice."
        )

    def test_not_found_when_no_usable_sentences(self) -> None:
        assert generate_extractive_answer("What is it?", "Ok. Yes. No.") == NOT_FOUND_ANSWER

    def test_answer_capped_at_hundred_words(self) -> None:
        long_sentence = "The indemnity clause " + " ".join(["covers"] * 150) + "."
        answer = generate_extractive_answer("What does the indemnity clause cover?", long_sentence)
        assert answer.endswith("...")
        assert len(answer[:-3].split()) == 100
