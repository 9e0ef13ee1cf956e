"""Grader for choose-words questions.

Three subtypes share a token-by-token comparison of normalized text:

- fill_in_blanks: submitted words against the blank answers
- translation: tokens scored by position, and the whole sentence must equal
  the canonical sentence to count as correct
- sentence_scramble: tokens compared by position only

Questions without a question_data block fall back to the legacy
correct_answer word list.
"""

from typing import Any

from models import ChooseWordsData, ChooseWordsQuestion, ChooseWordsSubtype, GradeResult
from grading.base import AnswerGrader, as_token_list, fraction, texts_match
from grading.normalizer import normalize_for_comparison


def count_positional_matches(submitted: list[str], canonical: list[str]) -> int:
    """Count positions where both sequences hold the same normalized token."""
    return sum(
        1
        for user_token, correct_token in zip(submitted, canonical)
        if texts_match(user_token, correct_token)
    )


class ChooseWordsGrader(AnswerGrader[ChooseWordsQuestion]):
    """Grader for choose-words questions (all subtypes)."""

    def grade(self, answer: Any) -> GradeResult:
        words = as_token_list(answer)
        question_data = self.question.question_data
        if question_data is None:
            return self._grade_legacy(words)

        if question_data.subtype == ChooseWordsSubtype.FILL_IN_BLANKS:
            return self._grade_fill_in_blanks(words, question_data)
        if question_data.subtype == ChooseWordsSubtype.TRANSLATION:
            return self._grade_translation(words, question_data)
        return self._grade_scramble(words, question_data)

    def _grade_fill_in_blanks(
        self, words: list[str], question_data: ChooseWordsData
    ) -> GradeResult:
        blanks = question_data.data.blanks
        correct = blanks.correct if blanks else []
        # Missing submitted blanks compare as empty strings
        padded = words + [""] * (len(correct) - len(words))
        correct_count = count_positional_matches(padded, correct)
        is_correct = (
            len(correct) > 0
            and correct_count == len(correct)
            and len(words) == len(correct)
        )
        return GradeResult(
            is_correct=is_correct,
            score=fraction(correct_count, len(correct)),
            feedback="All blanks correct!"
            if is_correct
            else f"{correct_count}/{len(correct)} blanks correct",
        )

    def _grade_translation(
        self, words: list[str], question_data: ChooseWordsData
    ) -> GradeResult:
        tokens = question_data.data.tokens
        canonical_sentence = (
            question_data.data.canonical_sentence or " ".join(tokens)
        ).strip()
        user_sentence = " ".join(words).strip()

        correct_count = count_positional_matches(words, tokens)
        is_correct = (
            len(tokens) > 0
            and len(words) == len(tokens)
            and normalize_for_comparison(user_sentence)
            == normalize_for_comparison(canonical_sentence)
        )
        return GradeResult(
            is_correct=is_correct,
            score=fraction(correct_count, len(tokens)),
            feedback="Perfect translation!"
            if is_correct
            else f"{correct_count}/{len(tokens)} tokens in correct order",
        )

    def _grade_scramble(
        self, words: list[str], question_data: ChooseWordsData
    ) -> GradeResult:
        tokens = question_data.data.tokens
        correct_count = count_positional_matches(words, tokens)
        is_correct = (
            len(tokens) > 0
            and len(words) == len(tokens)
            and correct_count == len(tokens)
        )
        return GradeResult(
            is_correct=is_correct,
            score=fraction(correct_count, len(tokens)),
            feedback="Perfect sentence!"
            if is_correct
            else f"{correct_count}/{len(tokens)} tokens in correct order",
        )

    def _grade_legacy(self, words: list[str]) -> GradeResult:
        correct_words = self.question.correct_answer
        canonical = {normalize_for_comparison(word) for word in correct_words}
        correct_count = sum(
            1 for word in words if normalize_for_comparison(word) in canonical
        )
        is_correct = (
            len(correct_words) > 0
            and correct_count == len(correct_words)
            and len(words) == len(correct_words)
        )
        return GradeResult(
            is_correct=is_correct,
            score=fraction(correct_count, len(correct_words)),
            feedback="Perfect translation!"
            if is_correct
            else f"{correct_count}/{len(correct_words)} words correct",
        )
