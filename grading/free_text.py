"""Grader for error-correction questions."""

from typing import Any

from models import ErrorCorrectionQuestion, GradeResult
from grading.base import AnswerGrader, as_text, texts_match


class ErrorCorrectionGrader(AnswerGrader[ErrorCorrectionQuestion]):
    """Compares the corrected sentence with the target, ignoring diacritics,
    case and punctuation. Binary score."""

    def grade(self, answer: Any) -> GradeResult:
        is_correct = isinstance(answer, (str, type(None))) and texts_match(
            as_text(answer), self.question.target
        )
        return GradeResult(
            is_correct=is_correct,
            score=1.0 if is_correct else 0.0,
            feedback="Correct correction!"
            if is_correct
            else f'The correct sentence is: "{self.question.target}"',
        )
