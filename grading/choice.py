"""Graders for single-choice questions.

Multiple choice, grammar structure and dialogue completion all compare the
submitted choice ID with the canonical one by exact equality. They differ
only in the feedback shown.
"""

from typing import Any

from models import (
    DialogueCompletionQuestion,
    GradeResult,
    GrammarStructureQuestion,
    MultipleChoiceQuestion,
)
from grading.base import AnswerGrader


def _choice_grade(
    is_correct: bool, correct_feedback: str, wrong_feedback: str
) -> GradeResult:
    return GradeResult(
        is_correct=is_correct,
        score=1.0 if is_correct else 0.0,
        feedback=correct_feedback if is_correct else wrong_feedback,
    )


class MultipleChoiceGrader(AnswerGrader[MultipleChoiceQuestion]):
    """Grader for multiple choice questions."""

    def grade(self, answer: Any) -> GradeResult:
        is_correct = answer == self.question.correct_choice_id
        correct_text = next(
            (
                choice.text
                for choice in self.question.choices
                if choice.id == self.question.correct_choice_id
            ),
            self.question.correct_choice_id,
        )
        return _choice_grade(
            is_correct,
            "Correct!",
            f"Incorrect. The correct answer is: {correct_text}",
        )


class GrammarStructureGrader(AnswerGrader[GrammarStructureQuestion]):
    """Grader for grammar structure questions."""

    def grade(self, answer: Any) -> GradeResult:
        is_correct = answer == self.question.correct_choice_id
        hint = self.question.hint or "Please review the grammar rule."
        return _choice_grade(is_correct, "Correct grammar!", f"Incorrect. {hint}")


class DialogueCompletionGrader(AnswerGrader[DialogueCompletionQuestion]):
    """Grader for dialogue completion questions."""

    def grade(self, answer: Any) -> GradeResult:
        is_correct = answer == self.question.correct_choice_id
        return _choice_grade(
            is_correct,
            "Good dialogue completion!",
            "Try a more appropriate response",
        )
