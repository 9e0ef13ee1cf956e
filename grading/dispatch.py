"""Variant dispatch for answer grading."""

import logging
from typing import Any

from config import GradingConfig
from models import BaseQuestion, GradeResult, QuestionType
from grading.base import AnswerGrader
from grading.choice import (
    DialogueCompletionGrader,
    GrammarStructureGrader,
    MultipleChoiceGrader,
)
from grading.choose_words import ChooseWordsGrader
from grading.free_text import ErrorCorrectionGrader
from grading.matching import SynonymsMatchingGrader, WordMatchingGrader
from grading.role_play import RolePlayGrader

logger = logging.getLogger(__name__)

# Registry of grader classes. Must cover every QuestionType member.
GRADERS: dict[QuestionType, type[AnswerGrader]] = {
    QuestionType.MULTIPLE_CHOICE: MultipleChoiceGrader,
    QuestionType.WORD_MATCHING: WordMatchingGrader,
    QuestionType.SYNONYMS_MATCHING: SynonymsMatchingGrader,
    QuestionType.CHOOSE_WORDS: ChooseWordsGrader,
    QuestionType.ERROR_CORRECTION: ErrorCorrectionGrader,
    QuestionType.GRAMMAR_STRUCTURE: GrammarStructureGrader,
    QuestionType.DIALOGUE_COMPLETION: DialogueCompletionGrader,
    QuestionType.ROLE_PLAY: RolePlayGrader,
}

UNKNOWN_TYPE_FEEDBACK = "Unknown question type"


def get_grader_class(question_type: str) -> type[AnswerGrader] | None:
    """Get the grader class for a question type tag, or None if unsupported."""
    try:
        return GRADERS.get(QuestionType(question_type))
    except ValueError:
        return None


def grade_question(
    question: BaseQuestion,
    answer: Any,
    config: GradingConfig | None = None,
) -> GradeResult:
    """Grade an answer to any question variant.

    Never raises: unsupported variants and grader failures produce a
    zero-score result.
    """
    grader_class = get_grader_class(question.type)
    if grader_class is None:
        logger.warning(
            "No grader for question %s of type %r", question.id, question.type
        )
        return GradeResult.incorrect(UNKNOWN_TYPE_FEEDBACK)

    try:
        return grader_class(question, config).grade(answer)
    except Exception:
        logger.exception("Grading failed for question %s", question.id)
        return GradeResult.incorrect("Answer could not be graded")
