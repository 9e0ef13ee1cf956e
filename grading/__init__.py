"""Answer grading for the Vietnamese tutor exercise engine.

Architecture:
- The normalizer canonicalizes free text (diacritics, case, punctuation)
- One grader class per question variant turns an answer into a GradeResult
- dispatch.GRADERS maps every QuestionType to its grader
- grade_question() is the single entry point used by the session controller

Graders:
- MultipleChoiceGrader, GrammarStructureGrader, DialogueCompletionGrader:
  exact choice ID equality
- WordMatchingGrader, SynonymsMatchingGrader: fraction of pairs matched
- ChooseWordsGrader: positional token comparison (three subtypes + legacy)
- ErrorCorrectionGrader: normalized free-text equality
- RolePlayGrader: per-step accuracy, passes above half
"""

from grading.base import AnswerGrader
from grading.choice import (
    DialogueCompletionGrader,
    GrammarStructureGrader,
    MultipleChoiceGrader,
)
from grading.choose_words import ChooseWordsGrader
from grading.dispatch import GRADERS, get_grader_class, grade_question
from grading.free_text import ErrorCorrectionGrader
from grading.matching import (
    SynonymsMatchingGrader,
    WordMatchingGrader,
    normalize_matching_answer,
)
from grading.normalizer import (
    compare_text,
    contains_text,
    fold_diacritics,
    normalize_for_comparison,
)
from grading.role_play import RolePlayGrader

__all__ = [
    # Normalization
    "normalize_for_comparison",
    "fold_diacritics",
    "compare_text",
    "contains_text",
    # Abstract classes
    "AnswerGrader",
    # Graders
    "MultipleChoiceGrader",
    "GrammarStructureGrader",
    "DialogueCompletionGrader",
    "WordMatchingGrader",
    "SynonymsMatchingGrader",
    "ChooseWordsGrader",
    "ErrorCorrectionGrader",
    "RolePlayGrader",
    # Dispatch
    "GRADERS",
    "get_grader_class",
    "grade_question",
    "normalize_matching_answer",
]
