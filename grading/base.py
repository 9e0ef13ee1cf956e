"""Abstract base class and shared utilities for answer graders."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from config import GradingConfig
from models import BaseQuestion, GradeResult
from grading.normalizer import normalize_for_comparison

Q = TypeVar("Q", bound=BaseQuestion)


class AnswerGrader(ABC, Generic[Q]):
    """Abstract base class for question graders.

    Graders are stateless apart from the question they wrap and the grading
    configuration. Each question variant implements this interface:

    1. Subclass AnswerGrader[YourQuestionModel]
    2. Implement grade()
    3. Register the class in GRADERS in grading/dispatch.py

    grade() must never raise on a malformed answer; an answer of the wrong
    shape grades as incorrect.
    """

    def __init__(self, question: Q, config: GradingConfig | None = None):
        self.question = question
        self.config = config or GradingConfig()

    @abstractmethod
    def grade(self, answer: Any) -> GradeResult:
        """Grade a submitted answer.

        Args:
            answer: The learner's submitted value. Its shape depends on the
                question variant.

        Returns:
            The grade, with a score in [0, 1].
        """
        ...


def as_text(value: Any) -> str:
    """Coerce a submitted token to text; None becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def as_token_list(answer: Any) -> list[str]:
    """Coerce a submitted token sequence to a list of strings.

    Anything that is not a list or tuple is treated as no tokens at all.
    """
    if not isinstance(answer, (list, tuple)):
        return []
    return [as_text(token) for token in answer]


def texts_match(submitted: Any, canonical: Any) -> bool:
    """Compare two free-text values after normalizing both sides."""
    return normalize_for_comparison(as_text(submitted)) == normalize_for_comparison(
        as_text(canonical)
    )


def fraction(correct: int, total: int) -> float:
    """Share of correct parts, clamped to [0, 1]; 0 when there are no parts."""
    if total <= 0:
        return 0.0
    return max(0.0, min(1.0, correct / total))
