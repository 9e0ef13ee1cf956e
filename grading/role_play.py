"""Grader for role-play questions."""

import math
from typing import Any

from models import GradeResult, RolePlayQuestion
from grading.base import AnswerGrader, fraction


class RolePlayGrader(AnswerGrader[RolePlayQuestion]):
    """Scores each conversation step against its expected choice index.

    Unlike the matching graders, role-play passes on partial credit: the
    answer counts as correct once more than role_play_pass_ratio of the
    steps are right.
    """

    def grade(self, answer: Any) -> GradeResult:
        choices = list(answer) if isinstance(answer, (list, tuple)) else []
        steps = self.question.steps
        total = len(steps)

        correct_steps = sum(
            1
            for index, step in enumerate(steps)
            if index < len(choices)
            and not isinstance(choices[index], bool)
            and choices[index] == step.expected
        )
        accuracy = fraction(correct_steps, total)
        is_correct = accuracy > self.config.role_play_pass_ratio
        percent = math.floor(accuracy * 100 + 0.5)

        if is_correct:
            feedback = (
                f"Great role-play! {correct_steps}/{total} steps correct "
                f"({percent}% accuracy)"
            )
        else:
            feedback = (
                f"{correct_steps}/{total} steps correct ({percent}% accuracy). "
                "Try to get more than half of the steps right next time!"
            )
        return GradeResult(is_correct=is_correct, score=accuracy, feedback=feedback)
