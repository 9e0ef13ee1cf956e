"""Final results for a finished (or abandoned) exercise session."""

import math
from datetime import datetime

from config import PassPolicyConfig
from models import Progress, ResultsSummary
from session import SessionController


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up (62.5 -> 63).

    Scores must agree with the ones the web and mobile clients report.
    """
    return math.floor(value + 0.5)


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


def calculate_accuracy(progress: Progress) -> int:
    """Percent of answered questions that were answered correctly."""
    return percent(progress.correct_answers, progress.answered)


def calculate_results(
    controller: SessionController, now: datetime | None = None
) -> ResultsSummary:
    """Summarize a session for result submission.

    Args:
        controller: The session to summarize.
        now: Reference time for running sessions. Defaults to the
            controller's clock. Completed sessions use their end time.

    Returns:
        The summary. All fields are 0 when no exercise is loaded.
    """
    if controller.exercise is None:
        return ResultsSummary()

    total = controller.total_questions
    progress = controller.progress

    time_spent = 0
    if controller.started_at is not None:
        reference = controller.ended_at or now or controller.now()
        elapsed = (reference - controller.started_at).total_seconds()
        time_spent = max(0, math.floor(elapsed))

    return ResultsSummary(
        score=percent(progress.correct_answers, total),
        accuracy=calculate_accuracy(progress),
        correct_answers=progress.correct_answers,
        incorrect_answers=progress.incorrect_answers,
        skipped_questions=max(0, total - progress.answered),
        total_questions=total,
        time_spent=time_spent,
    )


def is_exercise_passed(
    accuracy: float,
    threshold: float | None = None,
    zone_level: int | None = None,
    config: PassPolicyConfig | None = None,
) -> bool:
    """Decide pass/fail for a caller.

    Precedence: an explicit per-exercise threshold, then the zone level
    table, then the default threshold. Unknown zone levels use the default.
    """
    config = config or PassPolicyConfig()
    if threshold is not None:
        return accuracy >= threshold
    if zone_level is not None:
        return accuracy >= config.zone_thresholds.get(
            zone_level, config.default_threshold
        )
    return accuracy >= config.default_threshold
