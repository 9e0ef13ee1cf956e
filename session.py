"""Exercise session state machine.

A SessionController drives one learner through one attempt at an exercise:

    UNINITIALIZED --start()--> IN_PROGRESS --end()--> COMPLETED
    any state --reset()--> UNINITIALIZED

Each controller instance belongs to exactly one attempt; callers own it and
pass it around explicitly. Late or out-of-order calls (after reset, after
completion, with no exercise) never raise.
"""

import logging
from datetime import datetime
from typing import Any, Callable

from config import SessionConfig, GradingConfig
from grading import grade_question
from models import (
    AnswerRecord,
    BaseQuestion,
    Exercise,
    GradeResult,
    Progress,
    SessionPhase,
    SessionSnapshot,
    SessionStatus,
    SkipState,
    utc_now,
)

logger = logging.getLogger(__name__)

NO_EXERCISE_FEEDBACK = "No exercise loaded"
QUESTION_NOT_FOUND_FEEDBACK = "Question not found"


class SessionController:
    """In-memory state for a single exercise attempt."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        grading_config: GradingConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config or SessionConfig()
        self.grading_config = grading_config or GradingConfig()
        self._clock = clock
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Discard all state and return to UNINITIALIZED."""
        self.exercise: Exercise | None = None
        self.status = SessionStatus.UNINITIALIZED
        self.current_index = 0
        self.answers: dict[str, AnswerRecord] = {}
        self.progress = Progress()
        self.skip_state = SkipState()
        self.started_at: datetime | None = None
        self.ended_at: datetime | None = None
        self.question_started_at: datetime | None = None

    def start(self, exercise: Exercise) -> None:
        """Begin a fresh attempt at the first question."""
        self.reset()
        now = self._clock()
        self.exercise = exercise
        self.status = SessionStatus.IN_PROGRESS
        self.started_at = now
        self.question_started_at = now
        logger.debug(
            "Started session for exercise %s (%d questions)",
            exercise.id,
            len(exercise.questions),
        )

    def restore(self, exercise: Exercise, snapshot: SessionSnapshot) -> None:
        """Resume an attempt from a persisted snapshot.

        A completed snapshot, or one recorded for another exercise, starts a
        fresh session instead.
        """
        if snapshot.exercise_id != exercise.id:
            logger.warning(
                "Snapshot for exercise %s does not match %s, starting fresh",
                snapshot.exercise_id,
                exercise.id,
            )
            self.start(exercise)
            return

        if snapshot.status == SessionStatus.COMPLETED:
            self.start(exercise)
            return

        self.start(exercise)
        self.started_at = snapshot.started_at
        self.current_index = resume_index(snapshot, len(exercise.questions))

        # Only answers to questions that still exist are carried over
        for record in snapshot.answers:
            if exercise.get_question(record.question_id) is not None:
                self.answers[record.question_id] = record
        self.progress = Progress(
            correct_answers=sum(1 for r in self.answers.values() if r.grade.is_correct),
            incorrect_answers=sum(
                1 for r in self.answers.values() if not r.grade.is_correct
            ),
        )
        if snapshot.skip_state is not None:
            question_ids = {question.id for question in exercise.questions}
            skip_state = snapshot.skip_state
            self.skip_state = SkipState(
                phase=skip_state.phase,
                skipped_queue_ids=[
                    qid for qid in skip_state.skipped_queue_ids if qid in question_ids
                ],
                skip_counts={
                    qid: count
                    for qid, count in skip_state.skip_counts.items()
                    if qid in question_ids
                },
            )
        logger.debug(
            "Restored session for exercise %s at question %d",
            exercise.id,
            self.current_index,
        )

    def end(self) -> None:
        """Mark the session completed and freeze the timers."""
        if self.status != SessionStatus.IN_PROGRESS:
            return
        self.status = SessionStatus.COMPLETED
        self.ended_at = self._clock()
        self.question_started_at = None

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        """Current time according to the session clock."""
        return self._clock()

    @property
    def total_questions(self) -> int:
        return len(self.exercise.questions) if self.exercise else 0

    @property
    def answered_count(self) -> int:
        return self.progress.answered

    @property
    def current_question(self) -> BaseQuestion | None:
        if self.exercise is None or not self.exercise.questions:
            return None
        return self.exercise.questions[self.current_index]

    def get_answer(self, question_id: str) -> AnswerRecord | None:
        return self.answers.get(question_id)

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------

    def submit_answer(self, question_id: str, value: Any) -> GradeResult:
        """Grade and record an answer.

        Resubmitting replaces the previous answer: its contribution to the
        progress counters is removed before the new grade is counted, so each
        question is counted once.
        """
        if self.exercise is None:
            return GradeResult.incorrect(NO_EXERCISE_FEEDBACK)

        question = self.exercise.get_question(question_id)
        if question is None:
            logger.warning(
                "Question %s not found in exercise %s", question_id, self.exercise.id
            )
            return GradeResult.incorrect(QUESTION_NOT_FOUND_FEEDBACK)

        grade = grade_question(question, value, self.grading_config)
        self._record(question, value, grade, status="answered")

        if self.skip_state.phase == SessionPhase.SKIPPED:
            self._dequeue_skipped(question_id)

        return grade

    def _record(
        self,
        question: BaseQuestion,
        value: Any,
        grade: GradeResult,
        status: str,
    ) -> AnswerRecord:
        now = self._clock()
        time_spent_ms = 0
        if self.question_started_at is not None:
            elapsed = now - self.question_started_at
            time_spent_ms = max(0, int(elapsed.total_seconds() * 1000))

        record = AnswerRecord(
            question_id=question.id,
            answer=value,
            grade=grade,
            time_spent_ms=time_spent_ms,
            timestamp=now,
            status=status,
            question_type=question.type,
        )

        previous = self.answers.get(question.id)
        if previous is not None:
            self._count(previous.grade, -1)
        self._count(grade, 1)
        self.answers[question.id] = record
        return record

    def _count(self, grade: GradeResult, delta: int) -> None:
        if grade.is_correct:
            self.progress.correct_answers += delta
        else:
            self.progress.incorrect_answers += delta

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def go_to_index(self, index: int) -> bool:
        """Move to a question by position. Out-of-range requests are ignored.

        Returns:
            True if the current question changed.
        """
        if self.exercise is None or self.status != SessionStatus.IN_PROGRESS:
            return False
        if not 0 <= index < len(self.exercise.questions):
            return False
        self.current_index = index
        self.question_started_at = self._clock()
        return True

    def go_to_next(self) -> bool:
        return self.go_to_index(self.current_index + 1)

    def go_to_previous(self) -> bool:
        return self.go_to_index(self.current_index - 1)

    def _go_to_question(self, question_id: str) -> bool:
        if self.exercise is None:
            return False
        return self.go_to_index(self.exercise.index_of(question_id))

    def advance(self) -> SessionStatus:
        """Move on to the next question in the session flow.

        In the main phase this is the next question in order. Past the last
        question the session switches to the skipped phase if any questions
        were skipped, otherwise it ends. In the skipped phase the queue is
        walked in order and the session ends at its tail.

        Returns:
            The session status after moving.
        """
        if self.exercise is None or self.status != SessionStatus.IN_PROGRESS:
            return self.status

        if self.skip_state.phase == SessionPhase.MAIN:
            if self.go_to_next():
                return self.status
            return self._enter_skipped_phase()

        queue = self.skip_state.skipped_queue_ids
        current = self.current_question
        position = queue.index(current.id) if current and current.id in queue else -1
        next_position = position + 1
        if next_position < len(queue):
            self._go_to_question(queue[next_position])
            return self.status

        self.end()
        return self.status

    def _enter_skipped_phase(self) -> SessionStatus:
        queue = self.skip_state.skipped_queue_ids
        if not queue:
            self.end()
            return self.status
        self.skip_state.phase = SessionPhase.SKIPPED
        self._go_to_question(queue[0])
        return self.status

    def _dequeue_skipped(self, question_id: str) -> None:
        queue = self.skip_state.skipped_queue_ids
        if question_id in queue:
            queue.remove(question_id)

    # ------------------------------------------------------------------
    # Skipping
    # ------------------------------------------------------------------

    def skip(self) -> SessionStatus:
        """Skip the current question.

        The first skips queue the question for a retry after the main pass.
        Reaching max_skips records it as incorrect and drops it from the
        queue.

        Returns:
            The session status after moving.
        """
        question = self.current_question
        if question is None or self.status != SessionStatus.IN_PROGRESS:
            return self.status

        counts = self.skip_state.skip_counts
        counts[question.id] = counts.get(question.id, 0) + 1
        queue = self.skip_state.skipped_queue_ids

        if counts[question.id] >= self.config.max_skips:
            grade = GradeResult.incorrect(
                f"Marked incorrect after {self.config.max_skips} skips"
            )
            self._record(question, None, grade, status="skipped")

            position = queue.index(question.id) if question.id in queue else -1
            self._dequeue_skipped(question.id)

            if self.skip_state.phase == SessionPhase.MAIN:
                if self.go_to_next():
                    return self.status
                return self._enter_skipped_phase()

            # Skipped phase: the next item slid into the removed slot
            if not queue:
                self.end()
                return self.status
            next_id = queue[position] if 0 <= position < len(queue) else queue[0]
            self._go_to_question(next_id)
            return self.status

        if self.skip_state.phase == SessionPhase.MAIN:
            if question.id not in queue:
                queue.append(question.id)
            if self.go_to_next():
                return self.status
            return self._enter_skipped_phase()

        # Skipped phase: push the question to the back of the queue
        if question.id in queue:
            position = queue.index(question.id)
            queue.remove(question.id)
            queue.append(question.id)
            next_id = queue[position]
            if next_id != question.id:
                self._go_to_question(next_id)
        return self.status

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_snapshot(self) -> SessionSnapshot | None:
        """Build the persistable snapshot, or None when no exercise is loaded."""
        if self.exercise is None or self.started_at is None:
            return None
        return SessionSnapshot(
            exercise_id=self.exercise.id,
            status=self.status,
            started_at=self.started_at,
            last_updated_at=self._clock(),
            current_index=self.current_index,
            answers=list(self.answers.values()),
            progress=self.progress.model_copy(),
            skip_state=self.skip_state.model_copy(deep=True),
        )


def resume_index(snapshot: SessionSnapshot | None, total_questions: int) -> int:
    """Question position to resume a snapshot at.

    Completed or missing snapshots start over at 0; otherwise the stored
    index is clamped to the exercise length.
    """
    if snapshot is None or snapshot.status == SessionStatus.COMPLETED:
        return 0
    if total_questions <= 0:
        return 0
    return min(snapshot.current_index, total_questions - 1)
