from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich import box
from typing import Optional

from models import GradeResult, ResultsSummary, SessionSnapshot
from ui.styles import (
    VIET_RED,
    VIET_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    MUTED_GRAY,
    TEXT_WHITE,
    create_error_header,
    create_session_complete_header,
    create_success_header,
    get_score_style,
)


class GradePanel:
    """A styled panel for displaying the grade of one answer."""

    def __init__(
        self,
        question_id: str,
        grade: GradeResult,
        question_type: Optional[str] = None,
    ):
        self.question_id = question_id
        self.grade = grade
        self.question_type = question_type

    def render(self) -> Panel:
        content = Text()
        if self.grade.is_correct:
            content.append(create_success_header())
        else:
            content.append(create_error_header())
        content.append("\n\n")

        content.append("Score: ", Style(color=MUTED_GRAY))
        content.append(f"{self.grade.score:.0%}", get_score_style(self.grade.score))

        if self.grade.feedback:
            content.append("\n")
            content.append(self.grade.feedback, Style(color=TEXT_WHITE))

        title = f"Question {self.question_id}"
        if self.question_type:
            title += f" ({self.question_type})"

        return Panel(
            Align.left(content),
            title=title,
            border_style=SUCCESS_GREEN if self.grade.is_correct else ERROR_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ResultsPanel:
    """A styled panel for the final results of an exercise."""

    def __init__(
        self,
        results: ResultsSummary,
        passed: Optional[bool] = None,
    ):
        self.results = results
        self.passed = passed

    def render(self) -> Panel:
        content = Text()
        content.append(create_session_complete_header())
        content.append("\n\n")

        r = self.results
        rows = [
            ("Score", f"{r.score}%"),
            ("Accuracy", f"{r.accuracy}%"),
            ("Correct", str(r.correct_answers)),
            ("Incorrect", str(r.incorrect_answers)),
            ("Skipped", str(r.skipped_questions)),
            ("Questions", str(r.total_questions)),
            ("Time", format_duration(r.time_spent)),
        ]
        for label, value in rows:
            content.append(f"{label:<10}", Style(color=MUTED_GRAY))
            content.append(f"{value}\n", Style(color=TEXT_WHITE, bold=True))

        if self.passed is not None:
            content.append("\n")
            if self.passed:
                content.append("PASSED", Style(color=SUCCESS_GREEN, bold=True))
            else:
                content.append("NOT PASSED", Style(color=ERROR_RED, bold=True))

        return Panel(
            Align.left(content),
            title="Results",
            border_style=VIET_RED,
            box=box.DOUBLE,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SnapshotTable:
    """A table listing the answers stored in a session snapshot."""

    def __init__(self, snapshot: SessionSnapshot):
        self.snapshot = snapshot

    def render(self) -> Table:
        s = self.snapshot
        table = Table(
            title=f"Session {s.exercise_id} ({s.status.value})",
            caption=(
                f"Question {s.current_index + 1} · "
                f"{s.progress.correct_answers} correct · "
                f"{s.progress.incorrect_answers} incorrect · "
                f"updated {s.last_updated_at:%Y-%m-%d %H:%M}"
            ),
            box=box.ROUNDED,
            title_style=Style(color=VIET_RED, bold=True),
            header_style=Style(color=VIET_GOLD, bold=True),
            border_style=Style(color=MUTED_GRAY),
        )
        table.add_column("Question", style=Style(color=TEXT_WHITE))
        table.add_column("Type", style=Style(color=MUTED_GRAY))
        table.add_column("Result", justify="center")
        table.add_column("Score", justify="right")
        table.add_column("Time", justify="right", style=Style(color=MUTED_GRAY))

        for record in s.answers:
            result = Text(
                "✓" if record.grade.is_correct else "✗",
                Style(color=SUCCESS_GREEN if record.grade.is_correct else ERROR_RED),
            )
            if record.status == "skipped":
                result.append(" skipped", Style(color=MUTED_GRAY))
            table.add_row(
                record.question_id,
                record.question_type or "",
                result,
                Text(
                    f"{record.grade.score:.0%}", get_score_style(record.grade.score)
                ),
                f"{record.time_spent_ms / 1000:.1f}s",
            )
        return table

    def __rich__(self) -> Table:
        return self.render()


def format_duration(seconds: int) -> str:
    """Format seconds as 45s, 2m or 2m 5s."""
    if seconds < 60:
        return f"{seconds}s"
    minutes, remaining = divmod(seconds, 60)
    if remaining == 0:
        return f"{minutes}m"
    return f"{minutes}m {remaining}s"
