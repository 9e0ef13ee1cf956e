import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from config import EngineConfig, load_config
from grading import grade_question
from models import Exercise, SessionStatus
from results import calculate_results, is_exercise_passed
from session import SessionController
from storage import DEFAULT_DB_PATH, get_session_store
from ui import CONSOLE, GradePanel, ResultsPanel, SnapshotTable

logger = logging.getLogger(__name__)


class ScriptStep(BaseModel):
    """One scripted learner action in a `play` answers file."""

    answer: Any = None
    skip: bool = False
    question_id: str | None = None  # Defaults to the current question


SCRIPT_ADAPTER = TypeAdapter(list[ScriptStep])


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Vietnamese Tutor exercise engine")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON engine configuration file",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help="SQLite database for saved sessions",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Grade subcommand
    grade_parser = subparsers.add_parser("grade", help="Grade one answer")
    grade_parser.add_argument("exercise", type=Path, help="Exercise JSON file")
    grade_parser.add_argument("question_id", help="ID of the question to grade")
    grade_parser.add_argument(
        "answer",
        help="The answer as JSON (e.g. '\"a\"' or '[1, 2]'); non-JSON text is "
        "taken as a plain string",
    )

    # Play subcommand
    play_parser = subparsers.add_parser(
        "play", help="Run a scripted answers file through a session"
    )
    play_parser.add_argument("exercise", type=Path, help="Exercise JSON file")
    play_parser.add_argument(
        "answers",
        type=Path,
        help='JSON list of steps: {"answer": ...}, {"skip": true}',
    )
    play_parser.add_argument(
        "--context",
        default=None,
        help="Lesson context the session is saved under",
    )

    # Sessions subcommand
    sessions_parser = subparsers.add_parser("sessions", help="Manage saved sessions")
    sessions_sub = sessions_parser.add_subparsers(dest="action", required=True)
    sessions_sub.add_parser("list", help="List saved sessions")
    for action, help_text in (
        ("show", "Show a saved session"),
        ("clear", "Delete a saved session"),
    ):
        action_parser = sessions_sub.add_parser(action, help=help_text)
        action_parser.add_argument("exercise_id", help="Exercise ID")
        action_parser.add_argument("--context", default=None, help="Lesson context")

    return parser


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def parse_answer(text: str) -> Any:
    """Decode a command-line answer, falling back to the raw text."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def load_exercise(path: Path) -> Exercise:
    """Load and validate an exercise document."""
    return Exercise.model_validate_json(path.read_text(encoding="utf-8"))


def run_grade(args, config: EngineConfig, console: Console) -> int:
    """Run the grade subcommand."""
    exercise = load_exercise(args.exercise)
    question = exercise.get_question(args.question_id)
    if question is None:
        console.print(
            f"Question {args.question_id} not found in exercise {exercise.id}",
            style="error",
        )
        return 1

    grade = grade_question(question, parse_answer(args.answer), config.grading)
    console.print(GradePanel(question.id, grade, question.type))
    return 0 if grade.is_correct else 2


def run_play(args, config: EngineConfig, console: Console) -> int:
    """Run the play subcommand, saving the session after every step."""
    exercise = load_exercise(args.exercise)
    steps = SCRIPT_ADAPTER.validate_json(args.answers.read_text(encoding="utf-8"))

    store = get_session_store(args.db, config.persistence)
    controller = SessionController(config.session, config.grading)

    snapshot = store.load(exercise.id, args.context)
    if snapshot is not None and snapshot.status == SessionStatus.IN_PROGRESS:
        controller.restore(exercise, snapshot)
        console.print(
            f"Resuming {escape(exercise.title)} at question {controller.current_index + 1}",
            style="info",
        )
    else:
        controller.start(exercise)
        console.print(f"Starting {escape(exercise.title)}", style="title")
    store.save(exercise.id, args.context, controller.to_snapshot())

    for step in steps:
        if controller.status != SessionStatus.IN_PROGRESS:
            logger.info("Session finished before the end of the answers file")
            break

        if step.question_id is not None:
            index = exercise.index_of(step.question_id)
            if not controller.go_to_index(index):
                logger.warning("Skipping step for unknown question %s", step.question_id)
                continue

        question = controller.current_question
        if question is None:
            break
        if step.skip:
            controller.skip()
            console.print(f"Skipped question {question.id}", style="muted")
        else:
            grade = controller.submit_answer(question.id, step.answer)
            console.print(GradePanel(question.id, grade, question.type))
            controller.advance()

        store.save(exercise.id, args.context, controller.to_snapshot())

    if controller.status != SessionStatus.COMPLETED:
        console.print(
            f"Session saved at question {controller.current_index + 1} "
            f"of {controller.total_questions}",
            style="info",
        )
        return 0

    results = calculate_results(controller)
    passed = is_exercise_passed(
        results.accuracy,
        threshold=exercise.pass_threshold,
        zone_level=exercise.zone_level,
        config=config.pass_policy,
    )
    console.print(ResultsPanel(results, passed))
    return 0


def run_sessions(args, config: EngineConfig, console: Console) -> int:
    """Run the sessions subcommand."""
    store = get_session_store(args.db, config.persistence)

    if args.action == "list":
        keys = store.stored_keys()
        if not keys:
            console.print("No saved sessions.", style="muted")
            return 0
        table = Table(title="Saved sessions")
        table.add_column("Key")
        for key in keys:
            table.add_row(key)
        console.print(table)
        return 0

    if args.action == "show":
        snapshot = store.load(args.exercise_id, args.context)
        if snapshot is None:
            console.print(f"No saved session for {args.exercise_id}.", style="muted")
            return 1
        console.print(SnapshotTable(snapshot))
        return 0

    store.clear(args.exercise_id, args.context)
    console.print(f"Cleared session for {args.exercise_id}.", style="success")
    return 0


COMMANDS = {
    "grade": run_grade,
    "play": run_play,
    "sessions": run_sessions,
}


def main(argv: list[str] | None = None, console: Console = CONSOLE) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args.log_level)

    try:
        config = load_config(args.config)
        return COMMANDS[args.command](args, config, console)
    except (OSError, ValueError) as e:
        # Unreadable files and content that fails validation
        console.print(f"Error: {escape(str(e))}", style="error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
