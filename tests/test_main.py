"""Smoke tests for the command-line interface."""

import io
import json

import pytest
from rich.console import Console

from main import main, parse_answer
from ui.styles import DEFAULT_THEME


@pytest.fixture
def console() -> Console:
    """A console that records output instead of printing it."""
    return Console(file=io.StringIO(), theme=DEFAULT_THEME, width=120)


@pytest.fixture
def exercise_file(tmp_path, multiple_choice_exercise):
    """The multiple-choice exercise written to disk."""
    path = tmp_path / "exercise.json"
    path.write_text(multiple_choice_exercise.model_dump_json(), encoding="utf-8")
    return path


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cli" / "sessions.db"


def output(console: Console) -> str:
    return console.file.getvalue()


def write_script(tmp_path, steps, name="answers.json"):
    path = tmp_path / name
    path.write_text(json.dumps(steps), encoding="utf-8")
    return path


class TestParseAnswer:
    """Tests for parse_answer."""

    def test_json_values(self):
        assert parse_answer('"a"') == "a"
        assert parse_answer("[1, 2]") == [1, 2]

    def test_plain_text_fallback(self):
        assert parse_answer("xin chào") == "xin chào"


class TestGradeCommand:
    """Tests for the grade subcommand."""

    def test_correct_answer(self, console, exercise_file, db_path):
        """Should exit 0 and show the success panel."""
        code = main(
            ["--db", str(db_path), "grade", str(exercise_file), "q1", '"a"'], console
        )
        assert code == 0
        assert "Correct!" in output(console)

    def test_wrong_answer(self, console, exercise_file, db_path):
        """Should exit 2 and name the right answer."""
        code = main(
            ["--db", str(db_path), "grade", str(exercise_file), "q2", "a"], console
        )
        assert code == 2
        assert "The correct answer is: goodbye" in output(console)

    def test_unknown_question(self, console, exercise_file, db_path):
        code = main(
            ["--db", str(db_path), "grade", str(exercise_file), "q9", "a"], console
        )
        assert code == 1
        assert "not found" in output(console)

    def test_missing_exercise_file(self, console, tmp_path, db_path):
        """Should report unreadable files instead of crashing."""
        code = main(
            ["--db", str(db_path), "grade", str(tmp_path / "none.json"), "q1", "a"],
            console,
        )
        assert code == 1
        assert "Error:" in output(console)

    def test_invalid_exercise_file(self, console, tmp_path, db_path):
        """Should report content that fails validation."""
        path = tmp_path / "bad.json"
        path.write_text('{"id": "x"}', encoding="utf-8")
        code = main(["--db", str(db_path), "grade", str(path), "q1", "a"], console)
        assert code == 1
        assert "Error:" in output(console)


class TestPlayCommand:
    """Tests for the play subcommand."""

    def test_full_run(self, console, tmp_path, exercise_file, db_path):
        """Should grade every step and print the summary."""
        script = write_script(
            tmp_path, [{"answer": "a"}, {"answer": "x"}, {"answer": "c"}]
        )
        code = main(["--db", str(db_path), "play", str(exercise_file), str(script)], console)

        text = output(console)
        assert code == 0
        assert "Results" in text
        assert "67%" in text
        assert "NOT PASSED" in text

    def test_resume_across_runs(self, tmp_path, exercise_file, db_path):
        """A second run should pick up where the first stopped."""
        first_console = Console(file=io.StringIO(), theme=DEFAULT_THEME, width=120)
        first = write_script(tmp_path, [{"answer": "a"}], "first.json")
        main(["--db", str(db_path), "play", str(exercise_file), str(first)], first_console)
        assert "Session saved at question 2 of 3" in output(first_console)

        second_console = Console(file=io.StringIO(), theme=DEFAULT_THEME, width=120)
        second = write_script(tmp_path, [{"answer": "b"}, {"answer": "c"}], "second.json")
        main(["--db", str(db_path), "play", str(exercise_file), str(second)], second_console)

        text = output(second_console)
        assert "Resuming Greetings at question 2" in text
        assert "100%" in text
        assert "PASSED" in text
        assert "NOT PASSED" not in text

    def test_skipped_question_is_revisited(self, console, tmp_path, exercise_file, db_path):
        """A skipped question should come back after the main pass."""
        script = write_script(
            tmp_path,
            [{"skip": True}, {"answer": "b"}, {"answer": "c"}, {"answer": "a"}],
        )
        main(["--db", str(db_path), "play", str(exercise_file), str(script)], console)

        text = output(console)
        assert "Skipped question q1" in text
        assert "100%" in text


class TestSessionsCommand:
    """Tests for the sessions subcommand."""

    def test_list_empty(self, console, db_path):
        assert main(["--db", str(db_path), "sessions", "list"], console) == 0
        assert "No saved sessions." in output(console)

    def test_show_and_clear(self, console, tmp_path, exercise_file, db_path):
        """Should show a stored session and then delete it."""
        script = write_script(tmp_path, [{"answer": "a"}])
        main(["--db", str(db_path), "play", str(exercise_file), str(script)], console)

        show_console = Console(file=io.StringIO(), theme=DEFAULT_THEME, width=120)
        code = main(["--db", str(db_path), "sessions", "show", "ex-mc"], show_console)
        assert code == 0
        assert "Session ex-mc (in_progress)" in output(show_console)

        list_console = Console(file=io.StringIO(), theme=DEFAULT_THEME, width=120)
        main(["--db", str(db_path), "sessions", "list"], list_console)
        assert "exercise:ex-mc:default" in output(list_console)

        main(["--db", str(db_path), "sessions", "clear", "ex-mc"], console)
        after_console = Console(file=io.StringIO(), theme=DEFAULT_THEME, width=120)
        code = main(["--db", str(db_path), "sessions", "show", "ex-mc"], after_console)
        assert code == 1
        assert "No saved session for ex-mc." in output(after_console)


def test_no_command_prints_help(console, capsys):
    """Should print usage and fail without a subcommand."""
    assert main([], console) == 1
    assert "usage" in capsys.readouterr().out
