"""Shared pytest fixtures for the exercise engine test suite."""

import pytest
from datetime import datetime, timedelta, timezone

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import (
    Blanks,
    Choice,
    ChooseWordsData,
    ChooseWordsPayload,
    ChooseWordsQuestion,
    ChooseWordsSubtype,
    DialogueCompletionQuestion,
    DialogueLine,
    ErrorCorrectionQuestion,
    Exercise,
    GrammarStructureQuestion,
    MultipleChoiceQuestion,
    RolePlayChoice,
    RolePlayQuestion,
    RolePlayStep,
    SynonymPair,
    SynonymsMatchingQuestion,
    WordMatchingQuestion,
    WordPair,
)
from storage import InMemoryKeyValueStore, SessionStore, init_schema


class FakeClock:
    """A controllable clock for timing tests."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


def make_multiple_choice(question_id: str, correct: str) -> MultipleChoiceQuestion:
    """Build a multiple-choice question with choices a, b, c."""
    return MultipleChoiceQuestion(
        id=question_id,
        question_text="Chọn nghĩa đúng",
        choices=[
            Choice(id="a", text="hello"),
            Choice(id="b", text="goodbye"),
            Choice(id="c", text="thank you"),
        ],
        correct_choice_id=correct,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def multiple_choice_exercise() -> Exercise:
    """Three multiple-choice questions answered a, b, c."""
    return Exercise(
        id="ex-mc",
        title="Greetings",
        questions=[
            make_multiple_choice("q1", "a"),
            make_multiple_choice("q2", "b"),
            make_multiple_choice("q3", "c"),
        ],
    )


@pytest.fixture
def word_matching_question() -> WordMatchingQuestion:
    """Four Vietnamese-English word pairs."""
    return WordMatchingQuestion(
        id="wm1",
        pairs=[
            WordPair(id=1, english="hello", vietnamese="xin chào"),
            WordPair(id=2, english="thank you", vietnamese="cảm ơn"),
            WordPair(id=3, english="coffee", vietnamese="cà phê"),
            WordPair(id=4, english="student", vietnamese="sinh viên"),
        ],
    )


@pytest.fixture
def synonyms_question() -> SynonymsMatchingQuestion:
    """Two synonym pairs."""
    return SynonymsMatchingQuestion(
        id="syn1",
        pairs=[
            SynonymPair(id=1, word1="đẹp", word2="xinh", meaning="beautiful"),
            SynonymPair(id=2, word1="nhanh", word2="mau", meaning="fast"),
        ],
    )


@pytest.fixture
def translation_question() -> ChooseWordsQuestion:
    """Choose-words translation of 'I am a student'."""
    return ChooseWordsQuestion(
        id="cw-tr",
        question_data=ChooseWordsData(
            subtype=ChooseWordsSubtype.TRANSLATION,
            data=ChooseWordsPayload(
                canonical_sentence="toi la sinh vien",
                tokens=["toi", "la", "sinh", "vien"],
                source_sentence="I am a student",
            ),
        ),
    )


@pytest.fixture
def fill_in_blanks_question() -> ChooseWordsQuestion:
    """Choose-words question with two blanks."""
    return ChooseWordsQuestion(
        id="cw-fib",
        question_data=ChooseWordsData(
            subtype=ChooseWordsSubtype.FILL_IN_BLANKS,
            data=ChooseWordsPayload(
                canonical_sentence="Tôi uống cà phê",
                tokens=["Tôi", "uống", "cà", "phê"],
                blanks=Blanks(
                    indices=[1, 3],
                    correct=["uống", "phê"],
                    word_bank=["uống", "ăn", "phê", "trà"],
                ),
            ),
        ),
    )


@pytest.fixture
def scramble_question() -> ChooseWordsQuestion:
    """Choose-words sentence scramble."""
    return ChooseWordsQuestion(
        id="cw-scr",
        question_data=ChooseWordsData(
            subtype=ChooseWordsSubtype.SENTENCE_SCRAMBLE,
            data=ChooseWordsPayload(
                canonical_sentence="Hôm nay trời đẹp",
                tokens=["Hôm", "nay", "trời", "đẹp"],
            ),
        ),
    )


@pytest.fixture
def legacy_choose_words_question() -> ChooseWordsQuestion:
    """Choose-words question without a question_data block."""
    return ChooseWordsQuestion(
        id="cw-legacy",
        question="Translate: I drink tea",
        words=["tôi", "uống", "trà", "ăn"],
        correct_answer=["tôi", "uống", "trà"],
    )


@pytest.fixture
def error_correction_question() -> ErrorCorrectionQuestion:
    """Error correction with a diacritic-heavy target."""
    return ErrorCorrectionQuestion(
        id="ec1",
        question="Sửa lỗi trong câu",
        faulty_sentence="Tôi là sinh viên không.",
        target="Tôi không phải là sinh viên.",
    )


@pytest.fixture
def grammar_question() -> GrammarStructureQuestion:
    """Grammar structure question with a hint."""
    return GrammarStructureQuestion(
        id="gs1",
        question_text="Tôi ___ sinh viên",
        choices=[Choice(id="a", text="là"), Choice(id="b", text="có")],
        correct_choice_id="a",
        hint="Use 'là' to link a subject and a noun.",
    )


@pytest.fixture
def dialogue_question() -> DialogueCompletionQuestion:
    """Dialogue completion question."""
    return DialogueCompletionQuestion(
        id="dc1",
        context=[DialogueLine(who="A", text="Bạn khỏe không?")],
        choices=[Choice(id="a", text="Tôi khỏe, cảm ơn."), Choice(id="b", text="Tạm biệt.")],
        correct_choice_id="a",
    )


@pytest.fixture
def role_play_question() -> RolePlayQuestion:
    """Four-step role-play at a café."""
    step_choices = [RolePlayChoice(text="Option A"), RolePlayChoice(text="Option B")]
    return RolePlayQuestion(
        id="rp1",
        title="Ordering coffee",
        steps=[
            RolePlayStep(bot="Xin chào!", choices=step_choices, expected=0),
            RolePlayStep(bot="Bạn muốn uống gì?", choices=step_choices, expected=1),
            RolePlayStep(bot="Nóng hay đá?", choices=step_choices, expected=0),
            RolePlayStep(bot="Cảm ơn!", choices=step_choices, expected=1),
        ],
    )


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    """Create an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def session_store(memory_store, clock) -> SessionStore:
    """Create a SessionStore over the in-memory store."""
    return SessionStore(memory_store, clock=clock)


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_sessions.db"
    init_schema(db_path)
    return db_path
