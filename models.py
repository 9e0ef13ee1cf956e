from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Bump whenever SessionSnapshot changes incompatibly. Stored snapshots with a
# different version are discarded on load.
SCHEMA_VERSION = "1.0.0"


def utc_now() -> datetime:
    """Default clock for sessions and snapshots."""
    return datetime.now(timezone.utc)


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    WORD_MATCHING = "word-matching"
    SYNONYMS_MATCHING = "synonyms-matching"
    CHOOSE_WORDS = "choose-words"
    ERROR_CORRECTION = "error-correction"
    GRAMMAR_STRUCTURE = "grammar-structure"
    DIALOGUE_COMPLETION = "dialogue-completion"
    ROLE_PLAY = "role-play"


class ChooseWordsSubtype(str, Enum):
    TRANSLATION = "translation"
    FILL_IN_BLANKS = "fill_in_blanks"
    SENTENCE_SCRAMBLE = "sentence_scramble"


# ============================================================================
# Question type metadata
# ============================================================================


class QuestionTypeInfo(BaseModel):
    """Display and pacing metadata for a question type."""

    label: str
    description: str
    difficulty: Literal["easy", "medium", "hard"]
    estimated_seconds: int


QUESTION_TYPE_INFO: dict[QuestionType, QuestionTypeInfo] = {
    QuestionType.MULTIPLE_CHOICE: QuestionTypeInfo(
        label="Multiple Choice",
        description="Choose the correct answer from multiple options",
        difficulty="easy",
        estimated_seconds=30,
    ),
    QuestionType.WORD_MATCHING: QuestionTypeInfo(
        label="Word Matching",
        description="Match Vietnamese words with their English translations",
        difficulty="easy",
        estimated_seconds=45,
    ),
    QuestionType.SYNONYMS_MATCHING: QuestionTypeInfo(
        label="Synonyms Matching",
        description="Match words with their synonyms",
        difficulty="medium",
        estimated_seconds=45,
    ),
    QuestionType.CHOOSE_WORDS: QuestionTypeInfo(
        label="Choose Words",
        description="Build sentences by selecting the correct words",
        difficulty="medium",
        estimated_seconds=60,
    ),
    QuestionType.ERROR_CORRECTION: QuestionTypeInfo(
        label="Error Correction",
        description="Identify and correct errors in Vietnamese sentences",
        difficulty="hard",
        estimated_seconds=75,
    ),
    QuestionType.GRAMMAR_STRUCTURE: QuestionTypeInfo(
        label="Grammar Structure",
        description="Apply grammar rules to complete sentences",
        difficulty="medium",
        estimated_seconds=45,
    ),
    QuestionType.DIALOGUE_COMPLETION: QuestionTypeInfo(
        label="Dialogue Completion",
        description="Complete conversations with appropriate responses",
        difficulty="medium",
        estimated_seconds=60,
    ),
    QuestionType.ROLE_PLAY: QuestionTypeInfo(
        label="Role Play",
        description="Participate in interactive conversations",
        difficulty="hard",
        estimated_seconds=90,
    ),
}


def estimate_duration(question_types: list[QuestionType]) -> int:
    """Estimated time in seconds to work through the given question types."""
    return sum(QUESTION_TYPE_INFO[t].estimated_seconds for t in question_types)


# ============================================================================
# Content models (read-only input)
# ============================================================================


class Choice(BaseModel):
    id: str
    text: str
    image_url: str | None = None


class WordPair(BaseModel):
    id: int
    english: str
    vietnamese: str


class SynonymPair(BaseModel):
    id: int
    word1: str
    word2: str
    meaning: str | None = None


class DialogueLine(BaseModel):
    who: str
    text: str


class RolePlayChoice(BaseModel):
    text: str


class RolePlayStep(BaseModel):
    bot: str
    choices: list[RolePlayChoice] = Field(default_factory=list)
    expected: int  # Index into choices
    tips: str | None = None


class Blanks(BaseModel):
    indices: list[int] = Field(default_factory=list)
    correct: list[str] = Field(default_factory=list)
    word_bank: list[str] = Field(default_factory=list)


class ChooseWordsPayload(BaseModel):
    canonical_sentence: str = ""
    tokens: list[str] = Field(default_factory=list)
    source_sentence: str | None = None  # translation only
    blanks: Blanks | None = None  # fill_in_blanks only


class ChooseWordsData(BaseModel):
    """Unified question_data block for choose-words questions."""

    spec_version: int = 1
    subtype: ChooseWordsSubtype
    data: ChooseWordsPayload


class BaseQuestion(BaseModel):
    """Base class for all questions."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str


class MultipleChoiceQuestion(BaseQuestion):
    type: Literal["multiple-choice"] = "multiple-choice"
    question_text: str | None = None
    passage: str | None = None
    target_word: str | None = None
    choices: list[Choice]
    correct_choice_id: str
    hint: str | None = None


class GrammarStructureQuestion(BaseQuestion):
    type: Literal["grammar-structure"] = "grammar-structure"
    question_text: str | None = None
    passage: str | None = None
    choices: list[Choice]
    correct_choice_id: str
    hint: str | None = None


class DialogueCompletionQuestion(BaseQuestion):
    type: Literal["dialogue-completion"] = "dialogue-completion"
    context: list[DialogueLine] = Field(default_factory=list)
    choices: list[Choice]
    correct_choice_id: str
    explanation: str | None = None


class WordMatchingQuestion(BaseQuestion):
    type: Literal["word-matching"] = "word-matching"
    pairs: list[WordPair]


class SynonymsMatchingQuestion(BaseQuestion):
    type: Literal["synonyms-matching"] = "synonyms-matching"
    pairs: list[SynonymPair]


class ChooseWordsQuestion(BaseQuestion):
    type: Literal["choose-words"] = "choose-words"
    question_data: ChooseWordsData | None = None

    # Legacy fields, used when question_data is absent
    question: str | None = None
    sentence: str | None = None
    words: list[str] = Field(default_factory=list)
    correct_answer: list[str] = Field(default_factory=list)


class ErrorCorrectionQuestion(BaseQuestion):
    type: Literal["error-correction"] = "error-correction"
    question: str = ""
    faulty_sentence: str
    target: str
    hint: str | None = None


class RolePlayQuestion(BaseQuestion):
    type: Literal["role-play"] = "role-play"
    title: str = ""
    steps: list[RolePlayStep]


Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        WordMatchingQuestion,
        SynonymsMatchingQuestion,
        ChooseWordsQuestion,
        ErrorCorrectionQuestion,
        GrammarStructureQuestion,
        DialogueCompletionQuestion,
        RolePlayQuestion,
    ],
    Field(discriminator="type"),
]


class Exercise(BaseModel):
    """An ordered set of questions plus pass and reward metadata."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    questions: list[Question]
    coin_reward: int = 0
    xp_reward: int = 0
    pass_threshold: float | None = None  # Percent, 0-100
    zone_level: int | None = None
    topic_id: str | None = None
    lesson_id: str | None = None

    def get_question(self, question_id: str) -> BaseQuestion | None:
        """Find a question by ID."""
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def index_of(self, question_id: str) -> int:
        """Return the position of a question, or -1 if absent."""
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        return -1


# ============================================================================
# Grading and session models
# ============================================================================


class GradeResult(BaseModel):
    is_correct: bool
    score: float = Field(ge=0.0, le=1.0)
    feedback: str = ""

    @classmethod
    def incorrect(cls, feedback: str) -> "GradeResult":
        """A zero-score grade carrying only feedback."""
        return cls(is_correct=False, score=0.0, feedback=feedback)


class SessionStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SessionPhase(str, Enum):
    MAIN = "main"
    SKIPPED = "skipped"


class AnswerRecord(BaseModel):
    """The current answer for one question in a session."""

    question_id: str
    answer: Any = None
    grade: GradeResult
    time_spent_ms: int = 0
    timestamp: datetime
    status: Literal["answered", "skipped"] = "answered"
    question_type: str | None = None


class Progress(BaseModel):
    correct_answers: int = 0
    incorrect_answers: int = 0

    @property
    def answered(self) -> int:
        return self.correct_answers + self.incorrect_answers


class SkipState(BaseModel):
    """Skip queue management state."""

    phase: SessionPhase = SessionPhase.MAIN
    skipped_queue_ids: list[str] = Field(default_factory=list)
    skip_counts: dict[str, int] = Field(default_factory=dict)


class SessionSnapshot(BaseModel):
    """Serializable record of a session, versioned for compatibility."""

    exercise_id: str
    schema_version: str = SCHEMA_VERSION
    status: SessionStatus = SessionStatus.IN_PROGRESS
    started_at: datetime
    last_updated_at: datetime
    current_index: int = Field(default=0, ge=0)
    answers: list[AnswerRecord] = Field(default_factory=list)
    progress: Progress = Field(default_factory=Progress)
    skip_state: SkipState | None = None

    def get_answer(self, question_id: str) -> AnswerRecord | None:
        for record in self.answers:
            if record.question_id == question_id:
                return record
        return None


class ResultsSummary(BaseModel):
    """Final numbers handed to the result-submission collaborator."""

    score: int = 0  # Percent of all questions answered correctly
    accuracy: int = 0  # Percent of answered questions answered correctly
    correct_answers: int = 0
    incorrect_answers: int = 0
    skipped_questions: int = 0
    total_questions: int = 0
    time_spent: int = 0  # Seconds
