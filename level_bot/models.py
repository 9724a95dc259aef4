"""Data models for the level test."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from level_bot.exceptions import SessionStateError

OPTIONS_PER_QUESTION = 4


class Difficulty(str, Enum):
    """Difficulty band of a generated question, easiest first."""
    VERY_EASY = "very-easy"
    EASY = "easy"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @classmethod
    def from_label(cls, label: str) -> "Difficulty":
        """Accept the spellings models tend to produce: "Very Easy", "very_easy", "medium"."""
        normalized = "-".join(label.strip().lower().replace("_", " ").split())
        normalized = _DIFFICULTY_ALIASES.get(normalized, normalized)
        return cls(normalized)

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


_DIFFICULTY_ALIASES = {
    "veryeasy": "very-easy",
    "medium": "intermediate",
    "hard": "advanced",
}

# Seconds a question of each band is designed to take
BAND_TIME_BUDGETS = {
    Difficulty.VERY_EASY: 15,
    Difficulty.EASY: 25,
    Difficulty.INTERMEDIATE: 35,
    Difficulty.ADVANCED: 45,
    Difficulty.EXPERT: 60,
}


class Level(str, Enum):
    """Recommended level to continue at."""
    EASY = "easy"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    HARD = "hard"


@dataclass(frozen=True)
class Question:
    """Single multiple-choice question. Immutable for the session."""
    id: str
    text: str
    options: tuple[str, ...]
    correct_option_index: int
    explanation: str
    difficulty: Difficulty
    topic: str
    expected_time_seconds: int

    def __post_init__(self):
        if len(self.options) != OPTIONS_PER_QUESTION:
            raise ValueError(f"Question {self.id} has {len(self.options)} options, expected {OPTIONS_PER_QUESTION}")
        if not 0 <= self.correct_option_index < OPTIONS_PER_QUESTION:
            raise ValueError(f"Question {self.id} has correct index {self.correct_option_index}")
        if self.expected_time_seconds <= 0:
            raise ValueError(f"Question {self.id} has non-positive expected time")

    @property
    def correct_answer(self) -> str:
        return self.options[self.correct_option_index]


@dataclass(frozen=True)
class AnswerRecord:
    """Answer to one question. chosen_option_index is None when unanswered or timed out."""
    question_index: int
    chosen_option_index: Optional[int]
    time_spent_seconds: int


@dataclass(frozen=True)
class QuestionBreakdown:
    """Per-question line of a topic report."""
    question: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    time_spent: int
    expected_time: int
    difficulty: Difficulty


@dataclass
class TopicPerformance:
    """Aggregated result for one topic of a finished session."""
    topic: str
    correct_count: int
    total_count: int
    average_time_ratio: float
    recommended_level: Level
    needs_improvement: bool
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    questions: list[QuestionBreakdown] = field(default_factory=list)

    @property
    def correct_ratio(self) -> float:
        return self.correct_count / self.total_count if self.total_count else 0.0


@dataclass
class AssessmentReport:
    """Everything computed when a session completes."""
    subject: str
    topics: list[TopicPerformance]
    overall_level: Level
    score: int
    question_count: int
    narrative: Optional[str] = None

    @property
    def score_percent(self) -> int:
        return round(self.score / self.question_count * 100) if self.question_count else 0


@dataclass
class AssessmentSession:
    """Questions of one level test plus the answers collected so far."""
    subject: str
    questions: list[Question]
    answers: dict[int, AnswerRecord] = field(default_factory=dict)
    started_at: datetime = field(default_factory=datetime.now)

    def record_answer(self, index: int, chosen: Optional[int], time_spent: int) -> AnswerRecord:
        """Store the final answer for question ``index``. Each question is answered once."""
        if not 0 <= index < len(self.questions):
            raise SessionStateError(f"No question with index {index}")
        if index in self.answers:
            raise SessionStateError(f"Question {index} is already answered")
        if chosen is not None and not 0 <= chosen < len(self.questions[index].options):
            raise SessionStateError(f"Option {chosen} does not exist for question {index}")

        record = AnswerRecord(
            question_index=index,
            chosen_option_index=chosen,
            time_spent_seconds=max(0, int(time_spent)),
        )
        self.answers[index] = record
        return record

    @property
    def score(self) -> int:
        return sum(
            1 for index, record in self.answers.items()
            if record.chosen_option_index == self.questions[index].correct_option_index
        )

    @property
    def is_complete(self) -> bool:
        return len(self.answers) == len(self.questions)
