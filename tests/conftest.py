"""Shared fixtures for the level test suite."""
import json

import pytest

from level_bot.models import AssessmentSession, Difficulty, Question


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_question(
    index: int = 0,
    topic: str = "Algebra",
    difficulty: Difficulty = Difficulty.EASY,
    correct: int = 0,
    expected_time: int = 20,
) -> Question:
    return Question(
        id=f"q-{index}",
        text=f"Question {index} about {topic}?",
        options=("first", "second", "third", "fourth"),
        correct_option_index=correct,
        explanation=f"Because of rule {index}.",
        difficulty=difficulty,
        topic=topic,
        expected_time_seconds=expected_time,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def two_topic_questions():
    """Two topics with two questions each."""
    return [
        make_question(0, "Algebra", Difficulty.VERY_EASY, correct=1, expected_time=15),
        make_question(1, "Geometry", Difficulty.EASY, correct=2, expected_time=25),
        make_question(2, "Algebra", Difficulty.INTERMEDIATE, correct=0, expected_time=35),
        make_question(3, "Geometry", Difficulty.ADVANCED, correct=3, expected_time=45),
    ]


@pytest.fixture
def session(two_topic_questions):
    return AssessmentSession(subject="math", questions=two_topic_questions)


def generated_payload(count: int = 10, topics=("Algebra", "Geometry", "Arithmetic", "Statistics", "Probability")):
    """A well-formed generator response with two questions per band."""
    bands = ["very easy", "easy", "intermediate", "advanced", "expert"]
    items = []
    for i in range(count):
        items.append({
            "question": f"Generated question {i}?",
            "options": ["a", "b", "c", "d"],
            "correctAnswer": i % 4,
            "explanation": "Explained.",
            "difficulty": bands[(i // 2) % len(bands)],
            "topic": topics[i % len(topics)],
            "expectedTime": 15 + 10 * ((i // 2) % len(bands)),
        })
    return json.dumps(items)


@pytest.fixture
def generated_text():
    return generated_payload()
