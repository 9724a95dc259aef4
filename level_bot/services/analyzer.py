"""
Topic performance analysis for a finished level test.

Everything here is a pure function of the questions and the answers: the
same input always gives the same report.
"""
from collections import defaultdict
from typing import Mapping, Sequence

from level_bot.models import (
    AnswerRecord,
    AssessmentReport,
    AssessmentSession,
    Difficulty,
    Level,
    Question,
    QuestionBreakdown,
    TopicPerformance,
)

# Level cut points (strict comparisons)
EASY_BELOW = 0.3
BEGINNER_BELOW = 0.5
HARD_ABOVE = 0.8

IMPROVEMENT_BELOW = 0.6
SLOW_TIME_RATIO = 1.5
FAST_TIME_RATIO = 0.8

SOLID_BAND_RATIO = 0.7
WEAK_BAND_RATIO = 0.3
WEAK_MIN_SAMPLES = 2

NO_ANSWER = "No answer"


def classify_level(ratio: float) -> Level:
    """Map a correct ratio onto the four recommendation buckets."""
    if ratio < EASY_BELOW:
        return Level.EASY
    if ratio < BEGINNER_BELOW:
        return Level.BEGINNER
    if ratio > HARD_ABOVE:
        return Level.HARD
    return Level.INTERMEDIATE


def overall_level(score: int, question_count: int) -> Level:
    """Session-wide level from the final score, independent of per-topic levels."""
    ratio = score / question_count if question_count else 0.0
    return classify_level(ratio)


def analyze_topics(
    questions: Sequence[Question],
    answers: Mapping[int, AnswerRecord],
) -> list[TopicPerformance]:
    """Group answered questions by topic and score each topic."""
    grouped: dict[str, list[QuestionBreakdown]] = defaultdict(list)

    for index, question in enumerate(questions):
        grouped[question.topic].append(_breakdown(question, answers.get(index)))

    return [_topic_performance(topic, items) for topic, items in grouped.items()]


def finalize(session: AssessmentSession) -> AssessmentReport:
    """Compute the report for a session. Unanswered questions count as wrong."""
    topics = analyze_topics(session.questions, session.answers)
    score = sum(perf.correct_count for perf in topics)
    count = len(session.questions)
    return AssessmentReport(
        subject=session.subject,
        topics=topics,
        overall_level=overall_level(score, count),
        score=score,
        question_count=count,
    )


def _breakdown(question: Question, answer: AnswerRecord | None) -> QuestionBreakdown:
    chosen = answer.chosen_option_index if answer else None
    # Missing or zero time falls back to the budget, giving a neutral ratio of 1.0
    time_spent = answer.time_spent_seconds if answer and answer.time_spent_seconds > 0 else question.expected_time_seconds

    return QuestionBreakdown(
        question=question.text,
        user_answer=question.options[chosen] if chosen is not None else NO_ANSWER,
        correct_answer=question.correct_answer,
        is_correct=chosen is not None and chosen == question.correct_option_index,
        time_spent=time_spent,
        expected_time=question.expected_time_seconds,
        difficulty=question.difficulty,
    )


def _topic_performance(topic: str, items: list[QuestionBreakdown]) -> TopicPerformance:
    total = len(items)
    correct = sum(1 for item in items if item.is_correct)
    correct_ratio = correct / total
    time_ratio = sum(item.time_spent / item.expected_time for item in items) / total

    strengths, weaknesses = _labels(topic, items, correct_ratio, time_ratio)

    return TopicPerformance(
        topic=topic,
        correct_count=correct,
        total_count=total,
        average_time_ratio=time_ratio,
        recommended_level=classify_level(correct_ratio),
        needs_improvement=correct_ratio < IMPROVEMENT_BELOW or time_ratio > SLOW_TIME_RATIO,
        strengths=strengths,
        weaknesses=weaknesses,
        questions=items,
    )


def _labels(
    topic: str,
    items: list[QuestionBreakdown],
    correct_ratio: float,
    time_ratio: float,
) -> tuple[list[str], list[str]]:
    strengths: list[str] = []
    weaknesses: list[str] = []

    by_band: dict[Difficulty, list[bool]] = defaultdict(list)
    for item in items:
        by_band[item.difficulty].append(item.is_correct)

    for band in Difficulty:
        results = by_band.get(band)
        if not results:
            continue
        ratio = sum(results) / len(results)
        if ratio == 1.0:
            strengths.append(f"Perfect score on {band.label} {topic} questions")
        elif ratio >= SOLID_BAND_RATIO:
            strengths.append(f"Solid grasp of {band.label} {topic} questions")
        elif ratio <= WEAK_BAND_RATIO and len(results) >= WEAK_MIN_SAMPLES:
            weaknesses.append(f"Struggles with {band.label} difficulty {topic} questions")

    # Bands often hold a single sample; still flag a topic that failed across them
    if not weaknesses and correct_ratio <= WEAK_BAND_RATIO and len(items) >= WEAK_MIN_SAMPLES:
        weaknesses.append(f"Struggles with {topic} questions across difficulty levels")

    if time_ratio < FAST_TIME_RATIO:
        strengths.append("Time management: answers faster than expected")
    elif time_ratio > SLOW_TIME_RATIO:
        weaknesses.append("Time management: slower than the expected pace")

    return strengths, weaknesses
