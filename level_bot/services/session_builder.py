import logging
import random
from collections import Counter

from level_bot.config import SUBJECTS, settings
from level_bot.exceptions import ContentParseError, GenerationError, InvariantViolation, UnknownSubjectError
from level_bot.llm.client import ContentGenerator, chat_completion, with_timeout
from level_bot.llm.parser import parse_questions
from level_bot.llm.prompts import build_level_test_prompt
from level_bot.llm.schemas import GeneratedQuestion
from level_bot.models import BAND_TIME_BUDGETS, AssessmentSession, Difficulty, Question

logger = logging.getLogger(__name__)

_FALLBACK_TEMPLATES = {
    Difficulty.VERY_EASY: "Which of these is a basic idea in {topic}?",
    Difficulty.EASY: "What is a common first step when working on {topic}?",
    Difficulty.INTERMEDIATE: "Which statement about {topic} is accurate?",
    Difficulty.ADVANCED: "Which approach best solves a multi-step {topic} problem?",
    Difficulty.EXPERT: "Which claim about advanced {topic} in {subject} holds in every case?",
}
_FALLBACK_OPTIONS = ("Option A", "Option B", "Option C", "Option D")


def get_subject(subject: str) -> dict:
    """Return the catalogue entry for a subject slug."""
    info = SUBJECTS.get(subject)
    if info is None:
        raise UnknownSubjectError(f"Unknown subject: {subject!r}")
    return info


async def start_session(subject: str, **kwargs) -> AssessmentSession:
    """Build the question set and open a session for it."""
    questions = await build_questions(subject, **kwargs)
    return AssessmentSession(subject=subject, questions=questions)


async def build_questions(
    subject: str,
    *,
    generator: ContentGenerator | None = None,
    rng: random.Random | None = None,
    per_band: int | None = None,
    timeout: float | None = None,
) -> list[Question]:
    """
    Build a shuffled level-test question set for a subject.

    The set always holds ``per_band`` questions for each difficulty band. When
    the generator fails, times out or returns unusable content, the local
    fallback set is used instead.

    Raises:
        UnknownSubjectError: subject is not in the catalogue
        InvariantViolation: the fallback set itself is malformed
    """
    info = get_subject(subject)
    per_band = settings.QUESTIONS_PER_BAND if per_band is None else per_band
    if per_band < 1:
        raise ValueError("per_band must be positive")
    timeout = settings.GENERATION_TIMEOUT_SECONDS if timeout is None else timeout
    rng = rng or random.Random()

    try:
        questions = await _generate_questions(subject, info, per_band, generator or chat_completion, timeout)
        logger.info("Generated %d questions for %s", len(questions), subject)
    except (GenerationError, ContentParseError) as e:
        logger.warning("Using fallback questions for %s: %s", subject, e)
        questions = fallback_questions(subject, per_band)

    # Mix bands so the position of a question does not reveal its difficulty
    rng.shuffle(questions)
    return questions


async def _generate_questions(
    subject: str,
    info: dict,
    per_band: int,
    generator: ContentGenerator,
    timeout: float,
) -> list[Question]:
    prompt = build_level_test_prompt(info["name"], info["topics"], per_band)

    try:
        outcome = await with_timeout(generator(prompt), timeout)
    except Exception as e:
        raise GenerationError(f"generator call failed: {e}") from e

    if outcome.timed_out:
        raise GenerationError(f"generator timed out after {timeout}s")
    if not outcome.value or not outcome.value.strip():
        raise GenerationError("generator returned empty text")

    parsed = parse_questions(outcome.value)
    if parsed is None:
        raise ContentParseError("no valid questions in generated text")

    # First per_band valid questions of each band, band by band
    selected = [
        item
        for band in Difficulty
        for item in [q for q in parsed if q.difficulty is band][:per_band]
    ]
    short = _unbalanced_bands(selected, per_band)
    if short:
        raise ContentParseError(
            f"got {len(parsed)} valid questions, bands short of {per_band}: {short}"
        )

    return [
        _to_question(item, f"level-test-{subject}-{index}")
        for index, item in enumerate(selected)
    ]


def _to_question(item: GeneratedQuestion, question_id: str) -> Question:
    if item.expectedTime is not None and item.expectedTime >= 1:
        expected_time = round(item.expectedTime)
    else:
        expected_time = BAND_TIME_BUDGETS[item.difficulty]

    return Question(
        id=question_id,
        text=item.question.strip(),
        options=tuple(item.options),
        correct_option_index=item.correctAnswer,
        explanation=item.explanation.strip(),
        difficulty=item.difficulty,
        topic=item.topic.strip(),
        expected_time_seconds=expected_time,
    )


def fallback_questions(subject: str, per_band: int = 2) -> list[Question]:
    """
    Deterministic placeholder set: ``per_band`` questions per band, band by band,
    with topics assigned round-robin over the subject's topic list.
    """
    info = get_subject(subject)
    topics = info["topics"]
    questions = []

    try:
        for band_index, band in enumerate(Difficulty):
            for offset in range(per_band):
                slot = band_index * per_band + offset
                topic = topics[slot % len(topics)]
                questions.append(Question(
                    id=f"fallback-{subject}-{slot}",
                    text=_FALLBACK_TEMPLATES[band].format(topic=topic, subject=info["name"]),
                    options=_FALLBACK_OPTIONS,
                    correct_option_index=slot % len(_FALLBACK_OPTIONS),
                    explanation=f"Review the {band.label} material on {topic} to see why.",
                    difficulty=band,
                    topic=topic,
                    expected_time_seconds=BAND_TIME_BUDGETS[band],
                ))
    except (ValueError, KeyError, ZeroDivisionError) as e:
        logger.critical("Fallback question set for %s is malformed: %s", subject, e)
        raise InvariantViolation(f"fallback questions for {subject} are malformed: {e}") from e

    _check_band_balance(subject, questions, per_band)
    return questions


def _unbalanced_bands(questions, per_band: int) -> dict[str, int]:
    """Bands whose question count differs from ``per_band``, with their counts."""
    counts = Counter(q.difficulty for q in questions)
    return {band.value: counts[band] for band in Difficulty if counts[band] != per_band}


def _check_band_balance(subject: str, questions: list[Question], per_band: int):
    unbalanced = _unbalanced_bands(questions, per_band)
    if unbalanced:
        logger.critical("Fallback question set for %s is unbalanced: %s", subject, unbalanced)
        raise InvariantViolation(f"fallback questions for {subject} are unbalanced")
