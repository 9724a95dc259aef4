import logging

from level_bot.config import settings
from level_bot.exceptions import ContentParseError, GenerationError
from level_bot.llm.client import ContentGenerator, chat_completion, with_timeout
from level_bot.llm.parser import parse_model
from level_bot.llm.prompts import build_interview_prompt
from level_bot.llm.schemas import InterviewQuestionSet

logger = logging.getLogger(__name__)

_DEFAULT_TECHNICAL = [
    "Explain the difference between var, let, and const in JavaScript.",
    "What is the difference between == and === in JavaScript?",
    "Explain the concept of closures in JavaScript.",
    "What is the event loop in JavaScript?",
    "Describe the box model in CSS.",
    "What are the different position values in CSS?",
    "Explain the concept of responsive design.",
    "What is the difference between HTTP and HTTPS?",
    "Explain the concept of RESTful APIs.",
    "What is the difference between client-side and server-side rendering?",
]

_DEFAULT_BEHAVIORAL = [
    "Describe a challenging project you worked on and how you overcame obstacles.",
    "How do you prioritize tasks when working on multiple projects?",
    "Describe a situation where you had to make a difficult decision with limited information.",
    "How do you handle feedback and criticism?",
    "Describe a time when you had to learn a new technology quickly.",
    "How do you approach problem-solving?",
    "Describe a situation where you had to work with a difficult team member.",
    "How do you stay updated with the latest technologies and trends?",
    "Describe a time when you had to explain a complex technical concept to a non-technical person.",
    "What are your strengths and weaknesses as a developer?",
]


def default_interview_questions() -> dict[str, list[dict]]:
    return {
        "technical": [{"id": f"tech-{i}", "question": q} for i, q in enumerate(_DEFAULT_TECHNICAL, 1)],
        "behavioral": [{"id": f"behav-{i}", "question": q} for i, q in enumerate(_DEFAULT_BEHAVIORAL, 1)],
    }


async def generate_interview_questions(
    role: str,
    *,
    generator: ContentGenerator | None = None,
    timeout: float | None = None,
) -> dict[str, list[dict]]:
    """Technical and behavioral questions for a role. Falls back to a generic set."""
    timeout = settings.GENERATION_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        return await _generate(role, generator or chat_completion, timeout)
    except (GenerationError, ContentParseError) as e:
        logger.warning("Using default interview questions for %r: %s", role, e)
        return default_interview_questions()


async def _generate(role: str, generator: ContentGenerator, timeout: float) -> dict[str, list[dict]]:
    try:
        outcome = await with_timeout(generator(build_interview_prompt(role)), timeout)
    except Exception as e:
        raise GenerationError(f"generator call failed: {e}") from e

    if outcome.timed_out or not outcome.value:
        raise GenerationError("no interview questions generated")

    question_set = parse_model(outcome.value, InterviewQuestionSet)
    if question_set is None:
        raise ContentParseError("interview questions could not be parsed")
    return question_set.model_dump()
