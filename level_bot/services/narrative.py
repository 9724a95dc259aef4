import logging

from level_bot.config import SUBJECTS, settings
from level_bot.llm.client import ContentGenerator, chat_completion, with_timeout
from level_bot.llm.prompts import build_analysis_prompt
from level_bot.models import AssessmentReport, AssessmentSession
from level_bot.services.analyzer import finalize

logger = logging.getLogger(__name__)


async def finalize_with_narrative(
    session: AssessmentSession,
    *,
    generator: ContentGenerator | None = None,
    timeout: float | None = None,
) -> AssessmentReport:
    """Structured report plus a best-effort written summary. The summary may be None."""
    report = finalize(session)
    report.narrative = await generate_narrative(report, generator=generator, timeout=timeout)
    return report


async def generate_narrative(
    report: AssessmentReport,
    *,
    generator: ContentGenerator | None = None,
    timeout: float | None = None,
) -> str | None:
    subject_name = SUBJECTS.get(report.subject, {}).get("name", report.subject)
    prompt = build_analysis_prompt(subject_name, report)
    timeout = settings.GENERATION_TIMEOUT_SECONDS if timeout is None else timeout

    try:
        outcome = await with_timeout((generator or chat_completion)(prompt), timeout)
    except Exception as e:
        logger.warning(f"Narrative analysis failed: {e}")
        return None

    if outcome.timed_out or not outcome.value or not outcome.value.strip():
        logger.warning("Narrative analysis unavailable, returning structured report only")
        return None

    return outcome.value.strip()
