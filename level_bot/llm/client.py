import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from openai import AsyncOpenAI

from level_bot.config import settings

logger = logging.getLogger(__name__)

# Any async callable taking a prompt and returning the generated text (or None)
ContentGenerator = Callable[..., Awaitable[Optional[str]]]

_client = AsyncOpenAI(base_url=settings.LLM_BASE_URL, api_key=settings.LLM_API_KEY)


async def chat_completion(
    prompt: str,
    temperature: float | None = None,
    max_tokens: int | None = None,
    model: str | None = None,
) -> str | None:
    """Send a prompt to the configured model and return the response text."""
    try:
        response = await _client.chat.completions.create(
            model=model or settings.LLM_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=settings.LLM_TEMPERATURE if temperature is None else temperature,
            max_tokens=max_tokens or settings.LLM_MAX_TOKENS,
        )
        return response.choices[0].message.content
    except Exception as e:
        logger.error(f"LLM request failed: {e}")
        return None


@dataclass(frozen=True)
class Outcome:
    """Result of racing a call against a deadline."""
    value: Any = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return not self.timed_out


async def with_timeout(awaitable: Awaitable[Any], seconds: float) -> Outcome:
    """Await ``awaitable`` for at most ``seconds``. The loser is cancelled."""
    try:
        value = await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        logger.warning("Call did not finish within %.1f seconds", seconds)
        return Outcome(timed_out=True)
    return Outcome(value=value)
