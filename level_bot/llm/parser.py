import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from level_bot.llm.schemas import GeneratedQuestion

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCED_RE = re.compile(r"```(?:json)?\s*(.+?)\s*```", re.DOTALL | re.IGNORECASE)
_FENCE_MARKER_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_SMART_QUOTES = str.maketrans({
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
})
_CLOSERS = {"{": "}", "[": "]"}
_OPENERS = {"}": "{", "]": "["}


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing generated text. ``error`` is set when nothing usable was found."""
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_json(text: str | None) -> ParseResult:
    """Parse JSON embedded in model output, repairing it if needed. Never raises."""
    if not text or not text.strip():
        return ParseResult(error="empty text")

    try:
        return ParseResult(value=json.loads(text.strip()))
    except (json.JSONDecodeError, TypeError):
        pass

    repaired = repair_json(text)
    if not repaired:
        return ParseResult(error="no JSON object or array found")

    try:
        value, _ = json.JSONDecoder().raw_decode(repaired)
    except json.JSONDecodeError as e:
        logger.warning("JSON still invalid after repair: %s", e)
        return ParseResult(error=f"unrepairable JSON: {e}")

    logger.info("Parsed generated JSON after repair")
    return ParseResult(value=value)


def repair_json(text: str) -> str:
    """Apply the textual repairs in order. Returns "" when no JSON start is present."""
    match = _FENCED_RE.search(text)
    text = match.group(1) if match else _FENCE_MARKER_RE.sub("", text)

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return ""
    text = text[min(starts):]

    text = text.translate(_SMART_QUOTES)
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    return _close_open_structures(text)


def _close_open_structures(text: str) -> str:
    """Cut prose after a complete value, or close whatever the text left open."""
    stack: list[str] = []
    in_string = False
    escaped = False
    string_start = -1

    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
            string_start = i
        elif ch in _CLOSERS:
            stack.append(ch)
        elif ch in _OPENERS:
            if not stack or stack[-1] != _OPENERS[ch]:
                # Mismatched closer, nothing sensible to do
                return text
            stack.pop()
            if not stack:
                return text[:i + 1]

    if in_string:
        if escaped:
            text = text[:-1]
        text += '"'

    text = text.rstrip()
    if text.endswith(","):
        text = text[:-1].rstrip()

    if text.endswith(":"):
        text += " null"
    elif stack and stack[-1] == "{" and _ends_with_bare_key(text, string_start):
        text += ": null"

    return text + "".join(_CLOSERS[opener] for opener in reversed(stack))


def _ends_with_bare_key(text: str, string_start: int) -> bool:
    """True when the text ends with a string sitting in key position of an object."""
    if string_start < 0 or not text.endswith('"') or len(text) - 1 <= string_start:
        return False
    before = text[:string_start].rstrip()
    return before.endswith(("{", ","))


def parse_model(raw_text: str | None, schema: type[ModelT]) -> ModelT | None:
    """Parse and validate a single object. Returns None on failure."""
    result = parse_json(raw_text)
    if not result.ok:
        logger.error("Failed to parse LLM response as JSON: %s", result.error)
        return None
    try:
        return schema.model_validate(result.value)
    except ValidationError as e:
        logger.warning(f"Response does not match {schema.__name__}: {e}")
        return None


def parse_questions(raw_text: str | None) -> list[GeneratedQuestion] | None:
    """Parse LLM output into validated questions. Returns None on failure."""
    result = parse_json(raw_text)
    if not result.ok:
        logger.error("Failed to parse LLM response as JSON: %s", result.error)
        return None

    items = result.value
    if isinstance(items, dict):
        items = items.get("questions")
    if not isinstance(items, list):
        logger.error("LLM response is not a list of questions")
        return None

    valid = []
    for item in items:
        try:
            valid.append(GeneratedQuestion.model_validate(item))
        except ValidationError:
            logger.warning(f"Skipping invalid question: {item}")

    return valid if valid else None
