import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from level_bot.exceptions import SessionStateError
from level_bot.models import AnswerRecord, AssessmentReport, AssessmentSession, Question
from level_bot.services.analyzer import finalize

logger = logging.getLogger(__name__)

TimeoutHook = Callable[[AnswerRecord], Awaitable[None]]


class CollectorState(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    ANSWER_CHECKED = "answer_checked"
    COMPLETED = "completed"


class TimedAnswerCollector:
    """
    Walks a session question by question against a per-question countdown.

    AWAITING_ANSWER --check--> ANSWER_CHECKED --next--> AWAITING_ANSWER | COMPLETED.
    When the countdown reaches zero in AWAITING_ANSWER the question is
    finalized with whatever is selected (possibly nothing).

    Only one countdown task exists at a time. Call ``dispose()`` when the
    session is abandoned so no timer fires afterwards.
    """

    def __init__(
        self,
        session: AssessmentSession,
        *,
        clock: Callable[[], float] = time.monotonic,
        on_timeout: Optional[TimeoutHook] = None,
        tick_interval: float = 1.0,
    ):
        if not session.questions:
            raise SessionStateError("Session has no questions")

        self.session = session
        self._clock = clock
        self._on_timeout = on_timeout
        self._tick_interval = tick_interval
        self._task: Optional[asyncio.Task] = None
        self._running = False

        self.state = CollectorState.AWAITING_ANSWER
        self.current_index = 0
        self.selected: Optional[int] = None
        self.timed_out = False
        self.time_left = 0
        self.last_record: Optional[AnswerRecord] = None
        self._question_started = 0.0
        self._reset_question()

    @property
    def current_question(self) -> Question:
        return self.session.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.session.questions) - 1

    @property
    def last_answer_correct(self) -> bool:
        record = self.last_record
        if record is None or record.chosen_option_index is None:
            return False
        return record.chosen_option_index == self.session.questions[record.question_index].correct_option_index

    def start(self):
        """Start the countdown for the current question. Needs a running event loop."""
        self._running = True
        self._spawn_timer()

    def select(self, option_index: int) -> bool:
        """Select or reselect an option. Ignored once the question is checked."""
        if self.state is not CollectorState.AWAITING_ANSWER:
            return False
        if not 0 <= option_index < len(self.current_question.options):
            raise ValueError(f"Option {option_index} does not exist")
        self.selected = option_index
        return True

    def check(self) -> AnswerRecord | None:
        """Finalize the current question. No-op without a selection unless time is up."""
        if self.state is not CollectorState.AWAITING_ANSWER:
            return None
        if self.selected is None and not self.timed_out:
            return None
        return self._finalize_current()

    async def tick(self) -> AnswerRecord | None:
        """Advance the countdown by one second. Returns the record if this tick timed out."""
        if self.state is not CollectorState.AWAITING_ANSWER:
            return None

        self.time_left = max(0, self.time_left - 1)
        if self.time_left > 0:
            return None

        self.timed_out = True
        record = self._finalize_current()
        logger.info(
            "Question %d timed out (selected=%s)", record.question_index, record.chosen_option_index
        )
        if self._on_timeout:
            await self._on_timeout(record)
        return record

    def next(self) -> Question | None:
        """Move on after a checked question. Returns the next question, or None when completed."""
        if self.state is not CollectorState.ANSWER_CHECKED:
            raise SessionStateError(f"Cannot move on while {self.state.value}")

        if self.is_last_question:
            self.state = CollectorState.COMPLETED
            self._cancel_timer()
            return None

        self.current_index += 1
        self.state = CollectorState.AWAITING_ANSWER
        self._reset_question()
        if self._running:
            self._spawn_timer()
        return self.current_question

    def finalize(self) -> AssessmentReport:
        if self.state is not CollectorState.COMPLETED:
            raise SessionStateError("Session is not completed yet")
        return finalize(self.session)

    def dispose(self):
        """Cancel any outstanding timer. Safe to call more than once."""
        self._running = False
        self._cancel_timer()

    def _reset_question(self):
        self.selected = None
        self.timed_out = False
        self.time_left = self.current_question.expected_time_seconds
        self._question_started = self._clock()

    def _finalize_current(self) -> AnswerRecord:
        elapsed = int(self._clock() - self._question_started)
        record = self.session.record_answer(self.current_index, self.selected, elapsed)
        self.state = CollectorState.ANSWER_CHECKED
        self.last_record = record
        self._cancel_timer()
        return record

    def _spawn_timer(self):
        self._cancel_timer()
        if self.state is CollectorState.AWAITING_ANSWER:
            self._task = asyncio.create_task(self._countdown())

    def _cancel_timer(self):
        task, self._task = self._task, None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            # dispose() from synchronous code, outside any running loop
            current = None
        # The countdown finalizes questions itself; it must not cancel its own run
        if task is not current:
            task.cancel()

    async def _countdown(self):
        me = asyncio.current_task()
        try:
            while self._task is me and self.state is CollectorState.AWAITING_ANSWER:
                await asyncio.sleep(self._tick_interval)
                await self.tick()
        except Exception:
            logger.exception("Countdown for question %d failed", self.current_index)
