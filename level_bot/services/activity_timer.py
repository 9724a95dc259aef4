import asyncio
import logging
import time
from typing import Callable, Optional

from level_bot.config import settings

logger = logging.getLogger(__name__)


class ActiveTimeTracker:
    """Counts seconds of active engagement, pausing after a stretch of inactivity."""

    def __init__(
        self,
        idle_threshold: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.idle_threshold = settings.IDLE_THRESHOLD_SECONDS if idle_threshold is None else idle_threshold
        self._clock = clock
        self._started_at = clock()
        self._last_activity = self._started_at
        self._task: Optional[asyncio.Task] = None
        self.active_seconds = 0

    def record_activity(self):
        self._last_activity = self._clock()

    def tick(self) -> bool:
        """Accrue one second unless the user has been idle too long."""
        if self._clock() - self._last_activity < self.idle_threshold:
            self.active_seconds += 1
            return True
        return False

    def start(self):
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    def stop(self):
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        logger.debug("Active time tracker stopped at %d active seconds", self.active_seconds)

    def elapsed_seconds(self) -> int:
        return int(self._clock() - self._started_at)

    def session_seconds(self) -> int:
        """Time to report for the session: the larger of active and wall time, at least 1."""
        # Idle time is not subtracted: wall time always wins, active_seconds is tracked separately
        return max(self.active_seconds, self.elapsed_seconds(), 1)

    async def _run(self):
        while True:
            await asyncio.sleep(1)
            self.tick()
