"""Per-question countdown that auto-submits a timeout."""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

_log = logging.getLogger("word_quiz.timer")

DEFAULT_TICK_SECONDS = 0.05


class QuestionTimer:
    """Polls elapsed time against a captured start and fires at most once.

    ``on_expire`` runs on the event loop thread. ``cancel()`` may be called
    any number of times, including from inside ``on_expire``.
    """

    def __init__(
        self,
        limit_seconds: float,
        on_expire: Callable[[], None],
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit_seconds = limit_seconds
        self.on_expire = on_expire
        self.tick_seconds = tick_seconds
        self.clock = clock
        self._started_at: float | None = None
        self._stopped_at: float | None = None
        self._task: asyncio.Task | None = None
        self._fired = False
        self._cancelled = False

    @property
    def enabled(self) -> bool:
        return self.limit_seconds > 0

    @property
    def running(self) -> bool:
        return self._task is not None

    @property
    def fired(self) -> bool:
        return self._fired

    def start(self) -> None:
        if not self.enabled or self._task is not None or self._fired or self._cancelled:
            return
        self._started_at = self.clock()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else self.clock()
        return end - self._started_at

    def fraction_remaining(self) -> float:
        if not self.enabled or self._started_at is None:
            return 1.0
        if self._fired:
            return 0.0
        return max(0.0, 1.0 - self.elapsed() / self.limit_seconds)

    def cancel(self) -> None:
        if self._started_at is not None and self._stopped_at is None:
            self._stopped_at = self.clock()
        self._cancelled = True
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            if self._cancelled:
                return
            if self.elapsed() >= self.limit_seconds:
                self._fired = True
                self._task = None
                _log.debug("Timer expired after %.2fs", self.elapsed())
                self.on_expire()
                return
