"""
Manual clock and scheduler (dev/test).

Virtual time that only moves when advance() is called. Timers fire in
due-time order; coroutines handed to spawn() are queued and run to
completion on one private event loop when the scheduler is advanced or
run_until_idle() is called. Not usable from inside a running loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_EPOCH_MS = 1_767_225_600_000  # 2026-01-01T00:00:00Z


class ManualClock:
    """ClockPort whose time is set by the test."""

    def __init__(self, start_ms: int = 0, epoch_offset_ms: int = DEFAULT_EPOCH_MS) -> None:
        self._now_ms = start_ms
        self._epoch_offset_ms = epoch_offset_ms

    def now_ms(self) -> int:
        return self._now_ms

    def epoch_ms(self) -> int:
        return self._epoch_offset_ms + self._now_ms

    def advance(self, ms: int) -> None:
        if ms < 0:
            raise ValueError("Cannot move a clock backwards")
        self._now_ms += ms

    def set(self, now_ms: int) -> None:
        if now_ms < self._now_ms:
            raise ValueError("Cannot move a clock backwards")
        self._now_ms = now_ms


@dataclass
class ManualTimer:
    due_ms: int
    callback: Callable[[], None]
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """SchedulerPort driven by virtual time."""

    def __init__(self, clock: ManualClock | None = None) -> None:
        self.clock = clock or ManualClock()
        self._timers: list[tuple[int, int, ManualTimer]] = []
        self._seq = itertools.count()
        self._tasks: list[Coroutine[Any, Any, None]] = []
        self._loop: asyncio.AbstractEventLoop | None = None

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(due_ms=self.clock.now_ms() + max(0, delay_ms), callback=callback)
        heapq.heappush(self._timers, (timer.due_ms, next(self._seq), timer))
        return timer

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        self._tasks.append(coro)

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, t in self._timers if not t.cancelled)

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    def advance(self, ms: int) -> None:
        """Move time forward, firing every timer that falls due on the way."""
        target = self.clock.now_ms() + ms
        self.run_until_idle()
        while self._timers and self._timers[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self.clock.set(due_ms)
            timer.callback()
            self._run_tasks()
        self.clock.set(target)
        self._run_tasks()

    def run_until_idle(self) -> None:
        """Run queued tasks and any timers already due, without moving time."""
        self._run_tasks()
        now = self.clock.now_ms()
        while self._timers and self._timers[0][0] <= now:
            _, _, timer = heapq.heappop(self._timers)
            if not timer.cancelled:
                timer.callback()
            self._run_tasks()

    def close(self) -> None:
        """Discard queued tasks and close the private event loop."""
        for coro in self._tasks:
            coro.close()
        self._tasks.clear()
        if self._loop is not None:
            self._loop.close()
            self._loop = None

    def _run_tasks(self) -> None:
        if not self._tasks:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "ManualScheduler cannot run tasks inside a running event loop; "
                "use AsyncioScheduler there"
            )

        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        while self._tasks:
            coro = self._tasks.pop(0)
            try:
                self._loop.run_until_complete(coro)
            except Exception as exc:
                logger.debug("Background telemetry task failed: %r", exc)
