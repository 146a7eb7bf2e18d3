"""
Asyncio scheduler adapter.

Runs cooldown timers and fire-and-forget submissions on one event loop,
which is the engine's single logical thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """
    SchedulerPort backed by an asyncio event loop.

    Must be constructed on (or handed) the loop it will schedule on.
    Spawned tasks are referenced until done so they are not garbage
    collected mid-flight.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._tasks: set[asyncio.Task[None]] = set()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(max(0, delay_ms) / 1000, callback)

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("Background telemetry task failed: %r", exc)

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for in-flight submissions (shutdown/tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
