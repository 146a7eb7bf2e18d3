"""
Scheduler Port.

Deferred execution for the engine. Everything scheduled through this port
runs on one logical thread: a callback runs to completion before the next
one starts, so timers for the same key never race.

Implementation strategies:
1. AsyncioScheduler: event-loop timers and tasks (production)
2. ManualScheduler: virtual time driven by advance() (dev/test)
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Protocol


class TimerHandle(Protocol):
    """Handle for a scheduled callback."""

    def cancel(self) -> None:
        """Cancel the callback if it has not run yet."""
        ...


class SchedulerPort(Protocol):
    """Deferred-execution interface."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay_ms milliseconds."""
        ...

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        """
        Start a coroutine without awaiting it.

        The caller never observes the outcome. Exceptions escaping the
        coroutine are retrieved and logged by the scheduler.
        """
        ...
