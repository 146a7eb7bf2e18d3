"""
Dedupe component - suppresses repeated keyed actions within a cooldown.

Key behaviors:
- First attempt for a key runs the action and starts the key's cooldown
- Attempts while the key is cooling down are dropped silently
- Each key has its own timer, created lazily and removed on expiry
- No size cap and no eviction: expiry is purely time based

Not thread-safe. All calls and timer callbacks happen on the scheduler's
single logical thread.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from engagement_telemetry.core.ports.scheduler import SchedulerPort, TimerHandle

logger = logging.getLogger(__name__)


# --- Dedupe Keys ---


def post_view_key(post_id: str) -> str:
    return f"view-{post_id}"


def profile_view_key(profile_user_id: str) -> str:
    return f"profile-{profile_user_id}"


def interaction_key(content_id: str, interaction_type: str) -> str:
    return f"{content_id}-{interaction_type}"


# --- Gate ---


class DedupeGate:
    """Cooldown gate keyed by string."""

    def __init__(self, scheduler: SchedulerPort) -> None:
        self._scheduler = scheduler
        self._timers: dict[str, TimerHandle] = {}

    def attempt(self, key: str, cooldown_ms: int, action: Callable[[], Any]) -> bool:
        """
        Run action unless key is cooling down.

        The cooldown is armed before the action runs. A coroutine returned by
        the action is handed to the scheduler and not awaited.

        Returns:
            True if the action ran, False if it was suppressed
        """
        if key in self._timers:
            logger.debug("Suppressed %s (cooling down)", key)
            return False

        self._timers[key] = self._scheduler.call_later(
            cooldown_ms, lambda: self._expire(key)
        )

        result = action()
        if inspect.iscoroutine(result):
            self._scheduler.spawn(result)
        return True

    def _expire(self, key: str) -> None:
        self._timers.pop(key, None)

    def is_cooling_down(self, key: str) -> bool:
        return key in self._timers

    @property
    def active_keys(self) -> tuple[str, ...]:
        return tuple(self._timers)

    def clear(self) -> None:
        """Cancel every cooldown; all keys become eligible immediately."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
