"""
Session component - issues the correlation id stamped on every
discovery-interaction event.

Invariants:
- Two get() calls without an intervening reset() return the same id
- The id is created lazily on first get()
- The id is never persisted and never expires on its own
"""

from __future__ import annotations

import secrets
import string

from engagement_telemetry.core.ports.clock import ClockPort

_BASE36 = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 7


def generate_session_id(epoch_ms: int, suffix: str | None = None) -> str:
    """
    Build a session id: session_{epochMillis}_{random base36 suffix}.

    The timestamp keeps ids from different processes apart; the random
    suffix separates processes started within the same millisecond.
    """
    if suffix is None:
        suffix = "".join(secrets.choice(_BASE36) for _ in range(SUFFIX_LENGTH))
    return f"session_{epoch_ms}_{suffix}"


class SessionIdentityProvider:
    """Holds the current session id."""

    def __init__(self, clock: ClockPort) -> None:
        self._clock = clock
        self._session_id: str | None = None

    def get(self) -> str:
        if self._session_id is None:
            self._session_id = generate_session_id(self._clock.epoch_ms())
        return self._session_id

    def reset(self) -> None:
        """Discard the current id (e.g. on logout); the next get() issues a new one."""
        self._session_id = None

    @property
    def has_session(self) -> bool:
        return self._session_id is not None
