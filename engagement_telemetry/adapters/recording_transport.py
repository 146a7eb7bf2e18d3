"""
Recording transport adapter (dev/test).

Keeps every submission in memory instead of sending it. Can be told to
fail so the reporter's failure containment can be exercised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from engagement_telemetry.core.ports.transport import SubmissionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedRequest:
    path: str
    body: dict[str, Any]


@dataclass
class RecordingTransport:
    """TransportPort that records requests."""

    requests: list[RecordedRequest] = field(default_factory=list)
    failures: list[RecordedRequest] = field(default_factory=list)
    fail_with: Exception | None = None

    async def post_json(self, path: str, body: dict[str, Any]) -> None:
        request = RecordedRequest(path=path, body=dict(body))
        if self.fail_with is not None:
            self.failures.append(request)
            raise self.fail_with

        logger.debug(f"RecordingTransport.post_json: path={path}, body={body}")
        self.requests.append(request)

    # --- Testing Helpers ---

    def fail(self, error: Exception | None = None) -> None:
        """Make subsequent submissions fail."""
        self.fail_with = error or SubmissionError("Simulated failure")

    def recover(self) -> None:
        self.fail_with = None

    def paths(self) -> list[str]:
        return [r.path for r in self.requests]

    def bodies_for(self, path: str) -> list[dict[str, Any]]:
        return [r.body for r in self.requests if r.path == path]

    def clear(self) -> None:
        self.requests.clear()
        self.failures.clear()
