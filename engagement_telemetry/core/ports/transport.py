"""
Transport Port.

Outbound "submit JSON body to endpoint, with credentials" primitive.
Authentication, base URL resolution and connection handling belong to the
adapter.
"""

from __future__ import annotations

from typing import Any, Protocol


class SubmissionError(Exception):
    """Outbound submission failed (network, timeout or non-success status)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportPort(Protocol):
    """Telemetry transport interface."""

    async def post_json(self, path: str, body: dict[str, Any]) -> None:
        """
        POST body as JSON to path (relative to the collector base URL).

        Raises:
            SubmissionError: if the request could not be delivered or the
                collector answered with a non-success status.
        """
        ...
