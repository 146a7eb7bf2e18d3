"""
httpx transport adapter.

Posts telemetry JSON to the collector with the session's credentials.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from engagement_telemetry.core.ports.transport import SubmissionError

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    TransportPort over httpx.AsyncClient.

    Credentials are carried by the client: a bearer token header and/or
    cookies set at construction time.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        auth_token: str | None = None,
        cookies: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=headers,
            cookies=cookies,
        )

    async def post_json(self, path: str, body: dict[str, Any]) -> None:
        try:
            response = await self._client.post(path, json=body)
        except httpx.TimeoutException as e:
            raise SubmissionError(f"Timed out posting to {path}") from e
        except httpx.HTTPError as e:
            raise SubmissionError(f"Network error posting to {path}: {e}") from e

        if response.is_error:
            raise SubmissionError(
                f"HTTP {response.status_code} from {path}",
                status_code=response.status_code,
            )

        logger.debug("Posted telemetry to %s (%s)", path, response.status_code)

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed
