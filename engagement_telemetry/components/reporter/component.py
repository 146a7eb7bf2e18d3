"""
Reporter component - fire-and-forget submission of telemetry events.

Invariants:
- Submissions are scheduled, never awaited by the caller
- Failures are logged at DEBUG and dropped; no retries, nothing re-raised
- Events that fail validation are logged at WARNING and never sent
- Every discovery interaction carries the current session id
- Watch-duration events below the minimum duration are never sent
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from engagement_telemetry.core.ports.scheduler import SchedulerPort
from engagement_telemetry.core.ports.transport import TransportPort
from engagement_telemetry.rules.models import EndpointRules, ThresholdRules

from .models import (
    DiscoveryInteraction,
    DiscoveryInteractionEvent,
    NotInterestedEvent,
    PostViewEvent,
    ProfileViewEvent,
    TelemetryEvent,
    TrafficSource,
    WatchDurationEvent,
)
from .ports import SessionIdPort

logger = logging.getLogger(__name__)


class InteractionReporter:
    """Outbound half of the engine: builds bodies and hands them to the transport."""

    def __init__(
        self,
        transport: TransportPort,
        scheduler: SchedulerPort,
        session: SessionIdPort,
        endpoints: EndpointRules | None = None,
        thresholds: ThresholdRules | None = None,
    ) -> None:
        self._transport = transport
        self._scheduler = scheduler
        self._session = session
        self._endpoints = endpoints or EndpointRules()
        self._thresholds = thresholds or ThresholdRules()

    # --- Event Submissions ---

    def submit_post_view(self, post_id: str, source: TrafficSource | str = TrafficSource.FEED) -> None:
        path = self._endpoints.post_view.format(post_id=post_id)
        event = self._build("post view", post_id, PostViewEvent, source=source)
        if event is not None:
            self._fire(path, event, "post view")

    def submit_profile_view(
        self, profile_user_id: str, source: TrafficSource | str = TrafficSource.DIRECT
    ) -> None:
        event = self._build(
            "profile view",
            profile_user_id,
            ProfileViewEvent,
            profile_user_id=profile_user_id,
            source=source,
        )
        if event is not None:
            self._fire(self._endpoints.profile_view, event, "profile view")

    def submit_watch_event(
        self,
        post_id: str,
        watch_time_ms: int | float,
        completed: bool,
        source: TrafficSource | str = TrafficSource.FEED,
    ) -> bool:
        """
        Submit a raw watch duration.

        Fractional durations are truncated to whole milliseconds.

        Returns:
            False if nothing was sent (below the reporting minimum, or unusable input)
        """
        try:
            watch_time_ms = int(watch_time_ms)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Dropped watch event for %s: bad duration %r", post_id, watch_time_ms)
            return False

        if watch_time_ms < self._thresholds.min_watch_event_ms:
            logger.debug(
                "Watch event for %s suppressed (%dms < %dms)",
                post_id,
                watch_time_ms,
                self._thresholds.min_watch_event_ms,
            )
            return False

        event = self._build(
            "watch event",
            post_id,
            WatchDurationEvent,
            post_id=post_id,
            watch_time_ms=watch_time_ms,
            completed=completed,
            source=source,
        )
        if event is None:
            return False
        self._fire(self._endpoints.watch_event, event, "watch event")
        return True

    def submit_discovery_interaction(self, interaction: DiscoveryInteraction) -> None:
        event = DiscoveryInteractionEvent.stamp(interaction, self._session.get())
        self._fire(self._endpoints.discovery_interaction, event, "discovery interaction")

    def submit_not_interested_profile(self, profile_id: str, reason: str | None = None) -> None:
        path = self._endpoints.not_interested_profile.format(profile_id=profile_id)
        self._fire(path, NotInterestedEvent(reason=reason), "profile not-interested")

    def submit_not_interested_content(self, content_id: str, reason: str | None = None) -> None:
        path = self._endpoints.not_interested_content.format(content_id=content_id)
        self._fire(path, NotInterestedEvent(reason=reason), "content not-interested")

    # --- Transport ---

    def _fire(self, path: str, event: TelemetryEvent, label: str) -> None:
        self._scheduler.spawn(self._submit(path, event.to_body(), label))

    async def _submit(self, path: str, body: dict[str, Any], label: str) -> None:
        try:
            await self._transport.post_json(path, body)
        except Exception as e:
            logger.debug(f"Failed to track {label}: {e!r}")

    def _build(
        self, label: str, subject: Any, model: type[TelemetryEvent], **fields: Any
    ) -> TelemetryEvent | None:
        try:
            return model(**fields)
        except ValidationError as e:
            logger.warning("Dropped invalid %s for %r: %s", label, subject, e)
            return None
