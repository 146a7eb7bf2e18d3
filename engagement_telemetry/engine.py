"""
Telemetry engine - the one object that owns the engine's mutable state.

Holds the cooldown table, the pending impression set and the session id,
and routes every outgoing event through the dedupe gate before it reaches
the reporter. Construct one per app process (or per test).

Nothing here raises on a telemetry path. Malformed tags are normalized and
transport failures stay inside the reporter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from engagement_telemetry.adapters.clock import SystemClock
from engagement_telemetry.adapters.http_transport import HttpxTransport
from engagement_telemetry.adapters.scheduler import AsyncioScheduler
from engagement_telemetry.components.dedupe import (
    DedupeGate,
    interaction_key,
    post_view_key,
    profile_view_key,
)
from engagement_telemetry.components.impressions import ImpressionBatcher
from engagement_telemetry.components.reporter import (
    ContentType,
    DiscoveryInteraction,
    InteractionReporter,
    InteractionType,
    ProfileViewEvent,
    TrafficSource,
)
from engagement_telemetry.components.session import SessionIdentityProvider
from engagement_telemetry.components.watch import WatchSessionTracker
from engagement_telemetry.core.ports.clock import ClockPort
from engagement_telemetry.core.ports.scheduler import SchedulerPort
from engagement_telemetry.core.ports.transport import TransportPort
from engagement_telemetry.rules import TelemetryRules, load_rules, resolve_base_url

logger = logging.getLogger(__name__)


class TelemetryEngine:
    """Caller-facing entry point for engagement telemetry."""

    def __init__(
        self,
        transport: TransportPort,
        scheduler: SchedulerPort,
        clock: ClockPort,
        rules: TelemetryRules | None = None,
    ) -> None:
        self._rules = rules or TelemetryRules()
        self._clock = clock
        self._scheduler = scheduler
        self._transport = transport

        self._session = SessionIdentityProvider(clock)
        self._gate = DedupeGate(scheduler)
        self._reporter = InteractionReporter(
            transport,
            scheduler,
            self._session,
            endpoints=self._rules.endpoints,
            thresholds=self._rules.thresholds,
        )
        self._impressions = ImpressionBatcher(
            scheduler,
            self,
            flush_delay_ms=self._rules.impressions.flush_delay_ms,
        )

    @property
    def rules(self) -> TelemetryRules:
        return self._rules

    @property
    def transport(self) -> TransportPort:
        return self._transport

    @property
    def gate(self) -> DedupeGate:
        return self._gate

    @property
    def impressions(self) -> ImpressionBatcher:
        return self._impressions

    # --- Session ---

    @property
    def session_id(self) -> str:
        return self._session.get()

    def reset_session(self) -> None:
        self._session.reset()

    # --- Raw Views ---

    def track_post_view(
        self, post_id: str, source: TrafficSource | str = TrafficSource.FEED
    ) -> None:
        self._gate.attempt(
            post_view_key(post_id),
            self._rules.cooldowns.post_view_ms,
            lambda: self._reporter.submit_post_view(post_id, source),
        )

    def track_profile_view(
        self, profile_user_id: str, source: TrafficSource | str = TrafficSource.DIRECT
    ) -> None:
        # A rejected id never arms a cooldown.
        try:
            event = ProfileViewEvent(profile_user_id=profile_user_id, source=source)
        except ValidationError as e:
            logger.warning("Dropped invalid profile view for %r: %s", profile_user_id, e)
            return
        self._gate.attempt(
            profile_view_key(event.profile_user_id),
            self._rules.cooldowns.profile_view_ms,
            lambda: self._reporter.submit_profile_view(event.profile_user_id, event.source),
        )

    def track_watch_event(
        self,
        post_id: str,
        watch_time_ms: int | float,
        completed: bool,
        source: TrafficSource | str = TrafficSource.FEED,
    ) -> None:
        self._reporter.submit_watch_event(post_id, watch_time_ms, completed, source)

    # --- Impressions ---

    def enqueue_impressions(
        self, content_ids: Iterable[str], source: TrafficSource | str = TrafficSource.FEED
    ) -> None:
        """Report content that just became visible (batched, deduplicated)."""
        self._impressions.enqueue(content_ids, source)

    def track_post_impression(
        self, post_id: str, source: TrafficSource | str = TrafficSource.FEED
    ) -> None:
        self._impressions.enqueue([post_id], source)

    def flush_impressions(self) -> int:
        return self._impressions.flush()

    # --- Discovery Interactions ---

    def record_interaction(self, interaction: DiscoveryInteraction) -> None:
        key = interaction_key(interaction.content_id, interaction.interaction_type.value)
        self._gate.attempt(
            key,
            self._rules.cooldowns.discovery_interaction_ms,
            lambda: self._reporter.submit_discovery_interaction(interaction),
        )

    def track_discovery_interaction(
        self,
        content_id: str,
        interaction_type: InteractionType | str,
        *,
        content_type: ContentType | str | None = None,
        watch_time_ms: int | None = None,
        completion_rate: float | None = None,
        rewatch_count: int | None = None,
        skipped_at_ms: int | None = None,
        creator_id: str | None = None,
    ) -> None:
        try:
            interaction = DiscoveryInteraction(
                content_id=content_id,
                content_type=content_type,
                interaction_type=interaction_type,
                watch_time_ms=watch_time_ms,
                completion_rate=completion_rate,
                rewatch_count=rewatch_count,
                skipped_at_ms=skipped_at_ms,
                creator_id=creator_id,
            )
        except ValidationError as e:
            logger.warning("Dropped invalid discovery interaction for %s: %s", content_id, e)
            return
        self.record_interaction(interaction)

    def track_content_skip(
        self,
        content_id: str,
        content_type: ContentType | str | None,
        skipped_at_ms: int,
        creator_id: str | None = None,
    ) -> None:
        if skipped_at_ms < self._rules.thresholds.min_content_skip_ms:
            return
        self.track_discovery_interaction(
            content_id,
            InteractionType.SKIP,
            content_type=content_type,
            skipped_at_ms=skipped_at_ms,
            watch_time_ms=skipped_at_ms,
            completion_rate=0.0,
            creator_id=creator_id,
        )

    def track_content_complete(
        self,
        content_id: str,
        content_type: ContentType | str | None,
        watch_time_ms: int,
        creator_id: str | None = None,
    ) -> None:
        self.track_discovery_interaction(
            content_id,
            InteractionType.VIEW,
            content_type=content_type,
            watch_time_ms=watch_time_ms,
            completion_rate=1.0,
            creator_id=creator_id,
        )

    # --- Negative Feedback ---

    def mark_profile_not_interested(self, profile_id: str, reason: str | None = None) -> None:
        self._reporter.submit_not_interested_profile(profile_id, reason)

    def mark_content_not_interested(self, content_id: str, reason: str | None = None) -> None:
        self._reporter.submit_not_interested_content(content_id, reason)

    # --- Watch Sessions ---

    def create_watch_tracker(
        self,
        content_id: str,
        source: TrafficSource | str = TrafficSource.FEED,
        *,
        content_type: ContentType | str | None = None,
        creator_id: str | None = None,
        expected_duration_ms: int | None = None,
    ) -> WatchSessionTracker:
        return WatchSessionTracker(
            content_id,
            self,
            self._clock,
            source,
            content_type=content_type,
            creator_id=creator_id,
            expected_duration_ms=expected_duration_ms,
            skip_threshold_ms=self._rules.watch.skip_threshold_ms,
        )

    # --- Lifecycle ---

    def close(self) -> None:
        """Cancel cooldowns and the scheduled flush; pending impressions are dropped."""
        self._impressions.discard()
        self._gate.clear()

    async def aclose(self) -> None:
        """
        close(), then let in-flight submissions finish and release the transport.

        Schedulers without drain() and transports without aclose() are skipped.
        """
        self.close()
        drain = getattr(self._scheduler, "drain", None)
        if drain is not None:
            await drain()
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()


# --- Factory ---


def create_engine(
    rules_path: Path | None = None,
    *,
    transport: TransportPort | None = None,
    scheduler: SchedulerPort | None = None,
    clock: ClockPort | None = None,
) -> TelemetryEngine:
    """
    Create a TelemetryEngine with production adapters by default.

    Without a scheduler this must be called from inside the running event
    loop the engine will live on. Await aclose() on shutdown to release the
    HTTP client.
    """
    rules = load_rules(rules_path)
    if transport is None:
        transport = HttpxTransport(
            base_url=resolve_base_url(rules),
            timeout_seconds=rules.transport.timeout_seconds,
            auth_token=rules.transport.auth_token,
        )
    return TelemetryEngine(
        transport=transport,
        scheduler=scheduler or AsyncioScheduler(),
        clock=clock or SystemClock(),
        rules=rules,
    )
