"""
Watch component - per-item watch session state machine.

States: IDLE -> TRACKING <-> PAUSED -> TERMINATED

Invariants:
- At most one open segment per session
- Accumulated time only grows, and only when a segment closes
- complete() never classifies SKIP; stop() is the only path to SKIP
- A session with zero accumulated time reports nothing
- Once TERMINATED every operation is a no-op
"""

from __future__ import annotations

import logging

from engagement_telemetry.components.reporter.models import (
    ContentType,
    DiscoveryInteraction,
    InteractionType,
    TrafficSource,
    map_source,
    normalize_content_type,
)
from engagement_telemetry.core.ports.clock import ClockPort

from .models import WatchClassification, WatchSession, WatchState
from .ports import InteractionSinkPort

logger = logging.getLogger(__name__)

DEFAULT_SKIP_THRESHOLD_MS = 3000


# --- Pure Functions ---


def compute_completion_rate(watch_ms: int, expected_duration_ms: int, unknown_rate: float) -> float:
    """
    Fraction of the expected duration watched, capped at 1.

    Args:
        watch_ms: Accumulated watch time
        expected_duration_ms: Content length (0 when unknown)
        unknown_rate: Rate to report when the length is unknown
    """
    if expected_duration_ms <= 0:
        return unknown_rate
    return min(1.0, watch_ms / expected_duration_ms)


def compute_rewatch_count(watch_ms: int, expected_duration_ms: int) -> int:
    """Full passes beyond the first."""
    if expected_duration_ms <= 0:
        return 0
    return max(0, watch_ms // expected_duration_ms - 1)


def classify_complete(session: WatchSession) -> WatchClassification:
    """Classify a session that played to its natural end."""
    watch_ms = session.accumulated_watch_ms
    expected = session.expected_duration_ms
    rewatch_count = compute_rewatch_count(watch_ms, expected)

    if rewatch_count > 0:
        return WatchClassification(
            interaction_type=InteractionType.REWATCH,
            watch_time_ms=watch_ms,
            completion_rate=1.0,
            rewatch_count=rewatch_count,
        )

    return WatchClassification(
        interaction_type=InteractionType.VIEW,
        watch_time_ms=watch_ms,
        completion_rate=compute_completion_rate(watch_ms, expected, unknown_rate=1.0),
    )


def classify_stop(
    session: WatchSession, skip_threshold_ms: int = DEFAULT_SKIP_THRESHOLD_MS
) -> WatchClassification:
    """
    Classify a session the viewer left before it ended.

    First match wins: SKIP (short and not yet reported), REWATCH, VIEW.
    """
    watch_ms = session.accumulated_watch_ms
    expected = session.expected_duration_ms
    completion_rate = compute_completion_rate(watch_ms, expected, unknown_rate=0.0)
    rewatch_count = compute_rewatch_count(watch_ms, expected)

    if watch_ms < skip_threshold_ms and not session.skip_already_reported:
        return WatchClassification(
            interaction_type=InteractionType.SKIP,
            watch_time_ms=watch_ms,
            completion_rate=completion_rate,
            skipped_at_ms=watch_ms,
        )

    if rewatch_count > 0:
        # Position within the current pass; exact multiples report 0.0.
        # TODO: confirm with product whether exact multiples should report 1.0.
        return WatchClassification(
            interaction_type=InteractionType.REWATCH,
            watch_time_ms=watch_ms,
            completion_rate=min(1.0, (watch_ms % expected) / expected),
            rewatch_count=rewatch_count,
        )

    return WatchClassification(
        interaction_type=InteractionType.VIEW,
        watch_time_ms=watch_ms,
        completion_rate=completion_rate,
    )


# --- Tracker ---


class WatchSessionTracker:
    """
    Tracks one content item from first start() to complete()/stop().

    Callers must call stop() on teardown; a discarded tracker never reports.
    """

    def __init__(
        self,
        content_id: str,
        sink: InteractionSinkPort,
        clock: ClockPort,
        source: TrafficSource | str = TrafficSource.FEED,
        *,
        content_type: ContentType | str | None = None,
        creator_id: str | None = None,
        expected_duration_ms: int | None = None,
        skip_threshold_ms: int = DEFAULT_SKIP_THRESHOLD_MS,
    ) -> None:
        self._sink = sink
        self._clock = clock
        self._skip_threshold_ms = skip_threshold_ms
        self._state = WatchState.IDLE
        self._session = WatchSession(
            content_id=content_id,
            traffic_source=map_source(source),
            content_type=normalize_content_type(content_type),
            creator_id=creator_id,
            expected_duration_ms=max(0, expected_duration_ms or 0),
        )

    @property
    def content_id(self) -> str:
        return self._session.content_id

    @property
    def session(self) -> WatchSession:
        return self._session

    @property
    def state(self) -> WatchState:
        return self._state

    # --- Segment Control ---

    def start(self) -> None:
        if self._state in (WatchState.TRACKING, WatchState.TERMINATED):
            return
        self._session.segment_start_ms = self._clock.now_ms()
        self._session.is_tracking = True
        self._state = WatchState.TRACKING

    def pause(self) -> None:
        session = self._session
        if self._state is not WatchState.TRACKING or session.segment_start_ms is None:
            return
        elapsed = max(0, self._clock.now_ms() - session.segment_start_ms)
        session.accumulated_watch_ms += elapsed
        session.segment_start_ms = None
        session.is_tracking = False
        self._state = WatchState.PAUSED

    # --- Terminal Operations ---

    def complete(self) -> WatchClassification | None:
        """
        Natural end of content. Never classifies SKIP.

        Returns:
            The reported classification, or None if nothing was reported
        """
        if self._state is WatchState.TERMINATED:
            return None
        self.pause()
        self._state = WatchState.TERMINATED

        session = self._session
        if session.accumulated_watch_ms <= 0:
            return None

        self._sink.track_watch_event(
            session.content_id, session.accumulated_watch_ms, True, session.traffic_source
        )
        classification = classify_complete(session)
        self._report(classification)
        return classification

    def stop(self) -> WatchClassification | None:
        """
        Viewer left before the end (scrolled away, screen closed).

        Returns:
            The reported classification, or None if nothing was reported
        """
        if self._state is WatchState.TERMINATED:
            return None
        self.pause()
        self._state = WatchState.TERMINATED

        session = self._session
        if session.accumulated_watch_ms <= 0:
            return None

        self._sink.track_watch_event(
            session.content_id, session.accumulated_watch_ms, False, session.traffic_source
        )
        classification = classify_stop(session, self._skip_threshold_ms)
        if classification.interaction_type is InteractionType.SKIP:
            session.skip_already_reported = True
        self._report(classification)
        return classification

    def _report(self, classification: WatchClassification) -> None:
        session = self._session
        logger.debug(
            "Watch session %s classified %s (%dms)",
            session.content_id,
            classification.interaction_type.value,
            classification.watch_time_ms,
        )
        self._sink.record_interaction(
            DiscoveryInteraction(
                content_id=session.content_id,
                content_type=session.content_type,
                interaction_type=classification.interaction_type,
                watch_time_ms=classification.watch_time_ms,
                completion_rate=classification.completion_rate,
                rewatch_count=classification.rewatch_count,
                skipped_at_ms=classification.skipped_at_ms,
                creator_id=session.creator_id,
            )
        )

    # --- Reads ---

    def get_watch_time(self) -> int:
        session = self._session
        if session.is_tracking and session.segment_start_ms is not None:
            return session.accumulated_watch_ms + max(0, self._clock.now_ms() - session.segment_start_ms)
        return session.accumulated_watch_ms

    def get_rewatch_count(self) -> int:
        return compute_rewatch_count(
            self._session.accumulated_watch_ms, self._session.expected_duration_ms
        )
