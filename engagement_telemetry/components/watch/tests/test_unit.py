"""
Unit tests for the Watch component.
"""

from __future__ import annotations

from typing import Any

import pytest

from engagement_telemetry.adapters.manual import ManualClock
from engagement_telemetry.components.reporter.models import (
    ContentType,
    DiscoveryInteraction,
    InteractionType,
    TrafficSource,
)

from ..component import (
    WatchSessionTracker,
    classify_complete,
    classify_stop,
    compute_completion_rate,
    compute_rewatch_count,
)
from ..models import WatchSession, WatchState

# --- Test Fixtures ---


class FakeSink:
    """Records what a tracker reports."""

    def __init__(self) -> None:
        self.watch_events: list[dict[str, Any]] = []
        self.interactions: list[DiscoveryInteraction] = []

    def track_watch_event(
        self,
        post_id: str,
        watch_time_ms: int,
        completed: bool,
        source: TrafficSource | str = TrafficSource.FEED,
    ) -> None:
        self.watch_events.append(
            {
                "post_id": post_id,
                "watch_time_ms": watch_time_ms,
                "completed": completed,
                "source": source,
            }
        )

    def record_interaction(self, interaction: DiscoveryInteraction) -> None:
        self.interactions.append(interaction)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


def make_tracker(
    sink: FakeSink, clock: ManualClock, expected_duration_ms: int | None = None, **kwargs: Any
) -> WatchSessionTracker:
    return WatchSessionTracker(
        "post-1", sink, clock, expected_duration_ms=expected_duration_ms, **kwargs
    )


def watch(tracker: WatchSessionTracker, clock: ManualClock, ms: int) -> None:
    tracker.start()
    clock.advance(ms)
    tracker.pause()


# --- Pure Functions ---


class TestComputeCompletionRate:
    def test_fraction(self) -> None:
        assert compute_completion_rate(200, 500, unknown_rate=1.0) == pytest.approx(0.4)

    def test_capped_at_one(self) -> None:
        assert compute_completion_rate(2500, 1000, unknown_rate=1.0) == 1.0

    def test_unknown_duration(self) -> None:
        assert compute_completion_rate(2500, 0, unknown_rate=1.0) == 1.0
        assert compute_completion_rate(2500, 0, unknown_rate=0.0) == 0.0


class TestComputeRewatchCount:
    @pytest.mark.parametrize(
        "watch_ms,expected_ms,count",
        [
            (0, 1000, 0),
            (999, 1000, 0),
            (1999, 1000, 0),
            (2000, 1000, 1),
            (2500, 1000, 1),
            (3000, 1000, 2),
            (5000, 0, 0),
        ],
    )
    def test_counts(self, watch_ms: int, expected_ms: int, count: int) -> None:
        assert compute_rewatch_count(watch_ms, expected_ms) == count


class TestClassify:
    def test_complete_short_content_is_view(self) -> None:
        session = WatchSession("c", TrafficSource.FEED, expected_duration_ms=500, accumulated_watch_ms=200)
        result = classify_complete(session)
        assert result.interaction_type is InteractionType.VIEW
        assert result.completion_rate == pytest.approx(0.4)

    def test_stop_exact_multiple_reports_zero_rate(self) -> None:
        session = WatchSession("c", TrafficSource.FEED, expected_duration_ms=4000, accumulated_watch_ms=8000)
        result = classify_stop(session)
        assert result.interaction_type is InteractionType.REWATCH
        assert result.rewatch_count == 1
        assert result.completion_rate == 0.0

    def test_stop_skip_guard(self) -> None:
        session = WatchSession(
            "c",
            TrafficSource.FEED,
            expected_duration_ms=10000,
            accumulated_watch_ms=1000,
            skip_already_reported=True,
        )
        assert classify_stop(session).interaction_type is InteractionType.VIEW

    def test_stop_custom_threshold(self) -> None:
        session = WatchSession("c", TrafficSource.FEED, accumulated_watch_ms=4000)
        assert classify_stop(session, skip_threshold_ms=5000).interaction_type is InteractionType.SKIP


# --- State Machine ---


class TestStateMachine:
    def test_initial_state(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        assert tracker.state is WatchState.IDLE
        assert tracker.get_watch_time() == 0

    def test_start_pause_transitions(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        tracker.start()
        assert tracker.state is WatchState.TRACKING
        tracker.pause()
        assert tracker.state is WatchState.PAUSED
        tracker.start()
        assert tracker.state is WatchState.TRACKING

    def test_start_while_tracking_keeps_segment(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        tracker.start()
        clock.advance(700)
        tracker.start()
        clock.advance(300)
        tracker.pause()
        assert tracker.get_watch_time() == 1000

    def test_pause_when_not_tracking_is_noop(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        tracker.pause()
        assert tracker.state is WatchState.IDLE
        watch(tracker, clock, 400)
        clock.advance(1000)
        tracker.pause()
        assert tracker.get_watch_time() == 400

    def test_accumulates_across_pause_resume(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        watch(tracker, clock, 1000)
        clock.advance(5000)  # paused time is not counted
        watch(tracker, clock, 500)
        assert tracker.get_watch_time() == 1500

    def test_watch_time_includes_open_segment(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        watch(tracker, clock, 1000)
        tracker.start()
        clock.advance(250)
        assert tracker.get_watch_time() == 1250
        assert tracker.session.accumulated_watch_ms == 1000
        assert tracker.state is WatchState.TRACKING

    def test_terminated_ignores_everything(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=10000)
        watch(tracker, clock, 5000)
        tracker.stop()
        assert tracker.state is WatchState.TERMINATED

        tracker.start()
        clock.advance(1000)
        tracker.pause()
        assert tracker.complete() is None
        assert tracker.stop() is None
        assert tracker.get_watch_time() == 5000
        assert len(sink.watch_events) == 1
        assert len(sink.interactions) == 1

    def test_get_rewatch_count(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=1000)
        watch(tracker, clock, 3200)
        assert tracker.get_rewatch_count() == 2
        assert len(sink.interactions) == 0


# --- stop() ---


class TestStop:
    def test_short_watch_is_skip(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=10000)
        tracker.start()
        clock.advance(1000)
        tracker.stop()

        assert sink.watch_events == [
            {"post_id": "post-1", "watch_time_ms": 1000, "completed": False, "source": TrafficSource.FEED}
        ]
        assert len(sink.interactions) == 1
        skip = sink.interactions[0]
        assert skip.interaction_type is InteractionType.SKIP
        assert skip.skipped_at_ms == 1000
        assert skip.watch_time_ms == 1000
        assert skip.completion_rate == pytest.approx(0.1)
        assert tracker.session.skip_already_reported is True

    def test_skip_without_duration_has_zero_rate(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        watch(tracker, clock, 800)
        tracker.stop()
        assert sink.interactions[0].interaction_type is InteractionType.SKIP
        assert sink.interactions[0].completion_rate == 0.0

    def test_rewatch(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=1000)
        watch(tracker, clock, 2000)
        watch(tracker, clock, 1500)
        tracker.stop()

        assert len(sink.interactions) == 1
        rewatch = sink.interactions[0]
        assert rewatch.interaction_type is InteractionType.REWATCH
        assert rewatch.rewatch_count == 2
        assert rewatch.completion_rate == pytest.approx(0.5)
        assert rewatch.watch_time_ms == 3500

    def test_skip_takes_precedence_over_rewatch(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=1000)
        watch(tracker, clock, 1500)
        watch(tracker, clock, 1000)
        assert tracker.get_rewatch_count() == 1
        tracker.stop()
        assert sink.interactions[0].interaction_type is InteractionType.SKIP
        assert sink.interactions[0].skipped_at_ms == 2500

    def test_long_watch_is_view(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=10000, creator_id="u7")
        watch(tracker, clock, 6000)
        tracker.stop()

        view = sink.interactions[0]
        assert view.interaction_type is InteractionType.VIEW
        assert view.completion_rate == pytest.approx(0.6)
        assert view.rewatch_count is None
        assert view.skipped_at_ms is None
        assert view.creator_id == "u7"

    def test_stop_while_tracking_closes_segment(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=10000)
        tracker.start()
        clock.advance(4000)
        tracker.stop()
        assert sink.watch_events[0]["watch_time_ms"] == 4000
        assert tracker.session.is_tracking is False

    def test_zero_watch_emits_nothing(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=10000)
        assert tracker.stop() is None
        assert sink.watch_events == []
        assert sink.interactions == []
        assert tracker.state is WatchState.TERMINATED

    def test_source_and_content_type_carried(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, source="SEARCH", content_type="VOICE")
        watch(tracker, clock, 5000)
        tracker.stop()
        assert sink.watch_events[0]["source"] is TrafficSource.SEARCH
        assert sink.interactions[0].content_type is ContentType.VOICE

    def test_invalid_source_becomes_other(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, source="WIDGET")
        assert tracker.session.traffic_source is TrafficSource.OTHER


# --- complete() ---


class TestComplete:
    def test_short_content_completion_is_view(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=500)
        tracker.start()
        clock.advance(200)
        tracker.complete()

        assert sink.watch_events[0]["completed"] is True
        view = sink.interactions[0]
        assert view.interaction_type is InteractionType.VIEW
        assert view.completion_rate == pytest.approx(0.4)

    def test_unknown_duration_completion_rate_one(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock)
        watch(tracker, clock, 1200)
        tracker.complete()
        assert sink.interactions[0].completion_rate == 1.0

    def test_rewatch_across_two_cycles(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=1000)
        watch(tracker, clock, 1500)
        watch(tracker, clock, 1000)
        tracker.complete()

        rewatch = sink.interactions[0]
        assert rewatch.interaction_type is InteractionType.REWATCH
        assert rewatch.rewatch_count == 1
        assert rewatch.watch_time_ms == 2500

    def test_rewatch_on_complete(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=1000)
        watch(tracker, clock, 3000)
        tracker.complete()

        rewatch = sink.interactions[0]
        assert rewatch.interaction_type is InteractionType.REWATCH
        assert rewatch.completion_rate == 1.0
        assert rewatch.rewatch_count == 2

    def test_zero_watch_emits_nothing(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=500)
        tracker.start()
        tracker.complete()
        assert sink.watch_events == []
        assert sink.interactions == []

    def test_exactly_one_interaction(self, sink: FakeSink, clock: ManualClock) -> None:
        tracker = make_tracker(sink, clock, expected_duration_ms=2000)
        watch(tracker, clock, 2000)
        tracker.complete()
        assert len(sink.interactions) == 1
        assert len(sink.watch_events) == 1
