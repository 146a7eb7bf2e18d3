"""
Impressions component - batches "became visible" events.

Key behaviors:
- enqueue() unions ids into a pending set; the first source recorded for
  an id is kept until the next flush
- One flush is scheduled per batch, flush_delay_ms after the first enqueue
- A flush submits every pending id once through the per-item view path
  and empties the set
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from engagement_telemetry.components.reporter.models import TrafficSource, map_source
from engagement_telemetry.core.ports.scheduler import SchedulerPort, TimerHandle

from .ports import PostViewTrackerPort

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_DELAY_MS = 500


class ImpressionBatcher:
    def __init__(
        self,
        scheduler: SchedulerPort,
        views: PostViewTrackerPort,
        flush_delay_ms: int = DEFAULT_FLUSH_DELAY_MS,
    ) -> None:
        self._scheduler = scheduler
        self._views = views
        self._flush_delay_ms = flush_delay_ms
        self._pending: dict[str, TrafficSource] = {}
        self._flush_timer: TimerHandle | None = None

    def enqueue(
        self, content_ids: Iterable[str], source: TrafficSource | str = TrafficSource.FEED
    ) -> None:
        normalized = map_source(source)
        for content_id in content_ids:
            self._pending.setdefault(content_id, normalized)

        if self._pending and self._flush_timer is None:
            self._flush_timer = self._scheduler.call_later(self._flush_delay_ms, self._on_timer)

    def _on_timer(self) -> None:
        self._flush_timer = None
        self._flush_pending()

    def flush(self) -> int:
        """Flush immediately, cancelling the scheduled flush. Returns ids flushed."""
        if self._flush_timer is not None:
            self._flush_timer.cancel()
            self._flush_timer = None
        return self._flush_pending()

    def _flush_pending(self) -> int:
        events = list(self._pending.items())
        self._pending.clear()

        for content_id, source in events:
            self._views.track_post_view(content_id, source)

        if events:
            logger.debug("Flushed %d impressions", len(events))
        return len(events)

    def discard(self) -> None:
        """Drop pending ids without reporting them."""
        if self._flush_timer is not None:
            self._flush_timer.cancel()
            self._flush_timer = None
        self._pending.clear()

    @property
    def pending_ids(self) -> tuple[str, ...]:
        return tuple(self._pending)

    @property
    def flush_scheduled(self) -> bool:
        return self._flush_timer is not None
