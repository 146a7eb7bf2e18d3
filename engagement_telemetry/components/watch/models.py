"""
Watch component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from engagement_telemetry.components.reporter.models import (
    ContentType,
    InteractionType,
    TrafficSource,
)


class WatchState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    PAUSED = "paused"
    TERMINATED = "terminated"


@dataclass
class WatchSession:
    """
    One tracked observation of a single content item.

    accumulated_watch_ms is the sum of all closed segments. segment_start_ms
    is set only while a segment is open.
    """

    content_id: str
    traffic_source: TrafficSource
    content_type: ContentType = ContentType.REEL
    creator_id: str | None = None
    expected_duration_ms: int = 0  # 0 = unknown
    accumulated_watch_ms: int = 0
    segment_start_ms: int | None = None
    is_tracking: bool = False
    skip_already_reported: bool = False


@dataclass(frozen=True)
class WatchClassification:
    """Outcome of complete()/stop(), as reported upstream."""

    interaction_type: InteractionType
    watch_time_ms: int
    completion_rate: float
    rewatch_count: int | None = None
    skipped_at_ms: int | None = None
