"""
Impressions component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from engagement_telemetry.components.reporter.models import TrafficSource


class PostViewTrackerPort(Protocol):
    """Per-item view path (deduplicated) that flushed impressions go through."""

    def track_post_view(self, post_id: str, source: TrafficSource | str = TrafficSource.FEED) -> None:
        ...
