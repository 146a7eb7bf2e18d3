"""
Watch component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from engagement_telemetry.components.reporter.models import (
    DiscoveryInteraction,
    TrafficSource,
)


class InteractionSinkPort(Protocol):
    """Where a finished watch session sends its events."""

    def track_watch_event(
        self,
        post_id: str,
        watch_time_ms: int,
        completed: bool,
        source: TrafficSource | str = TrafficSource.FEED,
    ) -> None:
        """Raw watch duration (short durations are dropped downstream)."""
        ...

    def record_interaction(self, interaction: DiscoveryInteraction) -> None:
        """Classified interaction; deduplicated and stamped downstream."""
        ...
