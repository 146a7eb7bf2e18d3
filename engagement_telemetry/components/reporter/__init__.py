"""
Reporter component - outbound telemetry events.
"""

from .component import InteractionReporter
from .models import (
    ContentType,
    DiscoveryInteraction,
    DiscoveryInteractionEvent,
    InteractionType,
    NotInterestedEvent,
    PostViewEvent,
    ProfileViewEvent,
    TelemetryEvent,
    TrafficSource,
    WatchDurationEvent,
    map_source,
    normalize_content_type,
)
from .ports import SessionIdPort

__all__ = [
    "InteractionReporter",
    "TrafficSource",
    "ContentType",
    "InteractionType",
    "map_source",
    "normalize_content_type",
    "TelemetryEvent",
    "PostViewEvent",
    "ProfileViewEvent",
    "WatchDurationEvent",
    "DiscoveryInteraction",
    "DiscoveryInteractionEvent",
    "NotInterestedEvent",
    "SessionIdPort",
]
