from .loader import API_URL_ENV, load_rules, resolve_base_url
from .models import (
    CooldownRules,
    EndpointRules,
    ImpressionRules,
    TelemetryRules,
    ThresholdRules,
    TransportRules,
    WatchRules,
)

__all__ = [
    "API_URL_ENV",
    "load_rules",
    "resolve_base_url",
    "TelemetryRules",
    "TransportRules",
    "CooldownRules",
    "ImpressionRules",
    "WatchRules",
    "ThresholdRules",
    "EndpointRules",
]
