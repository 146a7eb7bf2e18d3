"""
Watch component - watch session tracking and classification.
"""

from .component import (
    DEFAULT_SKIP_THRESHOLD_MS,
    WatchSessionTracker,
    classify_complete,
    classify_stop,
    compute_completion_rate,
    compute_rewatch_count,
)
from .models import WatchClassification, WatchSession, WatchState
from .ports import InteractionSinkPort

__all__ = [
    "WatchSessionTracker",
    "DEFAULT_SKIP_THRESHOLD_MS",
    "classify_complete",
    "classify_stop",
    "compute_completion_rate",
    "compute_rewatch_count",
    "WatchClassification",
    "WatchSession",
    "WatchState",
    "InteractionSinkPort",
]
