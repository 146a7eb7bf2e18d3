"""
Impressions component - coalesces visibility bursts into one flush.
"""

from .component import DEFAULT_FLUSH_DELAY_MS, ImpressionBatcher
from .ports import PostViewTrackerPort

__all__ = ["ImpressionBatcher", "DEFAULT_FLUSH_DELAY_MS", "PostViewTrackerPort"]
