"""
Dedupe component - keyed cooldown gate.
"""

from .component import DedupeGate, interaction_key, post_view_key, profile_view_key

__all__ = [
    "DedupeGate",
    "interaction_key",
    "post_view_key",
    "profile_view_key",
]
