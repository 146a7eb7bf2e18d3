"""
Reporter component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class SessionIdPort(Protocol):
    """Source of the correlation id stamped on discovery interactions."""

    def get(self) -> str:
        ...
