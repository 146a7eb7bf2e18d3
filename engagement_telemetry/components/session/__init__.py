"""
Session component - process-lifetime correlation identifier.
"""

from .component import SessionIdentityProvider, generate_session_id

__all__ = ["SessionIdentityProvider", "generate_session_id"]
