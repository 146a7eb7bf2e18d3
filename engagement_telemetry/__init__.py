"""
Client-side engagement telemetry engine.

Observes how long a viewer watches or listens to a content item, classifies
the observation (VIEW, SKIP, REWATCH) and reports it to the remote collector
without duplicate or excessive network traffic.
"""

from .engine import TelemetryEngine, create_engine

__all__ = ["TelemetryEngine", "create_engine"]
