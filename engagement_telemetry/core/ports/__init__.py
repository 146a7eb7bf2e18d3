"""
Port interfaces shared by the telemetry components.

Ports:
- ClockPort: monotonic millisecond clock
- SchedulerPort: delayed callbacks and fire-and-forget tasks
- TransportPort: outbound JSON submission
"""

from .clock import ClockPort
from .scheduler import SchedulerPort, TimerHandle
from .transport import SubmissionError, TransportPort

__all__ = [
    "ClockPort",
    "SchedulerPort",
    "TimerHandle",
    "TransportPort",
    "SubmissionError",
]
