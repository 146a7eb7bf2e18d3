from .clock import SystemClock
from .http_transport import HttpxTransport
from .manual import ManualClock, ManualScheduler
from .recording_transport import RecordedRequest, RecordingTransport
from .scheduler import AsyncioScheduler

__all__ = [
    "SystemClock",
    "AsyncioScheduler",
    "HttpxTransport",
    "ManualClock",
    "ManualScheduler",
    "RecordingTransport",
    "RecordedRequest",
]
