from typing import Protocol


class ClockPort(Protocol):
    def now_ms(self) -> int:
        """Return a monotonic timestamp in milliseconds."""
        ...

    def epoch_ms(self) -> int:
        """Return wall-clock time as milliseconds since the Unix epoch."""
        ...
