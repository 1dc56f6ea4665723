"""Clock implementations."""

from datetime import datetime

from src.activation.domain.models import ClockReading
from src.activation.domain.protocols import Clock


class SystemClock(Clock):
    """Local wall clock."""

    def now(self) -> ClockReading:
        return ClockReading.from_datetime(datetime.now())


class FixedClock(Clock):
    """Clock frozen at a given instant, for tests and replays."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def set(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> ClockReading:
        return ClockReading.from_datetime(self.instant)
