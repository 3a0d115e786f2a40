"""
Count-up clock for "time since launch preparation started".
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

# Launch preparation started 2025-09-20 07:30 IST
DEFAULT_START = datetime(2025, 9, 20, 7, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))

SECONDS_PER_DAY = 24 * 60 * 60
SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class Elapsed:
    days: int
    hours: int
    minutes: int
    seconds: int

    @classmethod
    def from_seconds(cls, total_seconds: int) -> "Elapsed":
        total_seconds = max(0, int(total_seconds))
        return cls(
            days=total_seconds // SECONDS_PER_DAY,
            hours=(total_seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR,
            minutes=(total_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
            seconds=total_seconds % SECONDS_PER_MINUTE,
        )

    def format(self) -> str:
        return (f"{self.days} days | {self.hours} hours | "
                f"{self.minutes} minutes | {self.seconds} seconds")


class CountdownClock:
    """
    Elapsed days/hours/minutes/seconds since a fixed start instant.

    Spans before the start clamp to zero.
    """

    def __init__(self, start: Optional[datetime] = None):
        self.start = start if start is not None else DEFAULT_START
        if self.start.tzinfo is None:
            raise ValueError("Start instant must be timezone-aware")

    @staticmethod
    def elapsed_since(start: datetime, now: datetime) -> Elapsed:
        total = (now - start).total_seconds()
        return Elapsed.from_seconds(int(total // 1))

    def elapsed(self, now: Optional[datetime] = None) -> Elapsed:
        if now is None:
            now = datetime.now(timezone.utc)
        return self.elapsed_since(self.start, now)
