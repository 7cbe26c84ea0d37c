"""
Time Stamp

Immutable payload delivered to time stamp observers.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from .durations import in_microseconds


@dataclass(frozen=True)
class TimeStamp:
    """
    A time stamp delivered by the time controller.

    Attributes:
        time: Playhead position at the moment of delivery
    """
    time: timedelta

    def __hash__(self) -> int:
        return hash(self.time)

    def __str__(self) -> str:
        return str(self.microseconds)

    @property
    def microseconds(self) -> int:
        """Playhead position in whole microseconds."""
        return in_microseconds(self.time)

    @property
    def seconds(self) -> float:
        return self.time.total_seconds()


# Callback called with each delivered time stamp
OnTimeStamp = Callable[[TimeStamp], None]
