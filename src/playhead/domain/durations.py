"""
Duration helpers.

The playhead and every derived quantity are datetime.timedelta values,
which carry whole microseconds. Public APIs also accept plain seconds.
"""
from datetime import timedelta
from typing import Union

MicroSeconds = float
TimeLike = Union[timedelta, int, float]

ZERO = timedelta(0)
ONE_MICROSECOND = timedelta(microseconds=1)


def to_duration(value: TimeLike) -> timedelta:
    """
    Normalize a time argument to a timedelta.

    Args:
        value: timedelta, or a number of seconds

    Returns:
        The value as timedelta (seconds rounded to the nearest microsecond)

    Raises:
        TypeError: If value is neither a timedelta nor a number
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected timedelta or seconds, got {type(value).__name__}")
    return timedelta(seconds=value)


def in_microseconds(value: timedelta) -> int:
    """Whole microseconds in value."""
    return value // ONE_MICROSECOND


def from_microseconds(value: MicroSeconds) -> timedelta:
    """Build a timedelta from (possibly fractional) microseconds, truncating."""
    return timedelta(microseconds=int(value))


def frame_duration_for(frame_rate: float) -> timedelta:
    """
    Duration between two frames at frame_rate.

    Raises:
        ValueError: If frame_rate is not positive
    """
    if frame_rate <= 0:
        raise ValueError(f"frame_rate must be positive, got {frame_rate}")
    return timedelta(microseconds=int((1.0 / frame_rate) * 1000 * 1000))
