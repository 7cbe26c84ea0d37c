"""
Host-specific collaborators: periodic timers and elapsed-time sources.
"""
from .periodic_timer import (
    PeriodicTimer,
    ManualPeriodicTimer,
    AsyncioPeriodicTimer,
    QtPeriodicTimer,
)
from .stopwatch import ElapsedTimeSource, Stopwatch, ManualStopwatch

__all__ = [
    'PeriodicTimer',
    'ManualPeriodicTimer',
    'AsyncioPeriodicTimer',
    'QtPeriodicTimer',
    'ElapsedTimeSource',
    'Stopwatch',
    'ManualStopwatch',
]
