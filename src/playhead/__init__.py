"""
playhead

Transport/time controller: one authoritative "current time" for media
players and timelines, driven by play/pause/stop, jumps and animations.
"""
from playhead.domain import TransportState, TimeStamp, OnTimeStamp, to_duration
from playhead.application import (
    TimeController,
    TimeControllerSettings,
    StateStream,
    example_time_controller,
    DEFAULT_FRAME_RATE,
    DEFAULT_ANIMATION_DURATION,
)
from playhead.infrastructure import (
    PeriodicTimer,
    ManualPeriodicTimer,
    AsyncioPeriodicTimer,
    QtPeriodicTimer,
    ElapsedTimeSource,
    Stopwatch,
    ManualStopwatch,
)

__version__ = "0.1.0"

__all__ = [
    'TransportState',
    'TimeStamp',
    'OnTimeStamp',
    'to_duration',
    'TimeController',
    'TimeControllerSettings',
    'StateStream',
    'example_time_controller',
    'DEFAULT_FRAME_RATE',
    'DEFAULT_ANIMATION_DURATION',
    'PeriodicTimer',
    'ManualPeriodicTimer',
    'AsyncioPeriodicTimer',
    'QtPeriodicTimer',
    'ElapsedTimeSource',
    'Stopwatch',
    'ManualStopwatch',
]
