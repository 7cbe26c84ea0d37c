"""
Domain types: transport states, time stamps and duration helpers.
"""
from .transport_state import TransportState
from .time_stamp import TimeStamp, OnTimeStamp
from .durations import to_duration, frame_duration_for, TimeLike

__all__ = [
    'TransportState',
    'TimeStamp',
    'OnTimeStamp',
    'to_duration',
    'frame_duration_for',
    'TimeLike',
]
