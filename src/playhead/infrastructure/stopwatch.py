"""
Elapsed-time sources.

The time controller never reads the wall clock directly. It asks an
elapsed-time source how long it has been running since the last reset.
"""
from datetime import timedelta
from typing import Protocol, runtime_checkable

from PyQt6.QtCore import QElapsedTimer

from playhead.domain.durations import to_duration


@runtime_checkable
class ElapsedTimeSource(Protocol):
    """
    Protocol for elapsed-time sources.

    Implement this to drive the time controller from another clock, e.g.
    an audio device position or a recorded clock for replay.
    """

    @property
    def elapsed(self) -> timedelta:
        """Time accumulated while running since the last reset."""
        ...

    @property
    def is_running(self) -> bool:
        ...

    def start(self) -> None:
        """Start or resume accumulating time."""
        ...

    def stop(self) -> None:
        """Stop accumulating time. Elapsed time is kept."""
        ...

    def reset(self) -> None:
        """Set elapsed time back to zero. Running state is kept."""
        ...


class Stopwatch:
    """
    Monotonic stopwatch on top of QElapsedTimer.

    QElapsedTimer only measures from its last start, so time elapsed in
    earlier start/stop runs is accumulated here.
    """

    def __init__(self):
        self._timer = QElapsedTimer()
        self._accumulated_ns = 0
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def elapsed(self) -> timedelta:
        ns = self._accumulated_ns
        if self._is_running:
            ns += self._timer.nsecsElapsed()
        return timedelta(microseconds=ns // 1000)

    def start(self) -> None:
        if not self._is_running:
            self._timer.start()
            self._is_running = True

    def stop(self) -> None:
        if self._is_running:
            self._accumulated_ns += self._timer.nsecsElapsed()
            self._timer.invalidate()
            self._is_running = False

    def reset(self) -> None:
        self._accumulated_ns = 0
        if self._is_running:
            self._timer.restart()


class ManualStopwatch:
    """
    Programmable elapsed-time source.

    Time moves only through advance() (and only while running) or
    set_elapsed(). Used for deterministic tests and externally clocked hosts.
    """

    def __init__(self, elapsed: timedelta = timedelta(0)):
        self._elapsed = to_duration(elapsed)
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def elapsed(self) -> timedelta:
        return self._elapsed

    def start(self) -> None:
        self._is_running = True

    def stop(self) -> None:
        self._is_running = False

    def reset(self) -> None:
        self._elapsed = timedelta(0)

    def advance(self, delta) -> None:
        """Move time forward by delta (timedelta or seconds) while running."""
        if self._is_running:
            self._elapsed += to_duration(delta)

    def set_elapsed(self, elapsed) -> None:
        self._elapsed = to_duration(elapsed)
