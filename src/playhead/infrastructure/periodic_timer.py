"""
Periodic Timers

Timers that can be started, stopped and started again. While running they
notify their subscribers at a fixed interval.

Variants:
- ManualPeriodicTimer: fires only when fire() is called (tests, externally
  clocked hosts such as a render-frame callback)
- AsyncioPeriodicTimer: schedules itself on an asyncio event loop
- QtPeriodicTimer: driven by a QTimer, for hosts running a Qt event loop

Contract shared by all variants: start() and stop() are idempotent, stop()
is safe when not started, no firing happens after stop() until the next
start(), and dispose() permanently prevents further firings.
"""
import asyncio
from datetime import timedelta
from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, QTimer, Qt

from playhead.utils.message import Log

TimerHandler = Callable[[], None]


def _validate_interval(interval: timedelta) -> timedelta:
    if not isinstance(interval, timedelta):
        raise TypeError(f"interval must be a timedelta, got {type(interval).__name__}")
    if interval <= timedelta(0):
        raise ValueError(f"interval must be positive, got {interval}")
    return interval


class PeriodicTimer:
    """
    Base class for periodic timers.

    Subscribers are plain callables taking no arguments. The time controller
    is normally the only subscriber.
    """

    def __init__(self, on_timer_fired: Optional[TimerHandler] = None):
        self._handlers: List[TimerHandler] = []
        self._is_running = False
        self._is_disposed = False
        if on_timer_fired is not None:
            self.subscribe(on_timer_fired)

    @property
    def is_running(self) -> bool:
        """Returns True if timer is running"""
        return self._is_running

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    def subscribe(self, handler: TimerHandler) -> None:
        """
        Subscribe to timer firings.

        Args:
            handler: Function called each time the timer fires
        """
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: TimerHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def start(self) -> None:
        """Start the timer. Subclasses must call super().start()."""
        self._is_running = True

    def stop(self) -> None:
        """Stop the timer. Subclasses must call super().stop()."""
        self._is_running = False

    def dispose(self) -> None:
        """Stop the timer for good and drop all subscribers."""
        self.stop()
        self._is_disposed = True
        self._handlers.clear()

    def _can_start(self) -> bool:
        if self._is_disposed:
            Log.warning(f"{type(self).__name__}: start() called after dispose(), ignoring")
            return False
        return True

    def _notify(self) -> None:
        for handler in list(self._handlers):
            handler()


class ManualPeriodicTimer(PeriodicTimer):
    """A periodic timer that needs to be triggered from the outside."""

    def start(self) -> None:
        if self._can_start():
            super().start()

    def fire(self) -> None:
        """Call this method regularly to make the timer fire"""
        if self.is_running:
            self._notify()


class AsyncioPeriodicTimer(PeriodicTimer):
    """
    Periodic timer scheduled on an asyncio event loop.

    Firings are scheduled against the start time (start + n * interval), so
    slow subscribers do not accumulate drift. When the loop falls behind by
    more than one interval, missed firings are skipped rather than replayed.

    start() must run inside a running event loop unless a loop was passed in.
    """

    def __init__(
        self,
        interval: timedelta,
        on_timer_fired: Optional[TimerHandler] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        super().__init__(on_timer_fired)
        self.interval = _validate_interval(interval)
        self._interval_seconds = interval.total_seconds()
        self._loop = loop
        self._active_loop: Optional[asyncio.AbstractEventLoop] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._started_at = 0.0
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if not self._can_start():
            return
        if self._handle is None:
            self._active_loop = self._loop or asyncio.get_running_loop()
            self._started_at = self._active_loop.time()
            self._ticks = 0
            self._schedule_next()
        super().start()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        super().stop()

    def _schedule_next(self) -> None:
        now = self._active_loop.time()
        self._ticks += 1
        when = self._started_at + self._interval_seconds * self._ticks
        if when < now:
            self._ticks = int((now - self._started_at) / self._interval_seconds) + 1
            when = self._started_at + self._interval_seconds * self._ticks
        self._handle = self._active_loop.call_at(when, self._on_fire)

    def _on_fire(self) -> None:
        # Schedule first so a subscriber calling stop() cancels the next firing
        self._schedule_next()
        self._notify()


class QtPeriodicTimer(PeriodicTimer):
    """
    Periodic timer backed by a QTimer.

    Requires a running Qt event loop (QCoreApplication) to fire. The
    interval is rounded to whole milliseconds, minimum 1 ms.
    """

    def __init__(
        self,
        interval: timedelta,
        on_timer_fired: Optional[TimerHandler] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(on_timer_fired)
        self.interval = _validate_interval(interval)
        self._timer = QTimer(parent)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(max(1, round(interval.total_seconds() * 1000)))
        self._timer.timeout.connect(self._notify)

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if not self._can_start():
            return
        if not self._timer.isActive():
            self._timer.start()
        super().start()

    def stop(self) -> None:
        self._timer.stop()
        super().stop()

    def dispose(self) -> None:
        was_disposed = self._is_disposed
        super().dispose()
        if not was_disposed:
            self._timer.timeout.disconnect(self._notify)
