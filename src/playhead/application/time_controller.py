"""
Time Controller

Delivers time stamps on a regular cadence. Can be started, paused and
stopped. Jumping as well as animating to a given time is possible.

The playhead is derived from an elapsed-time source (stopwatch) and an
offset that is re-synchronized whenever a transition fixes a new playhead
value:

    playhead = stopwatch.elapsed - stopwatch_offset      (while playing)

Observers:
- on_time_stamp callback and the time_stamp_delivered signal receive a
  TimeStamp on every timer tick and at explicit freeze points
- the state stream and the state_changed signal receive every
  TransportState change, including the transient jump states

Usage:
    controller = TimeController(on_time_stamp=lambda ts: print(ts))
    controller.state.subscribe(lambda state: print(state.value))
    controller.play()
    ...
    await controller.animate_to(20.0, animation_duration=0.1)
    controller.dispose()

Threading: single-threaded. All methods must be called from the thread
(and event loop) that drives the timer. Using a controller after
dispose() is a precondition violation and is not guarded.
"""
import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from playhead.application.state_stream import StateStream
from playhead.domain.durations import (
    ZERO,
    TimeLike,
    from_microseconds,
    frame_duration_for,
    in_microseconds,
    to_duration,
)
from playhead.domain.time_stamp import OnTimeStamp, TimeStamp
from playhead.domain.transport_state import TransportState
from playhead.infrastructure.periodic_timer import AsyncioPeriodicTimer, PeriodicTimer
from playhead.infrastructure.stopwatch import ElapsedTimeSource, Stopwatch
from playhead.utils.message import Log

# The default frame rate on which time stamps are delivered
DEFAULT_FRAME_RATE = 60.0

# The default animation duration used by animate_to()
DEFAULT_ANIMATION_DURATION = timedelta(milliseconds=120)


def _fmt(time: timedelta) -> str:
    return f"{time.total_seconds():.3f}s"


@dataclass
class _Animation:
    """Shared completion handle of the in-flight animation and what to restore after it."""
    done: asyncio.Future
    state_before: TransportState
    timer_was_running: bool
    stopwatch_was_running: bool
    final_time: timedelta = ZERO
    cancelled: bool = False
    settled: bool = False


class TimeController(QObject):
    """
    Transport controller producing the authoritative playhead time.

    Signals:
        state_changed(TransportState): Transport state changed
        time_stamp_delivered(TimeStamp): A time stamp was delivered
    """

    state_changed = pyqtSignal(object)
    time_stamp_delivered = pyqtSignal(object)

    DEFAULT_FRAME_RATE = DEFAULT_FRAME_RATE
    DEFAULT_ANIMATION_DURATION = DEFAULT_ANIMATION_DURATION

    def __init__(
        self,
        on_time_stamp: OnTimeStamp,
        frame_rate: float = DEFAULT_FRAME_RATE,
        timer: Optional[PeriodicTimer] = None,
        stopwatch: Optional[ElapsedTimeSource] = None,
        default_animation_duration: TimeLike = DEFAULT_ANIMATION_DURATION,
        parent: Optional[QObject] = None,
    ):
        """
        Args:
            on_time_stamp: Called with each delivered TimeStamp
            frame_rate: How often time stamps are emitted (Hz)
            timer: Injected periodic timer. Not disposed by the controller.
            stopwatch: Injected elapsed-time source. Not owned by the controller.
            default_animation_duration: Used when animate_to() gets no duration
            parent: Optional Qt parent

        Raises:
            ValueError: If frame_rate is not positive or the default
                animation duration is negative
        """
        super().__init__(parent)
        if on_time_stamp is None:
            raise ValueError("on_time_stamp is required")

        self.on_time_stamp = on_time_stamp
        self.frame_rate = float(frame_rate)
        self.frame_duration = frame_duration_for(self.frame_rate)
        self.default_animation_duration = to_duration(default_animation_duration)
        if self.default_animation_duration < ZERO:
            raise ValueError(
                f"default_animation_duration must not be negative, got {self.default_animation_duration}"
            )

        self._dispose_actions: List[Callable[[], None]] = []
        self._is_disposed = False
        self._last_time = ZERO
        self._stopwatch_offset = ZERO

        self._animation_start_time = ZERO
        self._animation_target_time = ZERO
        self._animation_duration = ZERO
        self._animation: Optional[_Animation] = None

        self._init_state()
        self._init_timer(timer)
        self._init_stopwatch(stopwatch)
        self._dispose_actions.append(self._interrupt_animation)

        Log.debug(f"TimeController: Created, frame_rate={self.frame_rate:g}Hz")

    @classmethod
    def default_frame_duration(cls) -> timedelta:
        """The default duration between two delivered time stamps"""
        return frame_duration_for(cls.DEFAULT_FRAME_RATE)

    # ------------------------------------------------------------------
    # Public state
    # ------------------------------------------------------------------

    @property
    def state(self) -> StateStream[TransportState]:
        """Transport state as stream. state.value is the current state."""
        return self._state

    @property
    def time(self) -> timedelta:
        """The playhead right now."""
        state = self._state.value
        if state == TransportState.PLAYING:
            return self._clock_time
        if state.is_animating and self._animation_in_flight:
            return self._animated_time
        return self._last_time

    @property
    def is_animating(self) -> bool:
        return self._animation_in_flight

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    @property
    def timer(self) -> PeriodicTimer:
        return self._timer

    @property
    def stopwatch(self) -> ElapsedTimeSource:
        return self._stopwatch

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def play(self) -> None:
        """Starts playing from the current playhead"""
        if self._state.value == TransportState.PLAYING:
            return

        self._interrupt_animation()
        self._state.value = TransportState.PLAYING
        self._timer.start()
        self._stopwatch.start()
        self._update_stopwatch_offset(self._last_time)
        Log.debug(f"TimeController: Play from {_fmt(self._last_time)}")

    def pause(self) -> None:
        """Pauses playing. The last live frame is delivered once more."""
        if self._state.value == TransportState.PAUSED:
            return

        self._interrupt_animation()
        self._state.value = TransportState.PAUSED
        self._timer.stop()

        clock_time = self._clock_time
        if self._last_time != clock_time:
            self._last_time = clock_time
            self._timer_fired()
        Log.debug(f"TimeController: Pause at {_fmt(self._last_time)}")

    def stop(self) -> None:
        """Stops playing. Time is set back to 0 and delivered, even if already stopped."""
        self._interrupt_animation()
        if self._state.value != TransportState.STOPPED:
            self._state.value = TransportState.STOPPED

        self._stopwatch.stop()
        self._timer.stop()
        self._stopwatch.reset()
        self._last_time = ZERO
        self._update_stopwatch_offset(ZERO)
        self._timer_fired()
        Log.debug("TimeController: Stop")

    def jump_to(self, time: TimeLike) -> None:
        """
        Jump to a given time.

        Publishes the transient jump direction first, then the steady state:
        the state before the jump when jumping to 0, paused otherwise.

        Args:
            time: Target time as timedelta or seconds
        """
        time = to_duration(time)

        # An in-flight animation is always cancelled, even by a jump to its current value
        state_before = self._interrupt_animation()
        if state_before is None:
            if time == self._clock_time:
                return
            state_before = self._state.value

        self._state.value = TransportState.jump_direction(time > self._clock_time)
        self._state.value = state_before if time == ZERO else TransportState.PAUSED

        self._last_time = time
        self._update_stopwatch_offset(time)
        self._timer_fired()
        Log.debug(f"TimeController: Jump to {_fmt(time)}")

    async def animate_to(
        self,
        target_time: TimeLike,
        animation_duration: Optional[TimeLike] = None,
    ) -> None:
        """
        Animate the playhead linearly to target_time within animation_duration.

        Resolves when the animation completes. Calling this while another
        animation is in flight retargets that animation: start, target and
        duration are replaced and every caller waits for the same completion.

        Must be awaited on the event loop that drives the timer.

        Args:
            target_time: Target time as timedelta or seconds
            animation_duration: timedelta or seconds. Defaults to
                default_animation_duration. Negative values count as 0.
        """
        target_time = to_duration(target_time)
        if animation_duration is None:
            animation_duration = self.default_animation_duration
        animation_duration = max(to_duration(animation_duration), ZERO)

        self._settle_finished_animation()

        # Start from the playhead's current value
        current_time = self.time
        self._update_stopwatch_offset(current_time)
        self._animation_target_time = target_time
        self._animation_start_time = self._clock_time
        self._animation_duration = animation_duration
        forward = target_time > self._clock_time

        if self._animation is not None:
            Log.debug(
                f"TimeController: Retarget animation to {_fmt(target_time)} "
                f"within {_fmt(animation_duration)}"
            )
            self._state.value = TransportState.animate_direction(forward)
            await asyncio.shield(self._animation.done)
            return

        animation = _Animation(
            done=asyncio.get_running_loop().create_future(),
            state_before=self._state.value,
            timer_was_running=self._timer.is_running,
            stopwatch_was_running=self._stopwatch.is_running,
        )
        animation.done.add_done_callback(lambda _: self._finish_animation(animation))
        self._animation = animation

        # Without a running timer and stopwatch there is no progress
        self._timer.start()
        if not animation.stopwatch_was_running:
            self._stopwatch.start()

        self._state.value = TransportState.animate_direction(forward)
        Log.debug(
            f"TimeController: Animate from {_fmt(current_time)} to {_fmt(target_time)} "
            f"within {_fmt(animation_duration)}"
        )

        await asyncio.shield(animation.done)

    def dispose(self) -> None:
        """
        Call this method if the time controller is not needed anymore.

        Runs the registered teardown actions in reverse order: cancels an
        in-flight animation, releases the owned stopwatch and timer, then
        publishes a final STOPPED state and closes the state stream.
        """
        for action in reversed(self._dispose_actions):
            action()
        self._dispose_actions.clear()
        self._is_disposed = True
        Log.debug("TimeController: Disposed")

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _init_state(self) -> None:
        self._state: StateStream[TransportState] = StateStream(
            TransportState.STOPPED, source_name="TimeController"
        )
        self._state.subscribe(self.state_changed.emit)

        def dispose_state():
            self._state.value = TransportState.STOPPED
            self._state.dispose()

        self._dispose_actions.append(dispose_state)

    def _init_timer(self, timer: Optional[PeriodicTimer]) -> None:
        if timer is None:
            self._timer = AsyncioPeriodicTimer(interval=self.frame_duration)
            self._timer.subscribe(self._timer_fired)
            self._dispose_actions.append(self._timer.dispose)
        else:
            self._timer = timer
            self._timer.subscribe(self._timer_fired)
            self._dispose_actions.append(lambda: timer.unsubscribe(self._timer_fired))

    def _init_stopwatch(self, stopwatch: Optional[ElapsedTimeSource]) -> None:
        if stopwatch is None:
            self._stopwatch = Stopwatch()
            self._dispose_actions.append(self._stopwatch.stop)
        else:
            self._stopwatch = stopwatch

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def _timer_fired(self) -> None:
        self._animate()
        if self._state.value == TransportState.PLAYING:
            self._last_time = self._clock_time

        time_stamp = TimeStamp(time=self._last_time)
        self.on_time_stamp(time_stamp)
        self.time_stamp_delivered.emit(time_stamp)

    @property
    def _clock_time(self) -> timedelta:
        return self._stopwatch.elapsed - self._stopwatch_offset

    def _update_stopwatch_offset(self, expected_time: timedelta) -> None:
        self._stopwatch_offset = self._stopwatch.elapsed - expected_time

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------

    @property
    def _animation_in_flight(self) -> bool:
        return self._animation is not None and not self._animation.done.done()

    @property
    def _animated_time(self) -> timedelta:
        start = in_microseconds(self._animation_start_time)
        duration = in_microseconds(self._animation_duration)
        if duration <= 0:
            return self._animation_target_time

        span = in_microseconds(self._animation_target_time) - start
        progress = (in_microseconds(self._clock_time) - start) / duration
        return from_microseconds(start + span * progress)

    def _animate(self) -> None:
        if not self._animation_in_flight:
            return

        # Compare elapsed time, not values, so the last frame is never missed
        is_ready = self._clock_time - self._animation_start_time >= self._animation_duration
        if is_ready:
            self._last_time = self._animation_target_time
            self._update_stopwatch_offset(self._last_time)
            self._animation.final_time = self._last_time
            self._animation.done.set_result(None)
            return

        self._last_time = self._animated_time

    def _finish_animation(self, animation: _Animation) -> None:
        """Restore the pre-animation condition once the animation completed."""
        if animation.settled:
            return
        animation.settled = True
        if self._animation is animation:
            self._animation = None
        if animation.cancelled:
            return

        self._update_stopwatch_offset(animation.final_time)
        if not animation.timer_was_running:
            self._timer.stop()
        if not animation.stopwatch_was_running:
            self._stopwatch.stop()

        # A stopped transport that moved away from 0 is paused now
        if animation.state_before == TransportState.STOPPED and animation.final_time != ZERO:
            self._state.value = TransportState.PAUSED
        else:
            self._state.value = animation.state_before
        Log.debug(f"TimeController: Animation finished at {_fmt(animation.final_time)}")

    def _settle_finished_animation(self) -> None:
        animation = self._animation
        if animation is not None and animation.done.done():
            self._finish_animation(animation)

    def _interrupt_animation(self) -> Optional[TransportState]:
        """
        Cancel an in-flight animation.

        The timer and stopwatch go back to their pre-animation condition,
        the clock is re-synchronized to the current animated time and all
        awaiting callers resume. Post-animation state restoration is skipped.

        Returns:
            The state before the animation, or None if nothing was in flight
        """
        self._settle_finished_animation()
        animation = self._animation
        if animation is None:
            return None

        current_time = self.time
        animation.cancelled = True
        animation.settled = True
        self._animation = None

        self._update_stopwatch_offset(current_time)
        if not animation.timer_was_running:
            self._timer.stop()
        if not animation.stopwatch_was_running:
            self._stopwatch.stop()

        if not animation.done.done() and not animation.done.get_loop().is_closed():
            animation.done.set_result(None)
        Log.debug(f"TimeController: Animation cancelled at {_fmt(current_time)}")
        return animation.state_before


def example_time_controller(
    on_time_stamp: Optional[OnTimeStamp] = None,
    stopwatch: Optional[ElapsedTimeSource] = None,
    timer: Optional[PeriodicTimer] = None,
) -> TimeController:
    """Time controller with a no-op callback unless one is given."""
    return TimeController(
        on_time_stamp=on_time_stamp or (lambda _: None),
        stopwatch=stopwatch,
        timer=timer,
    )
