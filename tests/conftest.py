"""
Shared fixtures for the playhead tests.

ControllerHarness wires a TimeController to a ManualPeriodicTimer and a
ManualStopwatch so every frame is driven explicitly by the test.
"""
from datetime import timedelta
from typing import List, Optional

import pytest

from playhead.application.time_controller import TimeController
from playhead.domain.time_stamp import TimeStamp
from playhead.domain.transport_state import TransportState
from playhead.infrastructure.periodic_timer import ManualPeriodicTimer
from playhead.infrastructure.stopwatch import ManualStopwatch


class ControllerHarness:
    """Time controller plus the manual collaborators that drive it."""

    def __init__(self, frame_rate: float = TimeController.DEFAULT_FRAME_RATE):
        self.timer = ManualPeriodicTimer()
        self.stopwatch = ManualStopwatch()
        self.time_stamps: List[TimeStamp] = []
        self.states: List[TransportState] = []
        self.controller = TimeController(
            on_time_stamp=self.time_stamps.append,
            frame_rate=frame_rate,
            timer=self.timer,
            stopwatch=self.stopwatch,
        )
        self.controller.state.subscribe(self.states.append)
        self.frame = self.controller.frame_duration

    @property
    def last_time(self) -> Optional[timedelta]:
        """Time of the most recently delivered stamp."""
        return self.time_stamps[-1].time if self.time_stamps else None

    def advance(self, duration: timedelta) -> None:
        """Let time pass without a timer firing."""
        self.stopwatch.advance(duration)

    def elapse(self, duration: timedelta) -> None:
        """Let time pass, then fire the timer once."""
        self.stopwatch.advance(duration)
        self.timer.fire()

    def elapse_frame(self) -> None:
        self.elapse(self.frame)

    def take_states(self) -> List[TransportState]:
        """States published since the last call."""
        states = list(self.states)
        self.states.clear()
        return states


@pytest.fixture
def make_harness():
    """Factory for harnesses with a custom frame rate."""
    created: List[ControllerHarness] = []

    def _make(frame_rate: float = TimeController.DEFAULT_FRAME_RATE) -> ControllerHarness:
        h = ControllerHarness(frame_rate=frame_rate)
        created.append(h)
        return h

    yield _make
    for h in created:
        h.controller.dispose()


@pytest.fixture
def harness(make_harness):
    return make_harness()


@pytest.fixture(scope="session")
def qapp():
    """Ensure a QCoreApplication exists for QTimer based tests."""
    from PyQt6.QtCore import QCoreApplication
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app
