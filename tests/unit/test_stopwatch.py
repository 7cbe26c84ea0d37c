"""
Tests for the elapsed-time sources.
"""
import time
from datetime import timedelta

import pytest

from playhead.infrastructure.stopwatch import ElapsedTimeSource, ManualStopwatch, Stopwatch


class TestStopwatch:
    """Tests for the QElapsedTimer based stopwatch."""

    def test_initially_stopped_at_zero(self):
        stopwatch = Stopwatch()
        assert stopwatch.is_running is False
        assert stopwatch.elapsed == timedelta(0)

    def test_accumulates_across_runs(self):
        stopwatch = Stopwatch()
        stopwatch.start()
        time.sleep(0.02)
        stopwatch.stop()

        first_run = stopwatch.elapsed
        assert first_run >= timedelta(milliseconds=15)

        time.sleep(0.02)
        assert stopwatch.elapsed == first_run

        stopwatch.start()
        time.sleep(0.01)
        assert stopwatch.elapsed > first_run

    def test_reset_keeps_running_state(self):
        stopwatch = Stopwatch()
        stopwatch.start()
        time.sleep(0.02)

        stopwatch.reset()

        assert stopwatch.is_running is True
        assert stopwatch.elapsed < timedelta(milliseconds=15)

        stopwatch.stop()
        stopwatch.reset()
        assert stopwatch.elapsed == timedelta(0)

    def test_satisfies_protocol(self):
        assert isinstance(Stopwatch(), ElapsedTimeSource)


class TestManualStopwatch:
    """Tests for the programmable stopwatch."""

    def test_advance_only_while_running(self):
        stopwatch = ManualStopwatch()
        stopwatch.advance(timedelta(milliseconds=5))
        assert stopwatch.elapsed == timedelta(0)

        stopwatch.start()
        stopwatch.advance(timedelta(milliseconds=5))
        stopwatch.advance(0.001)
        assert stopwatch.elapsed == timedelta(milliseconds=6)

    def test_set_elapsed_ignores_running_state(self):
        stopwatch = ManualStopwatch()
        stopwatch.set_elapsed(2.5)
        assert stopwatch.elapsed == timedelta(seconds=2.5)

    def test_reset_keeps_running(self):
        stopwatch = ManualStopwatch(elapsed=timedelta(seconds=1))
        stopwatch.start()
        stopwatch.reset()
        assert stopwatch.elapsed == timedelta(0)
        assert stopwatch.is_running is True

    def test_satisfies_protocol(self):
        assert isinstance(ManualStopwatch(), ElapsedTimeSource)

    def test_rejects_non_time_values(self):
        with pytest.raises(TypeError):
            ManualStopwatch().set_elapsed("soon")
