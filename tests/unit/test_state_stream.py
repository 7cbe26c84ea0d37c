"""
Tests for StateStream.

Tests value publishing, subscriptions, change detection and error isolation.
"""
import pytest
from unittest.mock import MagicMock, patch

from playhead.application.state_stream import StateStream
from playhead.domain.transport_state import TransportState


@pytest.fixture
def stream():
    return StateStream(TransportState.STOPPED, source_name="test")


class TestStateStreamValue:
    """Tests for value handling."""

    def test_seed_is_initial_value(self, stream):
        assert stream.value == TransportState.STOPPED
        assert stream.previous is None

    def test_set_updates_value_and_previous(self, stream):
        stream.value = TransportState.PLAYING
        assert stream.value == TransportState.PLAYING
        assert stream.previous == TransportState.STOPPED

    def test_set_reports_notification(self, stream):
        assert stream.set(TransportState.PLAYING) is True
        assert stream.set(TransportState.PLAYING) is False


class TestStateStreamSubscriptions:
    """Tests for subscribe/unsubscribe and delivery."""

    def test_subscriber_receives_changes_in_order(self, stream):
        received = []
        stream.subscribe(received.append)

        stream.value = TransportState.JUMPING_FORWARD
        stream.value = TransportState.PAUSED

        assert received == [TransportState.JUMPING_FORWARD, TransportState.PAUSED]

    def test_no_notification_without_change(self, stream):
        handler = MagicMock()
        stream.subscribe(handler)

        stream.value = TransportState.STOPPED

        handler.assert_not_called()

    def test_force_notify_redelivers_same_value(self, stream):
        handler = MagicMock()
        stream.subscribe(handler)

        stream.set(TransportState.STOPPED, force_notify=True)

        handler.assert_called_once_with(TransportState.STOPPED)

    def test_subscribing_twice_delivers_once(self, stream):
        handler = MagicMock()
        stream.subscribe(handler)
        stream.subscribe(handler)

        stream.value = TransportState.PLAYING

        handler.assert_called_once()

    def test_returned_callable_unsubscribes(self, stream):
        handler = MagicMock()
        unsubscribe = stream.subscribe(handler)

        unsubscribe()
        stream.value = TransportState.PLAYING

        handler.assert_not_called()

    def test_clear_subscriptions(self, stream):
        handler = MagicMock()
        stream.subscribe(handler)

        stream.clear_subscriptions()
        stream.value = TransportState.PLAYING

        handler.assert_not_called()

    def test_handler_error_does_not_stop_delivery(self, stream):
        """A failing handler is logged and later handlers still run."""
        failing = MagicMock(side_effect=RuntimeError("boom"))
        handler = MagicMock()
        stream.subscribe(failing)
        stream.subscribe(handler)

        with patch("playhead.application.state_stream.Log") as log:
            stream.value = TransportState.PLAYING

        handler.assert_called_once_with(TransportState.PLAYING)
        log.error.assert_called_once()
        assert "boom" in log.error.call_args[0][0]


class TestStateStreamHistory:
    """Tests for optional history tracking."""

    def test_history_disabled_by_default(self, stream):
        stream.value = TransportState.PLAYING
        assert stream.history == []

    def test_history_is_bounded(self):
        stream = StateStream(0, track_history=True, max_history=3)
        for value in range(1, 6):
            stream.value = value
        assert stream.history == [3, 4, 5]

    def test_dispose_keeps_value_and_drops_handlers(self, stream):
        handler = MagicMock()
        stream.subscribe(handler)
        stream.value = TransportState.PAUSED

        stream.dispose()
        stream.value = TransportState.STOPPED

        assert stream.is_disposed is True
        assert stream.value == TransportState.STOPPED
        handler.assert_called_once_with(TransportState.PAUSED)
