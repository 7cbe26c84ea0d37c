"""
Tests for TimeControllerSettings.

Tests field validation, dict/env loading and controller creation.
"""
import pytest
from datetime import timedelta
from unittest.mock import patch

from playhead.application.settings import (
    FieldValidator,
    TimeControllerSettings,
    ValidationResult,
)
from playhead.application.time_controller import TimeController
from playhead.infrastructure.periodic_timer import ManualPeriodicTimer
from playhead.infrastructure.stopwatch import ManualStopwatch


class TestValidationResult:
    """Tests for ValidationResult class."""

    def test_initial_state_is_valid(self):
        result = ValidationResult()
        assert result.valid is True

    def test_add_error_marks_invalid(self):
        result = ValidationResult()
        result.add_error("bad")
        assert result.valid is False
        assert result.errors == ["bad"]

    def test_merge_propagates_invalid(self):
        result = ValidationResult()
        other = ValidationResult()
        other.add_error("bad")
        other.add_error("worse")
        result.merge(other)
        assert result.valid is False
        assert result.errors == ["bad", "worse"]


class TestFieldValidator:
    """Tests for FieldValidator rules."""

    def test_range(self):
        validator = FieldValidator(min_value=1, max_value=10)
        assert validator.validate(5, "x").valid
        assert not validator.validate(0, "x").valid
        assert not validator.validate(11, "x").valid

    def test_range_rejects_non_numbers(self):
        validator = FieldValidator(min_value=1)
        result = validator.validate("fast", "x")
        assert not result.valid
        assert "Expected a number" in result.errors[0]

    def test_none_is_invalid(self):
        assert not FieldValidator().validate(None, "x").valid

    def test_choices(self):
        validator = FieldValidator(choices=["a", "b"])
        assert validator.validate("a", "x").valid
        assert not validator.validate("c", "x").valid

    def test_custom(self):
        validator = FieldValidator(custom=lambda v, name: f"{name}: odd" if v % 2 else None)
        assert validator.validate(2, "x").valid
        assert validator.validate(3, "x").errors == ["x: odd"]


class TestTimeControllerSettings:
    """Tests for TimeControllerSettings."""

    def test_defaults_are_valid(self):
        settings = TimeControllerSettings()
        assert settings.frame_rate == 60.0
        assert settings.animation_duration == timedelta(milliseconds=120)
        assert settings.log_level == "INFO"
        assert settings.is_valid()

    def test_out_of_range_values_are_reported(self):
        settings = TimeControllerSettings(frame_rate=0, animation_duration_ms=-1, log_level="LOUD")
        result = settings.validate()
        assert not result.valid
        assert len(result.errors) == 3
        assert any("frame_rate" in e for e in result.errors)

    def test_from_dict_ignores_unknown_keys(self):
        settings = TimeControllerSettings.from_dict({"frame_rate": 30.0, "color": "red"})
        assert settings.frame_rate == 30.0
        assert settings.animation_duration_ms == 120

    def test_to_dict_round_trip(self):
        settings = TimeControllerSettings(frame_rate=24.0, animation_duration_ms=50)
        assert TimeControllerSettings.from_dict(settings.to_dict()) == settings

    def test_from_env(self):
        environ = {
            "PLAYHEAD_FRAME_RATE": "120",
            "PLAYHEAD_ANIMATION_MS": "250",
            "PLAYHEAD_LOG_LEVEL": " debug ",
        }
        settings = TimeControllerSettings.from_env(environ)
        assert settings.frame_rate == 120.0
        assert settings.animation_duration_ms == 250
        assert settings.log_level == "DEBUG"

    def test_from_env_warns_and_keeps_defaults_on_junk(self):
        environ = {"PLAYHEAD_FRAME_RATE": "fast", "PLAYHEAD_ANIMATION_MS": "1.5"}
        with patch("playhead.application.settings.Log") as log:
            settings = TimeControllerSettings.from_env(environ)
        assert settings == TimeControllerSettings()
        assert log.warning.call_count == 2

    def test_apply_logging_sets_level(self):
        with patch("playhead.application.settings.Log") as log:
            TimeControllerSettings(log_level="WARNING").apply_logging()
        log.set_level.assert_called_once_with("WARNING")

    def test_create_controller(self):
        settings = TimeControllerSettings(frame_rate=62.5, animation_duration_ms=40)
        controller = settings.create_controller(
            on_time_stamp=lambda _: None,
            timer=ManualPeriodicTimer(),
            stopwatch=ManualStopwatch(),
        )
        try:
            assert isinstance(controller, TimeController)
            assert controller.frame_duration == timedelta(milliseconds=16)
            assert controller.default_animation_duration == timedelta(milliseconds=40)
        finally:
            controller.dispose()

    def test_create_controller_rejects_invalid_settings(self):
        with pytest.raises(ValueError, match="frame_rate"):
            TimeControllerSettings(frame_rate=-5).create_controller(on_time_stamp=lambda _: None)
