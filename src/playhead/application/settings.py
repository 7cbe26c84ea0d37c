"""
Time Controller Settings

Dataclass-based configuration with field validation. Nothing is persisted;
values come from defaults, a dict, or the environment.

Usage:
    settings = TimeControllerSettings.from_env()
    result = settings.validate()
    if not result.valid:
        for error in result.errors:
            print(f"Error: {error}")
    controller = settings.create_controller(on_time_stamp=print)

Environment:
    PLAYHEAD_FRAME_RATE   frames per second (float)
    PLAYHEAD_ANIMATION_MS default animation duration in milliseconds (int)
    PLAYHEAD_LOG_LEVEL    DEBUG | INFO | WARNING | ERROR
"""
import os
from dataclasses import dataclass, asdict, fields, field
from datetime import timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from playhead.utils.message import Log

ENV_FRAME_RATE = "PLAYHEAD_FRAME_RATE"
ENV_ANIMATION_MS = "PLAYHEAD_ANIMATION_MS"
ENV_LOG_LEVEL = "PLAYHEAD_LOG_LEVEL"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass
class ValidationResult:
    """
    Result of validating settings.

    Attributes:
        valid: True if every field passed
        errors: One message per failed rule
    """
    valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
        self.valid = False

    def merge(self, other: 'ValidationResult'):
        """Fold a per-field result into this one."""
        for error in other.errors:
            self.add_error(error)


@dataclass
class FieldValidator:
    """
    Validation rules for a settings field, stored in field metadata.
    """
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    choices: Optional[List[Any]] = None
    custom: Optional[Callable[[Any, str], Optional[str]]] = None

    def validate(self, value: Any, field_name: str) -> ValidationResult:
        result = ValidationResult()

        if value is None:
            result.add_error(f"{field_name}: Cannot be None")
            return result

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if self.min_value is not None and value < self.min_value:
                result.add_error(f"{field_name}: Value {value} is below minimum {self.min_value}")
            if self.max_value is not None and value > self.max_value:
                result.add_error(f"{field_name}: Value {value} is above maximum {self.max_value}")
        elif self.min_value is not None or self.max_value is not None:
            result.add_error(f"{field_name}: Expected a number, got {type(value).__name__}")

        if self.choices is not None and value not in self.choices:
            result.add_error(f"{field_name}: Value '{value}' not in allowed choices: {self.choices}")

        if self.custom is not None:
            error = self.custom(value, field_name)
            if error:
                result.add_error(error)

        return result


def validated_field(
    default: Any = None,
    *,
    min_value: Optional[Union[int, float]] = None,
    max_value: Optional[Union[int, float]] = None,
    choices: Optional[List[Any]] = None,
    custom: Optional[Callable[[Any, str], Optional[str]]] = None,
):
    """
    Create a dataclass field with validation metadata.

    Example:
        frame_rate: float = validated_field(60.0, min_value=1.0, max_value=1000.0)
    """
    validator = FieldValidator(
        min_value=min_value,
        max_value=max_value,
        choices=choices,
        custom=custom,
    )
    return field(default=default, metadata={'validator': validator})


@dataclass
class TimeControllerSettings:
    """
    Configuration of a TimeController.

    Attributes:
        frame_rate: How often time stamps are delivered (Hz)
        animation_duration_ms: Default duration of animate_to() in milliseconds
        log_level: Level applied to the package logger by apply_logging()
    """
    frame_rate: float = validated_field(60.0, min_value=1.0, max_value=1000.0)
    animation_duration_ms: int = validated_field(120, min_value=0, max_value=60000)
    log_level: str = validated_field("INFO", choices=LOG_LEVELS)

    @property
    def animation_duration(self) -> timedelta:
        return timedelta(milliseconds=self.animation_duration_ms)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TimeControllerSettings':
        """
        Create settings from a dictionary.

        Unknown keys are ignored and missing keys fall back to defaults.
        """
        valid_keys = {f.name for f in fields(cls)}
        merged = asdict(cls())
        merged.update({k: v for k, v in data.items() if k in valid_keys})
        return cls(**merged)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'TimeControllerSettings':
        """
        Create settings from PLAYHEAD_* environment variables.

        Values that cannot be parsed are reported and replaced by defaults.
        """
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        raw = environ.get(ENV_FRAME_RATE)
        if raw:
            try:
                data["frame_rate"] = float(raw)
            except ValueError:
                Log.warning(f"TimeControllerSettings: Ignoring {ENV_FRAME_RATE}={raw!r}, not a number")

        raw = environ.get(ENV_ANIMATION_MS)
        if raw:
            try:
                data["animation_duration_ms"] = int(raw)
            except ValueError:
                Log.warning(f"TimeControllerSettings: Ignoring {ENV_ANIMATION_MS}={raw!r}, not an integer")

        raw = environ.get(ENV_LOG_LEVEL)
        if raw:
            data["log_level"] = raw.strip().upper()

        return cls.from_dict(data)

    def validate(self) -> ValidationResult:
        """
        Validate all fields against their validators.

        Returns:
            ValidationResult with valid=True if all validations pass
        """
        result = ValidationResult()
        for f in fields(self):
            validator = f.metadata.get('validator') if f.metadata else None
            if isinstance(validator, FieldValidator):
                result.merge(validator.validate(getattr(self, f.name), f.name))
        return result

    def is_valid(self) -> bool:
        return self.validate().valid

    def apply_logging(self) -> None:
        Log.set_level(self.log_level)

    def create_controller(self, on_time_stamp, **kwargs):
        """
        Build a TimeController configured by these settings.

        Args:
            on_time_stamp: Callback receiving each TimeStamp
            **kwargs: Passed through to TimeController (timer, stopwatch, parent)

        Raises:
            ValueError: If the settings are invalid
        """
        result = self.validate()
        if not result.valid:
            raise ValueError("Invalid time controller settings: " + "; ".join(result.errors))

        from playhead.application.time_controller import TimeController

        return TimeController(
            on_time_stamp=on_time_stamp,
            frame_rate=self.frame_rate,
            default_animation_duration=self.animation_duration,
            **kwargs,
        )
