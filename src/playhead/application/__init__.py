"""
Application layer: the time controller, its state stream and settings.
"""
from .state_stream import StateStream
from .settings import TimeControllerSettings, ValidationResult, FieldValidator, validated_field
from .time_controller import (
    TimeController,
    example_time_controller,
    DEFAULT_FRAME_RATE,
    DEFAULT_ANIMATION_DURATION,
)

__all__ = [
    'StateStream',
    'TimeControllerSettings',
    'ValidationResult',
    'FieldValidator',
    'validated_field',
    'TimeController',
    'example_time_controller',
    'DEFAULT_FRAME_RATE',
    'DEFAULT_ANIMATION_DURATION',
]
