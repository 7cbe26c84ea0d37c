"""
Transport State

The discrete modes governing how the playhead evolves.
"""
from enum import Enum


class TransportState(Enum):
    """
    Different states of the time controller.

    JUMPING_* states are transient: they are published for the duration of
    one notification during jump_to() and then replaced by the steady state.
    ANIMATING_* states last as long as an animation is in flight.
    """
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"
    JUMPING_FORWARD = "jumping_forward"
    JUMPING_BACKWARD = "jumping_backward"
    ANIMATING_FORWARD = "animating_forward"
    ANIMATING_BACKWARD = "animating_backward"

    @property
    def is_jumping(self) -> bool:
        """Check if this is one of the transient jump states."""
        return self in (TransportState.JUMPING_FORWARD, TransportState.JUMPING_BACKWARD)

    @property
    def is_animating(self) -> bool:
        """Check if an animation drives the playhead in this state."""
        return self in (TransportState.ANIMATING_FORWARD, TransportState.ANIMATING_BACKWARD)

    @property
    def is_forward(self) -> bool:
        return self in (TransportState.JUMPING_FORWARD, TransportState.ANIMATING_FORWARD)

    @classmethod
    def jump_direction(cls, forward: bool) -> "TransportState":
        return cls.JUMPING_FORWARD if forward else cls.JUMPING_BACKWARD

    @classmethod
    def animate_direction(cls, forward: bool) -> "TransportState":
        return cls.ANIMATING_FORWARD if forward else cls.ANIMATING_BACKWARD
