"""
State Stream

Observable holder for the controller's current TransportState.

Usage:
    stream = StateStream(TransportState.STOPPED)
    stream.subscribe(lambda state: print(f"State: {state.value}"))
    stream.value = TransportState.PLAYING   # handler called synchronously

Features:
- Automatic change detection (only notifies on actual changes)
- Delivery in emission order, synchronously, including transient values
- Optional history tracking
- Handler errors are logged and do not stop delivery to other handlers
"""
from typing import Callable, Generic, List, Optional, TypeVar

from playhead.utils.message import Log

T = TypeVar("T")

StateHandler = Callable[[T], None]


class StateStream(Generic[T]):
    """
    Current-value stream with synchronous fan-out.

    Not thread-safe; owned by a single controller and touched only from
    its thread of control.

    Attributes:
        source_name: Name used in log messages
        track_history: Whether to keep every published value
        max_history: Maximum history entries to keep
    """

    def __init__(
        self,
        seed: T,
        source_name: str = "",
        track_history: bool = False,
        max_history: int = 100,
    ):
        self._value: T = seed
        self._previous: Optional[T] = None
        self._source_name = source_name or self.__class__.__name__
        self._track_history = track_history
        self._max_history = max_history
        self._history: List[T] = []
        self._handlers: List[StateHandler] = []
        self._is_disposed = False

    @property
    def value(self) -> T:
        """Get current value."""
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self.set(new_value)

    @property
    def previous(self) -> Optional[T]:
        """Value before the last change."""
        return self._previous

    @property
    def history(self) -> List[T]:
        """Published values (if tracking enabled)."""
        return self._history.copy()

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    def set(self, new_value: T, force_notify: bool = False) -> bool:
        """
        Set the current value.

        Only notifies subscribers if the value actually changed (or
        force_notify=True).

        Returns:
            True if subscribers were notified
        """
        changed = new_value != self._value
        if not changed and not force_notify:
            return False

        if changed:
            self._previous = self._value
            self._value = new_value
            if self._track_history:
                self._history.append(new_value)
                if len(self._history) > self._max_history:
                    self._history = self._history[-self._max_history:]

        for handler in list(self._handlers):
            try:
                handler(new_value)
            except Exception as e:
                Log.error(f"StateStream: Error in handler for '{self._source_name}': {e}")
        return True

    def subscribe(self, handler: StateHandler) -> Callable[[], None]:
        """
        Subscribe to value changes.

        Args:
            handler: Function called with each new value

        Returns:
            A function that removes the subscription
        """
        if handler not in self._handlers:
            self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: StateHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def clear_subscriptions(self) -> None:
        """Remove all subscriptions."""
        self._handlers.clear()

    def dispose(self) -> None:
        """Release subscribers. The last value stays readable."""
        self._handlers.clear()
        self._is_disposed = True
