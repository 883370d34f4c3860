"""Event system for Canarinho components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger
from ..note_types import TuningResult

logger = get_logger(__name__)


class TunerEventType(Enum):
    """Event types for the tuner."""

    RESULT = auto()
    IN_TUNE = auto()
    SILENCE = auto()
    STOPPED = auto()


class EventEmitter:
    """Event emitter for Canarinho components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        A failing listener is logged and skipped so the detection loop keeps running.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")


class TunerEvents:
    """Event emitter specifically for tuner events."""

    def __init__(self):
        """Initialize the tuner events."""
        self._emitter = EventEmitter()

    def on_result(self, callback: Callable[[TuningResult], None]) -> None:
        """Register a callback for every cycle that produced a note."""
        self._emitter.on(TunerEventType.RESULT, callback)

    def on_in_tune(self, callback: Callable[[TuningResult], None]) -> None:
        """Register a callback for the cycle a string just became in tune."""
        self._emitter.on(TunerEventType.IN_TUNE, callback)

    def on_silence(self, callback: Callable[[], None]) -> None:
        """Register a callback for cycles suppressed for lack of a usable pitch."""
        self._emitter.on(TunerEventType.SILENCE, callback)

    def on_stopped(self, callback: Callable[[], None]) -> None:
        """Register a callback for when monitoring stops."""
        self._emitter.on(TunerEventType.STOPPED, callback)

    def emit_result(self, result: TuningResult) -> None:
        self._emitter.emit(TunerEventType.RESULT, result)
        if result.just_became_in_tune:
            self._emitter.emit(TunerEventType.IN_TUNE, result)

    def emit_silence(self) -> None:
        self._emitter.emit(TunerEventType.SILENCE)

    def emit_stopped(self) -> None:
        self._emitter.emit(TunerEventType.STOPPED)
