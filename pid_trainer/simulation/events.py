"""
Domain events emitted by a simulation session.
"""

from dataclasses import dataclass
from enum import Enum
from collections import deque
from typing import Any, Callable, List, Optional


class SimulationEventType(Enum):
    """Kinds of session notifications."""
    STARTED = "started"
    STOPPED = "stopped"
    COMPLETED = "completed"  # value: settling time
    TIME_UPDATED = "time_updated"  # value: elapsed time


@dataclass(frozen=True)
class SimulationEvent:
    """A notification from a session."""
    type: SimulationEventType
    session: Any = None
    value: Optional[float] = None


EventCallback = Callable[[SimulationEvent], None]


class EventDispatcher:
    """
    Fan-out of session events to subscribed callbacks.

    Callbacks run synchronously in subscription order; an exception in a
    callback propagates to whoever triggered the event.
    """

    def __init__(self):
        self._callbacks: List[EventCallback] = []

    def subscribe(self, callback: EventCallback) -> None:
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: EventCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def emit(self, event: SimulationEvent) -> None:
        for callback in list(self._callbacks):
            callback(event)

    def __len__(self) -> int:
        return len(self._callbacks)


class EventLog:
    """
    Listener that queues received events.

    Subscribe the instance itself: ``session.events.subscribe(log)``.
    """

    def __init__(self, maxlen: Optional[int] = None, include_time_updates: bool = True):
        self._events: deque = deque(maxlen=maxlen)
        self._include_time_updates = include_time_updates

    def __call__(self, event: SimulationEvent) -> None:
        if event.type is SimulationEventType.TIME_UPDATED and not self._include_time_updates:
            return
        self._events.append(event)

    @property
    def events(self) -> List[SimulationEvent]:
        return list(self._events)

    def types(self) -> List[SimulationEventType]:
        return [e.type for e in self._events]

    def of_type(self, event_type: SimulationEventType) -> List[SimulationEvent]:
        return [e for e in self._events if e.type is event_type]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
