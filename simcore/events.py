"""
Event records and the listener fan-out used by the cycle engine.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """
    A state change of a named signal.

    Attributes:
        name: Stable signal name, e.g. "FeedPump_pump_state"
        old: Previous value, None if there was none
        new: New value
    """

    name: str
    old: Any
    new: Any


EventListener = Callable[[Event], None]
"""Callback receiving one event."""


class EventBus:
    """
    Delivers events to registered listeners.

    Delivery is synchronous and in registration order. Listeners must not
    step or command the component that produced the event.
    """

    def __init__(self) -> None:
        self._listeners: List[EventListener] = []
        self.delivered: int = 0

    def subscribe(self, listener: EventListener) -> None:
        """
        Register a listener.

        Args:
            listener: Callable taking one Event

        Raises:
            ValueError: If listener is not callable
        """
        if not callable(listener):
            raise ValueError("Event listener must be callable.")
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: Event) -> None:
        """
        Deliver one event to all listeners.

        An exception raised by a listener is logged and re-raised; the
        remaining listeners do not get the event.
        """
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.error(f"Listener {listener!r} failed on event {event.name}")
                raise
        self.delivered += 1

    def publish_all(self, events: Iterable[Event]) -> None:
        for event in events:
            self.publish(event)
