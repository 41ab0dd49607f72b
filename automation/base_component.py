"""
Capability interfaces shared by all automation components.

Components are composed from three capabilities instead of a deep class
hierarchy:

* Steppable   - advanced once per cycle by the engine
* Commandable - claims operator commands addressed to it by name
* Observable  - queues events in an outbox and pushes telemetry values
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, List, Optional, Protocol

from automation.commands import Command
from simcore.events import Event

logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Receiver of per-step values keyed by a stable name."""

    def set_value(self, name: str, value: Any) -> None:
        ...


class Steppable(ABC):
    """
    Abstract base for anything advanced by the cycle engine.
    """

    @abstractmethod
    def step(self, dt: float) -> None:
        """
        Advance the component by one time quantum.

        :param dt: Step duration in seconds.
        """
        pass


class Commandable(ABC):
    """
    Abstract base for components that accept operator commands.
    """

    @abstractmethod
    def handle_command(self, command: Command) -> bool:
        """
        Offer a command to the component.

        :param command: The operator command.
        :return: True if the command was addressed to and consumed by this
            component, False otherwise.
        """
        pass


class Observable:
    """
    Event outbox and telemetry push for a component.

    Events are not delivered by the component itself. They wait in the outbox
    until the surrounding loop drains them and fans them out to listeners.
    """

    def __init__(self, outbox: Optional[Deque[Event]] = None) -> None:
        self._outbox: Deque[Event] = deque() if outbox is None else outbox
        self._telemetry: Optional[TelemetrySink] = None

    def attach_outbox(self, outbox: Deque[Event]) -> None:
        """
        Queue events into an owner's outbox instead of an own one, so parts of
        an assembly keep the order in which their events were produced.
        Events already waiting are moved over.
        """
        if outbox is self._outbox:
            return
        outbox.extend(self._outbox)
        self._outbox.clear()
        self._outbox = outbox

    def register_telemetry(self, sink: TelemetrySink) -> None:
        """
        Set a sink that gets the component outputs on each step.

        :param sink: Object with a set_value(name, value) method.
        """
        self._telemetry = sink

    def drain_events(self) -> List[Event]:
        """Return and clear all queued events, oldest first."""
        events = list(self._outbox)
        self._outbox.clear()
        return events

    @property
    def pending_events(self) -> int:
        return len(self._outbox)

    def _emit(self, name: str, old: Any, new: Any) -> None:
        logger.debug(f"Event {name}: {old} -> {new}")
        self._outbox.append(Event(name, old, new))

    def _push_value(self, name: str, value: Any) -> None:
        if self._telemetry is not None:
            self._telemetry.set_value(name, value)
