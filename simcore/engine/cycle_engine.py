"""
CycleEngine - Fixed-quantum stepping of automation components.
Steps components in registration order, routes operator commands and fans out
the events each component produced.
"""

import logging
from typing import Any, List, Optional

import numpy as np

from automation.base_component import Commandable, Observable, Steppable
from automation.commands import Command
from simcore.events import EventBus, EventListener
from simcore.types import StepInputs, StopPredicate

logger = logging.getLogger(__name__)


class _Slot:
    """A registered component and the callable supplying its step inputs."""

    __slots__ = ("component", "inputs")

    def __init__(self, component: Steppable,
                 inputs: Optional[StepInputs]) -> None:
        self.component = component
        self.inputs = inputs


class CycleEngine:
    """
    Single-threaded scheduler calling step(dt) on every component once per
    cycle; the time history lives there, the engine only keeps the current
    time and cycle count.

    Within a cycle each component is stepped, then its queued events are
    published before the next component runs, so listeners see events in the
    order they were produced. The telemetry sink gets commit(time) once per
    cycle; the time history lives there, the engine only keeps the current
    time and cycle count.

    Attributes:
        step_time: Cycle duration in seconds
        telemetry: Sink registered with every observable component
        bus: EventBus the events are published on
        sim_time: Simulation time after the last finished cycle
        step_count: Number of finished cycles
    """

    def __init__(self, step_time: float = 0.1, telemetry: Any = None,
                 bus: Optional[EventBus] = None) -> None:
        """
        Initialize the engine.

        Args:
            step_time: Cycle duration in seconds, must be positive
            telemetry: Object with set_value(name, value) and commit(time)
            bus: Event bus to publish on, a new one if None
        """
        self.step_time: float = 0.1
        self.set_step_time(step_time)
        self.telemetry = telemetry
        self.bus = bus if bus is not None else EventBus()

        self.sim_time: float = 0.0
        self.step_count: int = 0
        self._slots: List[_Slot] = []

    def set_step_time(self, step_time: float) -> None:
        if not np.isfinite(step_time) or step_time <= 0:
            raise ValueError(f"Step time must be positive, got {step_time}.")
        self.step_time = float(step_time)

    @property
    def components(self) -> List[Steppable]:
        return [slot.component for slot in self._slots]

    def add_component(self, component: Steppable,
                      inputs: Optional[StepInputs] = None) -> Steppable:
        """
        Register a component to be stepped every cycle.

        Args:
            component: A Steppable
            inputs: Optional callable returning keyword arguments for the
                component's step(), e.g. lambda: {"safe_to_operate": level_ok()}

        Returns:
            The component, for chaining

        Raises:
            TypeError: If component is not Steppable or inputs is not callable
        """
        if not isinstance(component, Steppable):
            raise TypeError(f"{component!r} cannot be stepped.")
        if inputs is not None and not callable(inputs):
            raise TypeError("Step inputs must be callable.")
        if self.telemetry is not None and isinstance(component, Observable):
            component.register_telemetry(self.telemetry)
        self._slots.append(_Slot(component, inputs))
        logger.debug(f"Added component {getattr(component, 'name', component)!r}")
        return component

    def subscribe(self, listener: EventListener) -> None:
        self.bus.subscribe(listener)

    def dispatch(self, command: Command) -> bool:
        """
        Offer an operator command to the components in registration order.

        Returns:
            True if a component consumed it
        """
        for slot in self._slots:
            component = slot.component
            if isinstance(component, Commandable) and component.handle_command(command):
                logger.debug(f"Command {command} handled by {getattr(component, 'name', component)!r}")
                return True
        logger.warning(f"No component accepted command for target {command.target!r}")
        return False

    def step(self) -> float:
        """
        Run one cycle.

        Returns:
            Simulation time after the cycle
        """
        dt = self.step_time
        for slot in self._slots:
            kwargs = slot.inputs() if slot.inputs is not None else {}
            slot.component.step(dt, **kwargs)
            if isinstance(slot.component, Observable):
                self.bus.publish_all(slot.component.drain_events())

        self.step_count += 1
        self.sim_time += dt
        if self.telemetry is not None:
            self.telemetry.commit(self.sim_time)
        return self.sim_time

    def run(self, duration: float) -> int:
        """
        Step for the given simulation duration.

        Returns:
            Number of cycles run
        """
        steps = int(round(duration / self.step_time))
        for _ in range(steps):
            self.step()
        return steps

    def run_until(self, predicate: StopPredicate, timeout: float) -> bool:
        """
        Step until predicate() is True or timeout seconds of simulation
        time have passed.

        Returns:
            True if the predicate was met
        """
        max_steps = int(round(timeout / self.step_time))
        for _ in range(max_steps):
            self.step()
            if predicate():
                return True
        logger.info(f"Condition not met within {timeout} s")
        return False
