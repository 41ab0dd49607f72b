"""
Motor-operated valves with safety interlocks.

Every valve owns a RampGenerator as actuator and a ValveActuatorMonitor that
reports end positions. Variants are chosen by composition:

* DummyValve      - actuator and monitor only, no hydraulic element
* AutomatedValve  - adds the opening/resistance characteristic a flow network
                    solver consumes
* ControlledValve - AutomatedValve positioned by a cascaded PI controller
"""

import logging
import math
from typing import Optional

from automation.base_component import Commandable, Observable, Steppable
from automation.commands import Command, ControlCommand, tri_state
from automation.input_helpers import BooleanInput, clamp, require_positive
from automation.param_templates import actuator_params, defaults
from automation.pi_controller import PIController
from automation.ramp_generator import RampGenerator
from automation.valve_monitor import ValveActuatorMonitor

logger = logging.getLogger(__name__)


class BaseAutomatedValve(Steppable, Commandable, Observable):
    """
    Common actuator, safety and command handling of automated valves.

    Safety logic is inverted: an input has to be True for the valve to be
    operated freely. If safe-to-close is False the valve is driven closed,
    otherwise if safe-to-open is False it is driven open, regardless of any
    operator command. Both default to True.
    """

    def __init__(self, name: str = "unnamedAutomatedValve",
                 rate: Optional[float] = None,
                 lower: Optional[float] = None,
                 upper: Optional[float] = None) -> None:
        super().__init__()
        p = defaults(actuator_params())
        self.ramp = RampGenerator(
            rate=p["rate"] if rate is None else rate,
            lower=p["lower"] if lower is None else lower,
            upper=p["upper"] if upper is None else upper,
            initial=0.0,
        )
        self.monitor = ValveActuatorMonitor(name, outbox=self._outbox)
        self._safe_to_close = BooleanInput(f"{name} safe-to-close")
        self._safe_to_open = BooleanInput(f"{name} safe-to-open")
        self.name = name

    def init_name(self, name: str) -> None:
        self.name = name
        self.monitor.set_name(name)
        self._safe_to_close.name = f"{name} safe-to-close"
        self._safe_to_open.name = f"{name} safe-to-open"

    def attach_outbox(self, outbox) -> None:
        super().attach_outbox(outbox)
        self.monitor.attach_outbox(outbox)

    # -- safety inputs ----------------------------------------------------

    @property
    def safe_to_close(self) -> bool:
        return self._safe_to_close.value

    @property
    def safe_to_open(self) -> bool:
        return self._safe_to_open.value

    def set_safe_to_close(self, value: bool) -> None:
        """False forces the valve closed."""
        self._safe_to_close.set(value)

    def set_safe_to_open(self, value: bool) -> None:
        """False forces the valve open."""
        self._safe_to_open.set(value)

    def set_safe_to_close_provider(self, provider) -> None:
        self._safe_to_close.attach_provider(provider)

    def set_safe_to_open_provider(self, provider) -> None:
        self._safe_to_open.attach_provider(provider)

    # -- operation --------------------------------------------------------

    def operate_open(self) -> None:
        self.ramp.drive_to_max()

    def operate_close(self) -> None:
        self.ramp.drive_to_min()

    def operate_set_opening(self, opening: float) -> None:
        self.ramp.set_target(opening)

    def stop(self) -> None:
        self.ramp.hold()

    @property
    def opening(self) -> float:
        """Actuator position in %, may run slightly below 0."""
        return self.ramp.output

    def handle_command(self, command: Command) -> bool:
        """
        Momentary switches send +1/-1 while pressed and 0 on release, plain
        switches send True/False, a numeric value is an opening target.
        """
        if command.target != self.name:
            return False

        value = command.value
        if isinstance(value, (bool, int)):
            direction = tri_state(value)
            if direction > 0:
                self.operate_open()
            elif direction < 0:
                self.operate_close()
            else:
                self.stop()
        elif isinstance(value, float):
            self.operate_set_opening(value)
        else:
            logger.warning(f"{self.name}: ignoring command value {value!r}")
        return True

    # -- cycle ------------------------------------------------------------

    def step(self, dt: float, safe_to_close: Optional[bool] = None,
             safe_to_open: Optional[bool] = None) -> None:
        """
        Apply interlocks, move the actuator and report the new position.

        :param dt: Step duration in seconds.
        :param safe_to_close: Explicit safe-to-close value for this step.
        :param safe_to_open: Explicit safe-to-open value for this step.
        """
        close_ok = self._safe_to_close.sample(safe_to_close)
        open_ok = self._safe_to_open.sample(safe_to_open)

        if not close_ok:
            self.ramp.drive_to_min()
        elif not open_ok:
            self.ramp.drive_to_max()

        self.ramp.step(dt)
        self._apply_opening(self.ramp.output)

        self.monitor.set_input(self.ramp.output)
        self.monitor.step(dt)

        self._push_value(self.name, clamp(self.ramp.output, 0.0, 100.0))

    def _apply_opening(self, opening: float) -> None:
        pass


class DummyValve(BaseAutomatedValve):
    """
    A valve that does not exist in the flow network. It only provides a
    position that other simplified models can use.
    """

    def init_opening(self, opening: float) -> None:
        self.ramp.force_output(opening)


class AutomatedValve(BaseAutomatedValve):
    """
    Valve with a flow characteristic, driven by its actuator.

    The hydraulic opening follows the actuator but is limited to 0..100 %.
    A linear characteristic scales the conductance with the opening. With a
    closed factor above 1 the resistance instead rises exponentially from
    resistance_full_open at 100 % to resistance_full_open * closed_factor at
    0 %, so the closed valve still leaks.
    """

    def __init__(self, name: str = "unnamedAutomatedValve",
                 rate: Optional[float] = None,
                 lower: Optional[float] = None,
                 upper: Optional[float] = None) -> None:
        super().__init__(name, rate=rate, lower=lower, upper=upper)
        self.valve_opening: float = 0.0
        self.resistance_full_open: float = 1.0
        self.linear: bool = True
        self.closed_factor: float = 0.0

    def init_characteristic(self, resistance_full_open: float,
                            closed_factor: float = 0.0) -> None:
        """
        Initialize the valve characteristic.

        Args:
            resistance_full_open: Flow resistance at 100 % opening (Pa*s/kg)
            closed_factor: Values above 1.0 select the leaking exponential
                characteristic, anything else the linear one.

        Raises:
            ValueError: If resistance_full_open is not positive
        """
        resistance = require_positive("resistance_full_open", resistance_full_open)
        self.resistance_full_open = resistance
        if closed_factor > 1.0:
            self.linear = False
            self.closed_factor = float(closed_factor)
        else:
            self.linear = True
            self.closed_factor = 0.0
        logger.debug(f"{self.name}: characteristic R={resistance}, "
                     f"linear={self.linear}, closed_factor={self.closed_factor}")

    def init_opening(self, opening: float) -> None:
        self.ramp.force_output(opening)
        self.valve_opening = clamp(opening, 0.0, 100.0)

    def _apply_opening(self, opening: float) -> None:
        self.valve_opening = clamp(opening, 0.0, 100.0)

    def flow_resistance(self) -> float:
        """Flow resistance for the current hydraulic opening."""
        if self.linear:
            if self.valve_opening <= 0.0:
                return math.inf
            return self.resistance_full_open * 100.0 / self.valve_opening
        return self.resistance_full_open * self.closed_factor ** (1.0 - self.valve_opening / 100.0)


class ControlledValve(AutomatedValve):
    """
    Valve positioned by a cascaded controller.

    In automatic mode the controller output is the actuator target. Operator
    commands go to "<name>_control" and carry a ControlCommand; plain valve
    commands are not accepted. A tripped interlock switches the controller to
    manual.
    """

    def __init__(self, name: str = "unnamedControlledValve",
                 controller: Optional[PIController] = None,
                 rate: Optional[float] = None,
                 lower: Optional[float] = None,
                 upper: Optional[float] = None) -> None:
        super().__init__(name, rate=rate, lower=lower, upper=upper)
        self._output_override = False
        self.controller: PIController = None
        self.register_controller(controller or PIController(name))

    @property
    def control_target(self) -> str:
        return f"{self.name}_control"

    def init_name(self, name: str) -> None:
        super().init_name(name)
        self.controller.set_name(name)

    def register_controller(self, controller: PIController) -> None:
        """
        Use controller to position this valve. Its events are queued in the
        valve outbox and its lower limit is set to -1 so the valve is pulled
        firmly closed.
        """
        controller.set_name(self.name)
        controller.attach_outbox(self._outbox)
        if controller.max_output <= -1.0:
            raise ValueError("Controller maximum output must be above -1.")
        controller.set_min_output(-1.0)
        self.controller = controller

    def attach_outbox(self, outbox) -> None:
        super().attach_outbox(outbox)
        self.controller.attach_outbox(outbox)

    def set_input(self, error: float) -> None:
        """Set the control difference the controller works on."""
        self.controller.set_input(error)

    def handle_command(self, command: Command) -> bool:
        if command.target != self.control_target:
            return False

        value = command.value
        if value == ControlCommand.AUTOMATIC:
            self._output_override = False
            self.controller.set_manual_mode(False)
        elif value == ControlCommand.MANUAL_OPERATION:
            self._output_override = False
            self.controller.set_manual_mode(True)
            self.stop()
        elif value in (ControlCommand.OUTPUT_INCREASE, ControlCommand.OUTPUT_DECREASE):
            # remember auto mode to restore it when the operator lets go
            if not self._output_override:
                self._output_override = not self.controller.is_manual_mode()
            self.controller.set_manual_mode(True)
            if value == ControlCommand.OUTPUT_INCREASE:
                self.operate_open()
            else:
                self.operate_close()
        elif value == ControlCommand.OUTPUT_CONTINUE:
            self.stop()
            if self._output_override:
                self.controller.set_manual_mode(False)
                self._output_override = False
        else:
            logger.warning(f"{self.name}: ignoring command value {value!r}")
        return True

    def step(self, dt: float, safe_to_close: Optional[bool] = None,
             safe_to_open: Optional[bool] = None) -> None:
        close_ok = self._safe_to_close.sample(safe_to_close)
        open_ok = self._safe_to_open.sample(safe_to_open)

        if not (close_ok and open_ok) and not self.controller.is_manual_mode():
            logger.info(f"{self.name}: interlock active, controller switched to manual")
            self.controller.set_manual_mode(True)
            self._output_override = False

        if not self.controller.is_manual_mode():
            self.ramp.set_target(self.controller.output)

        super().step(dt, safe_to_close=close_ok, safe_to_open=open_ok)

        # follow-up is the valve position
        self.controller.set_follow_up(self.ramp.output)
        self.controller.step(dt)
