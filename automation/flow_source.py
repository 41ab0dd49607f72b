import logging

from automation.base_component import Commandable, Observable, Steppable
from automation.commands import Command, ControlCommand, tri_state
from automation.input_helpers import require_positive
from automation.ramp_generator import RampGenerator
from automation.valve_monitor import ValveActuatorMonitor

logger = logging.getLogger(__name__)


class ControlledFlowSource(Steppable, Commandable, Observable):
    """
    Flow setpoint used in place of a valve.

    The flow is ramped like a valve actuator and reported to telemetry and the
    monitor as 0..100 % of the maximum flow, so it looks like a valve position
    to the operator.
    """

    def __init__(self, name="unnamedFlowSource", max_flow=80.0, rate=20.0):
        super().__init__()
        self.name = name
        self._max_flow = require_positive("max_flow", max_flow)
        self.ramp = RampGenerator(rate=rate, lower=0.0, upper=self._max_flow)
        self.monitor = ValveActuatorMonitor(name, outbox=self._outbox)

    def init_name(self, name):
        self.name = name
        self.monitor.set_name(name)

    def attach_outbox(self, outbox):
        super().attach_outbox(outbox)
        self.monitor.attach_outbox(outbox)

    def init_characteristic(self, max_flow, time):
        """
        Args:
            max_flow: Flow in kg/s at 100 %
            time: Seconds to go from zero to max_flow

        Raises:
            ValueError: If one of the values is not positive
        """
        max_flow = require_positive("max_flow", max_flow)
        time = require_positive("time", time)
        self._max_flow = max_flow
        self.ramp.set_limits(0.0, max_flow)
        self.ramp.set_rate(max_flow / time)

    def init_flow(self, flow):
        self.ramp.force_output(flow)

    @property
    def max_flow(self):
        return self._max_flow

    @property
    def flow(self):
        return self.ramp.output

    @property
    def position(self):
        """Flow as percentage of the maximum flow."""
        return self.ramp.output / self._max_flow * 100.0

    def set_to_max_flow(self):
        self.ramp.drive_to_max()

    def set_to_min_flow(self):
        self.ramp.drive_to_min()

    def stop_at_current_flow(self):
        self.ramp.hold()

    def step(self, dt):
        self.ramp.step(dt)
        position = self.position
        self._push_value(self.name, position)
        self.monitor.set_input(position)
        self.monitor.step(dt)

    def handle_command(self, command: Command) -> bool:
        if command.target != self.name:
            return False

        value = command.value
        if isinstance(value, (bool, int)):
            direction = tri_state(value)
            if direction > 0:
                self.set_to_max_flow()
            elif direction < 0:
                self.set_to_min_flow()
            else:
                self.stop_at_current_flow()
        elif isinstance(value, float):
            self.ramp.set_target(value)
        elif value == ControlCommand.SETPOINT_INCREASE:
            self.set_to_max_flow()
        elif value == ControlCommand.SETPOINT_DECREASE:
            self.set_to_min_flow()
        elif value == ControlCommand.SETPOINT_STOP:
            self.stop_at_current_flow()
        else:
            logger.warning(f"{self.name}: ignoring command value {value!r}")
        return True
