import logging

from automation.base_component import Commandable, Observable, Steppable
from automation.commands import Command, ControlCommand
from automation.ramp_generator import RampGenerator

logger = logging.getLogger(__name__)


class Setpoint(Steppable, Commandable, Observable):
    """
    Operator setpoint changed with increase/decrease/stop commands.

    Listens to commands carrying its own name and pushes its value to the
    telemetry sink under the same name on each step.
    """

    def __init__(self, name="unnamedSetpoint", rate=1.0, lower=0.0, upper=100.0, initial=None):
        super().__init__()
        self.name = name
        self.ramp = RampGenerator(rate=rate, lower=lower, upper=upper, initial=initial)

    @property
    def value(self):
        return self.ramp.output

    def init_value(self, value):
        self.ramp.force_output(value)

    def step(self, dt):
        self.ramp.step(dt)
        self._push_value(self.name, self.ramp.output)

    def handle_command(self, command: Command) -> bool:
        if command.target != self.name:
            return False

        if command.value == ControlCommand.SETPOINT_INCREASE:
            self.ramp.drive_to_max()
        elif command.value == ControlCommand.SETPOINT_DECREASE:
            self.ramp.drive_to_min()
        elif command.value == ControlCommand.SETPOINT_STOP:
            self.ramp.hold()
        else:
            logger.warning(f"{self.name}: ignoring command value {command.value!r}")
        return True
