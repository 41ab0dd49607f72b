import logging

from automation.input_helpers import clamp, require_positive

logger = logging.getLogger(__name__)


class RampGenerator:
    """
    Rate-limited setpoint integrator.

    The output moves towards a target with at most ``rate`` units per second
    and never leaves [lower_limit, upper_limit]. Used to mimic motor-driven
    actuators and operator setpoints that can only be changed slowly.
    """

    def __init__(self, rate=25.0, lower=0.0, upper=100.0, initial=None):
        self._rate = require_positive("rate", rate)
        if lower >= upper:
            raise ValueError(
                f"Lower limit {lower} must be below upper limit {upper}.")
        self._lower = float(lower)
        self._upper = float(upper)
        start = self._lower if initial is None else clamp(initial, self._lower, self._upper)
        self._output = start
        self._target = start

    @property
    def output(self):
        return self._output

    @property
    def target(self):
        return self._target

    @property
    def rate(self):
        return self._rate

    @property
    def lower_limit(self):
        return self._lower

    @property
    def upper_limit(self):
        return self._upper

    def set_rate(self, rate):
        """Set the maximum change of the output per second."""
        self._rate = require_positive("rate", rate)

    def set_limits(self, lower, upper):
        """
        Set the output bounds. The pending target is clamped to the new range,
        the output follows on the next step.
        """
        if lower >= upper:
            raise ValueError(
                f"Lower limit {lower} must be below upper limit {upper}.")
        self._lower = float(lower)
        self._upper = float(upper)
        self._target = clamp(self._target, self._lower, self._upper)

    def set_upper_limit(self, upper):
        self.set_limits(self._lower, upper)

    def set_lower_limit(self, lower):
        self.set_limits(lower, self._upper)

    def drive_to_max(self):
        self._target = self._upper

    def drive_to_min(self):
        self._target = self._lower

    def hold(self):
        """Stop at the current output."""
        self._target = clamp(self._output, self._lower, self._upper)

    def set_target(self, value):
        self._target = clamp(value, self._lower, self._upper)

    def force_output(self, value):
        """
        Overwrite the output without rate limiting.

        Meant for initial conditions. The value is not clamped here, so an
        actuator can be placed beyond its end stop and is pulled back onto
        the bound by the next step.
        """
        self._output = float(value)
        self._target = clamp(value, self._lower, self._upper)

    def step(self, dt):
        if dt <= 0:
            return self._output

        max_step = self._rate * dt
        delta = self._target - self._output
        if abs(delta) <= max_step:
            value = self._target
        else:
            value = self._output + (max_step if delta > 0 else -max_step)

        self._output = clamp(value, self._lower, self._upper)
        return self._output

    def __repr__(self):
        return (f"RampGenerator(output={self._output:.3f}, target={self._target:.3f}, "
                f"rate={self._rate}, limits=[{self._lower}, {self._upper}])")
