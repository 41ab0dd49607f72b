import logging
from typing import Optional

from automation.commands import ControlCommand
from automation.controller import Controller
from automation.input_helpers import require_positive
from automation.param_templates import controller_params, defaults

logger = logging.getLogger(__name__)


class PIController(Controller):
    """
    Proportional-integral controller with output limits.

    u = K*e + K/TN * integral(e)

    The integral part is held at the limit while the output saturates so the
    controller does not wind up. Outside automatic mode the integral part is
    recomputed every step so that the output equals the follow-up value,
    giving a bumpless switch to automatic.

    A controller driving a valve can be given a slightly negative lower limit
    (e.g. -1) so the valve is pushed firmly closed.
    """

    def __init__(self, name: str = "unnamed",
                 gain: Optional[float] = None,
                 integral_time: Optional[float] = None,
                 min_output: Optional[float] = None,
                 max_output: Optional[float] = None) -> None:
        super().__init__(name, min_output=min_output, max_output=max_output)
        p = defaults(controller_params())
        self._gain = float(p["gain"] if gain is None else gain)
        self._integral_time = require_positive(
            "integral_time", p["integral_time"] if integral_time is None else integral_time)
        self._integral: float = 0.0
        self._freeze_integrator: bool = False

    @property
    def gain(self) -> float:
        return self._gain

    def set_gain(self, gain: float) -> None:
        self._gain = float(gain)

    @property
    def integral_time(self) -> float:
        return self._integral_time

    def set_integral_time(self, integral_time: float) -> None:
        """
        Time after which the integral part has added K times the input again.

        Raises:
            ValueError: If integral_time is not positive
        """
        self._integral_time = require_positive("integral_time", integral_time)

    @property
    def integral(self) -> float:
        return self._integral

    @property
    def integrator_frozen(self) -> bool:
        return self._freeze_integrator

    def set_integrator_frozen(self, frozen: bool) -> None:
        self._freeze_integrator = bool(frozen)

    def step(self, dt: float) -> None:
        super().step(dt)

        automatic = self._mode == ControlCommand.AUTOMATIC

        if automatic and not self._freeze_integrator:
            d_integral = self._error * self._gain * dt / self._integral_time
        else:
            d_integral = 0.0

        proportional = self._error * self._gain

        # Track the follow-up value so the switch to automatic is bumpless
        if not automatic:
            self._integral = self._follow_up - proportional

        integral = self._integral + d_integral
        total = integral + proportional

        if total > self._max:
            self._output = self._max
            self._integral = self._max - proportional
        elif total < self._min:
            self._output = self._min
            self._integral = self._min - proportional
        else:
            self._output = total
            self._integral = integral

        if not automatic:
            self._output = self._follow_up
