import logging
from typing import Callable, Optional

from automation.base_component import Steppable
from automation.input_helpers import require_positive

logger = logging.getLogger(__name__)


class Integrator(Steppable):
    """
    Discrete time integrator with limited output.

    y[k+1] = clip(y[k] + u * dt / ti, min, max)
    """

    def __init__(self, ti: float = 10.0, min_output: float = 0.0,
                 max_output: float = 100.0, initial: float = 0.0) -> None:
        if min_output >= max_output:
            raise ValueError(
                f"Minimum output {min_output} must be below maximum output {max_output}.")
        self._ti = require_positive("ti", ti)
        self._min = float(min_output)
        self._max = float(max_output)
        self._input = 0.0
        self._output = float(initial)
        self._input_provider: Optional[Callable[[], float]] = None

    @property
    def input(self) -> float:
        return self._input

    def set_input(self, value: float) -> None:
        if self._input_provider is not None:
            raise ValueError(
                "An input provider is set, using set_input makes no sense.")
        self._input = float(value)

    def set_input_provider(self, provider: Callable[[], float]) -> None:
        self._input_provider = provider

    @property
    def output(self) -> float:
        return self._output

    @property
    def ti(self) -> float:
        return self._ti

    def set_ti(self, ti: float) -> None:
        self._ti = require_positive("ti", ti)

    def set_limits(self, min_output: float, max_output: float) -> None:
        if min_output >= max_output:
            raise ValueError(
                f"Minimum output {min_output} must be below maximum output {max_output}.")
        self._min = float(min_output)
        self._max = float(max_output)

    def step(self, dt: float) -> None:
        if self._input_provider is not None:
            self._input = float(self._input_provider())

        value = self._output + self._input * dt / self._ti

        if value > self._max:
            self._output = self._max
        elif value < self._min:
            self._output = self._min
        else:
            self._output = value
