"""
Common state and behaviour of closed-loop controllers.
"""

import logging
from typing import Callable, Optional

from automation.base_component import Observable, Steppable
from automation.commands import ControlCommand
from automation.param_templates import controller_params, defaults

logger = logging.getLogger(__name__)


class Controller(Steppable, Observable):
    """
    Base class for controllers working on a control difference.

    Holds error input, follow-up value, output limits and the manual/automatic
    mode. While not in automatic mode, the output of a concrete controller has
    to track the follow-up value so switching to automatic does not make the
    output jump.

    Attributes:
        name: Controller name, used for the mode change event
    """

    def __init__(self, name: str = "unnamed",
                 min_output: Optional[float] = None,
                 max_output: Optional[float] = None) -> None:
        super().__init__()
        p = defaults(controller_params())
        self.name = name
        self._error: float = 0.0
        self._follow_up: float = 0.0
        self._output: float = 0.0
        self._min = float(p["min_output"] if min_output is None else min_output)
        self._max = float(p["max_output"] if max_output is None else max_output)
        if self._min >= self._max:
            raise ValueError(
                f"Minimum output {self._min} must be below maximum output {self._max}.")

        self._mode = ControlCommand.MANUAL_OPERATION
        self._last_mode: Optional[ControlCommand] = None

        self._input_provider: Optional[Callable[[], float]] = None
        self._follow_up_provider: Optional[Callable[[], float]] = None

    def set_name(self, name: str) -> None:
        self.name = name

    @property
    def event_name(self) -> str:
        return f"{self.name}_control_state"

    # -- inputs ---------------------------------------------------------

    @property
    def error(self) -> float:
        return self._error

    def set_input(self, error: float) -> None:
        """
        Set the control difference.

        Raises:
            ValueError: If an input provider is attached
        """
        if self._input_provider is not None:
            raise ValueError(
                f"{self.name}: an input provider is set, "
                "using set_input makes no sense.")
        self._error = float(error)

    def set_input_provider(self, provider: Callable[[], float]) -> None:
        """Pull the control difference from provider on every step."""
        self._input_provider = provider

    @property
    def follow_up(self) -> float:
        return self._follow_up

    def set_follow_up(self, value: float) -> None:
        """
        Set the value the output tracks while not in automatic mode.

        Raises:
            ValueError: If a follow-up provider is attached
        """
        if self._follow_up_provider is not None:
            raise ValueError(
                f"{self.name}: a follow-up provider is set, "
                "using set_follow_up makes no sense.")
        self._follow_up = float(value)

    def set_follow_up_provider(self, provider: Callable[[], float]) -> None:
        self._follow_up_provider = provider

    # -- output and limits ----------------------------------------------

    @property
    def output(self) -> float:
        return self._output

    @property
    def max_output(self) -> float:
        return self._max

    @property
    def min_output(self) -> float:
        return self._min

    def set_max_output(self, value: float) -> None:
        value = float(value)
        if value <= self._min:
            raise ValueError(
                f"Maximum output {value} must be above minimum output {self._min}.")
        self._max = value

    def set_min_output(self, value: float) -> None:
        value = float(value)
        if value >= self._max:
            raise ValueError(
                f"Minimum output {value} must be below maximum output {self._max}.")
        self._min = value

    # -- mode -------------------------------------------------------------

    @property
    def mode(self) -> ControlCommand:
        return self._mode

    def is_manual_mode(self) -> bool:
        return self._mode != ControlCommand.AUTOMATIC

    def set_manual_mode(self, manual: bool) -> None:
        self._mode = (ControlCommand.MANUAL_OPERATION if manual
                      else ControlCommand.AUTOMATIC)

    # -- cycle ------------------------------------------------------------

    def step(self, dt: float) -> None:
        """
        Sample providers and report a mode change. Concrete controllers call
        this first and compute their output afterwards.
        """
        if self._input_provider is not None:
            self._error = float(self._input_provider())
        if self._follow_up_provider is not None:
            self._follow_up = float(self._follow_up_provider())

        if self._mode != self._last_mode:
            logger.info(f"{self.name}: control mode {self._last_mode} -> {self._mode}")
            self._emit(self.event_name, self._last_mode, self._mode)
            self._last_mode = self._mode

    def __str__(self) -> str:
        return f"{self.name}-Controller"
