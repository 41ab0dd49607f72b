import logging
from typing import Optional

from automation.base_component import Observable

logger = logging.getLogger(__name__)


class ValveActuatorMonitor(Observable):
    """
    Watches an actuator position and reports end position changes.

    Two boolean signals are derived from the opening, "<name>_closed" and
    "<name>_open". An event is queued whenever one of them changes; the first
    step reports both initial values.
    """

    CLOSED_THRESHOLD = 1.0
    OPEN_THRESHOLD = 99.0

    def __init__(self, name: str = "unnamedMonitor", outbox=None) -> None:
        super().__init__(outbox)
        self.name = name
        self._input: float = 0.0
        self._closed: Optional[bool] = None
        self._open: Optional[bool] = None

    def set_name(self, name: str) -> None:
        self.name = name

    def set_input(self, opening: float) -> None:
        self._input = float(opening)

    @property
    def closed(self) -> bool:
        return bool(self._closed)

    @property
    def open(self) -> bool:
        return bool(self._open)

    def step(self, dt: float = 0.0) -> None:
        closed = self._input <= self.CLOSED_THRESHOLD
        fully_open = self._input >= self.OPEN_THRESHOLD

        if closed != self._closed:
            self._emit(f"{self.name}_closed", self._closed, closed)
            self._closed = closed
        if fully_open != self._open:
            self._emit(f"{self.name}_open", self._open, fully_open)
            self._open = fully_open
