"""
Pump assembly with suction and discharge valves and a start/stop sequencer.

The sequencer only lets the operator do what is allowed with such pumps:
the pump can only be started against a closed discharge valve with the
suction valve open, and it has to wait for a restart lock after each
switch-on.

Sequence index (internal) and visible pump state:

    0  idle         OFFLINE   -> 1 when ready
    1  confirming   OFFLINE   -> 2 after ready_delay
    2  ready        READY     -> 0 when no longer ready, -> 3 on start
    3  armed        READY     -> 4 after arming_delay, -> 0 when not ready
    4  run-up       STARTUP   -> 5 after startup_time, -> 0 when not ready
    5  running      RUNNING   -> 0 on safety trip or loss of suction

Timing uses elapsed-time accumulators advanced by the step duration, not the
wall clock, so a scenario can be fast-forwarded deterministically.
"""

import logging
from enum import Enum
from typing import Optional

from automation.base_component import Commandable, Observable, Steppable
from automation.commands import Command, tri_state
from automation.input_helpers import BooleanInput, clamp, require_positive
from automation.param_templates import actuator_params, defaults, pump_sequence_params
from automation.valves import DummyValve

logger = logging.getLogger(__name__)

# Tolerance on elapsed time comparisons, absorbs float accumulation of dt
_TIME_EPS = 1e-9


class PumpState(Enum):
    OFFLINE = "OFFLINE"
    READY = "READY"
    STARTUP = "STARTUP"
    RUNNING = "RUNNING"


class PumpAssembly(Steppable, Commandable, Observable):
    """
    A pump with suction and discharge valve.

    Sub-components are addressed by name:

    * "<name>_suction_valve"   - True opens, False closes (tri-state accepted)
    * "<name>_discharge_valve" - same
    * "<name>_pump"            - True or +1 starts, False or -1 stops the pump

    Events: "<name>_pump_state" on every visible state change, plus the end
    position events of both valve monitors.

    Telemetry: valve positions under the valve names, "<name>_pump_running"
    and "<name>_pump_effort".
    """

    def __init__(self, name: str = "unnamedPump", valve_rate: Optional[float] = None) -> None:
        super().__init__()
        self.name = name
        actuator = defaults(actuator_params(rate=15.0))
        rate = actuator["rate"] if valve_rate is None else valve_rate

        self.suction_valve = DummyValve(f"{name}_suction_valve", rate=rate,
                                        lower=actuator["lower"], upper=actuator["upper"])
        self.discharge_valve = DummyValve(f"{name}_discharge_valve", rate=rate,
                                          lower=actuator["lower"], upper=actuator["upper"])
        self.suction_valve.attach_outbox(self._outbox)
        self.discharge_valve.attach_outbox(self._outbox)

        seq = defaults(pump_sequence_params())
        self.ready_delay: float = seq["ready_delay"]
        self.arming_delay: float = seq["arming_delay"]
        self.startup_time: float = seq["startup_time"]
        self.restart_lock: float = seq["restart_lock"]
        self.suction_open_min: float = seq["suction_open_min"]
        self.discharge_closed_max: float = seq["discharge_closed_max"]
        self.suction_trip: float = seq["suction_trip"]

        self._safe_to_operate = BooleanInput(f"{name} safe-to-operate")

        self.total_head: float = 0.0
        self.working_pressure: float = 0.0
        self.working_flow: float = 0.0
        self.valve_resistance: float = 0.0
        self.effort: float = 0.0

        self._sequence: int = 0
        self._pump_state: PumpState = PumpState.OFFLINE
        self._reported_state: Optional[PumpState] = None
        self._ready: bool = False
        self._state_elapsed: float = 0.0
        self._since_switch_on: Optional[float] = None

    # -- setup ------------------------------------------------------------

    def init_name(self, name: str) -> None:
        self.name = name
        self.suction_valve.init_name(f"{name}_suction_valve")
        self.discharge_valve.init_name(f"{name}_discharge_valve")
        self._safe_to_operate.name = f"{name} safe-to-operate"

    def init_characteristic(self, total_head: float, working_pressure: float,
                            working_flow: float) -> None:
        """
        Initialize the linear pump characteristic.

        Args:
            total_head: Pressure against a closed discharge valve (Pa)
            working_pressure: Pressure added in the design point (Pa)
            working_flow: Flow in the design point (kg/s)

        Raises:
            ValueError: If the working point is not below the total head or a
                value is not positive
        """
        if working_pressure >= total_head:
            raise ValueError("total_head has to be higher than the working pressure.")
        require_positive("working_flow", working_flow)
        require_positive("working_pressure", working_pressure)

        self.total_head = float(total_head)
        self.working_pressure = float(working_pressure)
        self.working_flow = float(working_flow)
        # split the internal resistance between suction and discharge side
        self.valve_resistance = (total_head - working_pressure) / working_flow * 0.5
        if self._pump_state == PumpState.RUNNING:
            self.effort = self.total_head

    def set_initial_condition(self, pump_active: bool, suction_open: bool,
                              discharge_open: bool) -> None:
        """
        Put the assembly into a state without running the sequence. Open
        valves are placed beyond their end stop and settle on the next step.
        """
        if suction_open:
            self.suction_valve.init_opening(105.0)
        if discharge_open:
            self.discharge_valve.init_opening(105.0)
        if pump_active:
            self._sequence = 5
            self._pump_state = PumpState.RUNNING
            self.effort = self.total_head
        else:
            self._sequence = 0
            self._pump_state = PumpState.OFFLINE
            self.effort = 0.0
        self._state_elapsed = 0.0

    def register_telemetry(self, sink) -> None:
        super().register_telemetry(sink)
        self.suction_valve.register_telemetry(sink)
        self.discharge_valve.register_telemetry(sink)

    # -- safety -----------------------------------------------------------

    @property
    def safe_to_operate(self) -> bool:
        return self._safe_to_operate.value

    def set_safe_to_operate(self, value: bool) -> None:
        """
        Raises:
            ValueError: If a safe-to-operate provider is attached
        """
        self._safe_to_operate.set(value)

    def set_safe_to_operate_provider(self, provider) -> None:
        self._safe_to_operate.attach_provider(provider)

    # -- state ------------------------------------------------------------

    @property
    def pump_state(self) -> PumpState:
        return self._pump_state

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def running(self) -> bool:
        return self._pump_state == PumpState.RUNNING

    @property
    def suction_opening(self) -> float:
        return self.suction_valve.opening

    @property
    def discharge_actuator_opening(self) -> float:
        return self.discharge_valve.opening

    @property
    def discharge_opening(self) -> float:
        """
        Hydraulic discharge opening. Zero while the pump is not running, which
        stands in for the check valve such pumps always have.
        """
        if self._pump_state != PumpState.RUNNING:
            return 0.0
        return clamp(self.discharge_valve.opening, 0.0, 100.0)

    @property
    def seconds_since_switch_on(self) -> Optional[float]:
        return self._since_switch_on

    # -- operation --------------------------------------------------------

    def operate_open_suction_valve(self) -> None:
        self.suction_valve.operate_open()

    def operate_close_suction_valve(self) -> None:
        self.suction_valve.operate_close()

    def operate_open_discharge_valve(self) -> None:
        self.discharge_valve.operate_open()

    def operate_close_discharge_valve(self) -> None:
        self.discharge_valve.operate_close()

    def operate_start_pump(self) -> bool:
        """
        Request a start. Only accepted while READY with a closed discharge
        valve.

        Returns:
            True if the start sequence was armed
        """
        if self._sequence == 2 and self.discharge_valve.opening <= self.discharge_closed_max:
            logger.info(f"{self.name}: start sequence armed")
            self._enter(3)
            return True
        logger.info(f"{self.name}: start rejected in sequence state {self._sequence}")
        return False

    def operate_stop_pump(self) -> None:
        logger.info(f"{self.name}: stop")
        self._trip()

    def handle_command(self, command: Command) -> bool:
        if command.target == self.suction_valve.name:
            return self.suction_valve.handle_command(command)
        if command.target == self.discharge_valve.name:
            return self.discharge_valve.handle_command(command)
        if command.target == f"{self.name}_pump":
            value = command.value
            if not isinstance(value, (bool, int)):
                logger.warning(f"{self.name}: ignoring pump command value {value!r}")
                return True
            direction = tri_state(value)
            if direction > 0:
                self.operate_start_pump()
            elif direction < 0:
                self.operate_stop_pump()
            return True
        return False

    # -- cycle ------------------------------------------------------------

    def step(self, dt: float, safe_to_operate: Optional[bool] = None) -> None:
        """
        Advance valves and sequencer by one step.

        :param dt: Step duration in seconds.
        :param safe_to_operate: Explicit safety value for this step.
        """
        safe = self._safe_to_operate.sample(safe_to_operate)

        self.suction_valve.step(dt)
        self.discharge_valve.step(dt)

        self._state_elapsed += dt
        if self._since_switch_on is not None:
            self._since_switch_on += dt

        self._ready = self._check_ready(safe)
        self._run_sequence(safe)

        if self._pump_state != self._reported_state:
            logger.info(f"{self.name}: pump state {self._reported_state} -> {self._pump_state}")
            self._emit(f"{self.name}_pump_state", self._reported_state, self._pump_state)
            self._reported_state = self._pump_state

        self._push_value(f"{self.name}_pump_running", self.running)
        self._push_value(f"{self.name}_pump_effort", self.effort)

    def _check_ready(self, safe: bool) -> bool:
        if not safe:
            return False
        valves_ok = (self.suction_valve.opening >= self.suction_open_min
                     and self.discharge_valve.opening <= self.discharge_closed_max)
        if self._since_switch_on is None:
            return valves_ok
        return valves_ok and self._elapsed(self._since_switch_on, self.restart_lock)

    def _run_sequence(self, safe: bool) -> None:
        seq = self._sequence

        if seq == 0:
            if self._ready:
                self._enter(1)
        elif seq in (1, 2):
            # the confirming state is checked for abort on the same step,
            # including the step it becomes READY
            if seq == 1 and self._elapsed(self._state_elapsed, self.ready_delay):
                self._sequence = 2
                self._pump_state = PumpState.READY
            if not self._ready:
                self._abort()
        elif seq == 3:
            if self._elapsed(self._state_elapsed, self.arming_delay):
                self._enter(4)
                self._pump_state = PumpState.STARTUP
            elif not self._ready:
                self._abort()
        elif seq == 4:
            if self._elapsed(self._state_elapsed, self.startup_time):
                self._enter(5)
                self._since_switch_on = 0.0
                self._pump_state = PumpState.RUNNING
                self.effort = self.total_head
                logger.info(f"{self.name}: pump switched on")
            elif not self._ready:
                self._abort()
        elif seq == 5:
            if not safe:
                logger.warning(f"{self.name}: safety trip, closing valves")
                self._trip()
                self.operate_close_suction_valve()
                self.operate_close_discharge_valve()
            elif self.suction_valve.opening < self.suction_trip:
                logger.warning(f"{self.name}: loss of suction trip")
                self._trip()

    def _enter(self, sequence: int) -> None:
        self._sequence = sequence
        self._state_elapsed = 0.0

    def _abort(self) -> None:
        logger.debug(f"{self.name}: start sequence aborted in state {self._sequence}")
        self._sequence = 0
        self._pump_state = PumpState.OFFLINE

    def _trip(self) -> None:
        self._sequence = 0
        self._pump_state = PumpState.OFFLINE
        self.effort = 0.0

    @staticmethod
    def _elapsed(elapsed: float, limit: float) -> bool:
        return elapsed >= limit - _TIME_EPS
