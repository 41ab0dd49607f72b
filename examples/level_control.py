"""
Example: Tank level control

This example demonstrates a cascaded level loop:
- constant inflow from a ControlledFlowSource
- tank modelled as an Integrator
- outlet ControlledValve with PI controller on the level error
- operator setpoint raised after the loop has settled

The level and valve position traces are saved as a plot.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from automation.base_component import Steppable
from automation.commands import Command, ControlCommand
from automation.flow_source import ControlledFlowSource
from automation.integrator import Integrator
from automation.pi_controller import PIController
from automation.setpoint import Setpoint
from automation.valves import ControlledValve
from simcore.engine.cycle_engine import CycleEngine
from simcore.logging_config import setup_logging
from simcore.plotting.trace_plot import TracePlotter
from simcore.services.telemetry_service import TelemetryRecorder


def create_level_control_example():
    """Run the level loop for ten minutes of simulation time."""
    setup_logging()
    recorder = TelemetryRecorder()
    engine = CycleEngine(step_time=0.1, telemetry=recorder)

    setpoint = Setpoint("Level_sp", rate=1.0, initial=40.0)
    inflow = ControlledFlowSource("Inflow", max_flow=80.0, rate=20.0)
    inflow.init_flow(40.0)
    outlet = ControlledValve("Outlet", controller=PIController(gain=5.0, integral_time=10.0))
    outlet.init_characteristic(resistance_full_open=1.0)
    tank = Integrator(ti=10.0, initial=20.0)

    # Opening the outlet lowers the level
    outlet.controller.set_input_provider(lambda: tank.output - setpoint.value)
    tank.set_input_provider(lambda: 0.5 * inflow.position - 0.5 * outlet.valve_opening)

    for component in (setpoint, inflow, outlet, tank):
        engine.add_component(component)
    engine.add_component(_LevelProbe(tank, recorder))

    engine.dispatch(Command("Outlet_control", ControlCommand.AUTOMATIC))
    engine.run(300.0)
    engine.dispatch(Command("Level_sp", ControlCommand.SETPOINT_INCREASE))
    engine.run(15.0)
    engine.dispatch(Command("Level_sp", ControlCommand.SETPOINT_STOP))
    engine.run(285.0)

    print(f"Level {tank.output:.2f} % at setpoint {setpoint.value:.2f} %, "
          f"outlet {outlet.opening:.1f} %")

    output_path = os.path.join(os.path.dirname(__file__), 'level_control.png')
    TracePlotter(recorder, title="Level control").save(output_path, [
        ["Level", "Level_sp"],
        ["Outlet", "Inflow"],
    ])
    print(f"Saved: {output_path}")
    return output_path


class _LevelProbe(Steppable):
    """Pushes the tank level to telemetry."""

    def __init__(self, tank, sink):
        self._tank = tank
        self._sink = sink

    def step(self, dt):
        self._sink.set_value("Level", self._tank.output)


if __name__ == "__main__":
    create_level_control_example()
