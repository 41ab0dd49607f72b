"""
Example: Pump start-up sequence

This example runs a feed pump through the operator start-up:
- open the suction valve
- wait for READY (suction open, discharge closed, ready delay)
- start the pump, wait for RUNNING
- open the discharge valve

Pump state changes are printed as they happen and the recorded valve
positions and pump effort are saved as a plot.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from automation.commands import Command
from automation.pump_assembly import PumpAssembly, PumpState
from simcore.config_manager import get_config
from simcore.engine.cycle_engine import CycleEngine
from simcore.logging_config import setup_logging
from simcore.plotting.trace_plot import TracePlotter
from simcore.services.telemetry_service import TelemetryRecorder


def run_pump_startup():
    """Start a feed pump and save its traces."""
    config = get_config()
    setup_logging(settings=config.get("logging"))

    recorder = TelemetryRecorder(limit=config.get("telemetry.limit", 6000))
    engine = CycleEngine(telemetry=recorder)
    config.apply_to_engine(engine)

    pump = PumpAssembly("FeedPump")
    pump.init_characteristic(total_head=8e5, working_pressure=5e5, working_flow=20.0)
    config.apply_to_pump(pump)
    engine.add_component(pump)

    def print_state(event):
        if event.name == "FeedPump_pump_state":
            print(f"{engine.sim_time:6.1f} s  {event.old} -> {event.new}")

    engine.subscribe(print_state)

    engine.dispatch(Command("FeedPump_suction_valve", True))
    engine.run_until(lambda: pump.pump_state == PumpState.READY, timeout=30.0)

    engine.dispatch(Command("FeedPump_pump", True))
    engine.run_until(lambda: pump.running, timeout=10.0)

    engine.dispatch(Command("FeedPump_discharge_valve", True))
    engine.run(10.0)

    output_path = os.path.join(os.path.dirname(__file__), 'pump_startup.png')
    TracePlotter(recorder, title="Feed pump start-up").save(output_path, [
        ["FeedPump_suction_valve", "FeedPump_discharge_valve"],
        ["FeedPump_pump_running"],
    ])
    print(f"Saved: {output_path}")
    return output_path


if __name__ == "__main__":
    run_pump_startup()
