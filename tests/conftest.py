"""
Pytest configuration and shared fixtures for the automation tests.
"""

import os
import sys
from pathlib import Path

# Add parent directory to path so the packages import without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Headless plotting
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

STEP = 0.1


@pytest.fixture
def recorder():
    """Create a TelemetryRecorder."""
    from simcore.services.telemetry_service import TelemetryRecorder
    return TelemetryRecorder()


@pytest.fixture
def engine(recorder):
    """Create a CycleEngine with a recorder and 0.1 s cycle."""
    from simcore.engine.cycle_engine import CycleEngine
    return CycleEngine(step_time=STEP, telemetry=recorder)


@pytest.fixture
def valve():
    """Create an AutomatedValve with a linear characteristic."""
    from automation.valves import AutomatedValve
    v = AutomatedValve("FeedValve")
    v.init_characteristic(resistance_full_open=2.0)
    return v


@pytest.fixture
def pump():
    """Create a PumpAssembly with open suction and closed discharge valve."""
    from automation.pump_assembly import PumpAssembly
    p = PumpAssembly("FeedPump")
    p.init_characteristic(total_head=8e5, working_pressure=5e5, working_flow=20.0)
    p.set_initial_condition(pump_active=False, suction_open=True, discharge_open=False)
    return p


@pytest.fixture
def ready_pump(pump):
    """A pump stepped until it reports READY."""
    from automation.pump_assembly import PumpState
    for _ in range(100):
        pump.step(STEP)
        if pump.pump_state == PumpState.READY:
            return pump
    raise AssertionError("Pump did not become ready")
