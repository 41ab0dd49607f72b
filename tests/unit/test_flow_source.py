"""
Unit tests for ControlledFlowSource.
"""

import pytest
import numpy as np


@pytest.mark.unit
class TestControlledFlowSource:
    """Flow setpoint that behaves like a valve."""

    def test_switch_to_max_flow(self, recorder):
        from automation.commands import Command
        from automation.flow_source import ControlledFlowSource
        source = ControlledFlowSource("Feed", max_flow=80.0, rate=20.0)
        source.register_telemetry(recorder)
        assert source.handle_command(Command("Feed", True))
        for _ in range(40):
            source.step(0.1)
        assert source.flow == 80.0
        assert source.position == 100.0
        assert recorder.latest("Feed") == 100.0
        assert source.monitor.open

    def test_characteristic(self):
        from automation.flow_source import ControlledFlowSource
        source = ControlledFlowSource("Feed")
        source.init_characteristic(max_flow=40.0, time=10.0)
        assert source.max_flow == 40.0
        assert source.ramp.rate == 4.0
        source.set_to_max_flow()
        source.step(1.0)
        assert np.isclose(source.flow, 4.0)
        assert np.isclose(source.position, 10.0)

    @pytest.mark.parametrize("max_flow,time", [(0.0, 10.0), (10.0, 0.0), (-1.0, 5.0)])
    def test_invalid_characteristic(self, max_flow, time):
        from automation.flow_source import ControlledFlowSource
        source = ControlledFlowSource("Feed")
        with pytest.raises(ValueError):
            source.init_characteristic(max_flow, time)
        assert source.max_flow == 80.0

    def test_numeric_and_setpoint_commands(self):
        from automation.commands import Command, ControlCommand
        from automation.flow_source import ControlledFlowSource
        source = ControlledFlowSource("Feed", max_flow=80.0, rate=1000.0)
        source.handle_command(Command("Feed", 40.0))
        source.step(0.1)
        assert source.position == 50.0

        source.handle_command(Command("Feed", ControlCommand.SETPOINT_DECREASE))
        source.step(0.1)
        assert source.flow == 0.0

        source.init_flow(20.0)
        source.handle_command(Command("Feed", ControlCommand.SETPOINT_STOP))
        source.step(0.1)
        assert source.flow == 20.0

        assert not source.handle_command(Command("Other", True))

    def test_stop_at_current_flow(self):
        from automation.flow_source import ControlledFlowSource
        source = ControlledFlowSource("Feed", max_flow=80.0, rate=20.0)
        source.set_to_max_flow()
        source.step(0.5)
        source.stop_at_current_flow()
        source.step(1.0)
        assert source.flow == 10.0
        source.set_to_min_flow()
        source.step(1.0)
        assert source.flow == 0.0
