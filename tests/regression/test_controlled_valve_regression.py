"""
Regression tests for operator overrides of controlled valves.

An OUTPUT_INCREASE/DECREASE nudge remembers whether automatic mode was active
so OUTPUT_CONTINUE can restore it. An explicit mode command in between is the
operator's decision and must clear that memory.
"""

import pytest

DT = 0.1


def _command(valve, value):
    from automation.commands import Command
    return valve.handle_command(Command(valve.control_target, value))


def _steps(valve, count):
    for _ in range(count):
        valve.step(DT)


@pytest.mark.regression
class TestOverrideMemory:
    """Explicit mode commands clear the restore-automatic memory."""

    def _valve(self):
        from automation.valves import ControlledValve
        return ControlledValve("Outlet")

    def test_manual_choice_survives_nudge(self):
        from automation.commands import ControlCommand
        valve = self._valve()
        _command(valve, ControlCommand.AUTOMATIC)
        _steps(valve, 2)
        _command(valve, ControlCommand.OUTPUT_INCREASE)
        _steps(valve, 2)
        _command(valve, ControlCommand.MANUAL_OPERATION)
        _steps(valve, 2)
        _command(valve, ControlCommand.OUTPUT_INCREASE)
        _steps(valve, 2)
        _command(valve, ControlCommand.OUTPUT_CONTINUE)
        _steps(valve, 2)
        assert valve.controller.is_manual_mode()

    def test_automatic_choice_clears_memory(self):
        from automation.commands import ControlCommand
        valve = self._valve()
        _command(valve, ControlCommand.AUTOMATIC)
        _command(valve, ControlCommand.OUTPUT_DECREASE)
        _command(valve, ControlCommand.AUTOMATIC)
        _steps(valve, 2)
        _command(valve, ControlCommand.MANUAL_OPERATION)
        _command(valve, ControlCommand.OUTPUT_DECREASE)
        _command(valve, ControlCommand.OUTPUT_CONTINUE)
        assert valve.controller.is_manual_mode()

    def test_nudge_from_automatic_still_restores(self):
        from automation.commands import ControlCommand
        valve = self._valve()
        _command(valve, ControlCommand.AUTOMATIC)
        _command(valve, ControlCommand.OUTPUT_INCREASE)
        _steps(valve, 2)
        _command(valve, ControlCommand.OUTPUT_DECREASE)
        _steps(valve, 1)
        _command(valve, ControlCommand.OUTPUT_CONTINUE)
        assert not valve.controller.is_manual_mode()
