"""
Automation package - Equipment automation for the process simulator.
Contains actuators, controllers, automated valves and the pump sequencer.
"""

from automation.commands import Command, ControlCommand
from automation.controller import Controller
from automation.flow_source import ControlledFlowSource
from automation.integrator import Integrator
from automation.pi_controller import PIController
from automation.pump_assembly import PumpAssembly, PumpState
from automation.ramp_generator import RampGenerator
from automation.setpoint import Setpoint
from automation.valve_monitor import ValveActuatorMonitor
from automation.valves import AutomatedValve, ControlledValve, DummyValve

__all__ = [
    'Command',
    'ControlCommand',
    'Controller',
    'ControlledFlowSource',
    'Integrator',
    'PIController',
    'PumpAssembly',
    'PumpState',
    'RampGenerator',
    'Setpoint',
    'ValveActuatorMonitor',
    'AutomatedValve',
    'ControlledValve',
    'DummyValve',
]
