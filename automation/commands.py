"""
Operator commands understood by automation components.

A command is addressed by name. Every component compares the target with its
own name and either consumes the command or reports it as not consumed, so a
command can be offered to a chain of components until one claims it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ControlCommand(Enum):
    """Controller modes and transient operator overrides."""

    AUTOMATIC = "AUTOMATIC"
    MANUAL_OPERATION = "MANUAL_OPERATION"
    OUTPUT_INCREASE = "OUTPUT_INCREASE"
    OUTPUT_DECREASE = "OUTPUT_DECREASE"
    OUTPUT_CONTINUE = "OUTPUT_CONTINUE"
    SETPOINT_INCREASE = "SETPOINT_INCREASE"
    SETPOINT_DECREASE = "SETPOINT_DECREASE"
    SETPOINT_STOP = "SETPOINT_STOP"


CommandValue = Union[bool, int, float, ControlCommand]
"""Payload of a command: switch target, tri-state, opening or control mode."""


@dataclass(frozen=True)
class Command:
    """
    A named operator command.

    Attributes:
        target: Name of the component (or sub-component) the command is for.
        value: Boolean open/close, tri-state -1/0/+1 from a momentary switch,
            numeric opening target or a ControlCommand.
    """

    target: str
    value: CommandValue


def tri_state(value: CommandValue) -> int:
    """
    Map a switch-type payload to a direction.

    Booleans map to +1 (open) and -1 (close); integers keep their sign with
    anything other than -1/+1 meaning stop.

    Returns:
        -1, 0 or +1
    """
    # bool is a subclass of int, test it first
    if isinstance(value, bool):
        return 1 if value else -1
    if isinstance(value, int):
        if value == 1:
            return 1
        if value == -1:
            return -1
        return 0
    raise TypeError(f"Not a switch value: {value!r}")
