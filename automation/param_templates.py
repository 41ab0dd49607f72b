"""
Reusable parameter definition templates for automation components.

Each factory returns parameter definitions (type, default, doc) in the same
shape for every component kind, so defaults live in one place and the
configuration manager can expose them.

Usage:
    from automation.param_templates import actuator_params, defaults

    params = defaults(actuator_params(rate=15.0))
    ramp = RampGenerator(rate=params["rate"], ...)
"""

from typing import Any, Dict

# Type alias for parameter dictionary
ParamDict = Dict[str, Dict[str, Any]]


def defaults(params: ParamDict) -> Dict[str, Any]:
    """
    Extract the default values of a parameter definition dict.

    Args:
        params: Parameter definitions

    Returns:
        Mapping of parameter name to its default value
    """
    return {name: definition["default"] for name, definition in params.items()}


def actuator_params(
    rate: float = 25.0,
    lower: float = -5.0,
    upper: float = 100.0
) -> ParamDict:
    """
    Create drive parameters for a motor-operated valve actuator.

    The lower limit sits below 0 % so a closing valve runs a little past the
    closed position.

    Args:
        rate: Travel speed in %/s
        lower: Lower end of travel in %
        upper: Upper end of travel in %

    Returns:
        Parameter dict with rate, lower and upper definitions
    """
    return {
        "rate": {
            "type": "float",
            "default": rate,
            "doc": "Actuator travel speed (%/s)"
        },
        "lower": {
            "type": "float",
            "default": lower,
            "doc": "Lower end of travel (%)"
        },
        "upper": {
            "type": "float",
            "default": upper,
            "doc": "Upper end of travel (%)"
        }
    }


def controller_params(
    gain: float = 1.0,
    integral_time: float = 10.0,
    min_output: float = 0.0,
    max_output: float = 100.0
) -> ParamDict:
    """
    Create PI controller parameters.

    Args:
        gain: Proportional gain
        integral_time: Integral time constant in seconds
        min_output: Lower output limit
        max_output: Upper output limit

    Returns:
        Parameter dict with gain, integral_time, min_output, max_output
    """
    return {
        "gain": {
            "type": "float",
            "default": gain,
            "doc": "Proportional gain"
        },
        "integral_time": {
            "type": "float",
            "default": integral_time,
            "doc": "Integral time constant (s)"
        },
        "min_output": {
            "type": "float",
            "default": min_output,
            "doc": "Lower output limit"
        },
        "max_output": {
            "type": "float",
            "default": max_output,
            "doc": "Upper output limit"
        }
    }


def pump_sequence_params(
    ready_delay: float = 1.5,
    arming_delay: float = 0.8,
    startup_time: float = 3.0,
    restart_lock: float = 30.0
) -> ParamDict:
    """
    Create the timing and threshold parameters of the pump start sequence.

    Args:
        ready_delay: Time preconditions must hold before READY (s)
        arming_delay: Delay between start command and STARTUP (s)
        startup_time: Duration of STARTUP before RUNNING (s)
        restart_lock: Minimum time between two switch-on events (s)

    Returns:
        Parameter dict with timings and valve thresholds
    """
    return {
        "ready_delay": {
            "type": "float",
            "default": ready_delay,
            "doc": "Confirmation time before READY (s)"
        },
        "arming_delay": {
            "type": "float",
            "default": arming_delay,
            "doc": "Delay after start command (s)"
        },
        "startup_time": {
            "type": "float",
            "default": startup_time,
            "doc": "Run-up time before RUNNING (s)"
        },
        "restart_lock": {
            "type": "float",
            "default": restart_lock,
            "doc": "Restart lock after switch-on (s)"
        },
        "suction_open_min": {
            "type": "float",
            "default": 95.0,
            "doc": "Suction opening required for READY (%)"
        },
        "discharge_closed_max": {
            "type": "float",
            "default": 1.0,
            "doc": "Discharge opening allowed for READY and start (%)"
        },
        "suction_trip": {
            "type": "float",
            "default": 20.0,
            "doc": "Suction opening below which a running pump trips (%)"
        }
    }
