"""
Type definitions for the automation core.

Common type aliases used by the engine, telemetry and plotting code.
"""

from typing import Any, Callable, Dict, Union

import numpy as np
from numpy.typing import NDArray

# Simulation types
Timeline = NDArray[np.float64]
"""Array of simulation times, one per committed cycle."""

Trace = NDArray[np.float64]
"""Recorded samples of one telemetry signal, aligned to a Timeline."""

SignalName = str
"""Stable telemetry or event name, e.g. "FeedPump_pump_running"."""

TelemetryValue = Union[float, int, bool]
"""A value pushed to telemetry."""

RunData = Dict[str, Any]
"""Exported run: {'name': str, 'timeline': Timeline, 'traces': [{'name', 'y'}]}."""

# Callback types
StepInputs = Callable[[], Dict[str, Any]]
"""Returns keyword arguments for a component's step(), sampled every cycle."""

StopPredicate = Callable[[], bool]
"""Condition checked after each cycle by CycleEngine.run_until."""
