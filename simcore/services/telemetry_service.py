import logging
from typing import Any, Dict, List, Optional

import numpy as np

from automation.input_helpers import safe_float

logger = logging.getLogger(__name__)


class TelemetryRecorder:
    """
    Collects values pushed by components and keeps a per-step trace.

    Components call set_value() during their step; the engine calls commit()
    once per cycle to append the latest value of every known signal. Signals
    first seen later are padded with NaN for the cycles before. Booleans are
    stored as 0.0/1.0, values without a numeric form as NaN.

    This is a live recorder for one scenario, not a historian: retention is
    limited to the newest ``limit`` samples.
    """

    def __init__(self, limit=6000):
        if limit <= 0:
            raise ValueError("limit has to be a positive number of samples.")
        self.limit = int(limit)
        self._latest: Dict[str, Any] = {}
        self._times: List[float] = []
        self._traces: Dict[str, List[float]] = {}

    def set_value(self, name, value):
        """Store the newest value of a signal (TelemetrySink interface)."""
        if name not in self._latest:
            logger.info(f"New telemetry signal: {name}")
        self._latest[name] = value

    def latest(self, name, default=None):
        return self._latest.get(name, default)

    @property
    def names(self):
        return sorted(self._latest)

    def commit(self, time):
        """
        Append one sample row at the given simulation time.

        Args:
            time (float): Simulation time of the finished cycle
        """
        n_before = len(self._times)
        self._times.append(float(time))
        for name, value in self._latest.items():
            trace = self._traces.get(name)
            if trace is None:
                trace = [np.nan] * n_before
                self._traces[name] = trace
            trace.append(safe_float(value, np.nan))

        if len(self._times) > self.limit:
            drop = len(self._times) - self.limit
            del self._times[:drop]
            for trace in self._traces.values():
                del trace[:drop]

    @property
    def timeline(self):
        return np.array(self._times, dtype=float)

    def trace(self, name):
        """
        Recorded samples of one signal.

        Raises:
            KeyError: If the signal was never committed
        """
        return np.array(self._traces[name], dtype=float)

    def to_run(self, names: Optional[List[str]] = None, run_name="Run"):
        """
        Export recorded traces as a run entry.

        Returns:
            dict with "name", "timeline" and "traces" (list of {"name", "y"})
        """
        selected = names if names is not None else sorted(self._traces)
        return {
            "name": run_name,
            "timeline": self.timeline,
            "traces": [{"name": n, "y": self.trace(n)} for n in selected],
        }

    def clear(self):
        self._latest.clear()
        self._times.clear()
        self._traces.clear()
