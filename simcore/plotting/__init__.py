"""
Plotting module for the automation core.
Contains TracePlotter for recorded telemetry.
"""

from simcore.plotting.trace_plot import TracePlotter

__all__ = ['TracePlotter']
