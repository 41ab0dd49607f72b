"""
Trace plotter for recorded telemetry.

Draws selected signals of a TelemetryRecorder over simulation time and saves
the figure as an image, e.g. to review a pump start-up after a headless run.
"""

import logging
import numpy as np
from pathlib import Path

logger = logging.getLogger(__name__)


class TracePlotter:
    """Plot telemetry traces, one axis per signal group."""

    QUALITY_PRESETS = {
        'low': 72,
        'medium': 100,
        'high': 150
    }

    def __init__(self, recorder, title="Telemetry"):
        """
        Initialize the plotter.

        Args:
            recorder: TelemetryRecorder (or anything with timeline and trace(name))
            title: Figure title
        """
        self.recorder = recorder
        self.title = title

    def _collect(self, groups):
        timeline = np.asarray(self.recorder.timeline)
        if timeline.size == 0:
            raise ValueError("Nothing recorded yet, run the engine first.")
        data = []
        for group in groups:
            data.append([(name, np.asarray(self.recorder.trace(name))) for name in group])
        return timeline, data

    def create_figure(self, groups, figsize=(8, 6), dpi=100):
        """
        Build the figure without saving it.

        Args:
            groups: List of signal name lists, one subplot per list
            figsize: Figure size in inches
            dpi: Resolution

        Returns:
            matplotlib Figure
        """
        import matplotlib.pyplot as plt

        if not groups:
            raise ValueError("At least one group of signals is required.")
        timeline, data = self._collect(groups)

        fig, axes = plt.subplots(len(groups), 1, sharex=True, figsize=figsize,
                                 dpi=dpi, squeeze=False)
        for ax, group in zip(axes[:, 0], data):
            for name, y in group:
                ax.step(timeline, y, where='post', label=name)
            ax.grid(True, alpha=0.3)
            ax.legend(loc='best', fontsize='small')
        axes[0, 0].set_title(self.title)
        axes[-1, 0].set_xlabel('Time (s)')
        plt.tight_layout()
        return fig

    def save(self, filepath, groups, quality='medium', figsize=(8, 6)):
        """
        Plot the groups and save the figure.

        Args:
            filepath: Output path, format taken from the suffix (png, svg, pdf)
            groups: List of signal name lists, one subplot per list
            quality: 'low', 'medium' or 'high'

        Returns:
            Path of the written file
        """
        import matplotlib.pyplot as plt

        dpi = self.QUALITY_PRESETS.get(quality, 100)
        filepath = Path(filepath)
        fig = self.create_figure(groups, figsize=figsize, dpi=dpi)
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(filepath, dpi=dpi)
            logger.info(f"Saved trace plot to {filepath}")
        finally:
            plt.close(fig)
        return filepath
