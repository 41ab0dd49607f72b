"""
Unit tests for TracePlotter.
"""

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")


def _recorder_with_data():
    from simcore.services.telemetry_service import TelemetryRecorder
    recorder = TelemetryRecorder()
    for i in range(20):
        recorder.set_value("P_suction_valve", min(100.0, i * 10.0))
        recorder.set_value("P_pump_running", i > 10)
        recorder.commit((i + 1) * 0.1)
    return recorder


@pytest.mark.unit
class TestTracePlotter:
    """Headless export of recorded traces."""

    def test_save_png(self, tmp_path):
        from simcore.plotting.trace_plot import TracePlotter
        plotter = TracePlotter(_recorder_with_data(), title="Pump start")
        path = plotter.save(tmp_path / "plots" / "start.png",
                            [["P_suction_valve"], ["P_pump_running"]], quality='low')
        assert path.exists()
        assert path.stat().st_size > 0

    def test_create_figure_has_one_axis_per_group(self):
        import matplotlib.pyplot as plt
        from simcore.plotting.trace_plot import TracePlotter
        plotter = TracePlotter(_recorder_with_data())
        fig = plotter.create_figure([["P_suction_valve", "P_pump_running"]])
        try:
            assert len(fig.axes) == 1
            assert len(fig.axes[0].get_lines()) == 2
        finally:
            plt.close(fig)

    def test_empty_recorder_rejected(self):
        from simcore.plotting.trace_plot import TracePlotter
        from simcore.services.telemetry_service import TelemetryRecorder
        with pytest.raises(ValueError):
            TracePlotter(TelemetryRecorder()).create_figure([["x"]])

    def test_no_groups_rejected(self):
        from simcore.plotting.trace_plot import TracePlotter
        with pytest.raises(ValueError):
            TracePlotter(_recorder_with_data()).create_figure([])

    def test_unknown_signal(self):
        from simcore.plotting.trace_plot import TracePlotter
        with pytest.raises(KeyError):
            TracePlotter(_recorder_with_data()).create_figure([["nope"]])
