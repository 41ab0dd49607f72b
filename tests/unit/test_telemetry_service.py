"""
Unit tests for TelemetryRecorder.
"""

import pytest
import numpy as np


@pytest.mark.unit
class TestTelemetryRecorder:
    """Latest values and per-cycle traces."""

    def test_latest_and_names(self, recorder):
        recorder.set_value("b", 1.0)
        recorder.set_value("a", True)
        assert recorder.latest("a") is True
        assert recorder.latest("missing", 7) == 7
        assert recorder.names == ["a", "b"]

    def test_commit_builds_traces(self, recorder):
        recorder.set_value("x", 1.0)
        recorder.commit(0.1)
        recorder.set_value("x", 2.0)
        recorder.set_value("running", True)
        recorder.commit(0.2)
        assert np.allclose(recorder.timeline, [0.1, 0.2])
        assert np.allclose(recorder.trace("x"), [1.0, 2.0])
        running = recorder.trace("running")
        assert np.isnan(running[0])
        assert running[1] == 1.0

    def test_non_numeric_value_recorded_as_nan(self, recorder):
        recorder.set_value("state", "RUNNING")
        recorder.commit(0.1)
        assert np.isnan(recorder.trace("state")[0])

    def test_unknown_trace(self, recorder):
        with pytest.raises(KeyError):
            recorder.trace("nothing")

    def test_limit(self):
        from simcore.services.telemetry_service import TelemetryRecorder
        with pytest.raises(ValueError):
            TelemetryRecorder(limit=0)
        recorder = TelemetryRecorder(limit=3)
        for i in range(5):
            recorder.set_value("x", float(i))
            recorder.commit(i * 0.1)
        assert np.allclose(recorder.trace("x"), [2.0, 3.0, 4.0])
        assert len(recorder.timeline) == 3

    def test_to_run(self, recorder):
        recorder.set_value("x", 1.0)
        recorder.set_value("y", 2.0)
        recorder.commit(0.1)
        run = recorder.to_run(["y"], run_name="Start-up")
        assert run["name"] == "Start-up"
        assert [t["name"] for t in run["traces"]] == ["y"]
        assert np.allclose(run["traces"][0]["y"], [2.0])
        assert len(recorder.to_run()["traces"]) == 2

    def test_clear(self, recorder):
        recorder.set_value("x", 1.0)
        recorder.commit(0.1)
        recorder.clear()
        assert recorder.names == []
        assert len(recorder.timeline) == 0
