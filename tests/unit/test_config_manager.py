"""
Unit tests for ConfigManager.
"""

import json

import pytest


@pytest.mark.unit
class TestConfigManager:
    """Loading, access, validation and application of settings."""

    def test_defaults_when_file_missing(self, tmp_path):
        from simcore.config_manager import ConfigManager
        config = ConfigManager(str(tmp_path / "missing.json"))
        assert config.get("simulation.step_time") == 0.1
        assert config.get("pump.ready_delay") == 1.5
        assert config.get("actuators.lower") == -5.0
        assert config.get("controller.integral_time") == 10.0
        assert config.get("does.not.exist", "fallback") == "fallback"

    def test_shipped_config_is_valid(self):
        from simcore.config_manager import ConfigManager
        config = ConfigManager()
        ok, errors = config.validate_config()
        assert ok, errors
        assert config.get("simulation.step_time") == 0.1

    def test_invalid_json_falls_back_to_defaults(self, tmp_path):
        from simcore.config_manager import ConfigManager
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        config = ConfigManager(str(path))
        assert config.get("pump.restart_lock") == 30.0

    def test_set_and_save_roundtrip(self, tmp_path):
        from simcore.config_manager import ConfigManager
        path = tmp_path / "sub" / "config.json"
        config = ConfigManager(str(path))
        assert config.set("pump.restart_lock", 5.0)
        assert config.set("plant.name", "Feed station")
        assert config.save()
        assert json.loads(path.read_text())["pump"]["restart_lock"] == 5.0

        loaded = ConfigManager(str(path))
        assert loaded.get("pump.restart_lock") == 5.0
        assert loaded.get("plant.name") == "Feed station"

    def test_set_below_plain_value_fails(self, tmp_path):
        from simcore.config_manager import ConfigManager
        config = ConfigManager(str(tmp_path / "c.json"))
        assert not config.set("simulation.step_time.sub", 1)
        assert config.get("simulation.step_time") == 0.1

    def test_validate_config(self, tmp_path):
        from simcore.config_manager import ConfigManager
        config = ConfigManager(str(tmp_path / "c.json"))
        config.set("simulation.step_time", 0.0)
        config.set("controller.integral_time", -1.0)
        config.set("actuators.lower", 200.0)
        ok, errors = config.validate_config()
        assert not ok
        assert len(errors) == 3

    def test_get_all_is_a_copy(self, tmp_path):
        from simcore.config_manager import ConfigManager
        config = ConfigManager(str(tmp_path / "c.json"))
        data = config.get_all()
        data["pump"]["ready_delay"] = 99.0
        assert config.get("pump.ready_delay") == 1.5

    def test_reset_to_defaults(self, tmp_path):
        from simcore.config_manager import ConfigManager
        config = ConfigManager(str(tmp_path / "c.json"))
        config.set("pump.ready_delay", 9.0)
        config.reset_to_defaults()
        assert config.get("pump.ready_delay") == 1.5

    def test_apply_to_engine(self, tmp_path):
        from simcore.config_manager import ConfigManager
        from simcore.engine.cycle_engine import CycleEngine
        config = ConfigManager(str(tmp_path / "c.json"))
        config.set("simulation.step_time", 0.05)
        engine = CycleEngine()
        config.apply_to_engine(engine)
        assert engine.step_time == 0.05

    def test_apply_to_pump_and_controller(self, tmp_path):
        from automation.pi_controller import PIController
        from automation.pump_assembly import PumpAssembly
        from simcore.config_manager import ConfigManager
        config = ConfigManager(str(tmp_path / "c.json"))
        config.set("pump.restart_lock", 12.0)
        config.set("actuators.pump_valve_rate", 20.0)
        config.set("controller.gain", 2.5)
        pump = PumpAssembly("P")
        config.apply_to_pump(pump)
        assert pump.restart_lock == 12.0
        assert pump.suction_valve.ramp.rate == 20.0
        ctrl = PIController()
        config.apply_to_controller(ctrl)
        assert ctrl.gain == 2.5

    def test_global_instance(self, tmp_path):
        from simcore import config_manager
        first = config_manager.reload_config(str(tmp_path / "c.json"))
        assert config_manager.get_config() is first
        second = config_manager.reload_config(str(tmp_path / "c.json"))
        assert config_manager.get_config() is second
