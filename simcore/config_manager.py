"""
Simple configuration management for the automation core.

Holds cycle, actuator, controller and pump settings in one JSON document and
applies them to the engine and to components.
"""

import copy
import json
import os
from typing import Dict, Any, Optional
import logging

from automation.param_templates import (
    actuator_params, controller_params, defaults, pump_sequence_params
)

logger = logging.getLogger(__name__)

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_FILE = os.path.join(_PROJECT_ROOT, "config", "default_config.json")


class ConfigManager:
    """Simple configuration manager for automation settings."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or DEFAULT_CONFIG_FILE
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, 'r') as f:
                    self._config = json.load(f)
                logger.info(f"Configuration loaded from {self.config_file}")
            else:
                logger.warning(f"Configuration file {self.config_file} not found, using defaults")
                self._config = self._get_default_config()
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading configuration: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        actuator = defaults(actuator_params())
        return {
            "simulation": {
                "step_time": 0.1,
                "max_duration": 3600.0,
                "min_step_time": 0.001,
                "max_step_time": 1.0
            },
            "actuators": {
                "valve_rate": actuator["rate"],
                "pump_valve_rate": 15.0,
                "lower": actuator["lower"],
                "upper": actuator["upper"]
            },
            "controller": defaults(controller_params()),
            "pump": defaults(pump_sequence_params()),
            "telemetry": {
                "limit": 6000
            },
            "logging": {
                "level": "INFO",
                "log_to_file": False,
                "log_file": "automation.log"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Path to the configuration key (e.g., "simulation.step_time")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._config
        for key in key_path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, key_path: str, value: Any) -> bool:
        """
        Set configuration value using dot notation.

        Args:
            key_path: Path to the configuration key
            value: Value to set

        Returns:
            True if successful, False if a parent key holds a plain value
        """
        keys = key_path.split('.')
        config_ref = self._config

        # Navigate to the parent of the target key
        for key in keys[:-1]:
            if key not in config_ref:
                config_ref[key] = {}
            config_ref = config_ref[key]
            if not isinstance(config_ref, dict):
                logger.error(f"Error setting config key {key_path}: {key} is not a section")
                return False

        config_ref[keys[-1]] = value
        return True

    def save(self) -> bool:
        """Save current configuration to file."""
        try:
            directory = os.path.dirname(self.config_file)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.config_file, 'w') as f:
                json.dump(self._config, f, indent=2)

            logger.info(f"Configuration saved to {self.config_file}")
            return True

        except OSError as e:
            logger.error(f"Error saving configuration: {e}")
            return False

    def apply_to_engine(self, engine: Any) -> None:
        """Apply the cycle settings to a CycleEngine."""
        step_time = self.get("simulation.step_time", 0.1)
        engine.set_step_time(step_time)
        logger.info(f"Configuration applied to engine (step_time={step_time})")

    def apply_to_pump(self, pump: Any) -> None:
        """Apply sequence timings, thresholds and valve rate to a PumpAssembly."""
        for key in defaults(pump_sequence_params()):
            value = self.get(f"pump.{key}")
            if value is not None:
                setattr(pump, key, float(value))
        rate = self.get("actuators.pump_valve_rate")
        if rate is not None:
            pump.suction_valve.ramp.set_rate(rate)
            pump.discharge_valve.ramp.set_rate(rate)
        logger.info(f"Configuration applied to pump {pump.name}")

    def apply_to_controller(self, controller: Any) -> None:
        """Apply gain and integral time to a PIController."""
        controller.set_gain(self.get("controller.gain", 1.0))
        controller.set_integral_time(self.get("controller.integral_time", 10.0))

    def validate_config(self) -> tuple[bool, list[str]]:
        """Validate current configuration."""
        errors = []

        step_time = self.get("simulation.step_time")
        if step_time is not None and step_time <= 0:
            errors.append("Simulation step_time must be positive")

        min_step = self.get("simulation.min_step_time")
        max_step = self.get("simulation.max_step_time")
        if step_time and min_step and step_time < min_step:
            errors.append(f"Simulation step_time must be at least {min_step}")
        if step_time and max_step and step_time > max_step:
            errors.append(f"Simulation step_time must be at most {max_step}")

        for key in ("valve_rate", "pump_valve_rate"):
            rate = self.get(f"actuators.{key}")
            if rate is not None and rate <= 0:
                errors.append(f"Actuator {key} must be positive")

        lower = self.get("actuators.lower")
        upper = self.get("actuators.upper")
        if lower is not None and upper is not None and lower >= upper:
            errors.append("Actuator lower limit must be below upper limit")

        integral_time = self.get("controller.integral_time")
        if integral_time is not None and integral_time <= 0:
            errors.append("Controller integral_time must be positive")

        min_output = self.get("controller.min_output")
        max_output = self.get("controller.max_output")
        if min_output is not None and max_output is not None and min_output >= max_output:
            errors.append("Controller min_output must be below max_output")

        for key in ("ready_delay", "arming_delay", "startup_time", "restart_lock"):
            value = self.get(f"pump.{key}")
            if value is not None and value < 0:
                errors.append(f"Pump {key} cannot be negative")

        return len(errors) == 0, errors

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration as dictionary."""
        return copy.deepcopy(self._config)

    def reset_to_defaults(self) -> None:
        """Reset configuration to defaults."""
        self._config = self._get_default_config()
        logger.info("Configuration reset to defaults")


# Global configuration instance for easy access
_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config


def reload_config(config_file: Optional[str] = None) -> ConfigManager:
    """Reload configuration from file."""
    global _global_config
    _global_config = ConfigManager(config_file)
    return _global_config
