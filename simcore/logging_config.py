"""
Logging setup for automation scenarios.

Components log sequence transitions, trips and interlocks at INFO/WARNING.
End position reports, component step traces and per-cycle engine output are
emitted on every step and drown those out, so their loggers stay at WARNING
unless a scenario is being traced step by step.

A dictConfig file (config/logging.json) wins when present. Without one, the
"logging" section of the runtime configuration decides level and log file.
"""

import logging
import logging.config
import json
import os
import sys
from typing import Any, Dict, Optional

# Loggers that report on every step
STEP_LOGGERS = (
    'automation.base_component',
    'automation.valve_monitor',
    'simcore.engine',
    'simcore.engine.cycle_engine',
    'simcore.plotting',
)

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config_path: Optional[str] = None,
                  settings: Optional[Dict[str, Any]] = None) -> None:
    """
    Configure logging from a JSON dictConfig file or from runtime settings.

    Args:
        config_path: Path to a dictConfig JSON file.
                    Defaults to 'config/logging.json' relative to project root.
        settings: The "logging" section of the runtime configuration, used when
                  the file is missing or broken. Keys: "level" (name),
                  "log_to_file" (bool) and "log_file" (path).
    """
    if config_path is None:
        package_dir = os.path.dirname(os.path.abspath(__file__))
        project_root = os.path.dirname(package_dir)
        config_path = os.path.join(project_root, 'config', 'logging.json')

    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
            logging.config.dictConfig(config)
            return
        except (json.JSONDecodeError, ValueError, KeyError) as e:
            print(f"Warning: Failed to load logging config from {config_path}: {e}")
            print("Falling back to the runtime logging settings.")

    _setup_from_settings(settings or {})


def _setup_from_settings(settings: Dict[str, Any]) -> None:
    level_name = str(settings.get('level', 'INFO')).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        print(f"Warning: Unknown log level {level_name!r}, using INFO.")
        level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.get('log_to_file') and settings.get('log_file'):
        handlers.insert(0, logging.FileHandler(settings['log_file']))

    logging.basicConfig(level=level, format=_FORMAT, handlers=handlers, force=True)
    trace_steps(level <= logging.DEBUG)


def trace_steps(enabled: bool) -> None:
    """
    Let the per-step loggers through (DEBUG) or hold them at WARNING.

    Used to follow a pump sequence or valve travel cycle by cycle.
    """
    level = logging.DEBUG if enabled else logging.WARNING
    for logger_name in STEP_LOGGERS:
        logging.getLogger(logger_name).setLevel(level)
