"""
Input normalization utilities for automation components.

This module provides helpers for clamping values, coercing loosely typed
numeric inputs and holding optional boolean safety inputs.

Usage:
    from automation.input_helpers import BooleanInput, clamp

    safe_to_close = BooleanInput("FeedValve safe-to-close")
    safe_to_close.set(False)
    if not safe_to_close.sample():
        ...
"""

import numpy as np
from typing import Any, Callable, Optional


def clamp(value: float, lower: float, upper: float) -> float:
    """
    Clip a scalar to [lower, upper].

    Args:
        value: Value to clip
        lower: Lower limit
        upper: Upper limit

    Returns:
        Clipped value as plain float
    """
    return float(np.clip(value, lower, upper))


def safe_float(value: Any, default: float = 0.0) -> float:
    """
    Safely convert a value to float.

    Args:
        value: Any value
        default: Default if conversion fails

    Returns:
        Float value
    """
    if value is None:
        return default

    try:
        if isinstance(value, np.ndarray):
            if value.size == 0:
                return default
            return float(value.flat[0])
        return float(value)
    except (TypeError, ValueError):
        return default


def require_positive(name: str, value: float) -> float:
    """
    Validate a configuration value that must be strictly positive.

    Raises:
        ValueError: If value is not a finite number greater than zero
    """
    value = float(value)
    if not np.isfinite(value) or value <= 0.0:
        raise ValueError(f"{name} has to be a positive value, got {value}.")
    return value


class BooleanInput:
    """
    Optional boolean input with a permissive default.

    The value can either be written directly with set() or pulled from a
    provider callable on every sample. Using both for the same input is a
    configuration error.
    """

    def __init__(self, name: str, default: bool = True):
        """
        Args:
            name: Name used in error messages
            default: Value reported while nothing was set
        """
        self.name = name
        self._value = bool(default)
        self._provider: Optional[Callable[[], bool]] = None

    @property
    def value(self) -> bool:
        """Last sampled or set value."""
        return self._value

    @property
    def has_provider(self) -> bool:
        return self._provider is not None

    def set(self, value: bool) -> None:
        """
        Write the input directly.

        Raises:
            ValueError: If a provider is attached to this input
        """
        if self._provider is not None:
            raise ValueError(
                f"A provider is attached to {self.name}, "
                "setting the value directly makes no sense.")
        self._value = bool(value)

    def attach_provider(self, provider: Callable[[], bool]) -> None:
        """
        Pull the value from provider on every sample.

        Raises:
            ValueError: If provider is not callable
        """
        if not callable(provider):
            raise ValueError(f"Provider for {self.name} must be callable.")
        self._provider = provider

    def sample(self, override: Optional[bool] = None) -> bool:
        """
        Sample the input for the current step.

        Args:
            override: Explicit value for this step, takes precedence over
                provider and stored value

        Returns:
            Current value of the input
        """
        if override is not None:
            self._value = bool(override)
        elif self._provider is not None:
            self._value = bool(self._provider())
        return self._value
