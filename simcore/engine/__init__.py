"""
Engine package - Cycle scheduling for the automation core.
Contains the fixed-quantum cycle engine.
"""

from simcore.engine.cycle_engine import CycleEngine

__all__ = ['CycleEngine']
