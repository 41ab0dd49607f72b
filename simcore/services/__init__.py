"""
Services package - Runtime services for the automation core.
Contains the telemetry recorder.
"""

from simcore.services.telemetry_service import TelemetryRecorder

__all__ = ['TelemetryRecorder']
