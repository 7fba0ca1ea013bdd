"""Simulated device telemetry: generation, classification, and history."""

from emergency_power.telemetry.classifier import classify
from emergency_power.telemetry.generator import TelemetryGenerator
from emergency_power.telemetry.history import EventLogEntry, TelemetryHistory
from emergency_power.telemetry.reading import ReadingStatus, TelemetryReading

__all__ = [
    "EventLogEntry",
    "ReadingStatus",
    "TelemetryGenerator",
    "TelemetryHistory",
    "TelemetryReading",
    "classify",
]
