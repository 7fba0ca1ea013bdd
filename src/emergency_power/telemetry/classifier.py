"""Threshold classification of readings and of operator-entered voltages."""

from __future__ import annotations

from enum import Enum

from emergency_power.config.schema import ThresholdConfig
from emergency_power.telemetry.reading import ReadingStatus

_DEFAULT_THRESHOLDS = ThresholdConfig()


def classify(
    voltage: float,
    current: float,
    thresholds: ThresholdConfig | None = None,
) -> ReadingStatus:
    """Label a reading. Out-of-band voltage wins over overcurrent."""
    t = thresholds or _DEFAULT_THRESHOLDS
    if voltage < t.voltage_low or voltage > t.voltage_high:
        return ReadingStatus.WARNING
    if current > t.current_critical:
        return ReadingStatus.CRITICAL
    return ReadingStatus.NORMAL


# Input voltage bands for the manual grid check.
UNDERVOLTAGE_LIMIT = 180.0
OVERVOLTAGE_LIMIT = 240.0

NON_NUMERIC_MESSAGE = "Please enter a numeric value!"


class VoltageAssessment(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    OVERVOLTAGE = "overvoltage"

    @property
    def message(self) -> str:
        return _VOLTAGE_MESSAGES[self]


_VOLTAGE_MESSAGES = {
    VoltageAssessment.LOW: "Voltage too low! Emergency generator power is being activated.",
    VoltageAssessment.NORMAL: "Voltage is normal. Power is supplied from the mains.",
    VoltageAssessment.OVERVOLTAGE: "Overvoltage! The system is switching to protection mode.",
}


def assess_input_voltage(voltage: float) -> VoltageAssessment:
    """Decide which supply mode an incoming grid voltage calls for.

    Both band limits count as normal.
    """
    if voltage < UNDERVOLTAGE_LIMIT:
        return VoltageAssessment.LOW
    if voltage <= OVERVOLTAGE_LIMIT:
        return VoltageAssessment.NORMAL
    return VoltageAssessment.OVERVOLTAGE
