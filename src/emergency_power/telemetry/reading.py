"""Telemetry data model for simulated device readings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ReadingStatus(str, Enum):
    NORMAL = "Normal"
    WARNING = "Warning"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class TelemetryReading:
    """One timestamped measurement from a device, already classified."""

    device_id: str
    voltage: float
    current: float
    status: ReadingStatus
    temperature_c: float | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_normal(self) -> bool:
        return self.status == ReadingStatus.NORMAL

    @property
    def power_w(self) -> float:
        """Apparent power, volts times amps."""
        return self.voltage * self.current
