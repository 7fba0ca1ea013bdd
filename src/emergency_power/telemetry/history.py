"""Bounded reading history and event log for the status display."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from emergency_power.telemetry.reading import TelemetryReading


@dataclass(frozen=True)
class EventLogEntry:
    device_id: str
    status: str
    time: str  # HH:MM:SS of the reading, local time

    @classmethod
    def from_reading(cls, reading: TelemetryReading) -> EventLogEntry:
        return cls(
            device_id=reading.device_id,
            status=reading.status.value,
            time=reading.timestamp.astimezone().strftime("%H:%M:%S"),
        )

    def __str__(self) -> str:
        return f"{self.device_id} - {self.status} at {self.time}"


class TelemetryHistory:
    """Most-recent-first reading history with a separate log of abnormal readings.

    Both lists are capped; the oldest entry falls off when a new one arrives
    at capacity.
    """

    def __init__(self, history_size: int = 100, event_log_size: int = 100) -> None:
        self._readings: deque[TelemetryReading] = deque(maxlen=history_size)
        self._events: deque[EventLogEntry] = deque(maxlen=event_log_size)

    def __len__(self) -> int:
        return len(self._readings)

    def record(self, reading: TelemetryReading) -> EventLogEntry | None:
        """Store a reading; returns the event logged for it, if any."""
        self._readings.appendleft(reading)
        if reading.is_normal:
            return None
        entry = EventLogEntry.from_reading(reading)
        self._events.appendleft(entry)
        return entry

    def replace(self, readings: list[TelemetryReading]) -> None:
        """Swap the history for a fresh burst. The event log is kept."""
        self._readings.clear()
        for reading in readings:
            self._readings.append(reading)

    def clear(self) -> None:
        self._readings.clear()

    def clear_events(self) -> None:
        self._events.clear()

    def readings(self, device_id: str | None = None) -> list[TelemetryReading]:
        """Readings newest first, optionally for one device only."""
        if device_id is None:
            return list(self._readings)
        return [r for r in self._readings if r.device_id == device_id]

    def events(self) -> list[EventLogEntry]:
        return list(self._events)

    def latest(self, device_id: str) -> TelemetryReading | None:
        for reading in self._readings:
            if reading.device_id == device_id:
                return reading
        return None
