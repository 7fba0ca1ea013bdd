"""Standby power units: load checks and the system on/off switch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from emergency_power.config.schema import PowerUnitConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PowerUnit:
    id: int
    name: str
    max_power_kw: float
    is_active: bool = True

    @classmethod
    def from_config(cls, cfg: PowerUnitConfig) -> PowerUnit:
        return cls(id=cfg.id, name=cfg.name, max_power_kw=cfg.max_power_kw, is_active=cfg.is_active)

    def is_overloaded(self, load_kw: float) -> bool:
        return load_kw > self.max_power_kw

    def is_load_normal(self, load_kw: float) -> bool:
        return 0.0 <= load_kw <= self.max_power_kw


def format_power(kw: float) -> str:
    return f"{kw:.2f} kW"


class LoadAssessment(str, Enum):
    NEGATIVE = "negative"
    OVERLOADED = "overloaded"
    NORMAL = "normal"


@dataclass(frozen=True)
class LoadCheck:
    assessment: LoadAssessment
    message: str


def assess_load(unit: PowerUnit, load_kw: float) -> LoadCheck:
    """Check a requested load against a unit's rating."""
    if load_kw < 0:
        return LoadCheck(LoadAssessment.NEGATIVE, "Error: negative load value entered")
    if unit.is_overloaded(load_kw):
        logger.warning("%s overloaded: %.2fkW > %.2fkW", unit.name, load_kw, unit.max_power_kw)
        return LoadCheck(
            LoadAssessment.OVERLOADED,
            f"Overload. Current power: {format_power(load_kw)}",
        )
    return LoadCheck(LoadAssessment.NORMAL, f"Load is normal: {format_power(load_kw)}")


class PowerSystemSwitch:
    """Master on/off state for the emergency supply."""

    def __init__(self) -> None:
        self._on = False

    @property
    def is_on(self) -> bool:
        return self._on

    def start(self) -> str:
        self._on = True
        logger.info("Emergency power system started")
        return "Emergency power supply system started"

    def stop(self) -> str:
        self._on = False
        logger.info("Emergency power system stopped")
        return "Emergency power supply system stopped"

    def status_text(self) -> str:
        return "System on" if self._on else "System off"
