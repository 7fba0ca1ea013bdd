"""Fuel-powered standby generator."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from emergency_power.sources.base import SourceKind, clamp_pct

logger = logging.getLogger(__name__)

# Percent of fuel burnt per watt of load served on one supply.
FUEL_PER_WATT = 0.01


@dataclass
class Generator:
    """Standby generator that runs while it has fuel."""

    fuel_level_pct: float = 100.0
    rated_output_w: float = 1500.0
    name: str = "Generator"
    kind: SourceKind = SourceKind.GENERATOR

    def __post_init__(self) -> None:
        self.fuel_level_pct = clamp_pct(self.fuel_level_pct)

    def attempt_supply(self, load_w: float) -> bool:
        if self.fuel_level_pct <= 0 or self.rated_output_w < load_w:
            return False
        self.fuel_level_pct = max(0.0, self.fuel_level_pct - load_w * FUEL_PER_WATT)
        logger.debug("Generator carried %.1fW (fuel now %.2f%%)", load_w, self.fuel_level_pct)
        return True

    def refuel(self, amount_pct: float) -> None:
        """Top up the tank by ``amount_pct``, clamped to [0, 100]."""
        before = self.fuel_level_pct
        self.fuel_level_pct = clamp_pct(self.fuel_level_pct + amount_pct)
        logger.info("Generator refuelled: %.1f%% -> %.1f%%", before, self.fuel_level_pct)

    def describe_status(self) -> str:
        return f"Generator: fuel = {self.fuel_level_pct:.1f}%"
