"""Battery bank backup."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from emergency_power.sources.base import SourceKind, clamp_pct

logger = logging.getLogger(__name__)

# Percent of charge drained per watt of load served on one supply.
DRAIN_PER_WATT = 0.005


@dataclass
class Battery:
    """Battery bank with a state of charge in percent."""

    capacity_wh: float = 100.0
    charge_level_pct: float = 70.0
    rated_output_w: float = 500.0
    name: str = "Battery"
    kind: SourceKind = SourceKind.BATTERY

    def __post_init__(self) -> None:
        self.charge_level_pct = clamp_pct(self.charge_level_pct)

    @property
    def stored_energy_wh(self) -> float:
        """Energy currently held, from capacity and charge level."""
        return self.capacity_wh * self.charge_level_pct / 100.0

    def attempt_supply(self, load_w: float) -> bool:
        if self.charge_level_pct <= 0 or self.rated_output_w < load_w:
            return False
        self.charge_level_pct = max(0.0, self.charge_level_pct - load_w * DRAIN_PER_WATT)
        logger.debug("Battery carried %.1fW (charge now %.2f%%)", load_w, self.charge_level_pct)
        return True

    def recharge(self, amount_pct: float) -> None:
        """Add (or with a negative amount, remove) charge, clamped to [0, 100]."""
        before = self.charge_level_pct
        self.charge_level_pct = clamp_pct(self.charge_level_pct + amount_pct)
        logger.info("Battery recharged: %.1f%% -> %.1f%%", before, self.charge_level_pct)

    def describe_status(self) -> str:
        return f"Battery: charge = {self.charge_level_pct:.1f}%"
