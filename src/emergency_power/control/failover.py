"""Failover state machine choosing which source carries the load.

Every update re-evaluates the sources in a fixed priority order:
1. Mains (only while marked available)
2. Battery
3. Generator
4. Blackout (nothing could carry the load)

There is no hysteresis or minimum dwell time: a flapping grid produces
flapping transitions. Priority ignores how much charge or fuel is left.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum

from emergency_power.config.schema import AppConfig
from emergency_power.sources.base import PowerSource
from emergency_power.sources.battery import Battery
from emergency_power.sources.blackout import BLACKOUT
from emergency_power.sources.generator import Generator
from emergency_power.sources.mains import Mains

logger = logging.getLogger(__name__)


class SupplyState(str, Enum):
    """Which source is carrying the load. Declared in priority order."""

    ON_MAINS = "on_mains"
    ON_BATTERY = "on_battery"
    ON_GENERATOR = "on_generator"
    BLACKOUT = "blackout"

    @property
    def rank(self) -> int:
        return list(SupplyState).index(self)


@dataclass
class FailoverState:
    """Bookkeeping for the controller, readable by status displays."""

    supply_state: SupplyState = SupplyState.ON_MAINS
    last_load_w: float = 0.0
    update_count: int = 0
    transition_count: int = 0
    last_transition_at: float = 0.0


class FailoverController:
    """Owns one mains, one battery, and one generator and picks the active one."""

    def __init__(self, mains: Mains, battery: Battery, generator: Generator) -> None:
        self._mains = mains
        self._battery = battery
        self._generator = generator
        self._active: PowerSource = mains
        self._state = FailoverState()

    @classmethod
    def from_config(cls, config: AppConfig) -> FailoverController:
        """Build the controller and its sources from configuration."""
        return cls(
            Mains(
                rated_output_w=config.mains.rated_output_w,
                available=config.mains.available,
            ),
            Battery(
                capacity_wh=config.battery.capacity_wh,
                charge_level_pct=config.battery.charge_level_pct,
                rated_output_w=config.battery.rated_output_w,
            ),
            Generator(
                fuel_level_pct=config.generator.fuel_level_pct,
                rated_output_w=config.generator.rated_output_w,
            ),
        )

    @property
    def mains(self) -> Mains:
        return self._mains

    @property
    def battery(self) -> Battery:
        return self._battery

    @property
    def generator(self) -> Generator:
        return self._generator

    @property
    def state(self) -> FailoverState:
        return self._state

    @property
    def supply_state(self) -> SupplyState:
        return self._state.supply_state

    @property
    def active_source(self) -> PowerSource:
        return self._active

    def update(self, load_w: float, mains_available: bool | None = None) -> None:
        """Re-evaluate all sources for ``load_w`` and switch the active one.

        Args:
            load_w: Demand to carry this tick, in watts.
            mains_available: Grid availability for this tick. ``None`` keeps
                whatever ``mains.available`` currently holds.
        """
        if mains_available is not None:
            self._mains.available = mains_available

        if self._mains.available and self._mains.attempt_supply(load_w):
            new_state, source = SupplyState.ON_MAINS, self._mains
        elif self._battery.attempt_supply(load_w):
            new_state, source = SupplyState.ON_BATTERY, self._battery
        elif self._generator.attempt_supply(load_w):
            new_state, source = SupplyState.ON_GENERATOR, self._generator
        else:
            new_state, source = SupplyState.BLACKOUT, BLACKOUT

        self._active = source
        self._state.last_load_w = load_w
        self._state.update_count += 1

        old_state = self._state.supply_state
        if new_state != old_state:
            self._state.supply_state = new_state
            self._state.transition_count += 1
            self._state.last_transition_at = time.monotonic()
            if new_state.rank > old_state.rank:
                logger.warning(
                    "Failover: %s → %s (load=%.1fW)",
                    old_state.value, new_state.value, load_w,
                )
            else:
                logger.info(
                    "Restored: %s → %s (load=%.1fW)",
                    old_state.value, new_state.value, load_w,
                )

    def system_status(self) -> str:
        """Status text of the active source."""
        return self._active.describe_status()

    def recharge_battery(self, amount_pct: float) -> None:
        """Recharge the battery and re-evaluate with no load."""
        self._battery.recharge(amount_pct)
        self.update(0.0)

    def refuel_generator(self, amount_pct: float) -> None:
        """Refuel the generator and re-evaluate with no load."""
        self._generator.refuel(amount_pct)
        self.update(0.0)
