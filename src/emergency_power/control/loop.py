"""Async supply loop: drives the failover controller with a simulated load."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone

from emergency_power.config.schema import SimulationConfig
from emergency_power.control.failover import FailoverController, SupplyState
from emergency_power.logging.context import bind_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupplySnapshot:
    """What the controller looked like right after one tick."""

    tick: int
    load_w: float
    mains_available: bool
    supply_state: SupplyState
    source_name: str
    status: str
    battery_charge_pct: float
    generator_fuel_pct: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class LoopState:
    tick_count: int = 0
    last_tick_at: datetime | None = None
    last_snapshot: SupplySnapshot | None = None
    is_running: bool = False


class SupplyLoop:
    """Periodic demo driver for :class:`FailoverController`.

    Every tick:
    1. Draw a random load in ``[load_min_w, load_max_w]``
    2. Decide whether the grid is up this tick
    3. Update the controller with both
    4. Publish a :class:`SupplySnapshot` to the channel

    The randomness lives here so that the controller stays deterministic.
    """

    def __init__(
        self,
        config: SimulationConfig,
        controller: FailoverController,
        channel: asyncio.Queue | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config
        self._controller = controller
        self._channel = channel
        self._rng = rng or random.Random()
        self._state = LoopState()
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def controller(self) -> FailoverController:
        return self._controller

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        """Tick until stopped, either via :meth:`stop` or ``stop_event``."""
        stop = stop_event or self._stop_event
        interval = self._config.tick_seconds
        self._state.is_running = True
        bind_context(producer="supply_loop")
        logger.info("Supply loop starting (interval: %.1fs)", interval)

        try:
            while not stop.is_set():
                try:
                    await asyncio.wait_for(stop.wait(), timeout=interval)
                    break  # stop requested
                except asyncio.TimeoutError:
                    pass
                try:
                    await self.tick_once()
                except Exception:
                    logger.exception("Supply tick %d failed", self._state.tick_count)
        finally:
            self._state.is_running = False
            logger.info("Supply loop stopped after %d ticks", self._state.tick_count)

    def stop(self) -> None:
        """Signal the loop to stop."""
        self._stop_event.set()

    async def tick_once(
        self,
        load_w: float | None = None,
        mains_available: bool | None = None,
    ) -> SupplySnapshot:
        """Run one tick. Explicit arguments replace the random draws."""
        if load_w is None:
            load_w = self._rng.uniform(self._config.load_min_w, self._config.load_max_w)
        if mains_available is None:
            mains_available = self._rng.random() < self._config.mains_availability

        self._state.tick_count += 1
        self._state.last_tick_at = datetime.now(timezone.utc)
        self._controller.update(load_w, mains_available=mains_available)

        ctl = self._controller
        snapshot = SupplySnapshot(
            tick=self._state.tick_count,
            load_w=load_w,
            mains_available=mains_available,
            supply_state=ctl.supply_state,
            source_name=ctl.active_source.name,
            status=ctl.system_status(),
            battery_charge_pct=ctl.battery.charge_level_pct,
            generator_fuel_pct=ctl.generator.fuel_level_pct,
            timestamp=self._state.last_tick_at,
        )
        self._state.last_snapshot = snapshot
        logger.debug(
            "Tick %d: load=%.1fW grid=%s state=%s",
            snapshot.tick, load_w, "up" if mains_available else "down",
            snapshot.supply_state.value,
        )

        if self._channel is not None:
            await self._channel.put(snapshot)
        return snapshot
