"""Random telemetry source for the simulated devices."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator
from datetime import datetime, timezone

from emergency_power.config.schema import TelemetryConfig
from emergency_power.logging.context import bind_context
from emergency_power.telemetry.classifier import classify
from emergency_power.telemetry.reading import TelemetryReading

logger = logging.getLogger(__name__)


class TelemetryGenerator:
    """Produces uniformly random, classified readings per device.

    ``generate_once`` gives one burst for every device. ``run_device`` is the
    per-device producer task used by the application; ``stream`` wraps the
    same producers as an async iterator for callers that want to subscribe
    directly.
    """

    def __init__(self, config: TelemetryConfig, rng: random.Random | None = None) -> None:
        self._config = config
        self._rng = rng or random.Random()

    @property
    def devices(self) -> list[str]:
        return list(self._config.devices)

    def generate_single(self, device_id: str) -> TelemetryReading:
        cfg = self._config
        voltage = self._rng.uniform(cfg.voltage_min, cfg.voltage_max)
        current = self._rng.uniform(cfg.current_min, cfg.current_max)
        temperature = None
        if cfg.temperature_min is not None and cfg.temperature_max is not None:
            temperature = self._rng.uniform(cfg.temperature_min, cfg.temperature_max)
        return TelemetryReading(
            device_id=device_id,
            voltage=voltage,
            current=current,
            status=classify(voltage, current, cfg.thresholds),
            temperature_c=temperature,
            timestamp=datetime.now(timezone.utc),
        )

    def generate_once(self) -> list[TelemetryReading]:
        """One reading per configured device, in configuration order."""
        return [self.generate_single(device_id) for device_id in self._config.devices]

    def next_delay(self) -> float:
        return self._rng.uniform(self._config.tick_min_seconds, self._config.tick_max_seconds)

    async def run_device(
        self,
        device_id: str,
        channel: asyncio.Queue,
        stop_event: asyncio.Event,
    ) -> None:
        """Publish readings for one device until ``stop_event`` is set."""
        bind_context(producer="telemetry", device_id=device_id)
        logger.debug("Telemetry producer for %s starting", device_id)
        produced = 0
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.next_delay())
                break
            except asyncio.TimeoutError:
                pass
            reading = self.generate_single(device_id)
            await channel.put(reading)
            produced += 1
            if not reading.is_normal:
                logger.debug(
                    "%s reading: %.1fV %.2fA", reading.status.value,
                    reading.voltage, reading.current,
                )
        logger.debug("Telemetry producer for %s stopped after %d readings", device_id, produced)

    async def stream(self, stop_event: asyncio.Event | None = None) -> AsyncIterator[TelemetryReading]:
        """Yield readings from every device until stopped.

        Stops when ``stop_event`` is set or the consumer closes the iterator;
        readings still queued at that point are dropped.
        """
        stop = stop_event or asyncio.Event()
        channel: asyncio.Queue[TelemetryReading] = asyncio.Queue()
        tasks = [
            asyncio.create_task(self.run_device(device_id, channel, stop), name=f"telemetry-{device_id}")
            for device_id in self._config.devices
        ]
        waiters: set[asyncio.Future] = set()
        try:
            while not stop.is_set():
                getter = asyncio.ensure_future(channel.get())
                stopper = asyncio.ensure_future(stop.wait())
                waiters = {getter, stopper}
                done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
                if getter in done:
                    stopper.cancel()
                    waiters = set()
                    yield getter.result()
                else:
                    getter.cancel()
        finally:
            stop.set()
            # asyncio.wait leaves its futures running when the caller is cancelled
            pending = [f for f in (*waiters, *tasks) if not f.done()]
            for future in pending:
                future.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
