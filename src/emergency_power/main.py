"""Emergency Power entry point: simulation lifecycle and calculator commands.

Simulation startup:
  config → logging → sources + failover controller → channel →
  supply loop task → one telemetry task per device → consumer
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import signal
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from emergency_power.config.manager import ConfigManager
from emergency_power.config.schema import AppConfig
from emergency_power.control.failover import FailoverController
from emergency_power.control.loop import SupplyLoop, SupplySnapshot
from emergency_power.formulas import (
    DEMO_DEVICES,
    backup_time_hours,
    energy_kwh,
    energy_report,
    line_loss_w,
    simulate_discharge,
    total_energy_kwh,
)
from emergency_power.logging.structured import setup_logging
from emergency_power.telemetry.classifier import NON_NUMERIC_MESSAGE, assess_input_voltage
from emergency_power.telemetry.generator import TelemetryGenerator
from emergency_power.telemetry.history import TelemetryHistory
from emergency_power.telemetry.reading import TelemetryReading
from emergency_power.sources.base import clamp_pct
from emergency_power.units import PowerUnit, PowerSystemSwitch, assess_load

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


class Application:
    """Simulation lifecycle manager.

    Owns the failover controller, the telemetry producers, and the single
    consumer that turns channel items into display state.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.controller = FailoverController.from_config(config)
        self.generator = TelemetryGenerator(config.telemetry)
        self.history = TelemetryHistory(
            history_size=config.telemetry.history_size,
            event_log_size=config.telemetry.event_log_size,
        )
        self.switch = PowerSystemSwitch()
        self.last_snapshot: SupplySnapshot | None = None
        self.items_consumed = 0

        self._channel: asyncio.Queue | None = None
        self._supply_loop: SupplyLoop | None = None
        self._running = False
        self._tasks: list[asyncio.Task] = []
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start producers and the consumer. Returns once tasks are scheduled."""
        if self._running:
            logger.warning("Simulator already running")
            return
        logger.info("Starting Emergency Power simulator v%s", VERSION)
        self._running = True
        self._stop_event.clear()
        self.switch.start()

        # Single unbounded channel; capping happens in the history.
        self._channel = asyncio.Queue()

        self._supply_loop = SupplyLoop(self.config.simulation, self.controller, self._channel)
        self._tasks.append(
            asyncio.create_task(self._supply_loop.run(self._stop_event), name="supply-loop")
        )

        for device_id in self.generator.devices:
            self._tasks.append(
                asyncio.create_task(
                    self.generator.run_device(device_id, self._channel, self._stop_event),
                    name=f"telemetry-{device_id}",
                )
            )

        self._tasks.append(asyncio.create_task(self._consume(), name="consumer"))
        logger.info(
            "Simulation running: %d devices, supply tick %.1fs",
            len(self.generator.devices), self.config.simulation.tick_seconds,
        )

    async def run(self) -> None:
        """Start, block until :meth:`request_stop`, then shut down."""
        await self.start()
        try:
            await self._stop_event.wait()
        finally:
            await self.stop()

    def request_stop(self) -> None:
        """Ask a running simulation to wind down."""
        self._stop_event.set()

    async def stop(self) -> None:
        """Stop all producers and the consumer."""
        if not self._running:
            return

        logger.info("Shutting down simulator")
        self._running = False
        self._stop_event.set()

        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        self.switch.stop()
        logger.info("Shutdown complete (%d items consumed)", self.items_consumed)

    def refresh_all(self) -> list[TelemetryReading]:
        """Replace the history with one fresh reading per device."""
        burst = self.generator.generate_once()
        self.history.replace(burst)
        return burst

    def handle(self, item: object) -> None:
        """Apply one channel item to the display state."""
        if isinstance(item, TelemetryReading):
            entry = self.history.record(item)
            if entry is not None:
                logger.info("Event: %s", entry)
        elif isinstance(item, SupplySnapshot):
            self.last_snapshot = item
        else:
            logger.warning("Ignoring unknown channel item: %r", item)
            return
        self.items_consumed += 1

    async def _consume(self) -> None:
        assert self._channel is not None
        while True:
            item = await self._channel.get()
            try:
                self.handle(item)
            except Exception:
                logger.exception("Consumer failed on %r", item)

    def summary(self) -> list[str]:
        """Human readable end-of-run report."""
        ctl = self.controller
        lines = [
            self.switch.status_text(),
            f"Supply: {ctl.supply_state.value} ({ctl.system_status()})",
            f"Mains: {ctl.mains.describe_status()}, rating {ctl.mains.rated_output_w:.1f} W",
            ctl.battery.describe_status(),
            ctl.generator.describe_status(),
            f"Failover updates: {ctl.state.update_count}, transitions: {ctl.state.transition_count}",
            f"Readings kept: {len(self.history)}",
        ]
        events = self.history.events()
        lines.append(f"Events: {len(events)}")
        lines.extend(f"  {entry}" for entry in events[:10])
        return lines


# ── Command line ─────────────────────────────────────────────


def _format_reading(reading: TelemetryReading) -> str:
    line = (
        f"{reading.device_id:<20} {reading.voltage:7.2f} V {reading.current:6.2f} A"
        f" {reading.power_w:8.1f} W  {reading.status.value:<8}"
    )
    if reading.temperature_c is not None:
        line += f" {reading.temperature_c:5.1f} °C"
    return line + f"  {reading.timestamp.astimezone():%d.%m.%Y %H:%M:%S}"


def _run_simulation(config: AppConfig, duration: float) -> Application:
    app = Application(config)
    stop_requested = False
    signal_count = 0

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def _request_stop() -> None:
        nonlocal stop_requested, signal_count
        signal_count += 1
        if signal_count >= 2:
            os._exit(130)
        if stop_requested or loop.is_closed():
            return
        stop_requested = True
        loop.call_soon_threadsafe(app.request_stop)

    async def _run() -> None:
        if duration > 0:
            loop.call_later(duration, app.request_stop)
        await app.run()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _request_stop)
    else:
        signal.signal(signal.SIGINT, lambda *_: _request_stop())

    try:
        loop.run_until_complete(_run())
    except KeyboardInterrupt:
        _request_stop()
        with contextlib.suppress(Exception):
            loop.run_until_complete(app.stop())
    finally:
        pending = [task for task in asyncio.all_tasks(loop) if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            with contextlib.suppress(Exception):
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        loop.close()
    return app


def cmd_simulate(args: argparse.Namespace, manager: ConfigManager) -> int:
    app = _run_simulation(manager.config, args.duration)
    print("\n".join(app.summary()))
    return 0


def cmd_snapshot(args: argparse.Namespace, manager: ConfigManager) -> int:
    for reading in TelemetryGenerator(manager.config.telemetry).generate_once():
        print(_format_reading(reading))
    return 0


def cmd_failover(args: argparse.Namespace, manager: ConfigManager) -> int:
    controller = FailoverController.from_config(manager.config)
    if args.charge is not None:
        controller.battery.charge_level_pct = clamp_pct(args.charge)
    if args.fuel is not None:
        controller.generator.fuel_level_pct = clamp_pct(args.fuel)
    controller.update(args.load, mains_available=not args.mains_down)
    print(f"State: {controller.supply_state.value}")
    print(f"Active source: {controller.active_source.name}")
    print(f"Status: {controller.system_status()}")
    return 0


def cmd_energy(args: argparse.Namespace, manager: ConfigManager) -> int:
    if args.power is not None and args.hours is not None:
        print(f"Energy consumed: {energy_kwh(args.power, args.hours):.3f} kWh")
        return 0
    devices = [tuple(pair) for pair in args.device] if args.device else list(DEMO_DEVICES)
    print(f"Total consumption ({len(devices)} devices): {total_energy_kwh(*devices):.3f} kWh")
    return 0


def cmd_calculate(args: argparse.Namespace, manager: ConfigManager) -> int:
    report = energy_report(
        power_w=args.power,
        hours=args.hours,
        battery_wh=args.battery,
        current_a=args.current,
        resistance_ohm=args.resistance,
        years=args.years,
    )
    print("\n".join(report.lines()))
    return 0


def cmd_backup_time(args: argparse.Namespace, manager: ConfigManager) -> int:
    print(f"Backup time: {backup_time_hours(args.battery, args.consumption):.2f} h")
    return 0


def cmd_discharge(args: argparse.Namespace, manager: ConfigManager) -> int:
    remaining = simulate_discharge(args.initial, args.efficiency, args.degradation, args.years)
    print(f"Capacity after {args.years} years: {remaining:.1f} Wh")
    return 0


def cmd_line_loss(args: argparse.Namespace, manager: ConfigManager) -> int:
    print(f"Line loss: {line_loss_w(args.current, args.resistance):.2f} W")
    return 0


def cmd_check_voltage(args: argparse.Namespace, manager: ConfigManager) -> int:
    try:
        voltage = float(args.value)
    except ValueError:
        print(NON_NUMERIC_MESSAGE)
        return 1
    print(assess_input_voltage(voltage).message)
    return 0


def cmd_check_load(args: argparse.Namespace, manager: ConfigManager) -> int:
    units = {u.id: PowerUnit.from_config(u) for u in manager.config.units}
    if not units:
        print("No power units configured")
        return 1
    unit = units.get(args.unit) if args.unit is not None else next(iter(units.values()))
    if unit is None:
        print(f"Unknown unit id: {args.unit}")
        return 1
    if not unit.is_active:
        print(f"{unit.name} is inactive")
    print(assess_load(unit, args.load).message)
    return 0


def _nested(dotted: str, value: object) -> dict:
    update: dict = {}
    node = update
    *parents, leaf = dotted.split(".")
    for key in parents:
        node = node.setdefault(key, {})
    node[leaf] = value
    return update


def cmd_config(args: argparse.Namespace, manager: ConfigManager) -> int:
    if args.action == "show":
        print(manager.to_json())
        return 0
    if args.key is None or args.value is None:
        print("Usage: config set SECTION.KEY VALUE")
        return 1
    value = yaml.safe_load(args.value)
    try:
        manager.save_user_config(_nested(args.key, value))
    except ValidationError as e:
        print(f"Invalid value for {args.key}: {e.errors()[0]['msg']}")
        return 1
    print(f"Saved {args.key} = {value!r}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emergency-power",
        description="Emergency power supply simulator and calculators.",
    )
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument("--defaults", default="config.defaults.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("simulate", help="run the live failover and telemetry simulation")
    p.add_argument("--duration", type=float, default=0.0, help="seconds to run; 0 = until Ctrl+C")
    p.set_defaults(func=cmd_simulate)

    p = sub.add_parser("snapshot", help="print one reading per device")
    p.set_defaults(func=cmd_snapshot)

    p = sub.add_parser("failover", help="run one failover decision")
    p.add_argument("--load", type=float, required=True)
    p.add_argument("--mains-down", action="store_true")
    p.add_argument("--charge", type=float, default=None, help="battery charge %%")
    p.add_argument("--fuel", type=float, default=None, help="generator fuel %%")
    p.set_defaults(func=cmd_failover)

    p = sub.add_parser("energy", help="energy consumed, single load or several devices")
    p.add_argument("--power", type=float)
    p.add_argument("--hours", type=float)
    p.add_argument("--device", type=float, nargs=2, action="append", metavar=("WATTS", "HOURS"))
    p.set_defaults(func=cmd_energy)

    p = sub.add_parser("calculate", help="every calculator result for one set of inputs")
    for name in ("power", "hours", "battery", "current", "resistance"):
        p.add_argument(f"--{name}", type=float, default=0.0)
    p.add_argument("--years", type=int, default=0)
    p.set_defaults(func=cmd_calculate)

    p = sub.add_parser("backup-time", help="battery autonomy in hours")
    p.add_argument("--battery", type=float, required=True, help="battery energy, Wh")
    p.add_argument("--consumption", type=float, required=True, help="draw, W")
    p.set_defaults(func=cmd_backup_time)

    p = sub.add_parser("discharge", help="battery capacity after years of degradation")
    p.add_argument("--initial", type=float, required=True, help="initial capacity, Wh")
    p.add_argument("--efficiency", type=float, default=0.9)
    p.add_argument("--degradation", type=float, default=0.05, help="fraction lost per year")
    p.add_argument("--years", type=int, default=0)
    p.set_defaults(func=cmd_discharge)

    p = sub.add_parser("line-loss", help="I²R wiring loss")
    p.add_argument("--current", type=float, required=True)
    p.add_argument("--resistance", type=float, required=True)
    p.set_defaults(func=cmd_line_loss)

    p = sub.add_parser("check-voltage", help="assess an incoming grid voltage")
    p.add_argument("value")
    p.set_defaults(func=cmd_check_voltage)

    p = sub.add_parser("check-load", help="check a load (kW) against a power unit")
    p.add_argument("load", type=float)
    p.add_argument("--unit", type=int, default=None)
    p.set_defaults(func=cmd_check_load)

    p = sub.add_parser("config", help="show the effective config or persist an override")
    p.add_argument("action", choices=["show", "set"])
    p.add_argument("key", nargs="?", help="dotted path, e.g. battery.charge_level_pct")
    p.add_argument("value", nargs="?", help="YAML scalar")
    p.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the command line."""
    args = build_parser().parse_args(argv)

    manager = ConfigManager(defaults_path=Path(args.defaults), user_path=Path(args.config))
    config = manager.load()

    # Calculator commands only log problems.
    level = config.logging.level if args.command == "simulate" else "WARNING"
    setup_logging(level=level, fmt=config.logging.format, log_file=config.logging.file)

    return args.func(args, manager)


if __name__ == "__main__":
    sys.exit(main())
