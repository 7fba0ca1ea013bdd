"""Tests for mains, battery, generator, and blackout sources."""

from __future__ import annotations

import pytest

from emergency_power.sources import BLACKOUT, Battery, Generator, Mains, PowerSource, SourceKind


class TestMains:
    def test_supplies_when_available(self) -> None:
        mains = Mains(rated_output_w=1000.0)
        assert mains.attempt_supply(300.0) is True
        assert mains.rated_output_w == pytest.approx(997.0)

    def test_unavailable_refuses_and_keeps_rating(self) -> None:
        mains = Mains(rated_output_w=1000.0, available=False)
        assert mains.attempt_supply(100.0) is False
        assert mains.rated_output_w == 1000.0

    def test_load_above_rating_refused(self) -> None:
        mains = Mains(rated_output_w=200.0)
        assert mains.attempt_supply(200.1) is False
        assert mains.rated_output_w == 200.0

    def test_load_equal_to_rating_accepted(self) -> None:
        mains = Mains(rated_output_w=200.0)
        assert mains.attempt_supply(200.0) is True

    def test_toggling_availability_keeps_rating(self) -> None:
        mains = Mains(rated_output_w=800.0)
        mains.available = False
        mains.available = True
        assert mains.rated_output_w == 800.0

    def test_rating_never_negative(self) -> None:
        mains = Mains(rated_output_w=0.0)
        assert mains.attempt_supply(0.0) is True
        assert mains.rated_output_w == 0.0

    def test_status(self) -> None:
        mains = Mains()
        assert mains.describe_status() == "Mains active"
        mains.available = False
        assert mains.describe_status() == "Mains unavailable"


class TestBattery:
    def test_drains_proportionally(self) -> None:
        battery = Battery(charge_level_pct=70.0)
        assert battery.attempt_supply(400.0) is True
        assert battery.charge_level_pct == pytest.approx(68.0)

    def test_empty_battery_refuses(self) -> None:
        battery = Battery(charge_level_pct=0.0)
        assert battery.attempt_supply(10.0) is False
        assert battery.charge_level_pct == 0.0

    def test_overload_refused_without_drain(self) -> None:
        battery = Battery(charge_level_pct=50.0, rated_output_w=500.0)
        assert battery.attempt_supply(600.0) is False
        assert battery.charge_level_pct == 50.0

    def test_drain_floors_at_zero(self) -> None:
        battery = Battery(charge_level_pct=1.0)
        assert battery.attempt_supply(500.0) is True
        assert battery.charge_level_pct == 0.0

    def test_repeated_supply_never_increases_charge(self) -> None:
        battery = Battery(charge_level_pct=30.0)
        previous = battery.charge_level_pct
        for _ in range(50):
            battery.attempt_supply(250.0)
            assert battery.charge_level_pct <= previous
            previous = battery.charge_level_pct

    @pytest.mark.parametrize(
        ("start", "amount", "expected"),
        [(70.0, 10.0, 80.0), (95.0, 10.0, 100.0), (5.0, -20.0, 0.0), (50.0, 0.0, 50.0)],
    )
    def test_recharge_clamps(self, start: float, amount: float, expected: float) -> None:
        battery = Battery(charge_level_pct=start)
        battery.recharge(amount)
        assert battery.charge_level_pct == expected

    def test_constructor_clamps_charge(self) -> None:
        assert Battery(charge_level_pct=150.0).charge_level_pct == 100.0

    def test_stored_energy(self) -> None:
        battery = Battery(capacity_wh=200.0, charge_level_pct=25.0)
        assert battery.stored_energy_wh == 50.0

    def test_status(self) -> None:
        assert Battery(charge_level_pct=70.0).describe_status() == "Battery: charge = 70.0%"


class TestGenerator:
    def test_burns_fuel_proportionally(self) -> None:
        generator = Generator(fuel_level_pct=50.0)
        assert generator.attempt_supply(300.0) is True
        assert generator.fuel_level_pct == pytest.approx(47.0)

    def test_empty_tank_refuses(self) -> None:
        generator = Generator(fuel_level_pct=0.0)
        assert generator.attempt_supply(1.0) is False

    def test_overload_refused(self) -> None:
        generator = Generator(rated_output_w=1500.0)
        assert generator.attempt_supply(1600.0) is False
        assert generator.fuel_level_pct == 100.0

    @pytest.mark.parametrize(
        ("start", "amount", "expected"),
        [(47.0, 10.0, 57.0), (99.0, 10.0, 100.0), (3.0, -10.0, 0.0)],
    )
    def test_refuel_clamps(self, start: float, amount: float, expected: float) -> None:
        generator = Generator(fuel_level_pct=start)
        generator.refuel(amount)
        assert generator.fuel_level_pct == pytest.approx(expected)

    def test_status(self) -> None:
        assert Generator(fuel_level_pct=47.0).describe_status() == "Generator: fuel = 47.0%"


class TestBlackout:
    def test_never_supplies(self) -> None:
        assert BLACKOUT.attempt_supply(0.0) is False
        assert BLACKOUT.rated_output_w == 0.0

    def test_fixed_status(self) -> None:
        assert BLACKOUT.describe_status() == "System de-energized!"
        assert BLACKOUT.kind == SourceKind.BLACKOUT


class TestProtocol:
    @pytest.mark.parametrize("source", [Mains(), Battery(), Generator(), BLACKOUT])
    def test_all_sources_satisfy_protocol(self, source: object) -> None:
        assert isinstance(source, PowerSource)

    @pytest.mark.parametrize("load", [0.0, 1.0, 250.0, 499.0, 500.0, 501.0, 5000.0])
    def test_success_requires_rating(self, load: float) -> None:
        for source in (Mains(rated_output_w=500.0), Battery(rated_output_w=500.0), Generator(rated_output_w=500.0)):
            before = source.rated_output_w
            ok = source.attempt_supply(load)
            assert ok == (before >= load)
            assert source.rated_output_w >= 0
