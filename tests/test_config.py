"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from emergency_power.config.manager import ConfigManager
from emergency_power.config.schema import AppConfig, SimulationConfig, TelemetryConfig


class TestAppConfig:
    def test_default_config_is_valid(self) -> None:
        config = AppConfig()
        assert config.mains.rated_output_w == 1000.0
        assert config.battery.rated_output_w == 500.0
        assert config.battery.charge_level_pct == 70.0
        assert config.generator.rated_output_w == 1500.0
        assert config.generator.fuel_level_pct == 100.0

    def test_default_telemetry_is_ups_scenario(self) -> None:
        config = AppConfig()
        assert config.telemetry.devices == ["UPS1", "UPS2", "UPS3"]
        assert config.telemetry.voltage_min == 210.0
        assert config.telemetry.voltage_max == 250.0
        assert config.telemetry.thresholds.current_critical == 12.0
        assert config.telemetry.temperature_min is None

    def test_power_units_preset(self) -> None:
        telemetry = TelemetryConfig(preset="power_units")
        assert telemetry.devices[0] == "BACKUP_GENERATOR_A"
        assert len(telemetry.devices) == 4
        assert telemetry.temperature_min == 20.0
        assert telemetry.thresholds.voltage_low == 380.0

    def test_explicit_values_override_preset(self) -> None:
        telemetry = TelemetryConfig(preset="power_units", devices=["GEN"])
        assert telemetry.devices == ["GEN"]
        assert telemetry.voltage_min == 380.0

    def test_charge_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(battery={"charge_level_pct": 120.0})

    def test_inverted_load_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SimulationConfig(load_min_w=500.0, load_max_w=100.0)

    def test_half_temperature_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TelemetryConfig(temperature_min=20.0)

    def test_unknown_preset_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TelemetryConfig(preset="foo")

    def test_custom_values(self) -> None:
        config = AppConfig(
            battery={"capacity_wh": 200.0, "charge_level_pct": 10.0},
            simulation={"mains_availability": 0.0},
        )
        assert config.battery.capacity_wh == 200.0
        assert config.battery.charge_level_pct == 10.0
        assert config.simulation.mains_availability == 0.0


class TestConfigManager:
    def test_load_defaults_only(self, tmp_path: Path) -> None:
        defaults_file = tmp_path / "defaults.yaml"
        defaults_file.write_text("generator:\n  fuel_level_pct: 40\n")
        mgr = ConfigManager(defaults_path=defaults_file, user_path=tmp_path / "user.yaml")
        config = mgr.load()
        assert config.generator.fuel_level_pct == 40.0

    def test_user_overrides(self, tmp_path: Path) -> None:
        defaults_file = tmp_path / "defaults.yaml"
        defaults_file.write_text("battery:\n  capacity_wh: 100\n  charge_level_pct: 70\n")
        user_file = tmp_path / "user.yaml"
        user_file.write_text("battery:\n  capacity_wh: 250\n")
        mgr = ConfigManager(defaults_path=defaults_file, user_path=user_file)
        config = mgr.load()
        assert config.battery.capacity_wh == 250.0
        assert config.battery.charge_level_pct == 70.0

    def test_user_selects_preset(self, tmp_path: Path) -> None:
        defaults_file = tmp_path / "defaults.yaml"
        defaults_file.write_text("telemetry:\n  preset: ups\n  history_size: 50\n")
        user_file = tmp_path / "user.yaml"
        user_file.write_text("telemetry:\n  preset: power_units\n")
        config = ConfigManager(defaults_path=defaults_file, user_path=user_file).load()
        assert "UPS_MODULE_1" in config.telemetry.devices
        assert config.telemetry.history_size == 50

    def test_missing_files_give_defaults(self, tmp_path: Path) -> None:
        mgr = ConfigManager(defaults_path=tmp_path / "nope.yaml", user_path=tmp_path / "u.yaml")
        assert mgr.load() == AppConfig()

    def test_deep_merge(self) -> None:
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        override = {"a": {"b": 10}, "e": 5}
        result = ConfigManager._deep_merge(base, override)
        assert result == {"a": {"b": 10, "c": 2}, "d": 3, "e": 5}

    def test_config_before_load_raises(self, tmp_path: Path) -> None:
        mgr = ConfigManager(defaults_path=tmp_path / "d.yaml", user_path=tmp_path / "u.yaml")
        with pytest.raises(RuntimeError):
            _ = mgr.config

    def test_save_user_config(self, config_manager: ConfigManager) -> None:
        config = config_manager.save_user_config({"mains": {"available": False}})
        assert config.mains.available is False
        assert config.simulation.tick_seconds == 0.01
        assert "available: false" in config_manager._user_path.read_text()

    def test_invalid_update_leaves_user_file_untouched(self, config_manager: ConfigManager) -> None:
        config_manager.save_user_config({"battery": {"charge_level_pct": 40.0}})
        before = config_manager._user_path.read_text()
        with pytest.raises(ValidationError):
            config_manager.save_user_config({"battery": {"charge_level_pct": 140.0}})
        assert config_manager._user_path.read_text() == before
        assert config_manager.config.battery.charge_level_pct == 40.0

    def test_to_json(self, config_manager: ConfigManager) -> None:
        json_str = config_manager.to_json()
        assert '"fuel_level_pct"' in json_str

