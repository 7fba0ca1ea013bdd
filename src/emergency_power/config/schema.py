"""Pydantic configuration models for all simulator settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class MainsConfig(BaseModel):
    rated_output_w: float = Field(1000.0, ge=0.0)
    available: bool = True


class BatteryConfig(BaseModel):
    rated_output_w: float = Field(500.0, ge=0.0)
    capacity_wh: float = Field(100.0, ge=0.0)
    charge_level_pct: float = Field(70.0, ge=0.0, le=100.0)


class GeneratorConfig(BaseModel):
    rated_output_w: float = Field(1500.0, ge=0.0)
    fuel_level_pct: float = Field(100.0, ge=0.0, le=100.0)


class SimulationConfig(BaseModel):
    """Demo driver for the failover controller.

    Each tick draws a random load and decides whether the grid is up.
    """
    tick_seconds: float = Field(1.0, gt=0.0)
    load_min_w: float = Field(200.0, ge=0.0)
    load_max_w: float = Field(800.0, ge=0.0)
    mains_availability: float = Field(0.7, ge=0.0, le=1.0)  # P(grid up) per tick

    @model_validator(mode="after")
    def _check_load_range(self) -> SimulationConfig:
        if self.load_max_w < self.load_min_w:
            raise ValueError("load_max_w must be >= load_min_w")
        return self


class ThresholdConfig(BaseModel):
    voltage_low: float = 220.0
    voltage_high: float = 240.0
    current_critical: float = 12.0


class TelemetryConfig(BaseModel):
    preset: Literal["ups", "power_units"] = "ups"  # explicit fields below win
    devices: list[str] = Field(default_factory=lambda: ["UPS1", "UPS2", "UPS3"])
    voltage_min: float = 210.0
    voltage_max: float = 250.0
    current_min: float = 0.5
    current_max: float = 15.0
    temperature_min: float | None = None  # None = no temperature channel
    temperature_max: float | None = None
    tick_min_seconds: float = Field(0.5, gt=0.0)
    tick_max_seconds: float = Field(2.0, gt=0.0)
    history_size: int = Field(100, ge=1)
    event_log_size: int = Field(100, ge=1)
    thresholds: ThresholdConfig = ThresholdConfig()

    @model_validator(mode="before")
    @classmethod
    def _apply_preset(cls, data: object) -> object:
        if isinstance(data, dict) and data.get("preset") in TELEMETRY_PRESETS:
            return {**TELEMETRY_PRESETS[data["preset"]], **data}
        return data

    @model_validator(mode="after")
    def _check_ranges(self) -> TelemetryConfig:
        if self.voltage_max < self.voltage_min:
            raise ValueError("voltage_max must be >= voltage_min")
        if self.current_max < self.current_min:
            raise ValueError("current_max must be >= current_min")
        if self.tick_max_seconds < self.tick_min_seconds:
            raise ValueError("tick_max_seconds must be >= tick_min_seconds")
        if (self.temperature_min is None) != (self.temperature_max is None):
            raise ValueError("temperature_min and temperature_max must be set together")
        return self


# Device scenarios from the monitoring screens. Values set explicitly in
# config override the preset.
TELEMETRY_PRESETS: dict[str, dict] = {
    "ups": {},
    "power_units": {
        "devices": ["BACKUP_GENERATOR_A", "BACKUP_GENERATOR_B", "UPS_MODULE_1", "UPS_MODULE_2"],
        "voltage_min": 380.0,
        "voltage_max": 401.0,
        "current_min": 10.0,
        "current_max": 41.0,
        "temperature_min": 20.0,
        "temperature_max": 56.0,
        "thresholds": {"voltage_low": 380.0, "voltage_high": 400.0, "current_critical": 40.0},
    },
}


class PowerUnitConfig(BaseModel):
    id: int
    name: str
    max_power_kw: float = Field(ge=0.0)
    is_active: bool = True


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "console"
    file: str = ""


class AppConfig(BaseModel):
    """Root configuration model containing all simulator settings."""

    mains: MainsConfig = MainsConfig()
    battery: BatteryConfig = BatteryConfig()
    generator: GeneratorConfig = GeneratorConfig()
    simulation: SimulationConfig = SimulationConfig()
    telemetry: TelemetryConfig = TelemetryConfig()
    units: list[PowerUnitConfig] = Field(
        default_factory=lambda: [
            PowerUnitConfig(id=1, name="Backup generator", max_power_kw=50.0, is_active=True),
        ]
    )
    logging: LoggingConfig = LoggingConfig()
