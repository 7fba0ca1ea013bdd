"""Configuration management for Emergency Power."""

from emergency_power.config.schema import AppConfig
from emergency_power.config.manager import ConfigManager

__all__ = ["AppConfig", "ConfigManager"]
