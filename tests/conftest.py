"""Shared test fixtures for Emergency Power."""

from __future__ import annotations

import logging
import random
from pathlib import Path

import pytest

from emergency_power.config.manager import ConfigManager
from emergency_power.config.schema import AppConfig


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config() -> AppConfig:
    """Provide a default test configuration."""
    return AppConfig()


@pytest.fixture
def config_manager(tmp_path: Path) -> ConfigManager:
    """Provide a config manager with test paths."""
    defaults = tmp_path / "config.defaults.yaml"
    defaults.write_text("simulation:\n  tick_seconds: 0.01\n")
    user = tmp_path / "config.yaml"
    mgr = ConfigManager(defaults_path=defaults, user_path=user)
    mgr.load()
    return mgr


@pytest.fixture
def rng() -> random.Random:
    """Seeded RNG so random draws are repeatable."""
    return random.Random(1234)
