"""Emergency Power: failover and telemetry simulator for backup power supplies."""

try:
    from importlib.metadata import version as _pkg_version
    __version__ = _pkg_version("emergency-power")
except Exception:
    __version__ = "dev"
