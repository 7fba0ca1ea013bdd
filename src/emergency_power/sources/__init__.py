"""Power sources: mains, battery, generator, and the blackout pseudo-source."""

from emergency_power.sources.base import PowerSource, SourceKind
from emergency_power.sources.battery import Battery
from emergency_power.sources.blackout import BLACKOUT, Blackout
from emergency_power.sources.generator import Generator
from emergency_power.sources.mains import Mains

__all__ = [
    "BLACKOUT",
    "Battery",
    "Blackout",
    "Generator",
    "Mains",
    "PowerSource",
    "SourceKind",
]
