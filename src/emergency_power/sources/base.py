"""Power source protocol shared by mains, battery, generator and blackout."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class SourceKind(str, Enum):
    """The fixed set of source kinds the failover controller knows about."""

    MAINS = "mains"
    BATTERY = "battery"
    GENERATOR = "generator"
    BLACKOUT = "blackout"


@runtime_checkable
class PowerSource(Protocol):
    """Protocol every power source implements.

    ``rated_output_w`` is the ceiling on instantaneous deliverable power and
    never goes negative. ``attempt_supply`` reports failure as ``False``
    and leaves the source untouched; it does not raise.
    """

    name: str
    kind: SourceKind
    rated_output_w: float

    def attempt_supply(self, load_w: float) -> bool:
        """Try to carry ``load_w``, depleting the source's resource on success."""
        ...

    def describe_status(self) -> str:
        """One-line human readable summary of the source state."""
        ...


def clamp_pct(value: float) -> float:
    """Clamp a percentage into [0, 100]."""
    return max(0.0, min(100.0, value))
