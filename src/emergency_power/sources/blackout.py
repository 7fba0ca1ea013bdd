"""Terminal pseudo-source reported when nothing can carry the load."""

from __future__ import annotations

from dataclasses import dataclass

from emergency_power.sources.base import SourceKind

BLACKOUT_STATUS = "System de-energized!"


@dataclass(frozen=True)
class Blackout:
    name: str = "No power"
    kind: SourceKind = SourceKind.BLACKOUT
    rated_output_w: float = 0.0

    def attempt_supply(self, load_w: float) -> bool:
        return False

    def describe_status(self) -> str:
        return BLACKOUT_STATUS


BLACKOUT = Blackout()
