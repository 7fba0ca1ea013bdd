"""Grid mains supply."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from emergency_power.sources.base import SourceKind

logger = logging.getLogger(__name__)

# Fraction of the served load lost from the rating on every supply (line losses).
LOSS_FACTOR = 0.01


@dataclass
class Mains:
    """Utility grid. Never runs out, but can be switched off externally."""

    rated_output_w: float = 1000.0
    available: bool = True
    name: str = "Mains"
    kind: SourceKind = SourceKind.MAINS

    def attempt_supply(self, load_w: float) -> bool:
        if not self.available or self.rated_output_w < load_w:
            return False
        self.rated_output_w = max(0.0, self.rated_output_w - load_w * LOSS_FACTOR)
        logger.debug("Mains carried %.1fW (rating now %.2fW)", load_w, self.rated_output_w)
        return True

    def describe_status(self) -> str:
        return "Mains active" if self.available else "Mains unavailable"
