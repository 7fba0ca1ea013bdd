"""Failover control: the source state machine and the loop that drives it."""

from emergency_power.control.failover import FailoverController, FailoverState, SupplyState
from emergency_power.control.loop import SupplyLoop, SupplySnapshot

__all__ = ["FailoverController", "FailoverState", "SupplyLoop", "SupplySnapshot", "SupplyState"]
