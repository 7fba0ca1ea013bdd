"""Stateless energy formulas used by the calculator commands.

None of these validate their inputs. Physically meaningless arguments
(negative power, negative resistance) give whatever the arithmetic gives.
"""

from __future__ import annotations

from dataclasses import dataclass

# Sample appliance set from the calculator screen: (watts, hours).
DEMO_DEVICES: tuple[tuple[float, float], ...] = ((100.0, 2.0), (60.0, 3.0), (200.0, 1.5))


def energy_kwh(power_w: float, hours: float) -> float:
    """E = P × t, in kWh."""
    return power_w * hours / 1000.0


def total_energy_kwh(*devices: tuple[float, float]) -> float:
    """Sum of P × t over any number of ``(power_w, hours)`` pairs, in kWh."""
    return sum(power * hours for power, hours in devices) / 1000.0


def backup_time_hours(battery_wh: float, consumption_w: float) -> float:
    """How long the battery lasts at the given draw. Zero draw gives 0."""
    if consumption_w <= 0:
        return 0.0
    return battery_wh / consumption_w


def simulate_discharge(
    initial_wh: float,
    efficiency: float,
    degradation_per_year: float,
    years: int,
) -> float:
    """Usable capacity after ``years`` of compounding degradation.

    E = E0 × η × (1 - d) ^ years
    """
    return initial_wh * efficiency * (1 - degradation_per_year) ** years


def line_loss_w(current_a: float, resistance_ohm: float) -> float:
    """Resistive wiring loss, P = I² × R."""
    return current_a ** 2 * resistance_ohm


@dataclass(frozen=True)
class EnergyReport:
    energy_kwh: float
    backup_time_hours: float
    remaining_capacity_wh: float
    line_loss_w: float

    def lines(self) -> list[str]:
        return [
            f"Energy consumed: {self.energy_kwh:.3f} kWh",
            f"Backup time: {self.backup_time_hours:.2f} h",
            f"Capacity after degradation: {self.remaining_capacity_wh:.1f} Wh",
            f"Line loss: {self.line_loss_w:.2f} W",
        ]


def energy_report(
    power_w: float,
    hours: float,
    battery_wh: float,
    current_a: float,
    resistance_ohm: float,
    efficiency: float = 0.9,
    degradation_per_year: float = 0.05,
    years: int = 0,
) -> EnergyReport:
    """Every calculator result for one set of inputs.

    Backup time divides by the energy drawn over the period (P × t), the
    same figure the calculator screen shows.
    """
    return EnergyReport(
        energy_kwh=energy_kwh(power_w, hours),
        backup_time_hours=backup_time_hours(battery_wh, power_w * hours),
        remaining_capacity_wh=simulate_discharge(battery_wh, efficiency, degradation_per_year, years),
        line_loss_w=line_loss_w(current_a, resistance_ohm),
    )

