from __future__ import annotations

import math
from dataclasses import dataclass

from wcs.contracts import TimeAllocation

INJURY_INTENSITY_THRESHOLD = 10
INJURY_RISK_PER_HOUR = 0.01
INJURY_RISK_CAP = 0.3


@dataclass(slots=True)
class TrainingGains:
    technique: float = 0.0
    conditioning: float = 0.0
    strength: float = 0.0
    mat_iq: float = 0.0
    mental: float = 0.0


@dataclass(slots=True)
class RecoveryEffects:
    energy: float
    health: float
    stress_reduction: float


def training_gain(hours: float) -> float:
    """Log-shaped: doubling the hours never doubles the gain."""
    if hours <= 0:
        return 0.0
    return math.log(1 + hours * 0.5) * 4


def energy_factor(energy: float) -> float:
    return 0.4 + 0.6 * (energy / 100)


def stress_factor(stress: float) -> float:
    return max(0.2, 1 - stress / 100)


def allocation_to_gains(allocation: TimeAllocation, energy: float, stress: float) -> TrainingGains:
    factor = energy_factor(energy) * stress_factor(stress)
    return TrainingGains(
        technique=training_gain(allocation.technique) * factor,
        conditioning=training_gain(allocation.conditioning) * factor,
        strength=training_gain(allocation.strength) * factor,
        mat_iq=training_gain(allocation.film_study) * 0.8 * factor,
        mental=training_gain(allocation.study) * 0.3 * factor,
    )


def recovery_effects(recovery_hours: float, is_rest_heavy_week: bool) -> RecoveryEffects:
    hours = max(0.0, recovery_hours)
    return RecoveryEffects(
        energy=min(15.0, hours * 1.5),
        health=min(10.0, hours),
        stress_reduction=8.0 if is_rest_heavy_week else min(5.0, hours * 0.5),
    )


def injury_risk_from_hours(intense_hours: float) -> float:
    if intense_hours <= INJURY_INTENSITY_THRESHOLD:
        return 0.0
    return min(INJURY_RISK_CAP, (intense_hours - INJURY_INTENSITY_THRESHOLD) * INJURY_RISK_PER_HOUR)


def injury_risk_from_allocation(allocation: TimeAllocation) -> float:
    intensity = (
        allocation.technique
        + allocation.conditioning
        + allocation.strength
        + min(allocation.extra_practice_blocks, 4) * 2
    )
    return injury_risk_from_hours(intensity)


def is_rest_heavy(allocation: TimeAllocation) -> bool:
    return allocation.recovery >= 8 and (allocation.technique + allocation.conditioning + allocation.strength) < 4
