from __future__ import annotations

import pytest

from wcs.career.entities import Meters
from wcs.career.progression import (
    allocation_to_gains,
    energy_factor,
    injury_risk_from_allocation,
    is_rest_heavy,
    recovery_effects,
    stress_factor,
    training_gain,
)
from wcs.contracts import Attribute, TimeAllocation
from tests.helpers import make_competitor


def test_training_gain_is_increasing_and_concave():
    assert training_gain(0) == 0.0
    gains = [training_gain(h) for h in range(1, 21)]
    assert all(b > a for a, b in zip(gains, gains[1:]))
    assert training_gain(8) < 2 * training_gain(4)
    assert training_gain(20) < 2 * training_gain(10)


def test_energy_and_stress_factors_are_bounded():
    assert energy_factor(100) == pytest.approx(1.0)
    assert energy_factor(0) == pytest.approx(0.4)
    assert stress_factor(0) == pytest.approx(1.0)
    assert stress_factor(100) == pytest.approx(0.2)
    assert stress_factor(95) == pytest.approx(0.2)


def test_allocation_gains_shrink_when_tired():
    allocation = TimeAllocation(technique=6, conditioning=6, strength=6, film_study=2, study=4)
    fresh = allocation_to_gains(allocation, energy=100, stress=0)
    tired = allocation_to_gains(allocation, energy=20, stress=70)
    assert tired.technique < fresh.technique
    assert tired.mat_iq < fresh.mat_iq
    assert fresh.mental > 0


def test_recovery_is_capped():
    huge = recovery_effects(200, False)
    assert huge.energy == 15.0
    assert huge.health == 10.0
    assert huge.stress_reduction == 5.0
    assert recovery_effects(4, True).stress_reduction == 8.0


def test_injury_risk_threshold_and_cap():
    assert injury_risk_from_allocation(TimeAllocation(technique=5, conditioning=5)) == 0.0
    assert injury_risk_from_allocation(TimeAllocation(technique=10, conditioning=5)) == pytest.approx(0.05)
    assert injury_risk_from_allocation(TimeAllocation(technique=40, conditioning=40, extra_practice_blocks=3)) == pytest.approx(0.3)


def test_rest_heavy_detection():
    assert is_rest_heavy(TimeAllocation(recovery=10, technique=2))
    assert not is_rest_heavy(TimeAllocation(recovery=10, technique=4))
    assert not is_rest_heavy(TimeAllocation(recovery=6))


def test_growth_cap_scenario():
    competitor = make_competitor(level=50, growth_cap=5)
    start = competitor.attributes.get(Attribute.TECHNIQUE)
    for _ in range(6):
        competitor.apply_training_gain(Attribute.TECHNIQUE, 10)
    assert competitor.attributes.get(Attribute.TECHNIQUE) - start <= 6
    assert competitor.potential.yearly_growth_used <= 5


def test_growth_never_passes_ceiling_or_cap():
    competitor = make_competitor(level=80, growth_cap=30)
    competitor.potential.ceilings[Attribute.STRENGTH.value] = 84
    for _ in range(40):
        competitor.apply_training_gain(Attribute.STRENGTH, 7)
        competitor.apply_training_gain(Attribute.TECHNIQUE, 7)
        assert competitor.potential.yearly_growth_used <= competitor.potential.yearly_growth_cap
        assert competitor.attributes.strength <= 84
        assert competitor.attributes.technique <= competitor.potential.ceiling(Attribute.TECHNIQUE)


def test_non_positive_gain_and_full_ceiling_are_noops():
    competitor = make_competitor(level=95)
    assert competitor.apply_training_gain(Attribute.SPEED, 10) == 0
    fresh = make_competitor(level=50)
    assert fresh.apply_training_gain(Attribute.SPEED, 0) == 0
    assert fresh.apply_training_gain(Attribute.SPEED, -3) == 0
    assert fresh.potential.yearly_growth_used == 0


def test_near_ceiling_bands_reduce_gain():
    low = make_competitor(level=60, growth_cap=60)
    high = make_competitor(level=92, growth_cap=60)
    high.potential.ceilings[Attribute.TECHNIQUE.value] = 100
    assert low.apply_training_gain(Attribute.TECHNIQUE, 8) == 8
    assert high.apply_training_gain(Attribute.TECHNIQUE, 8) == 2


def test_ring_rust_after_two_rest_heavy_weeks():
    competitor = make_competitor(level=60)
    conditioning = competitor.attributes.conditioning
    strength = competitor.attributes.strength
    competitor.apply_rest(10, 5, 4, True)
    competitor.apply_rest(10, 5, 4, True)
    decayed = competitor.apply_rest_decay()
    assert Attribute.CONDITIONING in decayed
    assert competitor.attributes.conditioning <= conditioning
    assert competitor.attributes.strength <= strength
    assert competitor.attributes.conditioning < conditioning


def test_long_rest_streak_costs_technique_and_resets():
    competitor = make_competitor(level=60)
    competitor.consecutive_rest_weeks = 4
    assert competitor.apply_rest_decay() == [Attribute.TECHNIQUE]
    assert competitor.attributes.technique == 59
    assert competitor.consecutive_rest_weeks == 0


def test_meters_clamp_to_range():
    meters = Meters()
    meters.adjust(energy=500, health=-500, stress=250, confidence=-90)
    assert (meters.energy, meters.health, meters.stress, meters.confidence) == (100, 0, 100, 0)
    for delta in (-37, 12, 88, -140, 61):
        meters.adjust(energy=delta, health=delta, stress=-delta, confidence=delta)
        for value in (meters.energy, meters.health, meters.stress, meters.confidence):
            assert 0 <= value <= 100


def test_college_entry_compression():
    competitor = make_competitor(level=70)
    competitor.attributes.technique = 100
    competitor.apply_entry_cap(80)
    assert competitor.attributes.technique == 87
    assert competitor.attributes.strength == 70
