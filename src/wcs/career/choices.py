from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wcs.contracts import Attribute, LifeStage


@dataclass(frozen=True, slots=True)
class ModifierDelta:
    training: float = 0.0
    performance: float = 0.0
    injury_risk: float = 0.0
    weight_cut: float = 0.0
    reason: str = ""


@dataclass(frozen=True, slots=True)
class ChoiceDefinition:
    key: str
    label: str
    tab: str
    hours: int
    money: int = 0
    meters: dict[str, int] = field(default_factory=dict)
    modifier: ModifierDelta | None = None
    trains: Attribute | None = None
    gain_scale: float = 1.0
    intense: bool = False
    college_only: bool = False
    needs_partner: bool = False
    needs_injury: bool = False


CHOICES: dict[str, ChoiceDefinition] = {
    c.key: c
    for c in [
        ChoiceDefinition(
            "train_technique", "Train technique", "training", 10,
            meters={"energy": -20}, trains=Attribute.TECHNIQUE, intense=True,
        ),
        ChoiceDefinition(
            "train_conditioning", "Train conditioning", "training", 10,
            meters={"energy": -20}, trains=Attribute.CONDITIONING, intense=True,
        ),
        ChoiceDefinition(
            "train_strength", "Lift weights", "training", 8,
            meters={"energy": -20}, trains=Attribute.STRENGTH, intense=True,
        ),
        ChoiceDefinition(
            "study_film", "Study film", "training", 4,
            meters={"energy": 5}, trains=Attribute.MAT_IQ, gain_scale=0.8,
        ),
        ChoiceDefinition(
            "compete", "Compete / scrimmage", "training", 12,
            meters={"energy": -14}, intense=True, college_only=True,
        ),
        ChoiceDefinition(
            "rest", "Rest and recover", "training", 4,
            meters={"energy": 28, "health": 3, "confidence": 2, "stress": -2},
            modifier=ModifierDelta(injury_risk=-0.15, reason="Rested"),
        ),
        ChoiceDefinition("study", "Study", "life", 6, meters={"energy": 8}),
        ChoiceDefinition("hang_out", "Hang out", "life", 4, meters={"energy": 10}),
        ChoiceDefinition(
            "party", "Party", "life", 5, money=20,
            meters={"confidence": 5, "energy": -5},
            modifier=ModifierDelta(training=-0.1, performance=-0.05, reason="Partied"),
        ),
        ChoiceDefinition(
            "interview", "Media interview", "life", 3,
            meters={"confidence": 3},
            modifier=ModifierDelta(performance=0.05, reason="Media buzz"),
        ),
        ChoiceDefinition(
            "rehab", "Rehab / recovery", "life", 6,
            meters={"health": 5},
            modifier=ModifierDelta(training=-0.05, injury_risk=-0.2, reason="Rehab"),
            needs_injury=True,
        ),
        ChoiceDefinition("part_time_job", "Part-time job", "life", 12, college_only=True),
        ChoiceDefinition(
            "relationship_time", "Spend time with partner", "relationship", 6,
            modifier=ModifierDelta(performance=0.05, reason="Quality time"),
            needs_partner=True,
        ),
        ChoiceDefinition(
            "date", "Date night", "relationship", 6, money=30,
            meters={"confidence": 8},
            modifier=ModifierDelta(performance=0.08, reason="Date night"),
            needs_partner=True,
        ),
        ChoiceDefinition(
            "argument", "Argument (stress)", "relationship", 2,
            meters={"stress": 5, "confidence": -5},
            modifier=ModifierDelta(performance=-0.1, reason="Argument"),
            needs_partner=True,
        ),
    ]
}


def is_unlocked(choice: ChoiceDefinition, stage: LifeStage, has_partner: bool, has_injury: bool) -> bool:
    if choice.college_only and stage != LifeStage.COLLEGE:
        return False
    if choice.needs_partner and not has_partner:
        return False
    if choice.needs_injury and not has_injury:
        return False
    return True


def available_choices(
    stage: LifeStage,
    has_partner: bool,
    has_injury: bool,
    hours_left: int,
    money: int,
) -> list[ChoiceDefinition]:
    return [
        c
        for c in CHOICES.values()
        if is_unlocked(c, stage, has_partner, has_injury) and c.hours <= hours_left and c.money <= money
    ]


def preview(choice: ChoiceDefinition) -> dict[str, Any]:
    projection: dict[str, Any] = {
        "key": choice.key,
        "hours": choice.hours,
        "money": choice.money,
        "energy": 0,
        "health": 0,
        "stress": 0,
        "confidence": 0,
    }
    projection.update(choice.meters)
    mod = choice.modifier
    projection["modifier_deltas"] = (
        {
            "training": mod.training,
            "performance": mod.performance,
            "injury_risk": mod.injury_risk,
            "weight_cut": mod.weight_cut,
        }
        if mod
        else {}
    )
    projection["reason"] = mod.reason if mod else ""
    projection["trains"] = choice.trains.value if choice.trains else None
    return projection
