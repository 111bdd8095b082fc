from __future__ import annotations

from wcs.career import CareerStateMachine, StartOptions
from wcs.career.entities import Attributes, Competitor, Opponent, Potential
from wcs.contracts import Attribute, Style

DETERMINISM_ALLOCATION = {
    "technique": 4,
    "conditioning": 3,
    "strength": 2,
    "film_study": 1,
    "study": 5,
    "recovery": 4,
    "social": 2,
    "extra_practice_blocks": 1,
}


def make_machine(seed: str | int = "test-seed", **options) -> CareerStateMachine:
    return CareerStateMachine.create(seed, StartOptions(**options))


def advance_to_week(machine: CareerStateMachine, week: int) -> None:
    while machine.state.week != week:
        machine.advance_week()


def make_competitor(level: int = 50, style: Style = Style.NEUTRAL, growth_cap: int = 14) -> Competitor:
    return Competitor(
        name="Test Wrestler",
        weight_class=145,
        style=style,
        attributes=Attributes(**{attr.value: level for attr in Attribute}),
        potential=Potential(ceilings={attr.value: 95 for attr in Attribute}, yearly_growth_cap=growth_cap),
    )


def make_opponent(rating: int, opponent_id: str = "opp_1", style: Style = Style.NEUTRAL) -> Opponent:
    return Opponent(
        opponent_id=opponent_id,
        name=f"Opponent {opponent_id}",
        weight_class=145,
        style=style,
        true_skill=rating,
        overall_rating=rating,
        consistency=0.8,
        clutch=0.5,
    )
