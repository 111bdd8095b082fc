from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from wcs.career.budget import BudgetContext, available_hours
from wcs.career.calendar import generate_hs_schedule
from wcs.career.entities import (
    Attributes,
    Competitor,
    Finances,
    Meters,
    Potential,
    WeightState,
)
from wcs.career.opponents import generate_pools, generate_ranking_ledgers
from wcs.career.recruiting import compute_score
from wcs.career.reference import LEAGUES, weight_classes_for
from wcs.career.relationships import generate_initial_relationships
from wcs.career.state import HS_FIRST_GRADE, HS_LAST_GRADE, GameState
from wcs.contracts import Attribute, BudgetMode, LeagueTier, LifeStage, Style, ValidationError, ValidationIssue
from wcs.core import DeterministicRandomSource
from wcs.core.settings import EngineSettings, validate_settings_config

DEFAULT_WEIGHT_CLASS = 145
COLLEGE_FIRST_GRADE = 13


@dataclass(slots=True)
class StartOptions:
    name: str = "Wrestler"
    weight_class: int = DEFAULT_WEIGHT_CLASS
    league: LeagueTier = LeagueTier.HS_JV
    age: int = 14
    style: Style = Style.NEUTRAL
    attributes: dict[str, int] = field(default_factory=dict)
    money: int | None = None
    city_cost_index: float = 1.0
    settings: EngineSettings = field(default_factory=EngineSettings)

    def validate(self) -> None:
        issues: list[ValidationIssue] = []
        if not self.name.strip():
            issues.append(_issue("name", "name must not be blank"))
        if self.weight_class not in weight_classes_for(self.league):
            issues.append(_issue("weight_class", f"{self.weight_class} is not a {self.league.value} weight class"))
        if not 13 <= self.age <= 24:
            issues.append(_issue("age", "age must be within [13, 24]"))
        known = {a.value for a in Attribute}
        for key, value in self.attributes.items():
            if key not in known:
                issues.append(_issue(f"attributes.{key}", "unknown attribute"))
            elif not 0 <= value <= 100:
                issues.append(_issue(f"attributes.{key}", "attribute must be within [0, 100]"))
        if self.money is not None and self.money < 0:
            issues.append(_issue("money", "money cannot be negative"))
        if not 0.5 <= self.city_cost_index <= 2.0:
            issues.append(_issue("city_cost_index", "city cost index must be within [0.5, 2.0]"))
        try:
            self.settings.validate()
        except ValidationError as exc:
            issues.extend(exc.issues)
        if issues:
            raise ValidationError(issues)


def start_options_from_mapping(raw: Mapping[str, Any]) -> StartOptions:
    known = {f.name for f in fields(StartOptions)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"unknown start options: {unknown}")
    values = dict(raw)
    if "league" in values:
        values["league"] = LeagueTier(values["league"])
    if "style" in values:
        values["style"] = Style(values["style"])
    if "settings" in values and not isinstance(values["settings"], EngineSettings):
        values["settings"] = validate_settings_config(dict(values["settings"]))
    return StartOptions(**values)


def _issue(field_name: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        code="INVALID_START_OPTION",
        severity="blocking",
        field_path=f"start_options.{field_name}",
        entity_id=field_name,
        message=message,
    )


def _starting_grade(age: int, stage: LifeStage) -> int:
    if stage == LifeStage.COLLEGE:
        return COLLEGE_FIRST_GRADE
    return max(HS_FIRST_GRADE, min(HS_LAST_GRADE, HS_FIRST_GRADE + age - 14))


def create_game_state(seed: str | int, options: StartOptions | None = None) -> GameState:
    options = options or StartOptions()
    options.validate()
    rand = DeterministicRandomSource(str(seed))

    # draw every attribute even when overridden so the stream does not shift with options
    attributes = Attributes()
    for attr in Attribute:
        attributes.set(attr, 35 + rand.randint(0, 20))
    ceilings = {attr.value: 75 + rand.randint(0, 20) for attr in Attribute}
    for key, value in options.attributes.items():
        attributes.set(Attribute(key), value)
        ceilings[key] = max(ceilings[key], value)
    natural_weight = options.weight_class + rand.randint(-4, 4)

    competitor = Competitor(
        name=options.name.strip(),
        weight_class=options.weight_class,
        style=options.style,
        attributes=attributes,
        meters=Meters(),
        potential=Potential(ceilings=ceilings, yearly_growth_cap=options.settings.yearly_growth_cap),
        weight=WeightState(natural_weight, natural_weight, options.weight_class),
    )
    stage = options.league.life_stage
    money = options.settings.starting_money if options.money is None else options.money
    state = GameState(
        seed=str(seed),
        rng_state=rand.serialize(),
        competitor=competitor,
        league=options.league,
        settings=options.settings,
        age=options.age,
        grade=_starting_grade(options.age, stage),
        finances=Finances(money=money, city_cost_index=options.city_cost_index),
    )
    state.relationships = generate_initial_relationships(rand)

    mean = LEAGUES[options.league].mean_true_skill
    state.pools = generate_pools(options.weight_class, mean, rand, state.year)
    state.rankings = generate_ranking_ledgers(
        weight_classes_for(options.league), options.weight_class, mean, state.pools, rand, state.year
    )
    state.reputation.recruiting_score = compute_score(competitor, state.reputation, state.life, state.record.career)
    if stage == LifeStage.HIGH_SCHOOL:
        state.schedule = generate_hs_schedule(
            state.pools,
            rand,
            state.reputation.recruiting_score,
            has_fargo_history=False,
            jv=options.league == LeagueTier.HS_JV,
        )
    state.hours_left_this_week = available_hours(
        BudgetContext(
            life_stage=stage,
            mode=BudgetMode.ACTION_HOURS,
            over_weight_class=competitor.weight.pounds_over > 0,
            action_hours=options.settings.weekly_action_hours,
        )
    )
    state.log(f"{competitor.name} begins the journey at {LEAGUES[options.league].label}.")
    state.rng_state = rand.serialize()
    state.validate()
    return state
