"""Weekly hour budget: what a week leaves over after obligations, and whether a plan fits."""

from __future__ import annotations

from dataclasses import dataclass, fields

from wcs.contracts import BudgetMode, LifeStage, TimeAllocation, ValidationIssue, ValidationResult

HOURS_PER_WEEK = 168
DEFAULT_ACTION_HOURS = 40

HS_BASELINE: dict[str, int] = {
    "sleep": 56,
    "school": 40,
    "mandatory_practice": 10,
    "commute": 6,
    "homework": 5,
    "life_maintenance": 10,
}
COLLEGE_BASELINE: dict[str, int] = {
    "sleep": 56,
    "classes": 18,
    "practice": 10,
    "team_lifting": 4,
    "life_maintenance": 10,
    "baseline_study": 15,
    "transit": 5,
}

TOURNAMENT_LOCKED_HOURS: dict[BudgetMode, int] = {BudgetMode.FULL_WEEK: 20, BudgetMode.ACTION_HOURS: 8}
WEIGHT_CUT_LOCKED_HOURS = 3
EXTRA_PRACTICE_BLOCK_HOURS = 2
MAX_EXTRA_PRACTICE_BLOCKS: dict[LifeStage, int] = {LifeStage.HIGH_SCHOOL: 3, LifeStage.COLLEGE: 4}


@dataclass(slots=True)
class BudgetContext:
    life_stage: LifeStage
    mode: BudgetMode = BudgetMode.FULL_WEEK
    is_tournament_week: bool = False
    injury_weeks_out: list[int] | None = None
    over_weight_class: bool = False
    action_hours: int = DEFAULT_ACTION_HOURS


def baseline_hours(life_stage: LifeStage, mode: BudgetMode = BudgetMode.FULL_WEEK) -> int:
    if mode == BudgetMode.ACTION_HOURS:
        return 0
    table = HS_BASELINE if life_stage == LifeStage.HIGH_SCHOOL else COLLEGE_BASELINE
    return sum(table.values())


def locked_hours(context: BudgetContext) -> int:
    locked = 0
    if context.is_tournament_week:
        locked += TOURNAMENT_LOCKED_HOURS[context.mode]
    for weeks_out in context.injury_weeks_out or []:
        locked += min(5, weeks_out * 2)
    if context.over_weight_class:
        locked += WEIGHT_CUT_LOCKED_HOURS
    return locked


def available_hours(context: BudgetContext) -> int:
    constant = HOURS_PER_WEEK if context.mode == BudgetMode.FULL_WEEK else context.action_hours
    remaining = constant - baseline_hours(context.life_stage, context.mode) - locked_hours(context)
    return max(0, remaining)


def max_extra_blocks(life_stage: LifeStage) -> int:
    return MAX_EXTRA_PRACTICE_BLOCKS[life_stage]


def total_allocated(allocation: TimeAllocation, life_stage: LifeStage) -> int:
    blocks = min(allocation.extra_practice_blocks, max_extra_blocks(life_stage))
    return (
        allocation.technique
        + allocation.conditioning
        + allocation.strength
        + allocation.film_study
        + allocation.study
        + allocation.recovery
        + allocation.social
        + allocation.job
        + blocks * EXTRA_PRACTICE_BLOCK_HOURS
        + allocation.weight_cut
        + allocation.relationship_time
    )


def validate_allocation(allocation: TimeAllocation, available: int, life_stage: LifeStage) -> ValidationResult:
    cap = max_extra_blocks(life_stage)
    if allocation.extra_practice_blocks > cap:
        return _fail(
            "INVALID_BLOCK_COUNT",
            "allocation.extra_practice_blocks",
            f"Extra practice limited to {cap} blocks ({EXTRA_PRACTICE_BLOCK_HOURS}h each) per week.",
        )
    if allocation.extra_practice_blocks < 0:
        return _fail(
            "INVALID_BLOCK_COUNT",
            "allocation.extra_practice_blocks",
            "Extra practice blocks cannot be negative.",
        )
    negative = [f.name for f in fields(allocation) if getattr(allocation, f.name) < 0]
    if negative:
        return _fail("INVALID_HOURS", f"allocation.{negative[0]}", f"Hours cannot be negative: {', '.join(negative)}.")
    total = total_allocated(allocation, life_stage)
    if total > available:
        return _fail("EXCEEDS_BUDGET", "allocation", f"Total allocated {total}h exceeds available {available}h.")
    return ValidationResult(ok=True, issues=[])


def _fail(code: str, field_path: str, message: str) -> ValidationResult:
    return ValidationResult(
        ok=False,
        issues=[ValidationIssue(code=code, severity="blocking", field_path=field_path, entity_id="allocation", message=message)],
    )
