from __future__ import annotations

from wcs.career.budget import BudgetContext, available_hours, total_allocated, validate_allocation
from wcs.contracts import BudgetMode, LifeStage, TimeAllocation


def test_full_week_baselines():
    assert available_hours(BudgetContext(LifeStage.HIGH_SCHOOL)) == 41
    assert available_hours(BudgetContext(LifeStage.COLLEGE)) == 50


def test_action_hours_mode_uses_configured_constant():
    assert available_hours(BudgetContext(LifeStage.HIGH_SCHOOL, mode=BudgetMode.ACTION_HOURS)) == 40
    assert available_hours(BudgetContext(LifeStage.COLLEGE, mode=BudgetMode.ACTION_HOURS, action_hours=36)) == 36


def test_locked_hours_for_tournament_injury_and_weight():
    ctx = BudgetContext(
        LifeStage.HIGH_SCHOOL,
        is_tournament_week=True,
        injury_weeks_out=[1, 4],
        over_weight_class=True,
    )
    # 41 - 20 tournament - (2 + 5) injuries - 3 weight cut
    assert available_hours(ctx) == 11
    action_ctx = BudgetContext(LifeStage.HIGH_SCHOOL, mode=BudgetMode.ACTION_HOURS, is_tournament_week=True)
    assert available_hours(action_ctx) == 32


def test_available_hours_never_negative():
    ctx = BudgetContext(LifeStage.HIGH_SCHOOL, mode=BudgetMode.ACTION_HOURS, action_hours=8, is_tournament_week=True, over_weight_class=True)
    assert available_hours(ctx) == 0


def test_total_counts_blocks_at_two_hours():
    allocation = TimeAllocation(technique=4, study=5, extra_practice_blocks=2)
    assert total_allocated(allocation, LifeStage.HIGH_SCHOOL) == 13


def test_validate_rejects_over_budget():
    result = validate_allocation(TimeAllocation(technique=30, conditioning=12), 41, LifeStage.HIGH_SCHOOL)
    assert not result.ok
    assert result.issues[0].code == "EXCEEDS_BUDGET"


def test_validate_rejects_block_overflow_and_negative_hours():
    blocks = validate_allocation(TimeAllocation(extra_practice_blocks=4), 41, LifeStage.HIGH_SCHOOL)
    assert not blocks.ok
    assert blocks.issues[0].code == "INVALID_BLOCK_COUNT"
    assert validate_allocation(TimeAllocation(extra_practice_blocks=4), 50, LifeStage.COLLEGE).ok

    negative = validate_allocation(TimeAllocation(study=-1), 41, LifeStage.HIGH_SCHOOL)
    assert not negative.ok
    assert negative.issues[0].code == "INVALID_HOURS"


def test_budget_monotonicity():
    available = 41
    for technique in range(0, 25, 3):
        for study in range(0, 25, 4):
            for blocks in range(0, 4):
                allocation = TimeAllocation(technique=technique, study=study, recovery=6, extra_practice_blocks=blocks)
                total = total_allocated(allocation, LifeStage.HIGH_SCHOOL)
                assert validate_allocation(allocation, available, LifeStage.HIGH_SCHOOL).ok == (total <= available)


def test_negative_category_rejected_even_under_budget():
    allocation = TimeAllocation(technique=10, social=-4)
    assert total_allocated(allocation, LifeStage.HIGH_SCHOOL) <= 41
    result = validate_allocation(allocation, 41, LifeStage.HIGH_SCHOOL)
    assert not result.ok
    assert result.issues[0].code == "INVALID_HOURS"
