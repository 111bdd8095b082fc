from __future__ import annotations

from wcs.career.economy import settle_week, weekly_expenses, weekly_income
from wcs.career.entities import Finances
from wcs.contracts import LifeStage
from wcs.core import DeterministicRandomSource


class FixedChance(DeterministicRandomSource):
    def __init__(self, hit: bool) -> None:
        super().__init__("fixed")
        self.hit = hit

    def chance(self, p: float) -> bool:
        return self.hit


def test_high_school_allowance_and_expenses():
    finances = Finances(money=100, city_cost_index=1.2)
    assert weekly_income(LifeStage.HIGH_SCHOOL) == 20
    assert weekly_expenses(LifeStage.HIGH_SCHOOL, finances) == 18

    ledger = settle_week(LifeStage.HIGH_SCHOOL, finances, FixedChance(True))
    assert (ledger.income, ledger.expenses, ledger.net) == (20, 18, 2)
    assert finances.money == 102

    ledger = settle_week(LifeStage.HIGH_SCHOOL, finances, FixedChance(False))
    assert ledger.expenses == 0
    assert finances.money == 122


def test_college_costs_include_uncovered_tuition():
    finances = Finances(money=1000, city_cost_index=1.0, annual_tuition=10400, scholarship_pct=50)
    assert weekly_income(LifeStage.COLLEGE) == 0
    assert weekly_expenses(LifeStage.COLLEGE, finances) == 120 + 80 + 20 + 100

    full_ride = Finances(money=1000, annual_tuition=10400, scholarship_pct=100)
    assert weekly_expenses(LifeStage.COLLEGE, full_ride) == 220


def test_money_floors_at_zero_and_flags_broke():
    finances = Finances(money=50, annual_tuition=0)
    settle_week(LifeStage.COLLEGE, finances, FixedChance(True))
    assert finances.money == 0
    assert finances.broke
    assert finances.last_expenses == 220

    finances.money = 1000
    settle_week(LifeStage.COLLEGE, finances, FixedChance(True))
    assert not finances.broke
