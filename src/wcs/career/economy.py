from __future__ import annotations

from dataclasses import dataclass

from wcs.career.entities import Finances
from wcs.contracts import LifeStage, RandomSource

HS_ALLOWANCE = 20
HS_WEEKLY_EXPENSES_BASE = 15
HS_EXPENSE_CHANCE = 0.5
COLLEGE_RENT_BASE = 120
COLLEGE_FOOD_BASE = 80
COLLEGE_BOOKS_WEEKLY = 20
WEEKS_PER_YEAR = 52
PART_TIME_PAY = (200, 450)


@dataclass(slots=True)
class WeeklyLedger:
    income: int
    expenses: int

    @property
    def net(self) -> int:
        return self.income - self.expenses


def weekly_expenses(stage: LifeStage, finances: Finances) -> int:
    if stage == LifeStage.HIGH_SCHOOL:
        return round(HS_WEEKLY_EXPENSES_BASE * finances.city_cost_index)
    rent = COLLEGE_RENT_BASE * finances.city_cost_index
    food = COLLEGE_FOOD_BASE * finances.city_cost_index
    uncovered = finances.annual_tuition * (100 - finances.scholarship_pct) / 100
    return round(rent + food + COLLEGE_BOOKS_WEEKLY + uncovered / WEEKS_PER_YEAR)


def weekly_income(stage: LifeStage) -> int:
    return HS_ALLOWANCE if stage == LifeStage.HIGH_SCHOOL else 0


def part_time_pay(rand: RandomSource) -> int:
    return rand.randint(*PART_TIME_PAY)


def settle_week(stage: LifeStage, finances: Finances, rand: RandomSource) -> WeeklyLedger:
    income = weekly_income(stage)
    expenses = weekly_expenses(stage, finances)
    if stage == LifeStage.HIGH_SCHOOL and not rand.chance(HS_EXPENSE_CHANCE):
        expenses = 0
    balance = finances.money + income - expenses
    finances.broke = balance < 0
    finances.money = max(0, balance)
    finances.last_income = income
    finances.last_expenses = expenses
    return WeeklyLedger(income=income, expenses=expenses)
