from __future__ import annotations

from dataclasses import dataclass, replace

from wcs.career.entities import Competitor, LifeStats, MatchTally, Reputation, ScholarshipOffer, clamp
from wcs.career.reference import DIVISION_OFFER_MIN, SCHOOLS, School
from wcs.contracts import RandomSource
from wcs.core import stable_id

COUNTER_STEP_PCT = 5
DEFAULT_SCHOOL_NEED = 3
OFFER_DEADLINE_WEEKS = 16
MAX_OFFERS_PER_CYCLE = 3


@dataclass(slots=True)
class CounterOutcome:
    success: bool
    chance: float
    offer: ScholarshipOffer


def accolade_bonus(reputation: Reputation) -> int:
    bonus = 3 * len([p for p in reputation.state_placements if p <= 8])
    bonus += 2 * len([p for p in reputation.fargo_placements if p <= 8])
    return min(10, bonus)


def compute_score(
    competitor: Competitor,
    reputation: Reputation,
    life: LifeStats,
    career_record: MatchTally,
) -> int:
    score = competitor.true_skill * 0.5 + competitor.overall_rating * 0.3
    gpa = life.gpa
    if gpa >= 3.5:
        score += 8
    elif gpa >= 3.0:
        score += 4
    elif gpa < 2.5:
        score -= 10
    if reputation.state_rank is not None and reputation.state_rank <= 4:
        score += 6
    if reputation.national_rank is not None and reputation.national_rank <= 20:
        score += 10
    if career_record.matches > 0 and career_record.win_pct >= 0.85:
        score += 4
    score += accolade_bonus(reputation)
    if competitor.has_injury:
        score -= 5
    return int(clamp(0, 100, round(score)))


def negotiation_success_chance(
    recruiting_score: float,
    school_need: float,
    remaining_budget: float,
    coach_aggressiveness: float,
) -> float:
    score_norm = recruiting_score / 100
    need_norm = min(1.0, school_need / 5)
    budget_norm = min(1.0, remaining_budget / 50000)
    base = 0.3 + score_norm * 0.4 + need_norm * 0.2 + coach_aggressiveness * 0.1
    return clamp(0.1, 0.9, base * (0.8 + budget_norm * 0.2))


def resolve_counter(
    offer: ScholarshipOffer,
    school: School,
    recruiting_score: int,
    rand: RandomSource,
    weight_class: int | None = None,
) -> CounterOutcome:
    need = school.needs_by_weight.get(weight_class, DEFAULT_SCHOOL_NEED) if weight_class else DEFAULT_SCHOOL_NEED
    chance = negotiation_success_chance(recruiting_score, need, school.scholarship_budget, school.coach_aggressiveness)
    if not rand.chance(chance):
        return CounterOutcome(success=False, chance=chance, offer=offer)
    improved = replace(
        offer,
        tuition_covered_pct=min(100, offer.tuition_covered_pct + COUNTER_STEP_PCT),
        countered=True,
    )
    return CounterOutcome(success=True, chance=chance, offer=improved)


def offer_probability(recruiting_score: int, division_min: int) -> float:
    return clamp(0.05, 0.85, (recruiting_score - division_min + 10) / 40)


def generate_offers(
    recruiting_score: int,
    gpa: float,
    week_index: int,
    year: int,
    existing: list[ScholarshipOffer],
    rand: RandomSource,
) -> list[ScholarshipOffer]:
    """One recruiting cycle: each eligible school rolls once, at most three new offers."""
    already = {o.school_id for o in existing}
    offers: list[ScholarshipOffer] = []
    for school in SCHOOLS:
        if len(offers) >= MAX_OFFERS_PER_CYCLE:
            break
        if school.school_id in already or gpa < school.academic_min_gpa:
            continue
        division_min = DIVISION_OFFER_MIN[school.division]
        if recruiting_score < division_min:
            continue
        if not rand.chance(offer_probability(recruiting_score, division_min)):
            continue
        coverage = int(clamp(10, 100, (recruiting_score - division_min) * 2 + 25))
        offers.append(
            ScholarshipOffer(
                offer_id=stable_id("offer", school.school_id, year),
                school_id=school.school_id,
                school_name=school.name,
                division=school.division.value,
                tuition_covered_pct=coverage - coverage % COUNTER_STEP_PCT,
                offered_at_week_index=week_index,
                deadline_week_index=week_index + OFFER_DEADLINE_WEEKS,
            )
        )
    return offers
