from __future__ import annotations

from dataclasses import dataclass

from wcs.career.entities import OpponentPools, ScheduledMeet
from wcs.contracts import LifeStage, RandomSource

WEEKS_PER_YEAR = 52

HS_REGULAR_SEASON = (39, 49)
HS_DISTRICT_WEEK = 50
HS_STATE_WEEK = 51
HS_WRAP_WEEK = 52
COLLEGE_CONFERENCE_WEEK = 8
COLLEGE_NCAA_WEEK = 12

HS_SCHEDULE_TEMPLATE: list[str] = [
    "dual", "dual", "tournament", "dual", "rival", "tournament", "dual", "dual", "tournament", "dual", "dual",
]
STATE_RANKED_WEEKS = {39, 42, 45}
NATIONAL_RANKED_WEEK = 43
NATIONAL_RANKED_MIN_RECRUITING = 55


@dataclass(frozen=True, slots=True)
class PhaseWindow:
    first_week: int
    last_week: int
    label: str
    competition: bool = False


HS_PHASES: list[PhaseWindow] = [
    PhaseWindow(1, 8, "Early Offseason"),
    PhaseWindow(9, 20, "Spring Offseason"),
    PhaseWindow(21, 30, "Summer"),
    PhaseWindow(31, 38, "Preseason"),
    PhaseWindow(39, 49, "Regular Season", competition=True),
    PhaseWindow(50, 50, "District Tournament", competition=True),
    PhaseWindow(51, 51, "State Championship", competition=True),
    PhaseWindow(52, 52, "Season Wrap"),
]

COLLEGE_PHASES: list[PhaseWindow] = [
    PhaseWindow(1, 7, "Regular Season", competition=True),
    PhaseWindow(8, 8, "Conference Championships", competition=True),
    PhaseWindow(9, 11, "Postseason Training"),
    PhaseWindow(12, 12, "NCAA Championships", competition=True),
    PhaseWindow(13, 30, "Offseason"),
    PhaseWindow(31, 44, "Preseason"),
    PhaseWindow(45, 52, "Regular Season", competition=True),
]


def phase_window(week: int, stage: LifeStage) -> PhaseWindow:
    if not 1 <= week <= WEEKS_PER_YEAR:
        raise ValueError(f"week must be within 1..{WEEKS_PER_YEAR}, got {week}")
    table = HS_PHASES if stage == LifeStage.HIGH_SCHOOL else COLLEGE_PHASES
    for window in table:
        if window.first_week <= week <= window.last_week:
            return window
    raise ValueError(f"no phase covers week {week}")


def phase_label(week: int, stage: LifeStage) -> str:
    return phase_window(week, stage).label


def is_tournament_week(week: int, stage: LifeStage) -> bool:
    if stage == LifeStage.HIGH_SCHOOL:
        if week in (HS_DISTRICT_WEEK, HS_STATE_WEEK):
            return True
        first, last = HS_REGULAR_SEASON
        return first <= week <= last and HS_SCHEDULE_TEMPLATE[week - first] == "tournament"
    return week in (COLLEGE_CONFERENCE_WEEK, COLLEGE_NCAA_WEEK)


def generate_hs_schedule(
    pools: OpponentPools,
    rand: RandomSource,
    recruiting_score: int,
    has_fargo_history: bool,
    jv: bool,
) -> list[ScheduledMeet]:
    first, _ = HS_REGULAR_SEASON
    national_week = NATIONAL_RANKED_WEEK if (
        recruiting_score >= NATIONAL_RANKED_MIN_RECRUITING or has_fargo_history
    ) else None
    schedule: list[ScheduledMeet] = []
    for offset, kind in enumerate(HS_SCHEDULE_TEMPLATE):
        week = first + offset
        meet = ScheduledMeet(week=week, kind=kind)
        if kind in {"dual", "rival"}:
            if week == national_week and pools.national_ranked:
                meet.opponent_id = rand.choice(pools.national_ranked).opponent_id
            elif week in STATE_RANKED_WEEKS and pools.state_ranked:
                meet.opponent_id = rand.choice(pools.state_ranked).opponent_id
            elif pools.unranked:
                meet.opponent_id = rand.choice(pools.unranked).opponent_id
            # JV wrestlers practice through varsity duals
            meet.practice_only = jv
        schedule.append(meet)
    return schedule


def meet_for_week(schedule: list[ScheduledMeet], week: int) -> ScheduledMeet | None:
    for meet in schedule:
        if meet.week == week:
            return meet
    return None
