from __future__ import annotations

from dataclasses import dataclass, field

from wcs.career.calendar import WEEKS_PER_YEAR
from wcs.career.entities import (
    Competitor,
    Finances,
    LifeStats,
    LogEntry,
    OpponentPools,
    RankedEntry,
    Record,
    RelationshipEntry,
    Reputation,
    ScheduledMeet,
    ScholarshipOffer,
    SeasonProgress,
    WeekActivity,
    WeekModifiers,
    WeekSummary,
)
from wcs.contracts import LeagueTier, LifeStage
from wcs.core.settings import EngineSettings

HS_FIRST_GRADE = 9
HS_LAST_GRADE = 12
COLLEGE_LAST_GRADE = 16
LOG_LIMIT = 200


@dataclass(slots=True)
class GameState:
    seed: str
    rng_state: str
    competitor: Competitor
    league: LeagueTier = LeagueTier.HS_JV
    settings: EngineSettings = field(default_factory=EngineSettings)
    week: int = 1
    year: int = 1
    age: int = 14
    grade: int = HS_FIRST_GRADE
    hours_left_this_week: int = 0
    weeks_in_college: int = 0
    did_part_time_this_week: bool = False
    record: Record = field(default_factory=Record)
    life: LifeStats = field(default_factory=LifeStats)
    finances: Finances = field(default_factory=Finances)
    reputation: Reputation = field(default_factory=Reputation)
    season: SeasonProgress = field(default_factory=SeasonProgress)
    pools: OpponentPools = field(default_factory=OpponentPools)
    schedule: list[ScheduledMeet] = field(default_factory=list)
    rankings: dict[int, list[RankedEntry]] = field(default_factory=dict)
    offers: list[ScholarshipOffer] = field(default_factory=list)
    negotiated_offer_ids: list[str] = field(default_factory=list)
    committed_offer: ScholarshipOffer | None = None
    school_id: str | None = None
    relationships: list[RelationshipEntry] = field(default_factory=list)
    modifiers: WeekModifiers = field(default_factory=WeekModifiers)
    activity: WeekActivity = field(default_factory=WeekActivity)
    last_week_summary: WeekSummary | None = None
    weekly_log: list[LogEntry] = field(default_factory=list)
    log_count: int = 0
    career_complete: bool = False

    @property
    def life_stage(self) -> LifeStage:
        return self.league.life_stage

    @property
    def week_index(self) -> int:
        return (self.year - 1) * WEEKS_PER_YEAR + self.week

    def log(self, text: str) -> None:
        self.log_count += 1
        self.weekly_log.append(LogEntry(week_index=self.week_index, year=self.year, week=self.week, text=text))
        if len(self.weekly_log) > LOG_LIMIT:
            del self.weekly_log[: len(self.weekly_log) - LOG_LIMIT]

    def validate(self) -> None:
        if not 1 <= self.week <= WEEKS_PER_YEAR:
            raise ValueError(f"week out of range: {self.week}")
        if self.year < 1:
            raise ValueError(f"year must be positive: {self.year}")
        if self.hours_left_this_week < 0:
            raise ValueError("hours left cannot be negative")
        if self.finances.money < 0:
            raise ValueError("money cannot be negative")
        if not 0 <= self.life.grades <= 100 or not 0 <= self.life.social <= 100:
            raise ValueError("life stats out of range")
        for rel in self.relationships:
            if not 0 <= rel.level <= 100:
                raise ValueError(f"relationship {rel.rel_id} level out of range: {rel.level}")
        self.settings.validate()
        self.competitor.validate()
