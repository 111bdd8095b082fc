from __future__ import annotations

from dataclasses import dataclass, field

from wcs.contracts import Attribute, MatchMethod, RelationshipKind, Style


def clamp(lo: float, hi: float, value: float) -> float:
    return max(lo, min(hi, value))


def clamp_int(lo: int, hi: int, value: float) -> int:
    return int(max(lo, min(hi, round(value))))


TRUE_SKILL_WEIGHTS: dict[Attribute, float] = {
    Attribute.TECHNIQUE: 0.2,
    Attribute.MAT_IQ: 0.2,
    Attribute.CONDITIONING: 0.15,
    Attribute.STRENGTH: 0.15,
    Attribute.SPEED: 0.1,
    Attribute.MENTAL: 0.1,
    Attribute.TOUGHNESS: 0.1,
}


@dataclass(slots=True)
class Attributes:
    technique: int = 50
    conditioning: int = 50
    strength: int = 50
    speed: int = 50
    mat_iq: int = 50
    mental: int = 50
    toughness: int = 50

    def get(self, attr: Attribute) -> int:
        return int(getattr(self, attr.value))

    def set(self, attr: Attribute, value: float) -> None:
        setattr(self, attr.value, clamp_int(0, 100, value))

    def adjust(self, attr: Attribute, delta: int) -> None:
        self.set(attr, self.get(attr) + delta)

    def validate(self) -> None:
        for attr in Attribute:
            value = self.get(attr)
            if not 0 <= value <= 100:
                raise ValueError(f"attribute {attr.value} out of range: {value}")


@dataclass(slots=True)
class Meters:
    energy: int = 100
    health: int = 100
    stress: int = 0
    confidence: int = 50

    def adjust(self, energy: float = 0, health: float = 0, stress: float = 0, confidence: float = 0) -> None:
        self.energy = clamp_int(0, 100, self.energy + energy)
        self.health = clamp_int(0, 100, self.health + health)
        self.stress = clamp_int(0, 100, self.stress + stress)
        self.confidence = clamp_int(0, 100, self.confidence + confidence)

    def validate(self) -> None:
        for name in ("energy", "health", "stress", "confidence"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"meter {name} out of range: {value}")


@dataclass(slots=True)
class Potential:
    ceilings: dict[str, int] = field(default_factory=dict)
    yearly_growth_cap: int = 14
    yearly_growth_used: int = 0

    def ceiling(self, attr: Attribute) -> int:
        return int(self.ceilings.get(attr.value, 50))

    @property
    def remaining(self) -> int:
        return self.yearly_growth_cap - self.yearly_growth_used

    def reset_year(self) -> None:
        self.yearly_growth_used = 0

    def validate(self) -> None:
        if self.yearly_growth_used > self.yearly_growth_cap:
            raise ValueError(
                f"yearly growth used {self.yearly_growth_used} exceeds cap {self.yearly_growth_cap}"
            )
        for key, value in self.ceilings.items():
            if not 0 <= value <= 100:
                raise ValueError(f"ceiling for {key} out of range: {value}")


@dataclass(slots=True)
class MatchTally:
    wins: int = 0
    losses: int = 0
    pins: int = 0
    techs: int = 0
    majors: int = 0

    @property
    def matches(self) -> int:
        return self.wins + self.losses

    @property
    def win_pct(self) -> float:
        return self.wins / self.matches if self.matches else 0.0

    def add(self, won: bool, method: MatchMethod) -> None:
        if not won:
            self.losses += 1
            return
        self.wins += 1
        if method == MatchMethod.FALL:
            self.pins += 1
        elif method == MatchMethod.TECH_FALL:
            self.techs += 1
        elif method == MatchMethod.MAJOR:
            self.majors += 1


@dataclass(slots=True)
class Record:
    season: MatchTally = field(default_factory=MatchTally)
    career: MatchTally = field(default_factory=MatchTally)
    win_streak: int = 0

    def add_match_result(self, won: bool, method: MatchMethod) -> None:
        self.season.add(won, method)
        self.career.add(won, method)
        self.win_streak = self.win_streak + 1 if won else 0

    def reset_season(self) -> None:
        self.season = MatchTally()


@dataclass(slots=True)
class Injury:
    injury_id: str
    kind: str
    severity: int
    weeks_out: int


@dataclass(slots=True)
class WeightState:
    natural_weight: int
    current_weight: int
    target_class: int

    @property
    def pounds_over(self) -> int:
        return max(0, self.current_weight - self.target_class)


@dataclass(slots=True)
class Competitor:
    name: str
    weight_class: int
    style: Style = Style.NEUTRAL
    attributes: Attributes = field(default_factory=Attributes)
    meters: Meters = field(default_factory=Meters)
    potential: Potential = field(default_factory=Potential)
    weight: WeightState | None = None
    injuries: list[Injury] = field(default_factory=list)
    consecutive_rest_weeks: int = 0
    rating_bonus: int = 0

    @property
    def true_skill(self) -> int:
        raw = sum(self.attributes.get(attr) * weight for attr, weight in TRUE_SKILL_WEIGHTS.items())
        return clamp_int(1, 99, raw)

    @property
    def overall_rating(self) -> int:
        condition = 1 + (self.meters.energy / 100) * 0.1 + (self.meters.confidence / 100) * 0.05
        return clamp_int(1, 99, round(self.true_skill * condition) + self.rating_bonus)

    @property
    def has_injury(self) -> bool:
        return bool(self.injuries)

    def injury_penalty(self) -> float:
        return min(10.0, sum(i.severity for i in self.injuries) * 1.5)

    def weight_cut_penalty(self, severity_mult: float = 1.0) -> float:
        if self.weight is None:
            return 0.0
        return self.weight.pounds_over * 0.5 * severity_mult

    def apply_training_gain(
        self,
        attr: Attribute,
        raw_gain: float,
        energy_factor: float = 1.0,
        stress_factor: float = 1.0,
    ) -> int:
        current = self.attributes.get(attr)
        ceiling = self.potential.ceiling(attr)
        if raw_gain <= 0 or current >= ceiling:
            return 0

        gain = raw_gain * energy_factor * stress_factor
        if current >= 92:
            gain *= 0.25
        elif current >= 85:
            gain *= 0.5

        remaining = self.potential.remaining
        if remaining <= 0:
            gain *= 0.1
        elif remaining <= 2:
            gain *= 0.3
        elif remaining <= 4:
            gain *= 0.6

        actual = int(gain)
        if actual <= 0:
            return 0
        capped = min(actual, ceiling - current, max(0, remaining))
        if capped <= 0:
            return 0
        self.attributes.set(attr, current + capped)
        self.potential.yearly_growth_used += capped
        return capped

    def apply_rest(self, energy_gain: float, health_gain: float, stress_loss: float, is_rest_heavy: bool) -> None:
        self.meters.adjust(energy=energy_gain, health=health_gain, stress=-stress_loss)
        if is_rest_heavy:
            self.consecutive_rest_weeks += 1
        else:
            self.consecutive_rest_weeks = 0

    def apply_rest_decay(self) -> list[Attribute]:
        """Ring rust: long rest streaks cost conditioning and strength, then technique."""
        if self.consecutive_rest_weeks >= 4:
            self.attributes.adjust(Attribute.TECHNIQUE, -1)
            self.consecutive_rest_weeks = 0
            return [Attribute.TECHNIQUE]
        if self.consecutive_rest_weeks >= 2:
            self.attributes.adjust(Attribute.CONDITIONING, -1)
            self.attributes.adjust(Attribute.STRENGTH, -1)
            return [Attribute.CONDITIONING, Attribute.STRENGTH]
        return []

    def apply_entry_cap(self, cap: int) -> None:
        for attr in Attribute:
            value = self.attributes.get(attr)
            compressed = min(value, cap) + round(max(0, value - cap) * 0.35)
            self.attributes.set(attr, compressed)

    def validate(self) -> None:
        self.attributes.validate()
        self.meters.validate()
        self.potential.validate()
        if self.rating_bonus < 0:
            raise ValueError("rating bonus cannot be negative")


@dataclass(slots=True)
class Opponent:
    opponent_id: str
    name: str
    weight_class: int
    style: Style
    true_skill: int
    overall_rating: int
    consistency: float
    clutch: float
    state_rank: int | None = None
    national_rank: int | None = None


@dataclass(slots=True)
class RankedEntry:
    entry_id: str
    name: str
    weight_class: int
    rating: int
    true_skill: int = 0
    wins: int = 0
    losses: int = 0


@dataclass(slots=True)
class OpponentPools:
    unranked: list[Opponent] = field(default_factory=list)
    state_ranked: list[Opponent] = field(default_factory=list)
    national_ranked: list[Opponent] = field(default_factory=list)

    def find(self, opponent_id: str) -> Opponent | None:
        for pool in (self.unranked, self.state_ranked, self.national_ranked):
            for opponent in pool:
                if opponent.opponent_id == opponent_id:
                    return opponent
        return None


@dataclass(slots=True)
class ScheduledMeet:
    week: int
    kind: str
    opponent_id: str | None = None
    practice_only: bool = False
    completed: bool = False


@dataclass(slots=True)
class RelationshipEntry:
    rel_id: str
    kind: RelationshipKind
    name: str
    level: int
    label: str = ""
    weekly_time_required: int = 0


@dataclass(slots=True)
class ScholarshipOffer:
    offer_id: str
    school_id: str
    school_name: str
    division: str
    tuition_covered_pct: int
    offered_at_week_index: int
    deadline_week_index: int
    countered: bool = False


@dataclass(slots=True)
class WeekModifiers:
    training_mult: float = 1.0
    performance_mult: float = 1.0
    injury_risk_mult: float = 1.0
    weight_cut_severity_mult: float = 1.0
    reasons: list[str] = field(default_factory=list)

    def stack(
        self,
        training: float = 0.0,
        performance: float = 0.0,
        injury_risk: float = 0.0,
        weight_cut: float = 0.0,
        reason: str = "",
    ) -> None:
        self.training_mult = round(clamp(0.1, 2.0, self.training_mult + training), 4)
        self.performance_mult = round(clamp(0.1, 2.0, self.performance_mult + performance), 4)
        self.injury_risk_mult = round(clamp(0.0, 3.0, self.injury_risk_mult + injury_risk), 4)
        self.weight_cut_severity_mult = round(clamp(0.0, 3.0, self.weight_cut_severity_mult + weight_cut), 4)
        if reason:
            self.reasons.append(reason)


@dataclass(slots=True)
class WeekActivity:
    intense_hours: int = 0
    training_sessions: int = 0
    rest_sessions: int = 0
    relationship_hours: int = 0
    committed: bool = False


@dataclass(slots=True)
class LifeStats:
    grades: int = 75
    social: int = 50

    @property
    def gpa(self) -> float:
        return round(self.grades / 25, 2)

    def adjust(self, grades: float = 0, social: float = 0) -> None:
        self.grades = clamp_int(0, 100, self.grades + grades)
        self.social = clamp_int(0, 100, self.social + social)


@dataclass(slots=True)
class Finances:
    money: int = 500
    city_cost_index: float = 1.0
    annual_tuition: int = 0
    scholarship_pct: int = 0
    broke: bool = False
    last_income: int = 0
    last_expenses: int = 0


@dataclass(slots=True)
class Reputation:
    recruiting_score: int = 0
    state_rank: int | None = None
    national_rank: int | None = None
    accolades: list[str] = field(default_factory=list)
    state_placements: list[int] = field(default_factory=list)
    fargo_placements: list[int] = field(default_factory=list)
    super32_placements: list[int] = field(default_factory=list)
    ncaa_placements: list[int] = field(default_factory=list)
    wno_wins: int = 0


@dataclass(slots=True)
class SeasonProgress:
    district_place: int | None = None
    state_qualified: bool = False
    state_place: int | None = None
    conference_place: int | None = None
    ncaa_qualified: bool = False
    ncaa_place: int | None = None
    offseason_events_used: list[str] = field(default_factory=list)


@dataclass(slots=True)
class MatchLine:
    opponent_name: str
    opponent_rating: int
    won: bool
    method: str
    score: str
    state_rank: int | None = None
    national_rank: int | None = None


@dataclass(slots=True)
class WeekSummary:
    week: int
    year: int
    phase: str
    event_type: str = "none"
    matches: list[MatchLine] = field(default_factory=list)
    placement: int | None = None
    wins: int = 0
    losses: int = 0
    messages: list[str] = field(default_factory=list)
    energy_change: int = 0
    stress_change: int = 0
    recruiting_change: int = 0


@dataclass(slots=True)
class LogEntry:
    week_index: int
    year: int
    week: int
    text: str
