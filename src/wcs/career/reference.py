from __future__ import annotations

from dataclasses import dataclass, field

from wcs.contracts import LeagueTier, Style

WEIGHT_CLASSES_HS: list[int] = [106, 113, 120, 126, 132, 138, 145, 152, 160, 170, 182, 195, 220, 285]
WEIGHT_CLASSES_COLLEGE: list[int] = [125, 133, 141, 149, 157, 165, 174, 184, 197, 285]

FIRST_NAMES: list[str] = [
    "Jake", "Kyle", "David", "Ryan", "Cole", "Bryce", "Parker", "Chase",
    "Luke", "Mason", "Hunter", "Logan", "Tyler", "Eric", "Jason",
]
LAST_NAMES: list[str] = [
    "Smith", "Johnson", "Williams", "Brown", "Davis", "Martinez", "Anderson", "Thomas",
    "Jackson", "White", "Harris", "Clark", "Lewis", "Young", "King",
]
STYLES: list[Style] = [Style.NEUTRAL, Style.TOP, Style.SCRAMBLER, Style.DEFENSIVE, Style.AGGRESSIVE]

INJURY_KINDS: list[str] = ["sprained ankle", "tweaked knee", "jammed shoulder", "cracked rib", "neck strain", "concussion"]

HS_TIERS: list[LeagueTier] = [LeagueTier.HS_JV, LeagueTier.HS_VARSITY, LeagueTier.HS_ELITE]
COLLEGE_TIERS: list[LeagueTier] = [LeagueTier.JUCO, LeagueTier.NAIA, LeagueTier.D3, LeagueTier.D2, LeagueTier.D1]


@dataclass(frozen=True, slots=True)
class LeagueProfile:
    tier: LeagueTier
    label: str
    mean_true_skill: int
    rating_base: int
    rating_scale: float


LEAGUES: dict[LeagueTier, LeagueProfile] = {
    LeagueTier.HS_JV: LeagueProfile(LeagueTier.HS_JV, "High School JV", 42, 52, 0.81),
    LeagueTier.HS_VARSITY: LeagueProfile(LeagueTier.HS_VARSITY, "High School Varsity", 50, 55, 0.88),
    LeagueTier.HS_ELITE: LeagueProfile(LeagueTier.HS_ELITE, "High School Elite", 58, 58, 0.98),
    LeagueTier.JUCO: LeagueProfile(LeagueTier.JUCO, "Junior College", 55, 56, 0.38),
    LeagueTier.NAIA: LeagueProfile(LeagueTier.NAIA, "NAIA", 60, 58, 0.36),
    LeagueTier.D3: LeagueProfile(LeagueTier.D3, "NCAA Division III", 62, 58, 0.35),
    LeagueTier.D2: LeagueProfile(LeagueTier.D2, "NCAA Division II", 66, 60, 0.33),
    LeagueTier.D1: LeagueProfile(LeagueTier.D1, "NCAA Division I", 74, 62, 0.30),
}

# (min age, min rating) for moving up from the key tier; either threshold is enough
PROMOTIONS: dict[LeagueTier, tuple[LeagueTier, int, int]] = {
    LeagueTier.HS_JV: (LeagueTier.HS_VARSITY, 15, 68),
    LeagueTier.HS_VARSITY: (LeagueTier.HS_ELITE, 17, 75),
}

COLLEGE_ENTRY_CAPS: dict[LeagueTier, int] = {
    LeagueTier.D1: 80,
    LeagueTier.D2: 76,
    LeagueTier.D3: 74,
    LeagueTier.NAIA: 74,
    LeagueTier.JUCO: 72,
}

DIVISION_OFFER_MIN: dict[LeagueTier, int] = {
    LeagueTier.D1: 70,
    LeagueTier.D2: 60,
    LeagueTier.D3: 50,
    LeagueTier.NAIA: 50,
    LeagueTier.JUCO: 0,
}


@dataclass(frozen=True, slots=True)
class OffseasonEventDef:
    key: str
    name: str
    weeks: tuple[int, ...]
    cost: int
    prestige: float
    matches: int
    invite_only: bool = False
    min_recruiting: int = 0
    accolade_top: int = 0
    win_rating_bonus: int = 0


OFFSEASON_EVENTS: dict[str, OffseasonEventDef] = {
    "fargo": OffseasonEventDef("fargo", "Fargo Nationals", (27, 28), 450, 1.4, 5, accolade_top=2),
    "super32": OffseasonEventDef("super32", "Super 32", (36,), 320, 1.25, 4, accolade_top=2),
    "wno": OffseasonEventDef(
        "wno", "Who's Number One", (37,), 280, 1.5, 4, invite_only=True, min_recruiting=68, win_rating_bonus=5
    ),
}


@dataclass(frozen=True, slots=True)
class BracketDef:
    key: str
    name: str
    rounds: int
    pool: str
    qualify_top: int = 0


HS_BRACKETS: dict[int, BracketDef] = {
    50: BracketDef("district", "District Tournament", 3, "unranked", qualify_top=4),
    51: BracketDef("state", "State Championship", 4, "state_ranked"),
}
COLLEGE_BRACKETS: dict[int, BracketDef] = {
    8: BracketDef("conference", "Conference Championships", 3, "state_ranked", qualify_top=3),
    12: BracketDef("ncaa", "NCAA Championships", 5, "national_ranked"),
}


@dataclass(frozen=True, slots=True)
class School:
    school_id: str
    name: str
    division: LeagueTier
    tuition: int
    city_cost_index: float
    academic_min_gpa: float
    scholarship_budget: int
    coach_aggressiveness: float
    needs_by_weight: dict[int, int] = field(default_factory=dict)


SCHOOLS: list[School] = [
    School("iowa_state", "Iowa State", LeagueTier.D1, 26000, 1.0, 2.5, 90000, 0.7, {133: 5, 157: 4, 174: 3}),
    School("penn_valley", "Penn Valley", LeagueTier.D1, 32000, 1.2, 2.8, 120000, 0.5, {125: 4, 149: 5, 197: 3}),
    School("oklahoma_tech", "Oklahoma Tech", LeagueTier.D1, 24000, 0.9, 2.3, 70000, 0.8, {141: 5, 165: 4, 285: 4}),
    School("central_plains", "Central Plains", LeagueTier.D2, 18000, 0.85, 2.2, 45000, 0.6, {133: 3, 149: 4, 184: 5}),
    School("north_ridge", "North Ridge", LeagueTier.D2, 20000, 0.95, 2.4, 38000, 0.5, {125: 5, 157: 3, 174: 4}),
    School("lakeside", "Lakeside College", LeagueTier.D3, 42000, 1.3, 3.0, 20000, 0.4, {141: 4, 165: 5}),
    School("millbrook", "Millbrook", LeagueTier.D3, 38000, 1.1, 2.8, 15000, 0.5, {149: 4, 197: 3, 285: 5}),
    School("grand_view", "Grand View", LeagueTier.NAIA, 26000, 0.9, 2.0, 30000, 0.7, {125: 3, 157: 5, 184: 4}),
    School("prairie_state", "Prairie State", LeagueTier.NAIA, 22000, 0.8, 2.0, 25000, 0.6, {133: 4, 174: 5}),
    School("iowa_central", "Iowa Central CC", LeagueTier.JUCO, 6000, 0.8, 0.0, 15000, 0.8, {141: 4, 165: 4, 285: 3}),
    School("clackamas", "Clackamas CC", LeagueTier.JUCO, 5500, 0.9, 0.0, 12000, 0.7, {125: 5, 149: 3, 197: 4}),
]

DEFAULT_JUCO_SCHOOL_ID = "iowa_central"


def school_by_id(school_id: str) -> School:
    for school in SCHOOLS:
        if school.school_id == school_id:
            return school
    raise KeyError(f"unknown school '{school_id}'")


def weight_classes_for(tier: LeagueTier) -> list[int]:
    return WEIGHT_CLASSES_HS if tier in HS_TIERS else WEIGHT_CLASSES_COLLEGE


def nearest_weight_class(weight: int, classes: list[int]) -> int:
    for wc in classes:
        if weight <= wc:
            return wc
    return classes[-1]
