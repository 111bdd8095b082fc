from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class ActionType(str, Enum):
    GET_STATE = "get_state"
    GET_CHOICES = "get_choices"
    PREVIEW_CHOICE = "preview_choice"
    APPLY_CHOICE = "apply_choice"
    APPLY_ALLOCATION = "apply_allocation"
    ADVANCE_WEEK = "advance_week"
    GET_OFFSEASON_EVENTS = "get_offseason_events"
    RUN_OFFSEASON_EVENT = "run_offseason_event"
    GET_RELATIONSHIPS = "get_relationships"
    GET_RELATIONSHIP_ACTIONS = "get_relationship_actions"
    APPLY_RELATIONSHIP_ACTION = "apply_relationship_action"
    GET_RANKINGS_BOARD = "get_rankings_board"
    COUNTER_OFFER = "counter_offer"
    ACCEPT_OFFER = "accept_offer"
    SAVE_GAME = "save_game"
    LOAD_GAME = "load_game"
    GET_SEASON_HISTORY = "get_season_history"


class LifeStage(str, Enum):
    HIGH_SCHOOL = "high_school"
    COLLEGE = "college"


class LeagueTier(str, Enum):
    HS_JV = "HS_JV"
    HS_VARSITY = "HS_VARSITY"
    HS_ELITE = "HS_ELITE"
    JUCO = "JUCO"
    NAIA = "NAIA"
    D3 = "D3"
    D2 = "D2"
    D1 = "D1"

    @property
    def life_stage(self) -> LifeStage:
        if self.value.startswith("HS_"):
            return LifeStage.HIGH_SCHOOL
        return LifeStage.COLLEGE


class Style(str, Enum):
    NEUTRAL = "neutral"
    TOP = "top"
    SCRAMBLER = "scrambler"
    DEFENSIVE = "defensive"
    AGGRESSIVE = "aggressive"


class Attribute(str, Enum):
    TECHNIQUE = "technique"
    CONDITIONING = "conditioning"
    STRENGTH = "strength"
    SPEED = "speed"
    MAT_IQ = "mat_iq"
    MENTAL = "mental"
    TOUGHNESS = "toughness"


class BudgetMode(str, Enum):
    FULL_WEEK = "full_week"
    ACTION_HOURS = "action_hours"


class RelationshipKind(str, Enum):
    PARENT = "parent"
    SIBLING = "sibling"
    COACH = "coach"
    FRIEND = "friend"
    ROMANTIC = "romantic"


class MatchMethod(str, Enum):
    FALL = "fall"
    TECH_FALL = "tech"
    MAJOR = "major"
    DECISION = "dec"


class OutcomeCode(str, Enum):
    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    INVALID_CHOICE = "INVALID_CHOICE"
    ILLEGAL_STATE = "ILLEGAL_STATE"


class RandomSource(Protocol):
    def next_uint32(self) -> int: ...

    def rand(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def chance(self, p: float) -> bool: ...

    def normal(self) -> float: ...

    def choice(self, items: Sequence[Any]) -> Any: ...

    def shuffle(self, items: list[Any]) -> None: ...

    def serialize(self) -> str: ...


@dataclass(slots=True)
class NarrativeEvent:
    event_id: str
    time: datetime
    scope: str
    event_type: str
    actors: list[str]
    claims: list[str]
    evidence_handles: list[str]
    severity: str
    confidentiality_tier: str


@dataclass(slots=True)
class ActionRequest:
    request_id: str
    action_type: ActionType | str
    payload: dict[str, Any]
    actor_id: str = "player"


@dataclass(slots=True)
class ActionResult:
    request_id: str
    success: bool
    message: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Outcome:
    ok: bool
    message: str
    code: OutcomeCode | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def success(message: str, **data: Any) -> Outcome:
        return Outcome(ok=True, message=message, data=dict(data))

    @staticmethod
    def reject(code: OutcomeCode, message: str, **data: Any) -> Outcome:
        return Outcome(ok=False, message=message, code=code, data=dict(data))


@dataclass(slots=True)
class TimeAllocation:
    technique: int = 0
    conditioning: int = 0
    strength: int = 0
    film_study: int = 0
    study: int = 0
    recovery: int = 0
    social: int = 0
    job: int = 0
    extra_practice_blocks: int = 0
    weight_cut: int = 0
    relationship_time: int = 0

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> TimeAllocation:
        known = set(TimeAllocation.__dataclass_fields__)
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"unknown allocation categories: {unknown}")
        return TimeAllocation(**{key: int(value) for key, value in raw.items()})


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: str
    field_path: str
    entity_id: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]


class ValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        message = "; ".join(f"{i.code}:{i.entity_id}:{i.message}" for i in issues)
        super().__init__(message)
        self.issues = issues


@dataclass(slots=True)
class ForensicArtifact:
    artifact_id: str
    timestamp: datetime
    engine_scope: str
    error_code: str
    message: str
    state_snapshot: Mapping[str, Any]
    context: Mapping[str, Any]
    identifiers: Mapping[str, str]
    causal_fragment: Sequence[str]
