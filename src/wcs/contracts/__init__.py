from .types import (
    ActionRequest,
    ActionResult,
    ActionType,
    Attribute,
    BudgetMode,
    ForensicArtifact,
    LeagueTier,
    LifeStage,
    MatchMethod,
    NarrativeEvent,
    Outcome,
    OutcomeCode,
    RandomSource,
    RelationshipKind,
    Style,
    TimeAllocation,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ActionRequest",
    "ActionResult",
    "ActionType",
    "Attribute",
    "BudgetMode",
    "ForensicArtifact",
    "LeagueTier",
    "LifeStage",
    "MatchMethod",
    "NarrativeEvent",
    "Outcome",
    "OutcomeCode",
    "RandomSource",
    "RelationshipKind",
    "Style",
    "TimeAllocation",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
]
