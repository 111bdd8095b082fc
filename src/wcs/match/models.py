from __future__ import annotations

from dataclasses import dataclass, field

from wcs.contracts import MatchMethod


@dataclass(slots=True)
class MatchContext:
    injury_penalty: float = 0.0
    weight_cut_penalty: float = 0.0
    freshman_penalty: float = 0.0
    performance_mult: float = 1.0
    # postseason brackets and invite events, where opponent clutch counts
    high_stakes: bool = False

    def total_penalty(self) -> float:
        return self.injury_penalty + self.weight_cut_penalty + self.freshman_penalty


@dataclass(slots=True)
class MatchResult:
    won: bool
    method: MatchMethod
    my_score: int
    opp_score: int
    opponent_id: str
    opponent_name: str
    win_probability: float
    key_moments: list[str] = field(default_factory=list)

    @property
    def score_line(self) -> str:
        return f"{self.my_score}-{self.opp_score}"
