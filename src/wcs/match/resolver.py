from __future__ import annotations

import math
from typing import TYPE_CHECKING

from wcs.contracts import MatchMethod, RandomSource, Style
from wcs.match.models import MatchContext, MatchResult

if TYPE_CHECKING:
    from wcs.career.entities import Competitor, Opponent

DEFAULT_SLOPE = 8.0
# skill points an opponent gains (or gives up) per unit of clutch away from 0.5
CLUTCH_SWING = 6.0

STYLE_MATRIX: dict[Style, dict[Style, int]] = {
    Style.NEUTRAL: {Style.NEUTRAL: 0, Style.TOP: -1, Style.SCRAMBLER: 0, Style.DEFENSIVE: 1, Style.AGGRESSIVE: -1},
    Style.TOP: {Style.NEUTRAL: 1, Style.TOP: 0, Style.SCRAMBLER: -1, Style.DEFENSIVE: 2, Style.AGGRESSIVE: 0},
    Style.SCRAMBLER: {Style.NEUTRAL: 0, Style.TOP: 1, Style.SCRAMBLER: 0, Style.DEFENSIVE: 0, Style.AGGRESSIVE: 1},
    Style.DEFENSIVE: {Style.NEUTRAL: -1, Style.TOP: -2, Style.SCRAMBLER: 0, Style.DEFENSIVE: 0, Style.AGGRESSIVE: 2},
    Style.AGGRESSIVE: {Style.NEUTRAL: 1, Style.TOP: 0, Style.SCRAMBLER: -1, Style.DEFENSIVE: -2, Style.AGGRESSIVE: 0},
}

# cumulative thresholds on a single uniform draw, checked in order
METHOD_THRESHOLDS: list[tuple[float, MatchMethod]] = [
    (0.15, MatchMethod.FALL),
    (0.35, MatchMethod.TECH_FALL),
    (0.55, MatchMethod.MAJOR),
]
WIN_POINTS: dict[MatchMethod, int] = {MatchMethod.FALL: 6, MatchMethod.TECH_FALL: 16, MatchMethod.MAJOR: 12}
MARGIN_FLOOR: dict[MatchMethod, int] = {MatchMethod.TECH_FALL: 15, MatchMethod.MAJOR: 8, MatchMethod.DECISION: 1}


def win_probability(skill_diff: float, slope: float = DEFAULT_SLOPE) -> float:
    return 1.0 / (1.0 + math.exp(-skill_diff / slope))


def style_modifier(mine: Style, theirs: Style) -> int:
    return STYLE_MATRIX[mine][theirs]


def effective_skill(player: Competitor, opponent_style: Style, context: MatchContext) -> float:
    meters = player.meters
    energy_mod = (meters.energy / 100 - 0.5) * 5
    health_mod = (meters.health / 100 - 0.5) * 3
    stress_mod = -(meters.stress / 100) * 4
    confidence_mod = (meters.confidence / 100 - 0.5) * 2
    return (
        player.true_skill
        + energy_mod
        + health_mod
        + stress_mod
        + confidence_mod
        + style_modifier(player.style, opponent_style)
        - context.total_penalty()
    )


class MatchResolver:
    """Skill gap to win probability to result. Never mutates either side."""

    def __init__(self, slope: float = DEFAULT_SLOPE) -> None:
        if slope <= 0:
            raise ValueError("logistic slope must be positive")
        self._slope = slope

    def run(
        self,
        player: Competitor,
        opponent: Opponent,
        rand: RandomSource,
        context: MatchContext | None = None,
    ) -> MatchResult:
        ctx = context or MatchContext()
        my_eff = effective_skill(player, opponent.style, ctx)
        opp_eff = opponent.true_skill + rand.normal() * (1 - opponent.consistency) * 3
        if ctx.high_stakes:
            opp_eff += (opponent.clutch - 0.5) * CLUTCH_SWING
        probability = min(1.0, win_probability(my_eff - opp_eff, self._slope) * ctx.performance_mult)
        won = rand.rand() < probability

        method = self._decide_method(won, rand)
        if won:
            if method == MatchMethod.DECISION:
                my_score = 5 + rand.randint(0, 5)
            else:
                my_score = WIN_POINTS[method]
            if method == MatchMethod.FALL:
                opp_score = 0
            else:
                opp_score = min(my_score - MARGIN_FLOOR[method], rand.randint(0, 4))
        else:
            opp_score = 8 + rand.randint(0, 6)
            my_score = rand.randint(0, max(0, opp_score - 2))

        return MatchResult(
            won=won,
            method=method,
            my_score=my_score,
            opp_score=opp_score,
            opponent_id=opponent.opponent_id,
            opponent_name=opponent.name,
            win_probability=probability,
            key_moments=["You controlled the pace." if won else "Opponent had the edge."],
        )

    def _decide_method(self, won: bool, rand: RandomSource) -> MatchMethod:
        if not won:
            return MatchMethod.DECISION
        roll = rand.rand()
        for threshold, method in METHOD_THRESHOLDS:
            if roll < threshold:
                return method
        return MatchMethod.DECISION
