from __future__ import annotations

from wcs.career.entities import Opponent, OpponentPools
from wcs.career.opponents import event_opponent_strength, synthetic_opponent
from wcs.career.reference import BracketDef, OffseasonEventDef
from wcs.contracts import RandomSource

IN_SEASON_MATCHES = (3, 6)


def place_from_wins(wins: int, matches: int, rand: RandomSource) -> int:
    """Finish position out of eight; ties inside a win band break on a draw."""
    if wins >= matches:
        return 1
    if wins >= matches - 1:
        return 1 + rand.randint(0, 2)
    if wins >= matches - 2:
        return 3 + rand.randint(0, 2)
    if wins >= 1:
        return 5 + rand.randint(0, 2)
    return 7 + rand.randint(0, 1)


def place_from_losses(losses: int) -> int:
    if losses == 0:
        return 1
    if losses == 1:
        return 2
    if losses == 2:
        return 3
    return 4


def ordinal(place: int) -> str:
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(place, "th")
    return f"{place}{suffix}"


def _pool_by_name(pools: OpponentPools, name: str) -> list[Opponent]:
    return {
        "unranked": pools.unranked,
        "state_ranked": pools.state_ranked,
        "national_ranked": pools.national_ranked,
    }[name]


def bracket_opponents(bracket: BracketDef, pools: OpponentPools, rand: RandomSource) -> list[Opponent]:
    pool = _pool_by_name(pools, bracket.pool) or pools.unranked
    return [rand.choice(pool) for _ in range(bracket.rounds)]


def in_season_opponents(pools: OpponentPools, rand: RandomSource) -> list[Opponent]:
    field = [*pools.unranked, *pools.state_ranked]
    count = rand.randint(*IN_SEASON_MATCHES)
    return [rand.choice(field) for _ in range(count)]


def offseason_opponents(event: OffseasonEventDef, weight_class: int, year: int, rand: RandomSource) -> list[Opponent]:
    opponents: list[Opponent] = []
    for i in range(event.matches):
        strength = event_opponent_strength(event.prestige, i, rand)
        opponents.append(
            synthetic_opponent(
                weight_class,
                strength,
                opponent_id=f"{event.key}_{year}_{i + 1}",
                name=f"{event.name} round {i + 1}",
            )
        )
    return opponents
