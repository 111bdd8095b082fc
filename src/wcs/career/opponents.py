from __future__ import annotations

from wcs.career.entities import Opponent, OpponentPools, RankedEntry, clamp, clamp_int
from wcs.career.rankings import build_from_pool
from wcs.career.reference import FIRST_NAMES, LAST_NAMES, STYLES
from wcs.contracts import RandomSource, Style

UNRANKED_COUNT = 30
STATE_RANKED_COUNT = 20
NATIONAL_RANKED_COUNT = 20
LEDGER_SIZE = 15

UNRANKED_VARIANCE = 30
RANKED_VARIANCE = 20
STATE_MEAN_OFFSET = 8
NATIONAL_MEAN_OFFSET = 15


def generate_opponent(
    weight_class: int,
    mean_true_skill: float,
    variance: float,
    rand: RandomSource,
    opponent_id: str,
) -> Opponent:
    true_skill = clamp_int(30, 95, mean_true_skill + (rand.rand() - 0.5) * variance)
    overall = clamp_int(40, 99, true_skill + rand.randint(-3, 3))
    name = f"{rand.choice(FIRST_NAMES)} {rand.choice(LAST_NAMES)}"
    return Opponent(
        opponent_id=opponent_id,
        name=name,
        weight_class=weight_class,
        style=rand.choice(STYLES),
        true_skill=true_skill,
        overall_rating=overall,
        consistency=round(0.6 + rand.rand() * 0.35, 4),
        clutch=round(0.4 + rand.rand() * 0.5, 4),
    )


def generate_pool(
    weight_class: int,
    count: int,
    mean_true_skill: float,
    variance: float,
    rand: RandomSource,
    prefix: str,
) -> list[Opponent]:
    pool = [
        generate_opponent(weight_class, mean_true_skill, variance, rand, f"{prefix}_{weight_class}_{i + 1}")
        for i in range(count)
    ]
    pool.sort(key=lambda o: -o.overall_rating)
    return pool


def generate_pools(weight_class: int, mean_true_skill: float, rand: RandomSource, year: int) -> OpponentPools:
    """Season opposition at one weight class: local field, state-ranked and national-ranked."""
    unranked = generate_pool(weight_class, UNRANKED_COUNT, mean_true_skill, UNRANKED_VARIANCE, rand, f"unr{year}")
    state_ranked = generate_pool(
        weight_class, STATE_RANKED_COUNT, mean_true_skill + STATE_MEAN_OFFSET, RANKED_VARIANCE, rand, f"st{year}"
    )
    national_ranked = generate_pool(
        weight_class, NATIONAL_RANKED_COUNT, mean_true_skill + NATIONAL_MEAN_OFFSET, RANKED_VARIANCE, rand, f"nat{year}"
    )
    for rank, opponent in enumerate(state_ranked, start=1):
        opponent.state_rank = rank
    for rank, opponent in enumerate(national_ranked, start=1):
        opponent.national_rank = rank
    return OpponentPools(unranked=unranked, state_ranked=state_ranked, national_ranked=national_ranked)


def generate_ranking_ledgers(
    weight_classes: list[int],
    player_weight_class: int,
    mean_true_skill: float,
    pools: OpponentPools,
    rand: RandomSource,
    year: int,
) -> dict[int, list[RankedEntry]]:
    """Ranked boards for every class; the player's own class is seeded from the state-ranked pool."""
    ledgers: dict[int, list[RankedEntry]] = {}
    for wc in weight_classes:
        if wc == player_weight_class and pools.state_ranked:
            ledgers[wc] = build_from_pool(pools.state_ranked, wc)[:LEDGER_SIZE]
            continue
        pool = generate_pool(wc, LEDGER_SIZE, mean_true_skill + STATE_MEAN_OFFSET, RANKED_VARIANCE, rand, f"rk{year}")
        ledgers[wc] = build_from_pool(pool, wc)
    return ledgers


def synthetic_opponent(weight_class: int, rating: float, opponent_id: str, name: str) -> Opponent:
    """Event opposition scaled to a target rating instead of drawn from a pool."""
    value = clamp_int(45, 95, rating)
    return Opponent(
        opponent_id=opponent_id,
        name=name,
        weight_class=weight_class,
        style=Style.NEUTRAL,
        true_skill=value,
        overall_rating=value,
        consistency=0.8,
        clutch=0.6,
    )


def event_opponent_strength(prestige: float, match_index: int, rand: RandomSource) -> float:
    return clamp(45, 95, 50 + (prestige - 1) * 15 + (rand.rand() - 0.5) * 20 + match_index * 4)
