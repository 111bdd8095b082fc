from __future__ import annotations

from wcs.contracts import MatchMethod, Style
from wcs.core import seeded_random
from wcs.match import MatchContext, MatchResolver, effective_skill, style_modifier, win_probability
from tests.helpers import make_competitor, make_opponent


def test_strong_favourite_wins_most_matches():
    resolver = MatchResolver()
    player = make_competitor(level=85)
    assert player.true_skill == 85
    opponent = make_opponent(55)
    wins = sum(resolver.run(player, opponent, seeded_random(f"fav-{i}")).won for i in range(100))
    assert wins > 80


def test_upset_is_reachable():
    resolver = MatchResolver()
    player = make_competitor(level=52)
    opponent = make_opponent(58)
    wins = sum(resolver.run(player, opponent, seeded_random(f"dog-{i}")).won for i in range(200))
    assert wins >= 1


def test_win_probability_is_monotonic():
    previous = 0.0
    for diff in range(-60, 61, 5):
        p = win_probability(diff)
        assert p >= previous
        previous = p
    assert win_probability(0) == 0.5


def test_penalties_lower_effective_skill():
    player = make_competitor(level=60)
    clean = effective_skill(player, Style.NEUTRAL, MatchContext())
    hurt = effective_skill(player, Style.NEUTRAL, MatchContext(injury_penalty=4.5, freshman_penalty=3.0))
    assert hurt == clean - 7.5


def test_style_matrix_is_applied():
    assert style_modifier(Style.TOP, Style.DEFENSIVE) == 2
    assert style_modifier(Style.DEFENSIVE, Style.TOP) == -2
    player = make_competitor(level=60, style=Style.TOP)
    assert effective_skill(player, Style.DEFENSIVE, MatchContext()) - effective_skill(player, Style.TOP, MatchContext()) == 2


def test_results_are_consistent_with_method():
    resolver = MatchResolver()
    player = make_competitor(level=65)
    opponent = make_opponent(65)
    for i in range(200):
        result = resolver.run(player, opponent, seeded_random(i))
        if not result.won:
            assert result.method == MatchMethod.DECISION
            assert result.opp_score > result.my_score
            continue
        assert result.my_score > result.opp_score
        if result.method == MatchMethod.FALL:
            assert (result.my_score, result.opp_score) == (6, 0)
        elif result.method == MatchMethod.TECH_FALL:
            assert result.my_score - result.opp_score >= 15
        elif result.method == MatchMethod.MAJOR:
            assert result.my_score - result.opp_score >= 8


def test_resolver_is_deterministic_and_does_not_mutate():
    resolver = MatchResolver()
    player = make_competitor(level=70)
    opponent = make_opponent(68)
    before = (player.meters.energy, player.attributes.technique)
    first = resolver.run(player, opponent, seeded_random("same"))
    second = resolver.run(player, opponent, seeded_random("same"))
    assert first == second
    assert (player.meters.energy, player.attributes.technique) == before
    assert first.score_line == f"{first.my_score}-{first.opp_score}"


def test_opponent_clutch_counts_only_in_high_stakes_matches():
    resolver = MatchResolver()
    player = make_competitor(level=65)
    opponent = make_opponent(65)
    opponent.clutch = 0.9
    calm = resolver.run(player, opponent, seeded_random("clutch"), MatchContext())
    pressure = resolver.run(player, opponent, seeded_random("clutch"), MatchContext(high_stakes=True))
    assert pressure.win_probability < calm.win_probability

    opponent.clutch = 0.5
    neutral = resolver.run(player, opponent, seeded_random("clutch"), MatchContext(high_stakes=True))
    assert neutral.win_probability == calm.win_probability
