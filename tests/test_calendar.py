from __future__ import annotations

from wcs.career.calendar import generate_hs_schedule, is_tournament_week, meet_for_week, phase_label
from wcs.career.opponents import generate_pools, generate_ranking_ledgers
from wcs.career.reference import OFFSEASON_EVENTS, WEIGHT_CLASSES_HS
from wcs.career.tournaments import offseason_opponents, ordinal, place_from_losses, place_from_wins
from wcs.contracts import LifeStage
from wcs.core import seeded_random


def test_phase_labels_cover_both_calendars():
    for week in range(1, 53):
        assert phase_label(week, LifeStage.HIGH_SCHOOL)
        assert phase_label(week, LifeStage.COLLEGE)
    assert phase_label(39, LifeStage.HIGH_SCHOOL) == "Regular Season"


def test_tournament_weeks():
    assert is_tournament_week(50, LifeStage.HIGH_SCHOOL)
    assert is_tournament_week(41, LifeStage.HIGH_SCHOOL)
    assert not is_tournament_week(39, LifeStage.HIGH_SCHOOL)
    assert is_tournament_week(12, LifeStage.COLLEGE)
    assert not is_tournament_week(50, LifeStage.COLLEGE)


def test_pools_are_sized_and_sorted():
    pools = generate_pools(145, 50, seeded_random("pools"), 1)
    assert (len(pools.unranked), len(pools.state_ranked), len(pools.national_ranked)) == (30, 20, 20)
    ratings = [o.overall_rating for o in pools.state_ranked]
    assert ratings == sorted(ratings, reverse=True)
    assert [o.state_rank for o in pools.state_ranked] == list(range(1, 21))
    assert all(40 <= o.overall_rating <= 99 for o in pools.unranked)
    assert all(30 <= o.true_skill <= 95 for o in pools.national_ranked)


def test_ledgers_cover_every_weight_class():
    rand = seeded_random("ledgers")
    pools = generate_pools(145, 50, rand, 1)
    ledgers = generate_ranking_ledgers(WEIGHT_CLASSES_HS, 145, 50, pools, rand, 1)
    assert sorted(ledgers) == WEIGHT_CLASSES_HS
    assert all(len(entries) == 15 for entries in ledgers.values())
    own_ids = {o.opponent_id for o in pools.state_ranked}
    assert {e.entry_id for e in ledgers[145]} <= own_ids


def test_schedule_spans_regular_season():
    pools = generate_pools(145, 50, seeded_random("sched"), 1)
    varsity = generate_hs_schedule(pools, seeded_random("s"), 30, has_fargo_history=False, jv=False)
    assert [m.week for m in varsity] == list(range(39, 50))
    duals = [m for m in varsity if m.kind in {"dual", "rival"}]
    assert all(m.opponent_id and pools.find(m.opponent_id) for m in duals)
    assert not any(m.practice_only for m in varsity)
    assert meet_for_week(varsity, 39).opponent_id in {o.opponent_id for o in pools.state_ranked}
    assert meet_for_week(varsity, 20) is None

    jv = generate_hs_schedule(pools, seeded_random("s"), 30, has_fargo_history=False, jv=True)
    assert all(m.practice_only for m in jv if m.kind in {"dual", "rival"})


def test_national_opponent_needs_profile():
    pools = generate_pools(145, 50, seeded_random("nat"), 1)
    national_ids = {o.opponent_id for o in pools.national_ranked}
    quiet = generate_hs_schedule(pools, seeded_random("n"), 20, has_fargo_history=False, jv=False)
    loud = generate_hs_schedule(pools, seeded_random("n"), 20, has_fargo_history=True, jv=False)
    assert meet_for_week(quiet, 43).opponent_id not in national_ids
    assert meet_for_week(loud, 43).opponent_id in national_ids


def test_placement_from_wins_bands():
    rand = seeded_random("place")
    for _ in range(50):
        assert place_from_wins(5, 5, rand) == 1
        assert 1 <= place_from_wins(4, 5, rand) <= 3
        assert 3 <= place_from_wins(3, 5, rand) <= 5
        assert 5 <= place_from_wins(1, 5, rand) <= 7
        assert 7 <= place_from_wins(0, 5, rand) <= 8


def test_placement_from_losses_and_ordinals():
    assert [place_from_losses(n) for n in range(5)] == [1, 2, 3, 4, 4]
    assert [ordinal(n) for n in (1, 2, 3, 4, 11)] == ["1st", "2nd", "3rd", "4th", "11th"]


def test_offseason_opposition_strengthens_each_round():
    event = OFFSEASON_EVENTS["fargo"]
    opponents = offseason_opponents(event, 145, 1, seeded_random("fargo"))
    assert len(opponents) == event.matches
    assert all(45 <= o.overall_rating <= 95 for o in opponents)
    assert len({o.opponent_id for o in opponents}) == event.matches
