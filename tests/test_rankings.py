from __future__ import annotations

from wcs.career.entities import RankedEntry
from wcs.career.rankings import build_from_pool, entry_rating, player_rank_in_list, update_after_match, upsert_player
from tests.helpers import make_opponent


def _ledger() -> list[RankedEntry]:
    return build_from_pool(
        [make_opponent(60, "a"), make_opponent(72, "b"), make_opponent(66, "c"), make_opponent(66, "d")],
        145,
    )


def test_build_sorts_descending_and_filters_weight():
    pool = [make_opponent(60, "a"), make_opponent(72, "b")]
    pool[0].weight_class = 152
    ledger = build_from_pool(pool, 145)
    assert [e.entry_id for e in ledger] == ["b"]
    assert [e.rating for e in _ledger()] == [72, 66, 66, 60]


def test_ties_are_not_ahead_of_player():
    ledger = _ledger()
    assert player_rank_in_list(66, ledger) == 2
    assert player_rank_in_list(80, ledger) == 1
    assert player_rank_in_list(10, ledger) == 5


def test_update_after_match_reorders_and_counts():
    ledger = _ledger()
    updated = update_after_match(ledger, "a", "b", 74, 71)
    assert [e.entry_id for e in updated][:2] == ["a", "b"]
    a = next(e for e in updated if e.entry_id == "a")
    b = next(e for e in updated if e.entry_id == "b")
    assert (a.wins, a.losses, b.wins, b.losses) == (1, 0, 0, 1)
    # input untouched
    assert entry_rating(ledger, "a") == 60


def test_unknown_ids_are_silent_noops():
    ledger = _ledger()
    updated = update_after_match(ledger, "player", "c", 90, 65)
    c = next(e for e in updated if e.entry_id == "c")
    assert c.rating == 65 and c.losses == 1
    assert entry_rating(updated, "player") is None


def test_idempotent_with_unchanged_ratings():
    ledger = _ledger()
    same = update_after_match(ledger, "zz", "yy", 0, 0)
    assert same == ledger


def test_upsert_replaces_existing_entry():
    ledger = upsert_player(_ledger(), "player", "Me", 70, 145)
    ledger = upsert_player(ledger, "player", "Me", 64, 145)
    players = [e for e in ledger if e.entry_id == "player"]
    assert len(players) == 1
    assert players[0].rating == 64
    assert [e.rating for e in ledger] == sorted((e.rating for e in ledger), reverse=True)


def test_upsert_keeps_player_counters():
    ledger = upsert_player(_ledger(), "player", "Me", 70, 145, true_skill=68)
    ledger = update_after_match(ledger, "player", "a", 71, 59)
    ledger = update_after_match(ledger, "b", "player", 73, 70)
    ledger = upsert_player(ledger, "player", "Me", 69, 145, true_skill=67)
    player = next(e for e in ledger if e.entry_id == "player")
    assert (player.rating, player.true_skill, player.wins, player.losses) == (69, 67, 1, 1)


def test_ledger_rows_carry_true_skill():
    pool = [make_opponent(60, "a")]
    pool[0].true_skill = 58
    (entry,) = build_from_pool(pool, 145)
    assert (entry.rating, entry.true_skill) == (60, 58)
