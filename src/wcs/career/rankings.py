"""Per-weight-class ranked lists. Every function returns a new list."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from wcs.career.entities import Opponent, RankedEntry


def _sorted(entries: Iterable[RankedEntry]) -> list[RankedEntry]:
    # stable: equal ratings keep their relative order
    return sorted(entries, key=lambda e: -e.rating)


def build_from_pool(pool: Iterable[Opponent], weight_class: int) -> list[RankedEntry]:
    return _sorted(
        RankedEntry(
            entry_id=opp.opponent_id,
            name=opp.name,
            weight_class=opp.weight_class,
            rating=opp.overall_rating,
            true_skill=opp.true_skill,
        )
        for opp in pool
        if opp.weight_class == weight_class
    )


def player_rank_in_list(player_rating: int, entries: Iterable[RankedEntry]) -> int:
    return 1 + sum(1 for e in entries if e.rating > player_rating)


def update_after_match(
    entries: list[RankedEntry],
    winner_id: str,
    loser_id: str,
    new_winner_rating: int,
    new_loser_rating: int,
) -> list[RankedEntry]:
    updated: list[RankedEntry] = []
    for entry in entries:
        if entry.entry_id == winner_id:
            updated.append(replace(entry, rating=new_winner_rating, wins=entry.wins + 1))
        elif entry.entry_id == loser_id:
            updated.append(replace(entry, rating=new_loser_rating, losses=entry.losses + 1))
        else:
            updated.append(replace(entry))
    return _sorted(updated)


def upsert_player(
    entries: list[RankedEntry],
    entry_id: str,
    name: str,
    rating: int,
    weight_class: int,
    true_skill: int | None = None,
) -> list[RankedEntry]:
    """Insert or refresh the player row. Win/loss counters carry over from an existing row."""
    existing = find_entry(entries, entry_id)
    kept = [replace(e) for e in entries if e.entry_id != entry_id]
    kept.append(
        RankedEntry(
            entry_id=entry_id,
            name=name,
            weight_class=weight_class,
            rating=rating,
            true_skill=rating if true_skill is None else true_skill,
            wins=existing.wins if existing else 0,
            losses=existing.losses if existing else 0,
        )
    )
    return _sorted(kept)


def find_entry(entries: Iterable[RankedEntry], entry_id: str) -> RankedEntry | None:
    for entry in entries:
        if entry.entry_id == entry_id:
            return entry
    return None


def entry_rating(entries: Iterable[RankedEntry], entry_id: str) -> int | None:
    entry = find_entry(entries, entry_id)
    return entry.rating if entry else None
