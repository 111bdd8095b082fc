from __future__ import annotations

import logging

import pytest

from tests.helpers import DETERMINISM_ALLOCATION, make_machine
from wcs.career import CareerStateMachine
from wcs.contracts import LeagueTier, RelationshipKind
from wcs.persistence import SNAPSHOT_VERSION, dumps, from_snapshot, loads, snapshot_digest, to_snapshot


def _played_machine():
    machine = make_machine("snapshot")
    machine.apply_allocation(DETERMINISM_ALLOCATION)
    for _ in range(45):
        machine.advance_week()
    return machine


def test_round_trip_is_lossless():
    machine = _played_machine()
    state, report = loads(dumps(machine.state))
    assert state == machine.state
    assert report.source_version == SNAPSHOT_VERSION
    assert report.migrations_applied == []
    assert report.warnings == []
    assert snapshot_digest(to_snapshot(state)) == snapshot_digest(to_snapshot(machine.state))


def test_loaded_state_continues_identically():
    machine = _played_machine()
    state, _ = loads(dumps(machine.state))
    restored = CareerStateMachine(state)
    for _ in range(10):
        machine.advance_week()
        restored.advance_week()
    assert dumps(restored.state) == dumps(machine.state)


def test_legacy_month_save_is_migrated(caplog):
    raw = to_snapshot(make_machine("legacy", league=LeagueTier.D1, weight_class=149, age=18).state)["state"]
    raw["month"] = raw.pop("week")
    raw["hours_left_this_month"] = raw.pop("hours_left_this_week")
    raw.pop("weeks_in_college")
    raw["months_in_college"] = 2
    raw["relationship"] = {"partner_name": "Jordan", "level": 55, "status": "dating"}
    raw.pop("log_count")

    with caplog.at_level(logging.WARNING, logger="wcs.persistence.snapshot"):
        state, report = from_snapshot(raw)

    assert report.source_version == 1
    assert report.migrations_applied == [2, 3, 4]
    assert state.weeks_in_college == 8
    partner = [r for r in state.relationships if r.kind == RelationshipKind.ROMANTIC]
    assert len(partner) == 1
    assert (partner[0].name, partner[0].level, partner[0].label) == ("Jordan", 55, "Dating")
    assert report.warnings == ["missing field 'log_count' filled with default"]
    assert "DataIntegrityWarning" in caplog.text


def test_newer_version_is_refused():
    snapshot = to_snapshot(make_machine().state)
    snapshot["version"] = SNAPSHOT_VERSION + 1
    with pytest.raises(ValueError):
        from_snapshot(snapshot)


def test_missing_required_field_is_refused():
    snapshot = to_snapshot(make_machine().state)
    del snapshot["state"]["competitor"]
    with pytest.raises(ValueError):
        from_snapshot(snapshot)


def test_v3_save_gains_ranking_true_skill():
    snapshot = to_snapshot(_played_machine().state)
    snapshot["version"] = 3
    for ledger in snapshot["state"]["rankings"].values():
        for entry in ledger:
            del entry["true_skill"]
    for pool in snapshot["state"]["pools"].values():
        for opponent in pool:
            opponent["injury_risk"] = 0.2

    state, report = from_snapshot(snapshot)

    assert report.migrations_applied == [4]
    assert report.warnings == []
    entries = [e for ledger in state.rankings.values() for e in ledger]
    assert entries
    assert all(e.true_skill == e.rating for e in entries)
