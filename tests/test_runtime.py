from __future__ import annotations

import json
from pathlib import Path

from tests.helpers import DETERMINISM_ALLOCATION
from wcs.career import StartOptions
from wcs.contracts import ActionRequest, ActionType
from wcs.core import make_id
from wcs.simulation import CareerRuntime


def _request(action: ActionType | str, payload: dict | None = None) -> ActionRequest:
    return ActionRequest(make_id("req"), action, payload or {}, "player")


def test_runtime_dispatches_queries_and_mutations(tmp_path):
    runtime = CareerRuntime(tmp_path, seed="runtime-seed")

    state = runtime.handle_action(_request(ActionType.GET_STATE))
    assert state.success
    assert state.data["snapshot"]["state"]["week"] == 1
    assert state.data["rng_state"] == runtime.machine.rng_state

    choices = runtime.handle_action(_request(ActionType.GET_CHOICES))
    assert "train_technique" in [c["key"] for c in choices.data["choices"]]

    planned = runtime.handle_action(_request(ActionType.APPLY_ALLOCATION, {"allocation": DETERMINISM_ALLOCATION}))
    assert planned.success, planned.message
    assert planned.data["code"] is None

    rejected = runtime.handle_action(_request(ActionType.APPLY_CHOICE, {"key": "rest"}))
    assert not rejected.success
    assert rejected.data["code"] == "INVALID_CHOICE"

    advanced = runtime.handle_action(_request("advance_week"))
    assert advanced.success
    assert advanced.data["year_boundary_crossed"] is False
    assert advanced.data["summary"]["week"] == 2

    board = runtime.handle_action(_request(ActionType.GET_RANKINGS_BOARD))
    assert board.data["board"]
    rels = runtime.handle_action(_request(ActionType.GET_RELATIONSHIPS))
    assert any(r["rel_id"] == "rel_parent_1" for r in rels.data["relationships"])
    assert not runtime.halted


def test_missing_payload_fields_rejected(tmp_path):
    runtime = CareerRuntime(tmp_path, seed="payload")
    result = runtime.handle_action(_request(ActionType.APPLY_RELATIONSHIP_ACTION, {"rel_id": "rel_parent_1"}))
    assert not result.success
    assert "action" in result.message
    assert not runtime.halted


def test_log_lines_published_as_career_events(tmp_path):
    runtime = CareerRuntime(tmp_path, seed="events")
    seen = []
    runtime.event_bus.subscribe_narrative(seen.append, scope="career")
    runtime.handle_action(_request(ActionType.APPLY_CHOICE, {"key": "rest"}))
    runtime.handle_action(_request(ActionType.APPLY_CHOICE, {"key": "rest"}))
    assert runtime.event_bus.emitted_count("career") == 2
    assert all(e.event_type == "career_log" for e in seen)


def test_save_and_load_round_trip(tmp_path):
    runtime = CareerRuntime(tmp_path, seed="save", start_options=StartOptions(name="Riley"))
    runtime.handle_action(_request(ActionType.ADVANCE_WEEK))
    saved = runtime.handle_action(_request(ActionType.SAVE_GAME, {"slot_id": "main"}))
    assert saved.success
    digest = saved.data["digest"]

    runtime.handle_action(_request(ActionType.ADVANCE_WEEK))
    assert runtime.state.week == 3
    loaded = runtime.handle_action(_request(ActionType.LOAD_GAME, {"slot_id": "main"}))
    assert loaded.success
    assert loaded.data["migrations_applied"] == []
    assert runtime.state.week == 2
    assert runtime.handle_action(_request(ActionType.SAVE_GAME, {"slot_id": "again"})).data["digest"] == digest

    missing = runtime.handle_action(_request(ActionType.LOAD_GAME, {"slot_id": "nope"}))
    assert not missing.success


def test_runtime_hard_stops_and_restores_state(tmp_path, monkeypatch):
    runtime = CareerRuntime(tmp_path, seed="halt")
    runtime.handle_action(_request(ActionType.APPLY_CHOICE, {"key": "rest"}))

    def explode() -> bool:
        runtime.machine.state.week = 9
        raise RuntimeError("boom")

    monkeypatch.setattr(runtime.machine, "advance_week", explode)
    result = runtime.handle_action(_request(ActionType.ADVANCE_WEEK))
    assert not result.success
    assert runtime.halted
    assert result.data["error_code"] == "UNHANDLED_RUNTIME_EXCEPTION"
    artifact = Path(result.data["forensic_path"])
    assert artifact.exists()
    assert json.loads(artifact.read_text(encoding="utf-8"))["error_code"] == "UNHANDLED_RUNTIME_EXCEPTION"
    assert runtime.state.week == 1

    blocked = runtime.handle_action(_request(ActionType.GET_STATE))
    assert not blocked.success
    assert "halted" in blocked.message


def test_unknown_action_is_rejected_without_halting(tmp_path):
    runtime = CareerRuntime(tmp_path, seed="typo")
    result = runtime.handle_action(_request("advance_wek"))
    assert not result.success
    assert "advance_wek" in result.message
    assert not runtime.halted
    assert runtime.handle_action(_request(ActionType.GET_CHOICES)).success


def test_unreadable_save_slot_is_rejected_without_halting(tmp_path):
    runtime = CareerRuntime(tmp_path, seed="slots")
    assert runtime.handle_action(_request(ActionType.SAVE_GAME, {"slot_id": "future"})).success
    with runtime.store.connect() as conn:
        row = conn.execute("SELECT snapshot_json FROM save_slots WHERE slot_id = 'future'").fetchone()
        snapshot = json.loads(row[0])
        snapshot["version"] = snapshot["version"] + 1
        conn.execute(
            "UPDATE save_slots SET snapshot_json = ? WHERE slot_id = 'future'",
            (json.dumps(snapshot),),
        )

    runtime.handle_action(_request(ActionType.ADVANCE_WEEK))
    loaded = runtime.handle_action(_request(ActionType.LOAD_GAME, {"slot_id": "future"}))
    assert not loaded.success
    assert "newer than supported" in loaded.message
    assert not runtime.halted
    assert runtime.state.week == 2

    blank = runtime.handle_action(_request(ActionType.SAVE_GAME, {"slot_id": "  "}))
    assert not blank.success
    assert not runtime.halted
