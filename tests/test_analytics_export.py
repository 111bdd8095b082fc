from __future__ import annotations

from pathlib import Path

import duckdb

from wcs.career import StartOptions
from wcs.contracts import ActionRequest, ActionType, LeagueTier
from wcs.core import make_id
from wcs.simulation import CareerRuntime


def _college_runtime(root: Path) -> CareerRuntime:
    options = StartOptions(name="Morgan", league=LeagueTier.D1, weight_class=149, age=18)
    return CareerRuntime(root=root, seed="analytics", start_options=options)


def _act(runtime: CareerRuntime, action: ActionType, payload: dict | None = None):
    return runtime.handle_action(ActionRequest(make_id("req"), action, payload or {}, "player"))


def test_matches_recorded_and_rolled_into_season_marts(tmp_path: Path):
    runtime = _college_runtime(tmp_path)
    competed = _act(runtime, ActionType.APPLY_CHOICE, {"key": "compete"})
    assert competed.success
    assert runtime.history.match_count("analytics") == len(competed.data["summary"]["matches"])

    for _ in range(8):
        _act(runtime, ActionType.ADVANCE_WEEK)
    assert runtime.state.week == 9

    recorded = runtime.history.match_count("analytics", year=1)
    assert recorded == runtime.state.record.career.matches

    history = _act(runtime, ActionType.GET_SEASON_HISTORY)
    assert history.success
    (season,) = history.data["seasons"]
    assert season["year"] == 1
    assert season["matches"] == recorded
    assert season["wins"] + season["losses"] == recorded
    assert season["wins"] == runtime.state.record.career.wins
    assert season["best_placement"] is not None


def test_replayed_week_overwrites_its_rows(tmp_path: Path):
    runtime = _college_runtime(tmp_path)
    _act(runtime, ActionType.SAVE_GAME, {"slot_id": "start"})
    _act(runtime, ActionType.APPLY_CHOICE, {"key": "compete"})
    first = runtime.history.match_count("analytics")

    _act(runtime, ActionType.LOAD_GAME, {"slot_id": "start"})
    _act(runtime, ActionType.APPLY_CHOICE, {"key": "compete"})
    assert runtime.history.match_count("analytics") == first
    assert len(runtime.history.week_rows("analytics")) == 1


def test_export_csv_parquet_row_count_parity(tmp_path: Path):
    runtime = _college_runtime(tmp_path)
    _act(runtime, ActionType.APPLY_CHOICE, {"key": "compete"})
    _act(runtime, ActionType.ADVANCE_WEEK)

    outputs = runtime.export()
    csv_files = [p for p in outputs if p.suffix == ".csv"]
    parquet_files = [p for p in outputs if p.suffix == ".parquet"]
    assert {p.stem for p in csv_files} == {"week_results", "match_results", "season_records"}
    assert len(parquet_files) == len(csv_files)

    with duckdb.connect() as conn:
        for csv_path in csv_files:
            parquet_path = csv_path.with_suffix(".parquet")
            csv_count = conn.execute(f"SELECT COUNT(*) FROM read_csv_auto('{csv_path.as_posix()}')").fetchone()[0]
            parquet_count = conn.execute(f"SELECT COUNT(*) FROM parquet_scan('{parquet_path.as_posix()}')").fetchone()[0]
            assert csv_count == parquet_count
            assert parquet_count > 0
