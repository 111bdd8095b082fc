from __future__ import annotations

import copy
import dataclasses
import hashlib
import json
import logging
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from wcs.career.state import GameState

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 4


@dataclass(slots=True)
class LoadReport:
    source_version: int
    migrations_applied: list[int] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _encode(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _encode(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def to_snapshot(state: GameState) -> dict[str, Any]:
    """Plain JSON-safe dict of the whole state, stamped with the current version."""
    return {"version": SNAPSHOT_VERSION, "state": _encode(state)}


def snapshot_digest(snapshot: dict[str, Any]) -> str:
    payload = json.dumps(snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


# ---------------------------------------------------------------- migrations


def _migrate_v1_to_v2(raw: dict[str, Any]) -> None:
    """Month-based calendar fields become week-based."""
    if "week" not in raw and "month" in raw:
        raw["week"] = raw["month"]
    if "hours_left_this_week" not in raw and "hours_left_this_month" in raw:
        raw["hours_left_this_week"] = raw["hours_left_this_month"]
    if "weeks_in_college" not in raw and "months_in_college" in raw:
        raw["weeks_in_college"] = int(raw["months_in_college"]) * 4
    if "did_part_time_this_week" not in raw and "did_part_time_this_month" in raw:
        raw["did_part_time_this_week"] = raw["did_part_time_this_month"]
    for legacy in ("month", "hours_left_this_month", "months_in_college", "did_part_time_this_month", "last_month_economy"):
        raw.pop(legacy, None)


def _migrate_v2_to_v3(raw: dict[str, Any]) -> None:
    """The single romantic `relationship` slot folds into the relationships list."""
    legacy = raw.pop("relationship", None)
    entries = raw.setdefault("relationships", [])
    if not legacy:
        return
    if any(e.get("kind") == "romantic" for e in entries):
        return
    entries.append(
        {
            "rel_id": "rel_romantic_1",
            "kind": "romantic",
            "name": legacy.get("partner_name", "Partner"),
            "level": int(legacy.get("level", 30)),
            "label": str(legacy.get("status", "dating")).capitalize(),
            "weekly_time_required": int(legacy.get("weekly_time_required", 4)),
        }
    )


def _migrate_v3_to_v4(raw: dict[str, Any]) -> None:
    """Ranking rows gain true_skill; opponents lose the unused injury_risk roll."""
    for ledger in raw.get("rankings", {}).values():
        for entry in ledger:
            entry.setdefault("true_skill", entry.get("rating", 0))
    for pool in raw.get("pools", {}).values():
        for opponent in pool:
            opponent.pop("injury_risk", None)


STATE_MIGRATIONS: list[tuple[int, Callable[[dict[str, Any]], None]]] = [
    (2, _migrate_v1_to_v2),
    (3, _migrate_v2_to_v3),
    (4, _migrate_v3_to_v4),
]


def migrate_raw_state(raw: dict[str, Any], version: int) -> list[int]:
    applied: list[int] = []
    for target, step in STATE_MIGRATIONS:
        if version < target:
            step(raw)
            applied.append(target)
    return applied


# ------------------------------------------------------------------ decoding


def _decode(tp: Any, value: Any, path: str, warnings: list[str]) -> Any:
    origin = typing.get_origin(tp)
    if origin in (typing.Union, types.UnionType):
        if value is None:
            return None
        inner = [a for a in typing.get_args(tp) if a is not type(None)]
        return _decode(inner[0], value, path, warnings)
    if origin is list:
        (item_tp,) = typing.get_args(tp)
        return [_decode(item_tp, v, f"{path}[{i}]", warnings) for i, v in enumerate(value)]
    if origin is dict:
        key_tp, val_tp = typing.get_args(tp)
        return {key_tp(k): _decode(val_tp, v, f"{path}.{k}", warnings) for k, v in value.items()}
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _decode_dataclass(tp, value, path, warnings)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return tp(value)
    if tp is float:
        return float(value)
    if tp is int:
        return int(value)
    return value


def _decode_dataclass(cls: type, raw: dict[str, Any], path: str, warnings: list[str]) -> Any:
    if not isinstance(raw, dict):
        raise ValueError(f"{path or cls.__name__}: expected an object, got {type(raw).__name__}")
    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        field_path = f"{path}.{f.name}" if path else f.name
        if f.name in raw:
            kwargs[f.name] = _decode(hints[f.name], raw[f.name], field_path, warnings)
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise ValueError(f"snapshot is missing required field '{field_path}'")
        warnings.append(f"missing field '{field_path}' filled with default")
    return cls(**kwargs)


def from_snapshot(snapshot: dict[str, Any]) -> tuple[GameState, LoadReport]:
    if "state" in snapshot and isinstance(snapshot["state"], dict):
        version = int(snapshot.get("version", 1))
        raw = copy.deepcopy(snapshot["state"])
    else:
        # unversioned saves predate the envelope
        version = 1
        raw = copy.deepcopy(snapshot)
    if version > SNAPSHOT_VERSION:
        raise ValueError(f"snapshot version {version} is newer than supported {SNAPSHOT_VERSION}")

    report = LoadReport(source_version=version)
    report.migrations_applied = migrate_raw_state(raw, version)
    state = _decode_dataclass(GameState, raw, "", report.warnings)
    for warning in report.warnings:
        logger.warning("DataIntegrityWarning: %s", warning)
    state.validate()
    return state, report


def dumps(state: GameState) -> str:
    return json.dumps(to_snapshot(state), sort_keys=True)


def loads(text: str) -> tuple[GameState, LoadReport]:
    return from_snapshot(json.loads(text))
