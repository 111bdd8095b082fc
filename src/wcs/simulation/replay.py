from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wcs.career import start_options_from_mapping
from wcs.contracts import ActionRequest
from wcs.core import make_id
from wcs.persistence import snapshot_digest, to_snapshot
from wcs.simulation.runtime import CareerRuntime


@dataclass(slots=True)
class ReplayAction:
    action_type: str
    payload: dict
    actor_id: str


class ReplayHarness:
    def __init__(self, seed: str | int, start_options: dict[str, Any] | None = None) -> None:
        self.seed = seed
        self.start_options = dict(start_options or {})
        self.actions: list[ReplayAction] = []

    def record(self, action_type: str, payload: dict | None = None, actor_id: str = "player") -> None:
        self.actions.append(ReplayAction(action_type=str(action_type), payload=dict(payload or {}), actor_id=actor_id))

    def save(self, path: Path) -> None:
        data = {
            "seed": self.seed,
            "start_options": self.start_options,
            "actions": [{"action_type": a.action_type, "payload": a.payload, "actor_id": a.actor_id} for a in self.actions],
        }
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @staticmethod
    def load(path: Path) -> ReplayHarness:
        data = json.loads(path.read_text(encoding="utf-8"))
        harness = ReplayHarness(seed=data["seed"], start_options=data.get("start_options"))
        for raw in data["actions"]:
            harness.actions.append(ReplayAction(action_type=raw["action_type"], payload=raw["payload"], actor_id=raw["actor_id"]))
        return harness

    def replay(self, root: Path) -> tuple[dict, dict]:
        runtime_a = self._build_runtime(root / "replay_a")
        runtime_b = self._build_runtime(root / "replay_b")

        for action in self.actions:
            runtime_a.handle_action(ActionRequest(make_id("req"), action.action_type, action.payload, action.actor_id))
            runtime_b.handle_action(ActionRequest(make_id("req"), action.action_type, action.payload, action.actor_id))

        return self._fingerprint(runtime_a), self._fingerprint(runtime_b)

    def _build_runtime(self, root: Path) -> CareerRuntime:
        options = start_options_from_mapping(self.start_options) if self.start_options else None
        return CareerRuntime(root=root, seed=self.seed, start_options=options)

    def _fingerprint(self, runtime: CareerRuntime) -> dict:
        if runtime.halted:
            raise RuntimeError(f"replay runtime halted; forensic={runtime.last_forensic_path}")
        state = runtime.state
        return {
            "year": state.year,
            "week": state.week,
            "rng_state": runtime.machine.rng_state,
            "record": f"{state.record.career.wins}-{state.record.career.losses}",
            "digest": snapshot_digest(to_snapshot(state)),
        }
