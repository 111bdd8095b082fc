from __future__ import annotations

import copy
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from wcs.career import CareerStateMachine, StartOptions
from wcs.career.state import GameState
from wcs.contracts import ActionRequest, ActionResult, ActionType, Outcome
from wcs.core import (
    EngineIntegrityError,
    EventBus,
    build_forensic_artifact,
    career_event,
    persist_forensic_artifact,
)
from wcs.export import ExportService
from wcs.persistence import CareerHistoryStore, SaveSlotStore, run_career_etl, snapshot_digest, to_snapshot

logger = logging.getLogger(__name__)


class RuntimePaths:
    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def sqlite_path(self) -> Path:
        return self.root / "data" / "saves.sqlite3"

    @property
    def duckdb_path(self) -> Path:
        return self.root / "data" / "analytics.duckdb"

    @property
    def export_dir(self) -> Path:
        return self.root / "exports"

    @property
    def forensic_dir(self) -> Path:
        return self.root / "forensics"


class CareerRuntime:
    """Action-request front door for one career; halts after any integrity failure."""

    def __init__(self, root: Path, seed: str | int, start_options: StartOptions | None = None) -> None:
        self.paths = RuntimePaths(root)
        self.paths.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        self.seed = seed
        self.event_bus = EventBus()
        self.store = SaveSlotStore(self.paths.sqlite_path)
        self.store.initialize_schema()
        self.history = CareerHistoryStore(self.paths.sqlite_path)
        self.machine = CareerStateMachine.create(seed, start_options)

        self.halted = False
        self.last_forensic_path: str | None = None

    @property
    def state(self) -> GameState:
        return self.machine.state

    def handle_action(self, request: ActionRequest) -> ActionResult:
        if self.halted:
            return ActionResult(
                request.request_id,
                False,
                f"runtime halted after integrity failure; forensic={self.last_forensic_path}",
                {"forensic_path": self.last_forensic_path},
            )

        before = copy.deepcopy(self.machine.state)
        try:
            result = self._handle_action_core(request)
            self.machine.state.validate()
        except EngineIntegrityError as exc:
            return self._halt(request, before, exc.artifact)
        except Exception as exc:
            artifact = build_forensic_artifact(
                engine_scope="runtime",
                error_code="UNHANDLED_RUNTIME_EXCEPTION",
                message=str(exc),
                state_snapshot={"year": before.year, "week": before.week, "league": before.league.value},
                context={"action_type": str(request.action_type), "payload": request.payload},
                identifiers={"request_id": request.request_id, "actor_id": request.actor_id, "seed": str(self.seed)},
                causal_fragment=["runtime_dispatch"],
            )
            return self._halt(request, before, artifact)
        self._publish_new_log_lines(before.log_count)
        return result

    def _halt(self, request: ActionRequest, before: GameState, artifact: Any) -> ActionResult:
        self.machine = CareerStateMachine(before)
        self.last_forensic_path = str(persist_forensic_artifact(artifact, self.paths.forensic_dir))
        self.halted = True
        logger.error("runtime hard-stopped on %s: %s (forensic=%s)", request.action_type, artifact.message, self.last_forensic_path)
        return ActionResult(
            request.request_id,
            False,
            f"runtime hard-stopped: {artifact.message}",
            {"forensic_path": self.last_forensic_path, "error_code": artifact.error_code},
        )

    def _handle_action_core(self, request: ActionRequest) -> ActionResult:
        action = self._normalize_action(request.action_type)
        if action is None:
            return ActionResult(request.request_id, False, f"unknown action '{request.action_type}'")
        payload = request.payload
        machine = self.machine

        missing = self._missing_fields(action, payload)
        if missing:
            return ActionResult(request.request_id, False, f"missing payload fields: {', '.join(missing)}")

        if action == ActionType.GET_STATE:
            state = machine.state
            return ActionResult(
                request.request_id,
                True,
                f"Year {state.year} week {state.week}",
                data={
                    "snapshot": to_snapshot(state),
                    "true_skill": state.competitor.true_skill,
                    "overall_rating": state.competitor.overall_rating,
                    "rng_state": machine.rng_state,
                },
            )
        if action == ActionType.GET_CHOICES:
            return ActionResult(request.request_id, True, "choices", data={"choices": machine.get_choices()})
        if action == ActionType.PREVIEW_CHOICE:
            return self._from_outcome(request, machine.preview_choice(str(payload["key"])))
        if action == ActionType.APPLY_CHOICE:
            outcome = machine.apply_choice(str(payload["key"]))
            self._record_summary(outcome.data.get("summary"))
            return self._from_outcome(request, outcome)
        if action == ActionType.APPLY_ALLOCATION:
            return self._from_outcome(request, machine.apply_allocation(payload["allocation"]))
        if action == ActionType.ADVANCE_WEEK:
            crossed = machine.advance_week()
            state = machine.state
            summary = asdict(state.last_week_summary) if state.last_week_summary else None
            self._record_summary(summary)
            return ActionResult(
                request.request_id,
                True,
                f"Advanced to year {state.year} week {state.week}",
                data={
                    "year_boundary_crossed": crossed,
                    "career_complete": state.career_complete,
                    "summary": summary,
                },
            )
        if action == ActionType.GET_OFFSEASON_EVENTS:
            return ActionResult(request.request_id, True, "offseason events", data={"events": machine.get_offseason_events()})
        if action == ActionType.RUN_OFFSEASON_EVENT:
            outcome = machine.run_offseason_event(str(payload["key"]))
            self._record_summary(outcome.data.get("summary"))
            return self._from_outcome(request, outcome)
        if action == ActionType.GET_RELATIONSHIPS:
            return ActionResult(request.request_id, True, "relationships", data={"relationships": machine.get_relationships()})
        if action == ActionType.GET_RELATIONSHIP_ACTIONS:
            actions = machine.get_relationship_actions(str(payload["rel_id"]))
            return ActionResult(request.request_id, True, "relationship actions", data={"actions": actions})
        if action == ActionType.APPLY_RELATIONSHIP_ACTION:
            outcome = machine.apply_relationship_action(str(payload["rel_id"]), str(payload["action"]))
            return self._from_outcome(request, outcome)
        if action == ActionType.GET_RANKINGS_BOARD:
            return ActionResult(request.request_id, True, "rankings", data={"board": machine.get_rankings_board()})
        if action == ActionType.COUNTER_OFFER:
            return self._from_outcome(request, machine.counter_offer(str(payload["offer_id"])))
        if action == ActionType.ACCEPT_OFFER:
            return self._from_outcome(request, machine.accept_offer(str(payload["offer_id"])))
        if action == ActionType.SAVE_GAME:
            slot_id = str(payload["slot_id"])
            try:
                self.store.save(slot_id, machine.state)
            except ValueError as exc:
                return ActionResult(request.request_id, False, str(exc))
            return ActionResult(
                request.request_id,
                True,
                f"Saved to slot '{slot_id}'",
                data={"slot_id": slot_id, "digest": snapshot_digest(to_snapshot(machine.state))},
            )
        if action == ActionType.LOAD_GAME:
            slot_id = str(payload["slot_id"])
            try:
                loaded = self.store.load(slot_id)
            except ValueError as exc:
                return ActionResult(request.request_id, False, f"cannot load slot '{slot_id}': {exc}")
            if loaded is None:
                return ActionResult(request.request_id, False, f"no save in slot '{slot_id}'")
            state, report = loaded
            self.machine = CareerStateMachine(state)
            return ActionResult(
                request.request_id,
                True,
                f"Loaded slot '{slot_id}'",
                data={
                    "source_version": report.source_version,
                    "migrations_applied": report.migrations_applied,
                    "warnings": report.warnings,
                },
            )
        if action == ActionType.GET_SEASON_HISTORY:
            store = run_career_etl(self.paths.sqlite_path, self.paths.duckdb_path, machine.state.seed)
            return ActionResult(request.request_id, True, "season history", data={"seasons": store.season_records(machine.state.seed)})
        return ActionResult(request.request_id, False, f"unsupported action '{action.value}'")

    def export(self) -> list[Path]:
        seed = self.machine.state.seed
        run_career_etl(self.paths.sqlite_path, self.paths.duckdb_path, seed)
        return ExportService(self.paths.duckdb_path).export_career(seed, self.paths.export_dir)

    def _record_summary(self, summary: dict[str, Any] | None) -> None:
        if summary is None:
            return
        state = self.machine.state
        self.history.record_summary(state.seed, state.log_count, summary)

    def _from_outcome(self, request: ActionRequest, outcome: Outcome) -> ActionResult:
        data = dict(outcome.data)
        data["code"] = outcome.code.value if outcome.code else None
        return ActionResult(request.request_id, outcome.ok, outcome.message, data=data)

    def _missing_fields(self, action: ActionType, payload: dict[str, Any]) -> list[str]:
        required = {
            ActionType.PREVIEW_CHOICE: ("key",),
            ActionType.APPLY_CHOICE: ("key",),
            ActionType.APPLY_ALLOCATION: ("allocation",),
            ActionType.RUN_OFFSEASON_EVENT: ("key",),
            ActionType.GET_RELATIONSHIP_ACTIONS: ("rel_id",),
            ActionType.APPLY_RELATIONSHIP_ACTION: ("rel_id", "action"),
            ActionType.COUNTER_OFFER: ("offer_id",),
            ActionType.ACCEPT_OFFER: ("offer_id",),
            ActionType.SAVE_GAME: ("slot_id",),
            ActionType.LOAD_GAME: ("slot_id",),
        }.get(action, ())
        return [name for name in required if name not in payload]

    def _publish_new_log_lines(self, count_before: int) -> None:
        state = self.machine.state
        fresh = min(len(state.weekly_log), max(0, state.log_count - count_before))
        for entry in state.weekly_log[len(state.weekly_log) - fresh :]:
            self.event_bus.publish_narrative(career_event("career_log", entry.text, entry.week_index))

    def _normalize_action(self, action: ActionType | str) -> ActionType | None:
        if isinstance(action, ActionType):
            return action
        try:
            return ActionType(action)
        except ValueError:
            return None
