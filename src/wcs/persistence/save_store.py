from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from wcs.career.state import GameState
from wcs.core import now_utc
from wcs.persistence.migrations import MigrationRunner
from wcs.persistence.snapshot import LoadReport, SNAPSHOT_VERSION, from_snapshot, to_snapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SaveSlotInfo:
    slot_id: str
    seed: str
    competitor_name: str
    league: str
    year: int
    week: int
    saved_at: str


class SaveSlotStore:
    """Named save slots holding one snapshot each, as JSON text."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            MigrationRunner(conn).apply()

    def save(self, slot_id: str, state: GameState) -> None:
        if not slot_id.strip():
            raise ValueError("slot id must not be blank")
        payload = json.dumps(to_snapshot(state), sort_keys=True)
        with self.connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO save_slots(
                    slot_id, seed, year, week, snapshot_version, snapshot_json, saved_at, competitor_name, league
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    slot_id,
                    state.seed,
                    state.year,
                    state.week,
                    SNAPSHOT_VERSION,
                    payload,
                    now_utc().isoformat(),
                    state.competitor.name,
                    state.league.value,
                ),
            )
        logger.debug("saved slot %s at year %s week %s", slot_id, state.year, state.week)

    def load(self, slot_id: str) -> tuple[GameState, LoadReport] | None:
        with self.connect() as conn:
            row = conn.execute("SELECT snapshot_json FROM save_slots WHERE slot_id = ?", (slot_id,)).fetchone()
        if not row:
            return None
        return from_snapshot(json.loads(row[0]))

    def has(self, slot_id: str) -> bool:
        with self.connect() as conn:
            row = conn.execute("SELECT 1 FROM save_slots WHERE slot_id = ?", (slot_id,)).fetchone()
        return row is not None

    def delete(self, slot_id: str) -> None:
        with self.connect() as conn:
            conn.execute("DELETE FROM save_slots WHERE slot_id = ?", (slot_id,))

    def list_slots(self) -> list[SaveSlotInfo]:
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT slot_id, seed, competitor_name, league, year, week, saved_at
                FROM save_slots
                ORDER BY saved_at DESC, slot_id
                """
            ).fetchall()
        return [SaveSlotInfo(*row) for row in rows]
