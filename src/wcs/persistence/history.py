from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from wcs.core import stable_id

logger = logging.getLogger(__name__)


class CareerHistoryStore:
    """Append-only week and match results, keyed so a replayed week overwrites itself."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def record_summary(self, seed: str, sequence: int, summary: dict[str, Any]) -> str:
        result_id = stable_id("wr", seed, summary["year"], summary["week"], sequence)
        with self.connect() as conn:
            conn.execute("DELETE FROM match_results WHERE result_id = ?", (result_id,))
            conn.execute(
                """
                INSERT OR REPLACE INTO week_results(
                    result_id, seed, year, week, phase, event_type, wins, losses, placement,
                    energy_change, stress_change, recruiting_change
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    result_id,
                    seed,
                    summary["year"],
                    summary["week"],
                    summary["phase"],
                    summary["event_type"],
                    summary["wins"],
                    summary["losses"],
                    summary["placement"],
                    summary["energy_change"],
                    summary["stress_change"],
                    summary["recruiting_change"],
                ),
            )
            conn.executemany(
                """
                INSERT INTO match_results(
                    match_id, result_id, seed, year, week, event_type, opponent_name, opponent_rating, won, method, score
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        f"{result_id}_m{idx + 1}",
                        result_id,
                        seed,
                        summary["year"],
                        summary["week"],
                        summary["event_type"],
                        line["opponent_name"],
                        line["opponent_rating"],
                        int(line["won"]),
                        line["method"],
                        line["score"],
                    )
                    for idx, line in enumerate(summary["matches"])
                ],
            )
        logger.debug("recorded %s result %s with %d match(es)", summary["event_type"], result_id, len(summary["matches"]))
        return result_id

    def match_count(self, seed: str, year: int | None = None) -> int:
        query = "SELECT COUNT(*) FROM match_results WHERE seed = ?"
        params: tuple[Any, ...] = (seed,)
        if year is not None:
            query += " AND year = ?"
            params = (seed, year)
        with self.connect() as conn:
            return int(conn.execute(query, params).fetchone()[0])

    def week_rows(self, seed: str) -> list[tuple]:
        with self.connect() as conn:
            return conn.execute(
                """
                SELECT year, week, event_type, wins, losses, placement
                FROM week_results
                WHERE seed = ?
                ORDER BY year, week, result_id
                """,
                (seed,),
            ).fetchall()
