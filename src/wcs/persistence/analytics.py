from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

import duckdb


class CareerAnalyticsStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> Any:
        return duckdb.connect(str(self.db_path))

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS mart_week_results (
                    result_id VARCHAR PRIMARY KEY,
                    seed VARCHAR,
                    year INTEGER,
                    week INTEGER,
                    phase VARCHAR,
                    event_type VARCHAR,
                    wins INTEGER,
                    losses INTEGER,
                    placement INTEGER,
                    energy_change INTEGER,
                    stress_change INTEGER,
                    recruiting_change INTEGER
                );

                CREATE TABLE IF NOT EXISTS mart_match_results (
                    match_id VARCHAR PRIMARY KEY,
                    result_id VARCHAR,
                    seed VARCHAR,
                    year INTEGER,
                    week INTEGER,
                    event_type VARCHAR,
                    opponent_name VARCHAR,
                    opponent_rating INTEGER,
                    won BOOLEAN,
                    method VARCHAR,
                    score VARCHAR
                );

                CREATE TABLE IF NOT EXISTS mart_season_records (
                    seed VARCHAR,
                    year INTEGER,
                    matches INTEGER,
                    wins INTEGER,
                    losses INTEGER,
                    falls INTEGER,
                    tech_falls INTEGER,
                    majors INTEGER,
                    avg_opponent_rating DOUBLE,
                    best_placement INTEGER,
                    PRIMARY KEY(seed, year)
                );
                """
            )

    def refresh_from_sqlite(self, sqlite_path: Path, seed: str) -> None:
        """Rebuild every mart row for one career from the operational store."""
        self.initialize_schema()
        with sqlite3.connect(sqlite_path) as sconn, self.connect() as dconn:
            week_rows = sconn.execute(
                """
                SELECT result_id, seed, year, week, phase, event_type, wins, losses, placement,
                       energy_change, stress_change, recruiting_change
                FROM week_results
                WHERE seed = ?
                """,
                (seed,),
            ).fetchall()
            match_rows = sconn.execute(
                """
                SELECT match_id, result_id, seed, year, week, event_type, opponent_name, opponent_rating,
                       won, method, score
                FROM match_results
                WHERE seed = ?
                """,
                (seed,),
            ).fetchall()

            for table in ("mart_week_results", "mart_match_results", "mart_season_records"):
                dconn.execute(f"DELETE FROM {table} WHERE seed = ?", [seed])
            self._insert_rows(dconn, "mart_week_results", week_rows)
            self._insert_rows(dconn, "mart_match_results", [(*r[:8], bool(r[8]), *r[9:]) for r in match_rows])
            self._refresh_season_records(dconn, seed)

    def season_records(self, seed: str) -> list[dict[str, Any]]:
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT year, matches, wins, losses, falls, tech_falls, majors, avg_opponent_rating, best_placement
                FROM mart_season_records
                WHERE seed = ?
                ORDER BY year
                """,
                [seed],
            ).fetchall()
        keys = ("year", "matches", "wins", "losses", "falls", "tech_falls", "majors", "avg_opponent_rating", "best_placement")
        return [dict(zip(keys, row)) for row in rows]

    def _insert_rows(self, conn: Any, table: str, rows: list[tuple]) -> None:
        if not rows:
            return
        values_placeholder = ",".join(["?"] * len(rows[0]))
        conn.executemany(f"INSERT INTO {table} VALUES ({values_placeholder})", rows)

    def _refresh_season_records(self, conn: Any, seed: str) -> None:
        conn.execute(
            """
            INSERT INTO mart_season_records
            SELECT m.seed,
                   m.year,
                   COUNT(*) AS matches,
                   SUM(CASE WHEN m.won THEN 1 ELSE 0 END) AS wins,
                   SUM(CASE WHEN m.won THEN 0 ELSE 1 END) AS losses,
                   SUM(CASE WHEN m.won AND m.method = 'fall' THEN 1 ELSE 0 END) AS falls,
                   SUM(CASE WHEN m.won AND m.method = 'tech' THEN 1 ELSE 0 END) AS tech_falls,
                   SUM(CASE WHEN m.won AND m.method = 'major' THEN 1 ELSE 0 END) AS majors,
                   ROUND(AVG(m.opponent_rating), 2) AS avg_opponent_rating,
                   (
                       SELECT MIN(w.placement)
                       FROM mart_week_results w
                       WHERE w.seed = m.seed AND w.year = m.year AND w.placement IS NOT NULL
                   ) AS best_placement
            FROM mart_match_results m
            WHERE m.seed = ?
            GROUP BY m.seed, m.year
            """,
            [seed],
        )
