from __future__ import annotations

import sqlite3

MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            applied_at TEXT DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS save_slots (
            slot_id TEXT PRIMARY KEY,
            seed TEXT NOT NULL,
            year INTEGER NOT NULL,
            week INTEGER NOT NULL,
            snapshot_version INTEGER NOT NULL,
            snapshot_json TEXT NOT NULL,
            saved_at TEXT NOT NULL
        );
        """,
    ),
    (
        2,
        """
        ALTER TABLE save_slots ADD COLUMN competitor_name TEXT NOT NULL DEFAULT '';
        ALTER TABLE save_slots ADD COLUMN league TEXT NOT NULL DEFAULT '';
        """,
    ),
    (
        3,
        """
        CREATE TABLE IF NOT EXISTS week_results (
            result_id TEXT PRIMARY KEY,
            seed TEXT NOT NULL,
            year INTEGER NOT NULL,
            week INTEGER NOT NULL,
            phase TEXT NOT NULL,
            event_type TEXT NOT NULL,
            wins INTEGER NOT NULL,
            losses INTEGER NOT NULL,
            placement INTEGER,
            energy_change INTEGER NOT NULL,
            stress_change INTEGER NOT NULL,
            recruiting_change INTEGER NOT NULL
        );

        CREATE TABLE IF NOT EXISTS match_results (
            match_id TEXT PRIMARY KEY,
            result_id TEXT NOT NULL,
            seed TEXT NOT NULL,
            year INTEGER NOT NULL,
            week INTEGER NOT NULL,
            event_type TEXT NOT NULL,
            opponent_name TEXT NOT NULL,
            opponent_rating INTEGER NOT NULL,
            won INTEGER NOT NULL,
            method TEXT NOT NULL,
            score TEXT NOT NULL,
            FOREIGN KEY (result_id) REFERENCES week_results(result_id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_match_results_seed_year ON match_results(seed, year);
        """,
    ),
]


class MigrationRunner:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def apply(self) -> None:
        self.conn.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT DEFAULT CURRENT_TIMESTAMP)")
        applied = {
            row[0]
            for row in self.conn.execute("SELECT version FROM schema_migrations").fetchall()
        }
        for version, sql in MIGRATIONS:
            if version in applied:
                continue
            self.conn.executescript(sql)
            self.conn.execute("INSERT INTO schema_migrations(version) VALUES (?)", (version,))
        self.conn.commit()

    def applied_versions(self) -> list[int]:
        return [row[0] for row in self.conn.execute("SELECT version FROM schema_migrations ORDER BY version").fetchall()]
