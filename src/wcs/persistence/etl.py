from __future__ import annotations

from pathlib import Path

from wcs.persistence.analytics import CareerAnalyticsStore


def run_career_etl(sqlite_path: Path, duckdb_path: Path, seed: str) -> CareerAnalyticsStore:
    store = CareerAnalyticsStore(duckdb_path)
    store.refresh_from_sqlite(sqlite_path, seed=seed)
    return store
