from __future__ import annotations

from pathlib import Path
from typing import Any

import duckdb

EXPORTED_MARTS: dict[str, str] = {
    "mart_week_results": "week_results",
    "mart_match_results": "match_results",
    "mart_season_records": "season_records",
}


def _sql_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class ExportService:
    def __init__(self, analytics_db: Path) -> None:
        self.analytics_db = analytics_db

    def export_career(self, seed: str, output_dir: Path) -> list[Path]:
        output_dir.mkdir(parents=True, exist_ok=True)
        outputs: list[Path] = []
        with duckdb.connect(str(self.analytics_db)) as conn:
            for table, stem in EXPORTED_MARTS.items():
                outputs.extend(self._export_table(conn, table, seed, output_dir / stem))
        return outputs

    def _export_table(self, conn: Any, table: str, seed: str, stem: Path) -> list[Path]:
        csv_path = stem.with_suffix(".csv")
        parquet_path = stem.with_suffix(".parquet")
        # COPY does not take bound parameters
        rows = f"SELECT * FROM {table} WHERE seed = {_sql_literal(seed)}"
        conn.execute(f"COPY ({rows}) TO '{csv_path.as_posix()}' (HEADER, DELIMITER ',')")
        conn.execute(f"COPY ({rows}) TO '{parquet_path.as_posix()}' (FORMAT PARQUET)")
        return [csv_path, parquet_path]
