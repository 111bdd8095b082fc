from .analytics import CareerAnalyticsStore
from .etl import run_career_etl
from .history import CareerHistoryStore
from .migrations import MigrationRunner
from .save_store import SaveSlotInfo, SaveSlotStore
from .snapshot import (
    SNAPSHOT_VERSION,
    STATE_MIGRATIONS,
    LoadReport,
    dumps,
    from_snapshot,
    loads,
    snapshot_digest,
    to_snapshot,
)

__all__ = [
    "CareerAnalyticsStore",
    "CareerHistoryStore",
    "LoadReport",
    "MigrationRunner",
    "SNAPSHOT_VERSION",
    "STATE_MIGRATIONS",
    "SaveSlotInfo",
    "SaveSlotStore",
    "dumps",
    "from_snapshot",
    "loads",
    "run_career_etl",
    "snapshot_digest",
    "to_snapshot",
]
