from .errors import EngineIntegrityError, InvalidArgumentError, build_forensic_artifact, persist_forensic_artifact
from .events import EventBus, career_event
from .ids import make_id, now_utc, stable_id
from .randomness import DeterministicRandomSource, seeded_random
from .settings import EngineSettings, default_engine_settings, validate_settings_config

__all__ = [
    "DeterministicRandomSource",
    "EngineIntegrityError",
    "EngineSettings",
    "EventBus",
    "InvalidArgumentError",
    "build_forensic_artifact",
    "career_event",
    "default_engine_settings",
    "make_id",
    "now_utc",
    "persist_forensic_artifact",
    "seeded_random",
    "stable_id",
    "validate_settings_config",
]
