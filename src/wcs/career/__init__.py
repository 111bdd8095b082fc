from .bootstrap import StartOptions, create_game_state, start_options_from_mapping
from .engine import CareerStateMachine
from .state import GameState

__all__ = [
    "CareerStateMachine",
    "GameState",
    "StartOptions",
    "create_game_state",
    "start_options_from_mapping",
]
