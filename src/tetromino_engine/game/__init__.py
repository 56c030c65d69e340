"""Game module for the tetromino engine.

Exports the simulation core and supporting classes:
- GameGrid: Board storage, collision queries and line clearing
- ActivePiece / TetrominoType: Falling piece and the piece catalog
- SevenBag: Bag randomizer
- ScoringRules / SpeedCurve: Score, level and gravity policy
- TetrominoGame: Session state machine driven by intents and ticks
- GravityClock: Host-side timer producing gravity ticks
"""

from .grid import GameGrid
from .pieces import (
    ActivePiece,
    InvalidTypeId,
    RotationSystem,
    TetrominoType,
    rotate_clockwise,
    rotate_counter_clockwise,
    shape_for,
    spawn_piece,
    try_rotate,
)
from .randomizer import SevenBag
from .rules import ScoringRules, SpeedCurve, level_for_lines
from .events import EventBus, GameEvent
from .core import (
    Action,
    ActivePieceView,
    ConfigurationError,
    GameConfig,
    GameSnapshot,
    Phase,
    TetrominoGame,
)
from .clock import GravityClock

__all__ = [
    "GameGrid",
    "ActivePiece",
    "InvalidTypeId",
    "RotationSystem",
    "TetrominoType",
    "rotate_clockwise",
    "rotate_counter_clockwise",
    "shape_for",
    "spawn_piece",
    "try_rotate",
    "SevenBag",
    "ScoringRules",
    "SpeedCurve",
    "level_for_lines",
    "EventBus",
    "GameEvent",
    "Action",
    "ActivePieceView",
    "ConfigurationError",
    "GameConfig",
    "GameSnapshot",
    "Phase",
    "TetrominoGame",
    "GravityClock",
]
