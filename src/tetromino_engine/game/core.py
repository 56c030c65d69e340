from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass, fields
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

import numpy as np

from .events import EventBus, GameEvent
from .grid import GameGrid
from .pieces import ActivePiece, RotationSystem, spawn_piece, to_type, try_rotate
from .randomizer import SevenBag
from .rules import ScoringRules, SpeedCurve, level_for_lines

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Invalid game configuration; the session is not started."""


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


@dataclass(frozen=True)
class GameConfig:
    board_width: int = 10
    board_height: int = 20
    lines_per_level: int = 4
    base_speed_ms: float = 1000
    speed_multiplier: float = 1.2
    min_speed_ms: float = 50
    random_seed: Optional[int] = None
    rotation_system: str = RotationSystem.SIMPLE.value

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "GameConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"unknown configuration keys: {', '.join(unknown)}")
        config = cls(**dict(values))
        config.validate()
        return config

    def validate(self) -> None:
        for name in ("board_width", "board_height", "lines_per_level"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        for name in ("base_speed_ms", "speed_multiplier", "min_speed_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not (value > 0 and math.isfinite(value)):
                raise ConfigurationError(f"{name} must be positive and finite, got {value!r}")
        try:
            RotationSystem(self.rotation_system)
        except ValueError:
            raise ConfigurationError(f"unknown rotation_system {self.rotation_system!r}") from None

    def speed_curve(self) -> SpeedCurve:
        return SpeedCurve(self.base_speed_ms, self.speed_multiplier, self.min_speed_ms)


class Randomizer(Protocol):
    def next(self) -> int: ...

    def refill(self) -> None: ...


@dataclass(frozen=True)
class ActivePieceView:
    type_id: int
    matrix: np.ndarray
    x: int
    y: int
    rotation: int


@dataclass(frozen=True)
class GameSnapshot:
    board: np.ndarray
    active: Optional[ActivePieceView]
    next_type: Optional[int]
    score: int
    lines_cleared: int
    level: int
    phase: Phase
    tick_interval_ms: int
    ghost_y: Optional[int]


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = arr.copy()
    out.flags.writeable = False
    return out


class TetrominoGame:
    """Owns one game session and applies intents and gravity ticks to it.

    Intents issued outside their valid phase are ignored and report failure;
    only configuration and programming errors raise.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        randomizer: Optional[Randomizer] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.config.validate()
        self.rules = rules or ScoringRules()
        self.events = EventBus()
        self._own_randomizer = randomizer is None
        self.randomizer: Randomizer = randomizer or SevenBag(seed=self.config.random_seed)
        self.grid = GameGrid(self.config.board_width, self.config.board_height)
        self.speed = self.config.speed_curve()
        self.phase = Phase.IDLE
        self.score = 0
        self.lines_cleared = 0
        self.pieces_locked = 0
        self.level = 1
        self.current_piece: Optional[ActivePiece] = None
        self.next_type: Optional[int] = None
        self.session_id = 0

    # ---------- Session ----------
    def start_game(self, config: Optional[GameConfig] = None) -> None:
        if config is not None:
            try:
                config.validate()
            except ConfigurationError:
                self._abandon_session()
                raise
            if self._own_randomizer and config.random_seed != self.config.random_seed:
                self.randomizer = SevenBag(seed=config.random_seed)
            self.config = config
            self.speed = config.speed_curve()
            if (config.board_width, config.board_height) != (self.grid.width, self.grid.height):
                self.grid = GameGrid(config.board_width, config.board_height)

        self.grid.reset()
        self.score = 0
        self.lines_cleared = 0
        self.pieces_locked = 0
        self.level = 1
        self.session_id += 1
        self.randomizer.refill()
        self.current_piece = spawn_piece(self._draw_type(), self.grid.width)
        self.next_type = self._draw_type()
        self.phase = Phase.RUNNING
        logger.debug("session %d started: %dx%d board", self.session_id, self.grid.width, self.grid.height)
        if self._spawn_blocked():
            self._end_game()

    def _abandon_session(self) -> None:
        if self.phase in (Phase.RUNNING, Phase.PAUSED):
            logger.debug("session %d abandoned after configuration error", self.session_id)
            self.phase = Phase.IDLE
            self.current_piece = None
            self.next_type = None

    def _draw_type(self) -> int:
        return int(to_type(self.randomizer.next()))

    def _spawn_blocked(self) -> bool:
        piece = self.current_piece
        assert piece is not None
        return self.grid.collides(piece.matrix, piece.x, piece.y)

    def _end_game(self) -> None:
        self.phase = Phase.GAME_OVER
        logger.debug("session %d over with score %d", self.session_id, self.score)
        self.events.emit(GameEvent.GAME_OVER, final_score=self.score)

    @property
    def running(self) -> bool:
        return self.phase == Phase.RUNNING and self.current_piece is not None

    @property
    def game_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    @property
    def tick_interval_ms(self) -> int:
        return self.speed.interval_ms(self.level)

    # ---------- Intents ----------
    def move_horizontal(self, direction: int) -> bool:
        if direction not in (-1, 1):
            raise ValueError(f"direction must be -1 or +1, got {direction!r}")
        if not self.running:
            return False
        piece = self.current_piece
        if self.grid.collides(piece.matrix, piece.x + direction, piece.y):
            return False
        piece.x += direction
        return True

    def move_left(self) -> bool:
        return self.move_horizontal(-1)

    def move_right(self) -> bool:
        return self.move_horizontal(1)

    def rotate(self, clockwise: bool = True) -> bool:
        if not self.running:
            return False
        rotated = try_rotate(
            self.grid, self.current_piece, clockwise, RotationSystem(self.config.rotation_system)
        )
        if rotated is None:
            return False
        self.current_piece = rotated
        return True

    def soft_drop(self) -> bool:
        """Move down one row, or lock the piece if it is resting. True if it moved."""
        if not self.running:
            return False
        piece = self.current_piece
        if not self.grid.collides(piece.matrix, piece.x, piece.y + 1):
            piece.y += 1
            return True
        self._lock_piece()
        return False

    def tick(self) -> bool:
        """One gravity step."""
        return self.soft_drop()

    def hard_drop(self) -> int:
        if not self.running:
            return 0
        piece = self.current_piece
        rows = self.grid.drop_distance(piece.matrix, piece.x, piece.y)
        piece.y += rows
        self.score += self.rules.hard_drop_bonus(rows)
        self._lock_piece()
        return rows

    def toggle_pause(self) -> bool:
        if self.phase == Phase.RUNNING:
            self.phase = Phase.PAUSED
        elif self.phase == Phase.PAUSED:
            self.phase = Phase.RUNNING
        else:
            return False
        logger.debug("session %d %s", self.session_id, self.phase.value)
        return True

    # ---------- Lock sequence ----------
    def _lock_piece(self) -> None:
        piece = self.current_piece
        type_id = int(piece.kind)
        self.grid.lock(piece.matrix, piece.x, piece.y, type_id)
        self.pieces_locked += 1
        self.events.emit(GameEvent.PIECE_LOCKED, type_id=type_id)
        lines = self.grid.clear_completed_lines()
        if lines:
            self._apply_line_clear(lines)
        self.current_piece = spawn_piece(self.next_type, self.grid.width)
        self.next_type = self._draw_type()
        if self._spawn_blocked():
            self._end_game()

    def _apply_line_clear(self, lines: int) -> None:
        self.score += self.rules.score_for_lines(lines, self.level)
        self.lines_cleared += lines
        self.events.emit(GameEvent.LINES_CLEARED, count=lines)
        new_level = level_for_lines(self.lines_cleared, self.config.lines_per_level)
        if new_level > self.level:
            self.level = new_level
            logger.debug("level %d, gravity every %d ms", self.level, self.tick_interval_ms)
            self.events.emit(GameEvent.LEVEL_CHANGED, level=self.level, tick_interval_ms=self.tick_interval_ms)

    # ---------- Dispatch ----------
    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, Dict[str, Any]]:
        score_before = self.score
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE_CW:
            self.rotate(clockwise=True)
        elif action == Action.ROTATE_CCW:
            self.rotate(clockwise=False)
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass

        info = {
            "score": self.score,
            "lines_cleared": self.lines_cleared,
            "pieces_locked": self.pieces_locked,
            "level": self.level,
            "phase": self.phase.value,
        }
        return self.get_state(), self.score - score_before, self.game_over, info

    # ---------- Queries ----------
    def ghost_y(self) -> Optional[int]:
        piece = self.current_piece
        if piece is None or self.game_over:
            return None
        return piece.y + self.grid.drop_distance(piece.matrix, piece.x, piece.y)

    def snapshot(self) -> GameSnapshot:
        piece = self.current_piece
        active = None
        if piece is not None:
            active = ActivePieceView(int(piece.kind), _frozen(piece.matrix), piece.x, piece.y, piece.rotation)
        return GameSnapshot(
            board=_frozen(self.grid.grid),
            active=active,
            next_type=self.next_type,
            score=self.score,
            lines_cleared=self.lines_cleared,
            level=self.level,
            phase=self.phase,
            tick_interval_ms=self.tick_interval_ms,
            ghost_y=self.ghost_y(),
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        piece = self.current_piece
        if piece is not None and not self.game_over:
            for x, y in piece.cells():
                if 0 <= y < self.grid.height and 0 <= x < self.grid.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(piece.kind)
        return state
