from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np


class InvalidTypeId(ValueError):
    """Raised for a piece type id outside 1..7."""


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


class RotationSystem(str, Enum):
    SIMPLE = "simple"
    SRS = "srs"


Shape = np.ndarray
Offset = Tuple[int, int]


def _template(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.flags.writeable = False
    return arr


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _template([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
    TetrominoType.J: _template([[1, 0, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.L: _template([[0, 0, 1], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.O: _template([[1, 1], [1, 1]]),
    TetrominoType.S: _template([[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
    TetrominoType.T: _template([[0, 1, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.Z: _template([[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
}

# Offsets are (dx, dy) with y growing downwards.
SIMPLE_KICKS: Tuple[Offset, ...] = (
    (0, 0),
    (-1, 0), (1, 0),
    (-2, 0), (2, 0),
    (0, -1), (0, -2),
    (-1, -1), (1, -1), (-1, 1), (1, 1),
)

# Guideline SRS tables, y flipped to board coordinates.
_JLSTZ_KICKS: Dict[Tuple[int, int], Tuple[Offset, ...]] = {
    (0, 1): ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (1, 0): ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
    (1, 2): ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
    (2, 1): ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (2, 3): ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    (3, 2): ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (3, 0): ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (0, 3): ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
}
_I_KICKS: Dict[Tuple[int, int], Tuple[Offset, ...]] = {
    (0, 1): ((0, 0), (-2, 0), (1, 0), (-2, 1), (1, -2)),
    (1, 0): ((0, 0), (2, 0), (-1, 0), (2, -1), (-1, 2)),
    (1, 2): ((0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1)),
    (2, 1): ((0, 0), (1, 0), (-2, 0), (1, 2), (-2, -1)),
    (2, 3): ((0, 0), (2, 0), (-1, 0), (2, -1), (-1, 2)),
    (3, 2): ((0, 0), (-2, 0), (1, 0), (-2, 1), (1, -2)),
    (3, 0): ((0, 0), (1, 0), (-2, 0), (1, 2), (-2, -1)),
    (0, 3): ((0, 0), (-1, 0), (2, 0), (-1, -2), (2, 1)),
}


def to_type(type_id: int) -> TetrominoType:
    try:
        return TetrominoType(int(type_id))
    except ValueError:
        raise InvalidTypeId(f"piece type id must be in 1..{len(TetrominoType)}, got {type_id!r}") from None


def shape_for(type_id: int) -> Shape:
    """Return the read-only canonical matrix for `type_id`."""
    return BASE_SHAPES[to_type(type_id)]


def rotate_clockwise(matrix: Shape) -> Shape:
    # m'[x][N-1-y] = m[y][x]
    return np.rot90(matrix, 1, axes=(1, 0)).copy()


def rotate_counter_clockwise(matrix: Shape) -> Shape:
    return np.rot90(matrix, 1, axes=(0, 1)).copy()


def kick_offsets(
    kind: TetrominoType,
    from_rotation: int,
    to_rotation: int,
    system: RotationSystem = RotationSystem.SIMPLE,
) -> Tuple[Offset, ...]:
    if system == RotationSystem.SIMPLE:
        return SIMPLE_KICKS
    if kind == TetrominoType.O:
        return ((0, 0),)
    table = _I_KICKS if kind == TetrominoType.I else _JLSTZ_KICKS
    return table.get((from_rotation % 4, to_rotation % 4), ((0, 0),))


@dataclass
class ActivePiece:
    kind: TetrominoType
    matrix: Shape = field(repr=False)
    x: int = 0
    y: int = 0
    rotation: int = 0  # 0..3

    def cells(self) -> List[Tuple[int, int]]:
        """Board coordinates of every filled cell, including those above row 0."""
        ys, xs = np.nonzero(self.matrix)
        return [(self.x + int(dx), self.y + int(dy)) for dy, dx in zip(ys, xs)]


def leading_empty_rows(matrix: Shape) -> int:
    filled = np.flatnonzero(matrix.any(axis=1))
    return int(filled[0]) if filled.size else 0


def spawn_piece(type_id: int, board_width: int) -> ActivePiece:
    """Create a piece centred horizontally with its top filled row on row 0."""
    kind = to_type(type_id)
    matrix = BASE_SHAPES[kind].copy()
    n = matrix.shape[1]
    x = board_width // 2 - n // 2
    y = -leading_empty_rows(matrix)
    return ActivePiece(kind=kind, matrix=matrix, x=x, y=y, rotation=0)


def try_rotate(
    grid,
    piece: ActivePiece,
    clockwise: bool = True,
    system: RotationSystem = RotationSystem.SIMPLE,
) -> Optional[ActivePiece]:
    """Rotate with wall kicks; return the new placement or None if every offset collides."""
    rotated = rotate_clockwise(piece.matrix) if clockwise else rotate_counter_clockwise(piece.matrix)
    new_rotation = (piece.rotation + (1 if clockwise else -1)) % 4
    for dx, dy in kick_offsets(piece.kind, piece.rotation, new_rotation, system):
        x, y = piece.x + dx, piece.y + dy
        if not grid.collides(rotated, x, y):
            return ActivePiece(piece.kind, rotated, x, y, new_rotation)
    return None
