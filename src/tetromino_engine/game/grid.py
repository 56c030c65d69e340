from __future__ import annotations

import numpy as np


class GameGrid:
    """Fixed-size board of locked cells.

    The grid uses 0 for empty cells and the piece type id (1..7) for locked
    cells. Row 0 is the top of the visible board; coordinates with a negative
    row lie above it and are never stored.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the locked cells."""
        view = self.grid.view()
        view.flags.writeable = False
        return view

    def collides(self, matrix: np.ndarray, x: int, y: int) -> bool:
        ys, xs = np.nonzero(matrix)
        for dy, dx in zip(ys, xs):
            bx = x + int(dx)
            by = y + int(dy)
            if bx < 0 or bx >= self.width or by >= self.height:
                return True
            if by >= 0 and self.grid[by, bx] != 0:
                return True
        return False

    def lock(self, matrix: np.ndarray, x: int, y: int, type_id: int) -> None:
        """Write `type_id` into every on-board cell covered by `matrix`."""
        ys, xs = np.nonzero(matrix)
        for dy, dx in zip(ys, xs):
            bx = x + int(dx)
            by = y + int(dy)
            if 0 <= by < self.height and 0 <= bx < self.width:
                self.grid[by, bx] = type_id

    def clear_completed_lines(self) -> int:
        cleared = 0
        row = self.height - 1
        while row >= 0:
            if np.all(self.grid[row] != 0):
                # Shift everything above down by one; the same index is checked again.
                self.grid[1 : row + 1] = self.grid[0:row].copy()
                self.grid[0] = 0
                cleared += 1
            else:
                row -= 1
        return cleared

    def drop_distance(self, matrix: np.ndarray, x: int, y: int) -> int:
        """Rows the placement can descend before it would collide."""
        rows = 0
        while not self.collides(matrix, x, y + rows + 1):
            rows += 1
            if rows > self.height + matrix.shape[0]:
                break
        return rows

    def get_max_height(self) -> int:
        """Height of the tallest column, counted up from the floor."""
        occupied = np.flatnonzero(self.grid.any(axis=1))
        return self.height - int(occupied[0]) if occupied.size else 0

    def count_holes(self) -> int:
        """Empty cells with at least one filled cell above them in the same column."""
        filled = self.grid != 0
        covered = np.logical_or.accumulate(filled, axis=0)
        return int(np.count_nonzero(covered & ~filled))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
