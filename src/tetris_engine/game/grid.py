from __future__ import annotations

import numpy as np

from .pieces import GridPoint, Piece


COLUMNS = 10
ROWS = 20


class GameGrid:
    """Locked-cell matrix of the playfield.

    The grid uses 0 for empty cells and the `TetrominoKind` value of the
    piece that locked a cell otherwise. Row 0 is the top of the visible
    board; negative rows are the hidden spawn region above it and are never
    stored.
    """

    def __init__(self, width: int = COLUMNS, height: int = ROWS) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, point: GridPoint) -> bool:
        x, y = point
        return self.is_inside(x, y) and self.grid[y, x] != 0

    def can_place(self, piece: Piece, origin: GridPoint) -> bool:
        for x, y in piece.cells_at(origin):
            if x < 0 or x >= self.width:
                return False
            if y >= self.height:
                return False
            # Above the board only the column bounds apply
            if y >= 0 and self.grid[y, x] != 0:
                return False
        return True

    def lock(self, piece: Piece, origin: GridPoint) -> bool:
        """Write `piece` into the grid and report whether it overflowed the top."""
        overflow = False
        value = int(piece.kind)
        for x, y in piece.cells_at(origin):
            if y < 0:
                overflow = True
                continue
            if self.is_inside(x, y):
                self.grid[y, x] = value
        return overflow

    def clear_completed_rows(self) -> int:
        full_rows = np.where(np.all(self.grid != 0, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Remove full rows and add empty rows at the top
        survivors = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, survivors))
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
