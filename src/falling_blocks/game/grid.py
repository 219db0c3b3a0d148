from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from .errors import PieceDoesNotFit
from .pieces import CellColor


Coordinate = Tuple[int, int]


@dataclass
class PlacementResult:
    rows_cleared: int
    cells_above_top: int


class GameGrid:
    """Playfield of locked cells.

    Cells hold ``CellColor`` values, 0 meaning empty. Row 0 is the top row.
    Coordinates are ``(x, y)`` while the array is indexed ``[y, x]``.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = self.empty_board()

    def empty_board(self) -> np.ndarray:
        return np.zeros((self.height, self.width), dtype=np.int8)

    def fits(self, cells: Iterable[Coordinate]) -> bool:
        # Cells above the top row only have to respect the side walls.
        for x, y in cells:
            if x < 0 or x >= self.width or y >= self.height:
                return False
            if y >= 0 and self.grid[y, x] != CellColor.EMPTY:
                return False
        return True

    def lock(self, cells: Iterable[Coordinate], color: CellColor) -> PlacementResult:
        """Write ``cells`` into the playfield, then clear full rows.

        Cells above the top row are not written; how many were dropped is
        reported back so callers can decide whether that ends the game.
        """
        cells = list(cells)
        if not self.fits(cells):
            raise PieceDoesNotFit(f"cannot lock {color.name} piece at {cells}")
        above_top = 0
        for x, y in cells:
            if y >= 0:
                self.grid[y, x] = int(color)
            else:
                above_top += 1
        rows = self.clear_full_rows()
        return PlacementResult(rows_cleared=rows, cells_above_top=above_top)

    def full_rows(self) -> np.ndarray:
        return np.where(np.all(self.grid != CellColor.EMPTY, axis=1))[0]

    def clear_full_rows(self) -> int:
        full = set(self.full_rows().tolist())
        if not full:
            return 0
        # Rebuild bottom-up into a fresh board, skipping full rows.
        new_grid = self.empty_board()
        new_row = self.height - 1
        for old_row in range(self.height - 1, -1, -1):
            if old_row not in full:
                new_grid[new_row] = self.grid[old_row]
                new_row -= 1
        self.grid = new_grid
        return len(full)

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
