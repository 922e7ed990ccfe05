"""Grid representation for rendering and occupancy queries."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

Position = tuple[int, int]


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2
    OBSTACLE = 3


_GLYPHS: dict[CellType, str] = {
    CellType.EMPTY: ".",
    CellType.SNAKE: "o",
    CellType.FOOD: "*",
    CellType.OBSTACLE: "#",
}


class Grid:
    """NumPy-backed square board.

    Positions are ``(x, y)`` pairs; the underlying array is indexed
    ``[y, x]`` so rows print top to bottom.
    """

    def __init__(self, size: int = 20) -> None:
        if size < 4:
            raise ValueError("Grid size must be at least 4×4.")
        self.size = size
        self.cells = np.zeros((size, size), dtype=np.int8)
        self._head: Position | None = None

    def paint(self, positions: Iterable[Position], cell_type: CellType) -> None:
        """Set every position in *positions* to *cell_type*."""
        for x, y in positions:
            self.cells[y, x] = cell_type

    @classmethod
    def from_snapshot(cls, snapshot: dict) -> Grid:
        """Rasterise an engine snapshot onto a fresh grid."""
        grid = cls(snapshot["grid_size"])
        grid.paint((tuple(p) for p in snapshot["obstacles"]), CellType.OBSTACLE)
        grid.paint((tuple(p) for p in snapshot["foods"]), CellType.FOOD)
        body = [tuple(p) for p in snapshot["snake"]]
        grid.paint(body, CellType.SNAKE)
        grid._head = body[0] if body else None
        return grid

    def render_text(self) -> str:
        """Return a plain-text drawing of the board, head marked with ``@``."""
        rows: list[str] = []
        for y in range(self.size):
            row = []
            for x in range(self.size):
                if (x, y) == self._head:
                    row.append("@")
                else:
                    row.append(_GLYPHS[CellType(self.cells[y, x])])
            rows.append("".join(row))
        return "\n".join(rows)
