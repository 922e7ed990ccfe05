"""Food spawning logic."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Sequence

import numpy as np

logger = logging.getLogger(__name__)

Position = tuple[int, int]
Chooser = Callable[[Sequence[Position]], Position]


def free_cells(occupied: Collection[Position], grid_size: int) -> list[Position]:
    """Return every unoccupied cell in row-major order (``y`` outer, ``x`` inner)."""
    mask = np.ones((grid_size, grid_size), dtype=bool)
    for x, y in occupied:
        if 0 <= x < grid_size and 0 <= y < grid_size:
            mask[y, x] = False
    ys, xs = np.nonzero(mask)
    return list(zip(xs.tolist(), ys.tolist(), strict=True))


def first_free_cell(cells: Sequence[Position]) -> Position:
    """Deterministic chooser: always the first free cell."""
    return cells[0]


class FoodSpawner:
    """Picks a free cell for a replacement food item.

    Uses a seeded NumPy RNG for uniform, reproducible placement unless a
    *choose* callable is supplied.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        choose: Chooser | None = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.choose = choose

    def spawn(
        self, occupied: Collection[Position], grid_size: int,
    ) -> Position | None:
        """Return an unoccupied cell, or ``None`` when the grid is full."""
        empty = free_cells(occupied, grid_size)
        if not empty:
            logger.info("No free cell available for food spawning.")
            return None

        if self.choose is not None:
            pos = tuple(self.choose(empty))
        else:
            pos = empty[int(self.rng.integers(len(empty)))]

        if pos in occupied:
            raise ValueError(f"Food chooser returned occupied cell {pos}.")
        return pos
