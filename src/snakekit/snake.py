"""Snake representation, headings and the anti-reversal direction filter."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable

Position = tuple[int, int]


class Direction(enum.Enum):
    """Cardinal headings with (x_delta, y_delta) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, name: str) -> Direction | None:
        """Look up a heading by case-insensitive name; unknown names give ``None``."""
        return cls.__members__.get(name.strip().upper())


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def accept_direction(current: Direction, requested: Direction) -> Direction:
    """Return *requested* unless it reverses *current*, else keep *current*."""
    if _OPPOSITES[current] is requested:
        return current
    return requested


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(
        self,
        cells: Iterable[Position],
        direction: Direction = Direction.RIGHT,
    ) -> None:
        self.body: deque[Position] = deque(tuple(c) for c in cells)
        if not self.body:
            raise ValueError("Snake length must be at least 1.")
        self.direction = direction

    @property
    def head(self) -> Position:
        """Return the head coordinate."""
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def next_head(self, direction: Direction | None = None) -> Position:
        """Compute the next head position without moving."""
        dx, dy = (direction or self.direction).value
        x, y = self.head
        return x + dx, y + dy

    def advance(self, new_head: Position, grow: bool = False) -> Position | None:
        """Prepend *new_head*.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(new_head)
        if grow:
            return None
        return self.body.pop()

    def occupies(self, x: int, y: int) -> bool:
        """Check whether the snake occupies a given cell."""
        return (x, y) in self.body

    def cells(self) -> set[Position]:
        return set(self.body)
