"""Immutable game configuration produced by the builder."""

from __future__ import annotations

import enum
import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from snakekit.snake import Direction

logger = logging.getLogger(__name__)

Position = tuple[int, int]

DEFAULT_GRID_SIZE = 20
DEFAULT_TICKS_PER_SECOND = 8.0


class CellKind(str, enum.Enum):
    """Kinds of cell the builder can place."""

    FOOD = "food"
    OBSTACLE = "obstacle"


@dataclass(frozen=True)
class BuilderCell:
    """One cell placed in the builder."""

    x: int
    y: int
    kind: CellKind

    @classmethod
    def from_dict(cls, raw: Mapping) -> BuilderCell:
        try:
            kind = CellKind(raw["kind"])
        except ValueError as exc:
            raise ValueError(f"Unknown cell kind {raw['kind']!r}.") from exc
        return cls(x=int(raw["x"]), y=int(raw["y"]), kind=kind)


def default_snake(
    grid_size: int = DEFAULT_GRID_SIZE,
    direction: Direction = Direction.RIGHT,
    length: int = 3,
) -> tuple[Position, ...]:
    """Return a snake whose head sits at the grid centre, trailing behind *direction*."""
    dx, dy = direction.value
    cx = cy = grid_size // 2
    return tuple((cx - dx * i, cy - dy * i) for i in range(length))


def _coerce_direction(value: Direction | str) -> Direction:
    if isinstance(value, Direction):
        return value
    parsed = Direction.parse(str(value))
    if parsed is None:
        raise ValueError(f"Unknown direction {value!r}.")
    return parsed


def _positions(cells: Iterable) -> tuple[Position, ...]:
    return tuple((int(c[0]), int(c[1])) for c in cells)


@dataclass(frozen=True)
class GameConfig:
    """Everything needed to start a run.

    The snake is listed head first. Validation happens at construction;
    an invalid layout is rejected, never repaired.
    """

    grid_size: int = DEFAULT_GRID_SIZE
    initial_snake: tuple[Position, ...] = field(default_factory=default_snake)
    initial_direction: Direction = Direction.RIGHT
    obstacles: tuple[Position, ...] = ()
    initial_foods: tuple[Position, ...] = ()
    ticks_per_second: float = DEFAULT_TICKS_PER_SECOND

    def __post_init__(self) -> None:
        # Normalise list inputs so the dataclass stays hashable and immutable.
        object.__setattr__(self, "initial_snake", _positions(self.initial_snake))
        object.__setattr__(self, "obstacles", _positions(self.obstacles))
        object.__setattr__(self, "initial_foods", _positions(self.initial_foods))
        object.__setattr__(
            self, "initial_direction", _coerce_direction(self.initial_direction),
        )

        if self.grid_size < 4:
            raise ValueError("grid_size must be at least 4.")
        if not math.isfinite(self.ticks_per_second) or self.ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be a positive number.")

        self._validate_snake()
        self._validate_cells("obstacle", self.obstacles)
        self._validate_cells("food", self.initial_foods)

        body = set(self.initial_snake)
        blocked = set(self.obstacles)
        for pos in self.obstacles:
            if pos in body:
                raise ValueError(f"Obstacle {pos} overlaps the initial snake.")
        for pos in self.initial_foods:
            if pos in body:
                raise ValueError(f"Food {pos} overlaps the initial snake.")
            if pos in blocked:
                raise ValueError(f"Food {pos} overlaps an obstacle.")

    def _in_bounds(self, pos: Position) -> bool:
        return 0 <= pos[0] < self.grid_size and 0 <= pos[1] < self.grid_size

    def _validate_snake(self) -> None:
        snake = self.initial_snake
        if not snake:
            raise ValueError("initial_snake must contain at least one cell.")
        if len(set(snake)) != len(snake):
            raise ValueError("initial_snake overlaps itself.")
        for pos in snake:
            if not self._in_bounds(pos):
                raise ValueError(f"Snake cell {pos} lies outside the grid.")
        for (ax, ay), (bx, by) in zip(snake, snake[1:]):
            if abs(ax - bx) + abs(ay - by) != 1:
                raise ValueError(
                    f"Snake cells {(ax, ay)} and {(bx, by)} are not adjacent."
                )
        if len(snake) > 1:
            dx, dy = self.initial_direction.value
            hx, hy = snake[0]
            if (hx + dx, hy + dy) == snake[1]:
                raise ValueError(
                    "initial_direction points into the snake's own body."
                )

    def _validate_cells(self, label: str, cells: tuple[Position, ...]) -> None:
        if len(set(cells)) != len(cells):
            raise ValueError(f"Duplicate {label} cells.")
        for pos in cells:
            if not self._in_bounds(pos):
                raise ValueError(f"{label.capitalize()} {pos} lies outside the grid.")

    @classmethod
    def from_builder(
        cls,
        cells: Iterable[BuilderCell | Mapping],
        grid_size: int = DEFAULT_GRID_SIZE,
        initial_snake: Iterable[Position] | None = None,
        initial_direction: Direction | str = Direction.RIGHT,
        ticks_per_second: float = DEFAULT_TICKS_PER_SECOND,
    ) -> GameConfig:
        """Build a configuration from builder ``{x, y, kind}`` placements."""
        initial_direction = _coerce_direction(initial_direction)
        foods: list[Position] = []
        obstacles: list[Position] = []
        seen: set[Position] = set()
        for raw in cells:
            cell = raw if isinstance(raw, BuilderCell) else BuilderCell.from_dict(raw)
            pos = (cell.x, cell.y)
            if pos in seen:
                raise ValueError(f"Duplicate builder cell at {pos}.")
            seen.add(pos)
            (foods if cell.kind is CellKind.FOOD else obstacles).append(pos)

        if initial_snake is None:
            initial_snake = default_snake(grid_size, initial_direction)
        return cls(
            grid_size=grid_size,
            initial_snake=tuple(initial_snake),
            initial_direction=initial_direction,
            obstacles=tuple(obstacles),
            initial_foods=tuple(foods),
            ticks_per_second=ticks_per_second,
        )

    def to_dict(self) -> dict:
        """Serialize to a plain, JSON-friendly dict."""
        return {
            "grid_size": self.grid_size,
            "initial_snake": [list(p) for p in self.initial_snake],
            "initial_direction": self.initial_direction.name,
            "obstacles": [list(p) for p in self.obstacles],
            "initial_foods": [list(p) for p in self.initial_foods],
            "ticks_per_second": self.ticks_per_second,
        }

    @classmethod
    def from_dict(cls, raw: Mapping) -> GameConfig:
        return cls(**dict(raw))

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
