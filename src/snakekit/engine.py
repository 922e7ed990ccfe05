"""Tick-based simulation engine driven by a GameConfig."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np

from snakekit.config import GameConfig
from snakekit.food import FoodSpawner
from snakekit.snake import Direction, Position, Snake, accept_direction

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    """Lifecycle states of a run."""

    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class RunState:
    """Mutable state of one run, derived from a configuration."""

    snake: Snake
    foods: set[Position]
    score: int = 0
    status: GameStatus = GameStatus.RUNNING
    pending_direction: Direction | None = None
    tick_count: int = 0

    @classmethod
    def from_config(cls, config: GameConfig) -> RunState:
        return cls(
            snake=Snake(config.initial_snake, config.initial_direction),
            foods=set(config.initial_foods),
        )


class GameEngine:
    """Single-snake, tick-based game engine.

    The engine owns the run state for one configuration. Each call to
    :meth:`tick` advances the game by one step while it is running and
    returns a snapshot for renderers.
    """

    def __init__(
        self,
        config: GameConfig,
        spawner: FoodSpawner | None = None,
        seed: int | None = None,
    ) -> None:
        self.config = config
        self.obstacles: frozenset[Position] = frozenset(config.obstacles)
        self.spawner = (
            spawner if spawner is not None
            else FoodSpawner(rng=np.random.default_rng(seed))
        )
        self.state = RunState.from_config(config)

    # --- read-only views -------------------------------------------------

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def snake(self) -> Snake:
        return self.state.snake

    @property
    def foods(self) -> set[Position]:
        return self.state.foods

    @property
    def direction(self) -> Direction:
        """Heading applied on the most recent tick."""
        return self.state.snake.direction

    @property
    def pending_direction(self) -> Direction:
        """Heading the next tick will use."""
        return self.state.pending_direction or self.state.snake.direction

    @property
    def tick_count(self) -> int:
        return self.state.tick_count

    # --- lifecycle -------------------------------------------------------

    def pause(self) -> None:
        if self.state.status is GameStatus.RUNNING:
            self.state.status = GameStatus.PAUSED

    def resume(self) -> None:
        if self.state.status is GameStatus.PAUSED:
            self.state.status = GameStatus.RUNNING

    def reset(self) -> dict:
        """Discard the current run and start a fresh one from the configuration."""
        self.state = RunState.from_config(self.config)
        logger.debug("Run reset.")
        return self.snapshot()

    def set_direction(self, direction: Direction | None) -> bool:
        """Record *direction* for the next tick unless it reverses the snake.

        The latest accepted input between two ticks wins.
        """
        if direction is None:
            return False
        current = self.state.snake.direction
        if accept_direction(current, direction) is not direction:
            return False
        self.state.pending_direction = direction
        return True

    # --- simulation ------------------------------------------------------

    def tick(self) -> dict:
        """Advance the game by one step.

        Returns the snapshot after the step.
        """
        state = self.state
        if state.status is not GameStatus.RUNNING:
            return self.snapshot()

        snake = state.snake
        if state.pending_direction is not None:
            snake.direction = state.pending_direction
            state.pending_direction = None

        nx, ny = snake.next_head()
        state.tick_count += 1

        # --- wall check ---
        size = self.config.grid_size
        if not (0 <= nx < size and 0 <= ny < size):
            self._end_run("wall")
            return self.snapshot()

        # --- self-collision check against the pre-move body ---
        if snake.occupies(nx, ny):
            self._end_run("self")
            return self.snapshot()

        # --- obstacle check ---
        if (nx, ny) in self.obstacles:
            self._end_run("obstacle")
            return self.snapshot()

        # --- move ---
        head = (nx, ny)
        ate = head in state.foods
        snake.advance(head, grow=ate)

        if ate:
            state.foods.discard(head)
            state.score += 1
            occupied = snake.cells() | self.obstacles | state.foods
            spawned = self.spawner.spawn(occupied, size)
            if spawned is not None:
                state.foods.add(spawned)

        return self.snapshot()

    def snapshot(self) -> dict:
        """Return the full, serializable run state."""
        state = self.state
        return {
            "tick": state.tick_count,
            "status": state.status.value,
            "score": state.score,
            "direction": state.snake.direction.name,
            "snake": [list(seg) for seg in state.snake.body],
            "foods": sorted(list(p) for p in state.foods),
            "obstacles": sorted(list(p) for p in self.obstacles),
            "grid_size": self.config.grid_size,
        }

    def _end_run(self, reason: str) -> None:
        """End the run after a collision."""
        self.state.status = GameStatus.GAME_OVER
        logger.info(
            "Snake hit %s at tick %d with score %d.",
            reason, self.state.tick_count, self.state.score,
        )
