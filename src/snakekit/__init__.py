"""SnakeKit: build a snake game, preview it live, export it standalone."""

from snakekit.config import BuilderCell, CellKind, GameConfig, default_snake
from snakekit.engine import GameEngine, GameStatus, RunState
from snakekit.food import FoodSpawner, first_free_cell
from snakekit.grid import CellType, Grid
from snakekit.snake import Direction, Snake, accept_direction

__all__ = [
    "BuilderCell",
    "CellKind",
    "CellType",
    "Direction",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "GameStatus",
    "Grid",
    "RunState",
    "Snake",
    "accept_direction",
    "default_snake",
    "first_free_cell",
]
