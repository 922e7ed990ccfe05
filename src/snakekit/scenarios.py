"""Shared trajectory fixtures every implementation must reproduce.

Food respawns at the first free cell in row-major order during replays.
"""

from __future__ import annotations

from snakekit.config import GameConfig, default_snake
from snakekit.equivalence import Scenario
from snakekit.snake import Direction

RUNNING = "running"
GAME_OVER = "game_over"


def _r(status: str, score: int, head: tuple[int, int], length: int) -> dict:
    return {"status": status, "score": score, "head": list(head), "length": length}


SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        name="eat_straight_ahead",
        config=GameConfig(
            grid_size=20,
            initial_snake=default_snake(20),
            initial_foods=((15, 10),),
        ),
        steps=((),) * 6,
        expected=(
            _r(RUNNING, 0, (11, 10), 3),
            _r(RUNNING, 0, (12, 10), 3),
            _r(RUNNING, 0, (13, 10), 3),
            _r(RUNNING, 0, (14, 10), 3),
            _r(RUNNING, 1, (15, 10), 4),
            _r(RUNNING, 1, (16, 10), 4),
        ),
    ),
    Scenario(
        name="wall_right",
        config=GameConfig(grid_size=20, initial_snake=((18, 10), (17, 10))),
        steps=((),) * 3,
        expected=(
            _r(RUNNING, 0, (19, 10), 2),
            _r(GAME_OVER, 0, (19, 10), 2),
            _r(GAME_OVER, 0, (19, 10), 2),
        ),
    ),
    Scenario(
        name="obstacle_ahead",
        config=GameConfig(
            grid_size=10,
            initial_snake=((2, 2), (1, 2)),
            obstacles=((5, 2),),
        ),
        steps=((),) * 4,
        expected=(
            _r(RUNNING, 0, (3, 2), 2),
            _r(RUNNING, 0, (4, 2), 2),
            _r(GAME_OVER, 0, (4, 2), 2),
            _r(GAME_OVER, 0, (4, 2), 2),
        ),
    ),
    Scenario(
        name="reversal_filtered_last_input_wins",
        config=GameConfig(grid_size=10, initial_snake=((5, 5), (4, 5), (3, 5))),
        steps=(
            ("LEFT",),
            ("UP", "LEFT"),
            ("DOWN",),
            ("LEFT", "RIGHT"),
            ("NORTH",),
        ),
        expected=(
            _r(RUNNING, 0, (6, 5), 3),
            _r(RUNNING, 0, (6, 4), 3),
            _r(RUNNING, 0, (6, 3), 3),
            _r(RUNNING, 0, (7, 3), 3),
            _r(RUNNING, 0, (8, 3), 3),
        ),
    ),
    Scenario(
        name="tail_chase_collides",
        config=GameConfig(
            grid_size=10,
            initial_snake=((5, 5), (4, 5), (4, 6), (5, 6)),
            initial_direction=Direction.RIGHT,
        ),
        steps=(("DOWN",), ()),
        expected=(
            _r(GAME_OVER, 0, (5, 5), 4),
            _r(GAME_OVER, 0, (5, 5), 4),
        ),
    ),
    Scenario(
        name="grow_then_bite",
        config=GameConfig(
            grid_size=8,
            initial_snake=((2, 2), (1, 2)),
            obstacles=((7, 7),),
            initial_foods=((3, 2), (4, 2)),
        ),
        steps=((), (), ("DOWN",), ("LEFT",), ("UP",)),
        expected=(
            _r(RUNNING, 1, (3, 2), 3),
            _r(RUNNING, 2, (4, 2), 4),
            _r(RUNNING, 2, (4, 3), 4),
            _r(RUNNING, 2, (3, 3), 4),
            _r(GAME_OVER, 2, (3, 3), 4),
        ),
    ),
    Scenario(
        name="first_free_respawns",
        config=GameConfig(
            grid_size=4,
            initial_snake=((1, 0), (0, 0)),
            initial_foods=((2, 0),),
        ),
        steps=(
            (), (), ("DOWN",), ("LEFT",), (), (), ("UP",), ("RIGHT",), (), (),
        ),
        expected=(
            _r(RUNNING, 1, (2, 0), 3),
            _r(RUNNING, 2, (3, 0), 4),
            _r(RUNNING, 2, (3, 1), 4),
            _r(RUNNING, 2, (2, 1), 4),
            _r(RUNNING, 2, (1, 1), 4),
            _r(RUNNING, 3, (0, 1), 5),
            _r(RUNNING, 4, (0, 0), 6),
            _r(RUNNING, 5, (1, 0), 7),
            _r(RUNNING, 6, (2, 0), 8),
            _r(GAME_OVER, 6, (2, 0), 8),
        ),
    ),
)
