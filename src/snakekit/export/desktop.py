"""Standalone desktop artifact: a pygame script with its own engine."""

from __future__ import annotations

import json
import logging
import types
from string import Template

from snakekit.config import GameConfig

logger = logging.getLogger(__name__)

CELL_PX = 24

_SCRIPT = Template('''\
#!/usr/bin/env python3
"""Standalone snake game exported from SnakeKit.

Requires pygame. Arrow keys or WASD steer, P or Space pauses,
R restarts and Esc quits.
"""

import random
import sys

TITLE = $title

CONFIG = $config

CELL = $cell

COLORS = {
    "background": (10, 10, 10),
    "grid": (31, 31, 31),
    "head": (110, 231, 183),
    "body": (74, 222, 128),
    "food": (248, 113, 113),
    "obstacle": (156, 163, 175),
    "text": (255, 255, 255),
}

DELTAS = {"UP": (0, -1), "DOWN": (0, 1), "LEFT": (-1, 0), "RIGHT": (1, 0)}
OPPOSITE = {"UP": "DOWN", "DOWN": "UP", "LEFT": "RIGHT", "RIGHT": "LEFT"}


def accept_direction(current, requested):
    if OPPOSITE[current] == requested:
        return current
    return requested


def free_cells(occupied, grid_size):
    # Row-major: y outer, x inner.
    return [
        (x, y)
        for y in range(grid_size)
        for x in range(grid_size)
        if (x, y) not in occupied
    ]


def random_cell(cells):
    return random.choice(cells)


def first_free_cell(cells):
    return cells[0]


class SnakeGame:
    """Game rules, independent of pygame."""

    def __init__(self, config=CONFIG, choose=None):
        self.config = config
        self.grid_size = config["grid_size"]
        self.obstacles = {tuple(p) for p in config["obstacles"]}
        self.choose = choose or random_cell
        self.reset()

    def reset(self):
        self.snake = [tuple(p) for p in self.config["initial_snake"]]
        self.direction = self.config["initial_direction"]
        self.pending = None
        self.foods = {tuple(p) for p in self.config["initial_foods"]}
        self.score = 0
        self.status = "running"
        self.ticks = 0

    def set_direction(self, name):
        requested = str(name).strip().upper()
        if requested not in DELTAS:
            return False
        if accept_direction(self.direction, requested) != requested:
            return False
        self.pending = requested
        return True

    def pause(self):
        if self.status == "running":
            self.status = "paused"

    def resume(self):
        if self.status == "paused":
            self.status = "running"

    def tick(self):
        if self.status != "running":
            return
        if self.pending is not None:
            self.direction = self.pending
            self.pending = None
        dx, dy = DELTAS[self.direction]
        hx, hy = self.snake[0]
        head = (hx + dx, hy + dy)
        self.ticks += 1

        if not (0 <= head[0] < self.grid_size and 0 <= head[1] < self.grid_size):
            self.status = "game_over"
            return
        # Checked against the body before it moves, tail included.
        if head in self.snake:
            self.status = "game_over"
            return
        if head in self.obstacles:
            self.status = "game_over"
            return

        self.snake.insert(0, head)
        if head in self.foods:
            self.foods.discard(head)
            self.score += 1
            occupied = set(self.snake) | self.obstacles | self.foods
            cells = free_cells(occupied, self.grid_size)
            if cells:
                self.foods.add(tuple(self.choose(cells)))
        else:
            self.snake.pop()

    def snapshot(self):
        return {
            "tick": self.ticks,
            "status": self.status,
            "score": self.score,
            "direction": self.direction,
            "snake": [list(s) for s in self.snake],
            "foods": sorted(list(f) for f in self.foods),
            "obstacles": sorted(list(o) for o in self.obstacles),
            "grid_size": self.grid_size,
        }


def draw(pygame, screen, font, game):
    screen.fill(COLORS["background"])
    size = game.grid_size * CELL
    for i in range(game.grid_size + 1):
        pygame.draw.line(screen, COLORS["grid"], (i * CELL, 0), (i * CELL, size))
        pygame.draw.line(screen, COLORS["grid"], (0, i * CELL), (size, i * CELL))
    for x, y in game.obstacles:
        pygame.draw.rect(screen, COLORS["obstacle"], (x * CELL + 2, y * CELL + 2, CELL - 4, CELL - 4))
    for x, y in game.foods:
        pygame.draw.rect(screen, COLORS["food"], (x * CELL + 6, y * CELL + 6, CELL - 12, CELL - 12))
    for idx, (x, y) in enumerate(game.snake):
        color = COLORS["head"] if idx == 0 else COLORS["body"]
        pygame.draw.rect(screen, color, (x * CELL + 2, y * CELL + 2, CELL - 4, CELL - 4))
    label = font.render("Score: %d" % game.score, True, COLORS["text"])
    screen.blit(label, (8, 8))
    if game.status != "running":
        message = "Paused" if game.status == "paused" else "Game Over"
        text = font.render(message, True, COLORS["text"])
        screen.blit(text, text.get_rect(center=(size // 2, size // 2)))


def main():
    import pygame

    pygame.init()
    size = CONFIG["grid_size"] * CELL
    screen = pygame.display.set_mode((size, size))
    pygame.display.set_caption(TITLE)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 28)
    keys = {
        pygame.K_UP: "UP", pygame.K_w: "UP",
        pygame.K_DOWN: "DOWN", pygame.K_s: "DOWN",
        pygame.K_LEFT: "LEFT", pygame.K_a: "LEFT",
        pygame.K_RIGHT: "RIGHT", pygame.K_d: "RIGHT",
    }
    game = SnakeGame()
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in keys:
                    game.set_direction(keys[event.key])
                elif event.key in (pygame.K_p, pygame.K_SPACE):
                    if game.status == "paused":
                        game.resume()
                    else:
                        game.pause()
                elif event.key == pygame.K_r:
                    game.reset()
        game.tick()
        draw(pygame, screen, font, game)
        pygame.display.flip()
        clock.tick(CONFIG["ticks_per_second"])
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
''')


def render_desktop_artifact(
    config: GameConfig, title: str = "SnakeKit Game",
) -> str:
    """Return a standalone pygame script that plays *config*."""
    source = _SCRIPT.substitute(
        title=repr(title),
        config=json.dumps(config.to_dict(), indent=4),
        cell=CELL_PX,
    )
    logger.info(
        "Rendered desktop artifact (%d bytes, grid %d).",
        len(source), config.grid_size,
    )
    return source


def load_desktop_artifact(
    source: str, name: str = "snakekit_desktop_artifact",
) -> types.ModuleType:
    """Execute a rendered script as a module without starting pygame."""
    module = types.ModuleType(name)
    exec(compile(source, f"<{name}>", "exec"), module.__dict__)  # noqa: S102
    return module
