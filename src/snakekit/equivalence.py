"""Replay scenarios through the live engine and both exported artifacts.

Every replay uses the first-free-cell food chooser so that all three
implementations are fully deterministic and trajectories can be compared
tick by tick.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

from snakekit.config import GameConfig
from snakekit.engine import GameEngine
from snakekit.export.browser import extract_core_script, render_browser_artifact
from snakekit.export.desktop import load_desktop_artifact, render_desktop_artifact
from snakekit.food import FoodSpawner, first_free_cell
from snakekit.snake import Direction

logger = logging.getLogger(__name__)

_NODE_TIMEOUT = 30.0  # seconds

_NODE_DRIVER = """
var core = module.exports;
var steps = %s;
var game = core.createGame(core.CONFIG, core.firstFreeCell);
var out = [];
steps.forEach(function (inputs) {
  inputs.forEach(function (name) { game.setDirection(name); });
  game.tick();
  var s = game.snapshot();
  out.push({ status: s.status, score: s.score, head: s.snake[0], length: s.snake.length });
});
process.stdout.write(JSON.stringify(out));
"""


@dataclass(frozen=True)
class Scenario:
    """A configuration, per-tick inputs, and the trajectory they must produce.

    ``steps[i]`` lists the direction names fed in before tick ``i + 1``;
    ``expected[i]`` is the ``{status, score, head, length}`` record after it.
    """

    name: str
    config: GameConfig
    steps: tuple[tuple[str, ...], ...]
    expected: tuple[dict, ...] = ()

    def __post_init__(self) -> None:
        if self.expected and len(self.expected) != len(self.steps):
            raise ValueError(
                f"Scenario {self.name!r}: expected {len(self.steps)} records, "
                f"got {len(self.expected)}."
            )


def record(snapshot: dict) -> dict:
    """Reduce a snapshot to the fields compared across implementations."""
    snake = snapshot["snake"]
    return {
        "status": snapshot["status"],
        "score": snapshot["score"],
        "head": list(snake[0]),
        "length": len(snake),
    }


def replay_live(scenario: Scenario) -> list[dict]:
    """Run *scenario* through :class:`GameEngine`."""
    engine = GameEngine(scenario.config, spawner=FoodSpawner(choose=first_free_cell))
    trajectory: list[dict] = []
    for inputs in scenario.steps:
        for name in inputs:
            engine.set_direction(Direction.parse(name))
        trajectory.append(record(engine.tick()))
    return trajectory


def replay_desktop(scenario: Scenario) -> list[dict]:
    """Run *scenario* through the rules embedded in the desktop artifact."""
    module = load_desktop_artifact(render_desktop_artifact(scenario.config))
    game = module.SnakeGame(module.CONFIG, choose=module.first_free_cell)
    trajectory: list[dict] = []
    for inputs in scenario.steps:
        for name in inputs:
            game.set_direction(name)
        game.tick()
        trajectory.append(record(game.snapshot()))
    return trajectory


def node_available() -> bool:
    return shutil.which("node") is not None


def replay_browser(scenario: Scenario) -> list[dict]:
    """Run *scenario* through the browser artifact's engine under Node.

    Raises :class:`RuntimeError` when no ``node`` executable is on PATH.
    """
    node = shutil.which("node")
    if node is None:
        raise RuntimeError("node is required to replay the browser artifact.")

    core = extract_core_script(render_browser_artifact(scenario.config))
    driver = _NODE_DRIVER % json.dumps([list(s) for s in scenario.steps])
    with tempfile.TemporaryDirectory() as tmp:
        script = Path(tmp) / "replay.js"
        script.write_text(core + driver)
        result = subprocess.run(
            [node, str(script)],
            capture_output=True,
            text=True,
            timeout=_NODE_TIMEOUT,
            check=False,
        )
    if result.returncode != 0:
        raise RuntimeError(
            f"Browser replay of {scenario.name!r} failed: {result.stderr.strip()}"
        )
    return json.loads(result.stdout)


def compare(expected: list[dict] | tuple[dict, ...], actual: list[dict]) -> list[int]:
    """Return the tick indices where two trajectories disagree."""
    mismatches = [
        i for i, (a, b) in enumerate(zip(expected, actual)) if a != b
    ]
    shorter = min(len(expected), len(actual))
    mismatches.extend(range(shorter, max(len(expected), len(actual))))
    return mismatches


def verify(
    scenarios: list[Scenario] | tuple[Scenario, ...],
    browser: bool = False,
) -> dict[str, dict[str, list[int]]]:
    """Replay every scenario and report mismatching ticks per implementation.

    Only scenarios or implementations with at least one mismatch appear in
    the result, so an empty dict means all implementations agree.
    """
    runners = {"live": replay_live, "desktop": replay_desktop}
    if browser:
        runners["browser"] = replay_browser

    failures: dict[str, dict[str, list[int]]] = {}
    for scenario in scenarios:
        for label, runner in runners.items():
            mismatches = compare(scenario.expected, runner(scenario))
            if mismatches:
                failures.setdefault(scenario.name, {})[label] = mismatches
                logger.warning(
                    "Scenario %s diverges in %s at ticks %s.",
                    scenario.name, label, mismatches,
                )
    logger.info(
        "Verified %d scenarios across %s.", len(scenarios), ", ".join(runners),
    )
    return failures
