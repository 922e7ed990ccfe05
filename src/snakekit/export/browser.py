"""Standalone browser artifact: an HTML page with an embedded JavaScript engine."""

from __future__ import annotations

import html
import json
import logging
import re
from string import Template

from snakekit.config import GameConfig

logger = logging.getLogger(__name__)

CELL_PX = 24

# The core script is DOM-free so it can also be loaded by Node for replays.
_CORE_SCRIPT = Template("""\
(function (root) {
  "use strict";

  var CONFIG = $config;

  var DELTAS = { UP: [0, -1], DOWN: [0, 1], LEFT: [-1, 0], RIGHT: [1, 0] };
  var OPPOSITE = { UP: "DOWN", DOWN: "UP", LEFT: "RIGHT", RIGHT: "LEFT" };

  function cellKey(x, y) {
    return x + "," + y;
  }

  function acceptDirection(current, requested) {
    return OPPOSITE[current] === requested ? current : requested;
  }

  // Row-major: y outer, x inner.
  function freeCells(occupied, gridSize) {
    var cells = [];
    for (var y = 0; y < gridSize; y++) {
      for (var x = 0; x < gridSize; x++) {
        if (!occupied.has(cellKey(x, y))) {
          cells.push([x, y]);
        }
      }
    }
    return cells;
  }

  function randomCell(cells) {
    return cells[Math.floor(Math.random() * cells.length)];
  }

  function firstFreeCell(cells) {
    return cells[0];
  }

  function comparePositions(a, b) {
    return a[0] - b[0] || a[1] - b[1];
  }

  function createGame(config, choose) {
    var pick = choose || randomCell;
    var gridSize = config.grid_size;
    var obstacles = new Set();
    config.obstacles.forEach(function (p) {
      obstacles.add(cellKey(p[0], p[1]));
    });
    var snake, direction, pending, foods, score, status, ticks;
    var game = {};

    function reset() {
      snake = config.initial_snake.map(function (p) {
        return [p[0], p[1]];
      });
      direction = config.initial_direction;
      pending = null;
      foods = new Map();
      config.initial_foods.forEach(function (p) {
        foods.set(cellKey(p[0], p[1]), [p[0], p[1]]);
      });
      score = 0;
      status = "running";
      ticks = 0;
    }

    function snakeOccupies(x, y) {
      return snake.some(function (s) {
        return s[0] === x && s[1] === y;
      });
    }

    game.setDirection = function (name) {
      var requested = String(name).trim().toUpperCase();
      if (!Object.prototype.hasOwnProperty.call(DELTAS, requested)) {
        return false;
      }
      if (acceptDirection(direction, requested) !== requested) {
        return false;
      }
      pending = requested;
      return true;
    };

    game.pause = function () {
      if (status === "running") {
        status = "paused";
      }
    };

    game.resume = function () {
      if (status === "paused") {
        status = "running";
      }
    };

    game.reset = reset;

    game.tick = function () {
      if (status !== "running") {
        return;
      }
      if (pending !== null) {
        direction = pending;
        pending = null;
      }
      var delta = DELTAS[direction];
      var nx = snake[0][0] + delta[0];
      var ny = snake[0][1] + delta[1];
      ticks += 1;

      if (nx < 0 || ny < 0 || nx >= gridSize || ny >= gridSize) {
        status = "game_over";
        return;
      }
      // Checked against the body before it moves, tail included.
      if (snakeOccupies(nx, ny)) {
        status = "game_over";
        return;
      }
      if (obstacles.has(cellKey(nx, ny))) {
        status = "game_over";
        return;
      }

      snake.unshift([nx, ny]);
      var headKey = cellKey(nx, ny);
      if (foods.has(headKey)) {
        foods.delete(headKey);
        score += 1;
        var occupied = new Set();
        snake.forEach(function (s) {
          occupied.add(cellKey(s[0], s[1]));
        });
        obstacles.forEach(function (o) {
          occupied.add(o);
        });
        foods.forEach(function (_, k) {
          occupied.add(k);
        });
        var cells = freeCells(occupied, gridSize);
        if (cells.length > 0) {
          var cell = pick(cells);
          foods.set(cellKey(cell[0], cell[1]), [cell[0], cell[1]]);
        }
      } else {
        snake.pop();
      }
    };

    game.snapshot = function () {
      return {
        tick: ticks,
        status: status,
        score: score,
        direction: direction,
        snake: snake.map(function (s) {
          return [s[0], s[1]];
        }),
        foods: Array.from(foods.values()).sort(comparePositions),
        obstacles: config.obstacles.map(function (p) {
          return [p[0], p[1]];
        }).sort(comparePositions),
        grid_size: gridSize
      };
    };

    reset();
    return game;
  }

  var api = {
    CONFIG: CONFIG,
    acceptDirection: acceptDirection,
    freeCells: freeCells,
    firstFreeCell: firstFreeCell,
    createGame: createGame
  };
  if (typeof module !== "undefined" && module.exports) {
    module.exports = api;
  }
  root.SnakeCore = api;
})(typeof window !== "undefined" ? window : globalThis);
""")

_PAGE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8" />
<meta name="viewport" content="width=device-width, initial-scale=1.0" />
<title>$title</title>
<style>
  html, body { margin: 0; height: 100%; background: #0b1020; color: #fff; font-family: sans-serif; }
  canvas { display: block; margin: 16px auto; background: #111; border-radius: 8px; touch-action: none; }
  #hud { text-align: center; }
</style>
</head>
<body>
<canvas id="snakeGame" width="$canvas_px" height="$canvas_px"></canvas>
<div id="hud">Score: <strong id="score">0</strong> &middot; <span id="status">running</span></div>
<script id="snakekit-core">
$core
</script>
<script id="snakekit-renderer">
(function () {
  "use strict";
  var CELL = $cell;
  var KEYS = {
    ArrowUp: "UP", ArrowDown: "DOWN", ArrowLeft: "LEFT", ArrowRight: "RIGHT",
    w: "UP", W: "UP", s: "DOWN", S: "DOWN", a: "LEFT", A: "LEFT", d: "RIGHT", D: "RIGHT"
  };
  var SWIPE_THRESHOLD = 20;
  var config = SnakeCore.CONFIG;
  var game = SnakeCore.createGame(config);
  var canvas = document.getElementById("snakeGame");
  var ctx = canvas.getContext("2d");
  var scoreEl = document.getElementById("score");
  var statusEl = document.getElementById("status");
  var grid = config.grid_size;

  function render() {
    var state = game.snapshot();
    ctx.fillStyle = "#0a0a0a";
    ctx.fillRect(0, 0, canvas.width, canvas.height);
    ctx.strokeStyle = "#1f1f1f";
    for (var i = 0; i <= grid; i++) {
      ctx.beginPath(); ctx.moveTo(i * CELL, 0); ctx.lineTo(i * CELL, grid * CELL); ctx.stroke();
      ctx.beginPath(); ctx.moveTo(0, i * CELL); ctx.lineTo(grid * CELL, i * CELL); ctx.stroke();
    }
    ctx.fillStyle = "#9ca3af";
    state.obstacles.forEach(function (o) { ctx.fillRect(o[0] * CELL + 2, o[1] * CELL + 2, CELL - 4, CELL - 4); });
    ctx.fillStyle = "#f87171";
    state.foods.forEach(function (f) { ctx.fillRect(f[0] * CELL + 6, f[1] * CELL + 6, CELL - 12, CELL - 12); });
    state.snake.forEach(function (s, idx) {
      ctx.fillStyle = idx === 0 ? "#6ee7b7" : "#4ade80";
      ctx.fillRect(s[0] * CELL + 2, s[1] * CELL + 2, CELL - 4, CELL - 4);
    });
    scoreEl.textContent = String(state.score);
    statusEl.textContent = state.status.replace("_", " ");
    if (state.status !== "running") {
      ctx.fillStyle = "rgba(0, 0, 0, 0.5)";
      ctx.fillRect(0, 0, canvas.width, canvas.height);
      ctx.fillStyle = "#fff";
      ctx.font = "20px sans-serif";
      ctx.textAlign = "center";
      ctx.fillText(state.status === "paused" ? "Paused" : "Game Over", canvas.width / 2, canvas.height / 2);
    }
  }

  setInterval(function () {
    game.tick();
    render();
  }, 1000 / config.ticks_per_second);

  window.addEventListener("keydown", function (e) {
    if (Object.prototype.hasOwnProperty.call(KEYS, e.key)) {
      e.preventDefault();
      game.setDirection(KEYS[e.key]);
    } else if (e.key === " " || e.key === "p" || e.key === "P") {
      e.preventDefault();
      if (game.snapshot().status === "paused") { game.resume(); } else { game.pause(); }
      render();
    } else if (e.key === "r" || e.key === "R") {
      game.reset();
      render();
    }
  });

  var touchStart = null;
  canvas.addEventListener("touchstart", function (e) {
    var t = e.touches[0];
    touchStart = { x: t.clientX, y: t.clientY };
  });
  canvas.addEventListener("touchend", function (e) {
    if (!touchStart) { return; }
    var t = e.changedTouches[0];
    var dx = t.clientX - touchStart.x;
    var dy = t.clientY - touchStart.y;
    touchStart = null;
    if (Math.abs(dx) > Math.abs(dy)) {
      if (dx > SWIPE_THRESHOLD) { game.setDirection("RIGHT"); } else if (dx < -SWIPE_THRESHOLD) { game.setDirection("LEFT"); }
    } else {
      if (dy > SWIPE_THRESHOLD) { game.setDirection("DOWN"); } else if (dy < -SWIPE_THRESHOLD) { game.setDirection("UP"); }
    }
  });

  render();
})();
</script>
</body>
</html>
""")

_CORE_RE = re.compile(
    r'<script id="snakekit-core">\n(.*?)</script>', re.DOTALL,
)


def render_core_script(config: GameConfig) -> str:
    """Return the DOM-free JavaScript engine with *config* embedded."""
    return _CORE_SCRIPT.substitute(config=json.dumps(config.to_dict()))


def render_browser_artifact(
    config: GameConfig, title: str = "SnakeKit Game",
) -> str:
    """Return a self-contained HTML page that plays *config*."""
    page = _PAGE.substitute(
        title=html.escape(title),
        canvas_px=config.grid_size * CELL_PX,
        cell=CELL_PX,
        core=render_core_script(config),
    )
    logger.info(
        "Rendered browser artifact (%d bytes, grid %d).",
        len(page), config.grid_size,
    )
    return page


def extract_core_script(page: str) -> str:
    """Pull the engine script back out of a rendered page."""
    match = _CORE_RE.search(page)
    if match is None:
        raise ValueError("Page has no snakekit-core script.")
    return match.group(1)
