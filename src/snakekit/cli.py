"""Command line tools for exporting, simulating and verifying games."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from snakekit.config import GameConfig

logger = logging.getLogger(__name__)

_MOVE_CODES = {"U": "UP", "D": "DOWN", "L": "LEFT", "R": "RIGHT"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snakekit",
        description="SnakeKit export, simulation and equivalence tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- export ---
    export_p = sub.add_parser(
        "export", help="Write standalone browser and desktop artifacts.",
    )
    export_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON game config (default layout when omitted).",
    )
    export_p.add_argument("--html", type=str, default=None)
    export_p.add_argument("--python", type=str, default=None)
    export_p.add_argument("--title", type=str, default="SnakeKit Game")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Replay moves headlessly and print the trajectory.",
    )
    sim_p.add_argument("--config", type=str, default=None)
    sim_p.add_argument(
        "--moves", type=str, default="",
        help="One character per tick: U/D/L/R to turn, '.' to keep going.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--render", action="store_true",
        help="Print the board after every tick.",
    )

    # --- verify ---
    verify_p = sub.add_parser(
        "verify",
        help="Check that the live engine and the artifacts agree on every scenario.",
    )
    verify_p.add_argument(
        "--browser", action="store_true",
        help="Also replay the browser artifact (needs node on PATH).",
    )

    return parser


def _load_config(path: str | None) -> GameConfig:
    return GameConfig.load(path) if path else GameConfig()


def _run_export(args: argparse.Namespace) -> int:
    from snakekit.export import render_browser_artifact, render_desktop_artifact

    if args.html is None and args.python is None:
        logger.error("Nothing to export: pass --html and/or --python.")
        return 2
    try:
        config = _load_config(args.config)
    except (OSError, ValueError, TypeError) as exc:
        logger.error("Invalid config: %s", exc)
        return 2

    if args.html:
        Path(args.html).write_text(render_browser_artifact(config, args.title))
        print(f"Wrote browser artifact to {args.html}")  # noqa: T201
    if args.python:
        Path(args.python).write_text(render_desktop_artifact(config, args.title))
        print(f"Wrote desktop artifact to {args.python}")  # noqa: T201
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    from snakekit.engine import GameEngine, GameStatus
    from snakekit.grid import Grid
    from snakekit.snake import Direction

    try:
        config = _load_config(args.config)
    except (OSError, ValueError, TypeError) as exc:
        logger.error("Invalid config: %s", exc)
        return 2

    engine = GameEngine(config, seed=args.seed)
    for code in args.moves.upper():
        if code in _MOVE_CODES:
            engine.set_direction(Direction[_MOVE_CODES[code]])
        state = engine.tick()
        print(json.dumps({  # noqa: T201
            "tick": state["tick"],
            "status": state["status"],
            "score": state["score"],
            "head": state["snake"][0],
            "length": len(state["snake"]),
        }))
        if args.render:
            print(Grid.from_snapshot(state).render_text())  # noqa: T201
        if engine.status is GameStatus.GAME_OVER:
            break
    return 0


def _run_verify(args: argparse.Namespace) -> int:
    from snakekit.equivalence import node_available, verify
    from snakekit.scenarios import SCENARIOS

    browser = args.browser
    if browser and not node_available():
        logger.warning("node not found; skipping the browser artifact.")
        browser = False

    failures = verify(SCENARIOS, browser=browser)
    for name, by_impl in failures.items():
        for impl, ticks in by_impl.items():
            print(f"MISMATCH {name} [{impl}] at ticks {ticks}")  # noqa: T201
    print(  # noqa: T201
        f"{len(SCENARIOS) - len(failures)}/{len(SCENARIOS)} scenarios agree."
    )
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snakekit`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "export": _run_export,
        "simulate": _run_simulate,
        "verify": _run_verify,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
