"""WebSocket handler for live preview play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snakekit.controls import parse_input
from snakekit.server.session_manager import SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_COMMANDS = ("pause", "resume", "reset")


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Player WebSocket: send inputs and commands, receive a snapshot each tick."""
    manager = _get_manager(websocket)
    session = manager.get_session(game_id)
    if session is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    session.subscribers.append(websocket)
    logger.info("Player connected to game %s.", game_id)

    # Send initial state snapshot so the client gets immediate feedback.
    await websocket.send_text(
        json.dumps(session.engine.snapshot(), separators=(",", ":")),
    )

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            command = msg.get("command")
            if command in _COMMANDS:
                state = await getattr(manager, command)(game_id)
                if command != "reset":
                    await websocket.send_text(
                        json.dumps(state, separators=(",", ":")),
                    )
                continue

            direction = parse_input(msg)
            if direction is None:
                continue
            await manager.set_direction(game_id, direction)
    except WebSocketDisconnect:
        logger.info("Player disconnected from game %s.", game_id)
    except KeyError:
        logger.info("Game %s closed while a player was connected.", game_id)
    finally:
        if websocket in session.subscribers:
            session.subscribers.remove(websocket)
