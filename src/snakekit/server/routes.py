"""REST API route handlers for preview sessions and exports."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse

from snakekit.config import GameConfig
from snakekit.controls import parse_input
from snakekit.export import render_browser_artifact, render_desktop_artifact
from snakekit.server.models import (
    CreateGameRequest,
    DirectionRequest,
    DirectionResponse,
    GameSummary,
    SpeedRequest,
)
from snakekit.server.session_manager import PreviewSession, SessionManager

router = APIRouter(prefix="/games", tags=["games"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _require(request: Request, game_id: str) -> PreviewSession:
    session = _get_manager(request).get_session(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    return session


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Build a configuration from builder cells and start a live preview."""
    manager = _get_manager(request)
    try:
        config = GameConfig.from_builder(
            [cell.model_dump() for cell in body.cells],
            grid_size=body.grid_size,
            initial_snake=body.initial_snake,
            initial_direction=body.initial_direction,
            ticks_per_second=body.ticks_per_second,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    try:
        session = manager.create_session(config)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List live preview sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get session metadata and the current snapshot."""
    session = _require(request, game_id)
    result = session.summary().model_dump()
    result["state"] = session.engine.snapshot()
    return result


@router.get("/{game_id}/config")
async def get_config(game_id: str, request: Request) -> dict:
    return _require(request, game_id).config.to_dict()


@router.post("/{game_id}/pause")
async def pause_game(game_id: str, request: Request) -> dict:
    _require(request, game_id)
    return await _get_manager(request).pause(game_id)


@router.post("/{game_id}/resume")
async def resume_game(game_id: str, request: Request) -> dict:
    _require(request, game_id)
    return await _get_manager(request).resume(game_id)


@router.post("/{game_id}/reset")
async def reset_game(game_id: str, request: Request) -> dict:
    """Start a fresh run from the session's configuration."""
    _require(request, game_id)
    return await _get_manager(request).reset(game_id)


@router.post("/{game_id}/direction")
async def set_direction(
    game_id: str, body: DirectionRequest, request: Request,
) -> DirectionResponse:
    """Queue a heading for the next tick; unmappable input is ignored."""
    session = _require(request, game_id)
    direction = parse_input(body.model_dump(exclude_none=True))
    accepted = await _get_manager(request).set_direction(game_id, direction)
    return DirectionResponse(
        accepted=accepted, pending=session.engine.pending_direction.name,
    )


@router.put("/{game_id}/speed")
async def set_speed(
    game_id: str, body: SpeedRequest, request: Request,
) -> GameSummary:
    session = _require(request, game_id)
    await _get_manager(request).set_speed(game_id, body.ticks_per_second)
    return session.summary()


@router.get("/{game_id}/export/html", response_class=HTMLResponse)
async def export_html(game_id: str, request: Request) -> HTMLResponse:
    """Download the standalone browser artifact for this configuration."""
    session = _require(request, game_id)
    return HTMLResponse(render_browser_artifact(session.config))


@router.get("/{game_id}/export/python", response_class=PlainTextResponse)
async def export_python(game_id: str, request: Request) -> PlainTextResponse:
    """Download the standalone desktop artifact for this configuration."""
    session = _require(request, game_id)
    return PlainTextResponse(render_desktop_artifact(session.config))


@router.delete("/{game_id}", status_code=204)
async def delete_game(game_id: str, request: Request) -> Response:
    try:
        await _get_manager(request).close_session(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found.") from exc
    return Response(status_code=204)
