"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from snakekit.config import CellKind


class BuilderCellModel(BaseModel):
    """One builder placement."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    kind: CellKind


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    grid_size: int = Field(default=20, ge=4, le=64)
    cells: list[BuilderCellModel] = Field(default_factory=list)
    ticks_per_second: float = Field(default=8.0, gt=0, le=60)
    initial_direction: str = "right"
    initial_snake: list[tuple[int, int]] | None = None


class DirectionRequest(BaseModel):
    """Request body for POST /games/{game_id}/direction.

    Exactly one input source is expected; extra ones are ignored in the
    order direction, key, swipe.
    """

    direction: str | None = None
    key: str | None = None
    swipe: tuple[float, float] | None = None


class DirectionResponse(BaseModel):
    accepted: bool
    pending: str


class SpeedRequest(BaseModel):
    """Request body for PUT /games/{game_id}/speed."""

    ticks_per_second: float = Field(gt=0, le=60)


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: str
    score: int
    grid_size: int
    ticks_per_second: float
