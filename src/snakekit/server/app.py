"""FastAPI application serving live previews and exports."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI

from snakekit.server.routes import router
from snakekit.server.session_manager import DEFAULT_MAX_SESSIONS, SessionManager
from snakekit.server.websocket import ws_router

logger = logging.getLogger(__name__)


def _preview_lifespan(
    max_sessions: int,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.session_manager = SessionManager(max_sessions=max_sessions)
        logger.info("Preview server up (max %d sessions).", max_sessions)
        try:
            yield
        finally:
            await app.state.session_manager.cleanup()

    return lifespan


def create_app(max_sessions: int = DEFAULT_MAX_SESSIONS) -> FastAPI:
    """Build the preview API; every session shares one SessionManager."""
    app = FastAPI(
        title="SnakeKit Studio API",
        description="Build snake levels, preview them live, export them standalone.",
        version="0.1.0",
        lifespan=_preview_lifespan(max_sessions),
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
