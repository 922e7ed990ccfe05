"""In-memory preview sessions, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import math
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from snakekit.config import GameConfig
from snakekit.engine import GameEngine, GameStatus
from snakekit.server.models import GameSummary
from snakekit.snake import Direction

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 100


@dataclass
class PreviewSession:
    """A live preview of one configuration."""

    session_id: str
    config: GameConfig
    engine: GameEngine
    ticks_per_second: float
    subscribers: list[WebSocket] = field(default_factory=list)
    last_tick_at: float = 0.0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _wake: asyncio.Event = field(default_factory=asyncio.Event, repr=False)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def tick_interval(self) -> float:
        return 1.0 / self.ticks_per_second

    def summary(self) -> GameSummary:
        return GameSummary(
            game_id=self.session_id,
            status=self.engine.status.value,
            score=self.engine.score,
            grid_size=self.config.grid_size,
            ticks_per_second=self.ticks_per_second,
        )

    def wake(self) -> None:
        """Rearm the tick loop so it picks up a status or speed change."""
        self._wake.set()


class SessionManager:
    """Central registry managing all preview sessions."""

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1.")
        self._sessions: dict[str, PreviewSession] = {}
        self._max_sessions = max_sessions

    def create_session(
        self, config: GameConfig, seed: int | None = None,
    ) -> PreviewSession:
        """Create a running preview session and start its tick loop."""
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached. Close a session first.")

        session_id = uuid.uuid4().hex[:12]
        session = PreviewSession(
            session_id=session_id,
            config=config,
            engine=GameEngine(config, seed=seed),
            ticks_per_second=config.ticks_per_second,
        )
        self._sessions[session_id] = session
        session._task = asyncio.create_task(self._tick_loop(session))
        logger.info(
            "Session %s created (grid=%d, tps=%.2f).",
            session_id, config.grid_size, config.ticks_per_second,
        )
        return session

    def get_session(self, session_id: str) -> PreviewSession | None:
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> PreviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Game {session_id} not found.")
        return session

    def list_sessions(self) -> list[GameSummary]:
        return [s.summary() for s in self._sessions.values()]

    # --- controls --------------------------------------------------------

    async def set_direction(
        self, session_id: str, direction: Direction | None,
    ) -> bool:
        """Write the pending heading; never runs engine logic inline."""
        session = self.require_session(session_id)
        async with session.lock:
            return session.engine.set_direction(direction)

    async def pause(self, session_id: str) -> dict:
        session = self.require_session(session_id)
        async with session.lock:
            session.engine.pause()
            state = session.engine.snapshot()
        session.wake()
        return state

    async def resume(self, session_id: str) -> dict:
        session = self.require_session(session_id)
        async with session.lock:
            session.engine.resume()
            state = session.engine.snapshot()
        session.wake()
        return state

    async def reset(self, session_id: str) -> dict:
        session = self.require_session(session_id)
        async with session.lock:
            state = session.engine.reset()
        session.wake()
        await self._broadcast(session, state)
        return state

    async def set_speed(self, session_id: str, ticks_per_second: float) -> None:
        """Change the tick rate and rearm the timer with the new interval."""
        if not math.isfinite(ticks_per_second) or ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be a positive number.")
        session = self.require_session(session_id)
        async with session.lock:
            session.ticks_per_second = ticks_per_second
        session.wake()
        logger.info(
            "Session %s speed set to %.2f ticks/s.", session_id, ticks_per_second,
        )

    async def close_session(self, session_id: str) -> None:
        """Stop the tick loop and drop the session."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Game {session_id} not found.")
        await self._stop(session)
        await self._close_connections(session)
        logger.info("Session %s closed.", session_id)

    # --- tick loop -------------------------------------------------------

    async def _tick_loop(self, session: PreviewSession) -> None:
        """Apply at most one tick per interval, broadcasting each snapshot.

        The deadline is measured from the last tick, so a wake-up only
        recomputes the remaining wait with the current interval. The
        elapsed part of the in-flight interval is kept, and an overdue
        deadline ticks at once. While not running the loop sleeps until
        woken and the interval restarts when play resumes.
        """
        engine = session.engine
        loop = asyncio.get_running_loop()
        session.last_tick_at = loop.time()
        try:
            while True:
                if engine.status is not GameStatus.RUNNING:
                    await session._wake.wait()
                    session._wake.clear()
                    session.last_tick_at = loop.time()
                    continue

                remaining = (
                    session.last_tick_at + session.tick_interval - loop.time()
                )
                if remaining > 0:
                    session._wake.clear()
                    try:
                        await asyncio.wait_for(
                            session._wake.wait(), timeout=remaining,
                        )
                        continue
                    except asyncio.TimeoutError:
                        pass

                session.last_tick_at = loop.time()
                async with session.lock:
                    state = engine.tick()
                await self._broadcast(session, state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", session.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", session.session_id)
            # A session without a loop cannot make progress.
            self._sessions.pop(session.session_id, None)
            await self._close_connections(session)

    async def _stop(self, session: PreviewSession) -> None:
        task = session._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def _close_connections(self, session: PreviewSession) -> None:
        """Close any live subscriber sockets for a closed session."""
        for ws in list(session.subscribers):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Game closed.")
            except Exception:
                logger.warning(
                    "Failed closing subscriber socket in session %s.",
                    session.session_id,
                )
        session.subscribers.clear()

    async def _broadcast(self, session: PreviewSession, state: dict) -> None:
        """Send a snapshot to all connected subscribers."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the
        # live subscriber list without affecting this send loop.
        for ws in list(session.subscribers):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in session.subscribers:
                session.subscribers.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        for session in list(self._sessions.values()):
            await self._stop(session)
        logger.info("SessionManager cleanup complete.")
