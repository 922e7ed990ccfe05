"""Tests for preview sessions and their tick loops."""

from __future__ import annotations

import asyncio

import pytest
from starlette.websockets import WebSocketState

from snakekit.config import GameConfig
from snakekit.engine import GameStatus
from snakekit.server.session_manager import SessionManager
from snakekit.snake import Direction

SLOW = GameConfig(ticks_per_second=0.5)
FAST = GameConfig(initial_snake=[(1, 10)], ticks_per_second=50)


@pytest.fixture()
async def manager():
    mgr = SessionManager()
    yield mgr
    await mgr.cleanup()


class TestSessionLifecycle:
    async def test_create_and_lookup(self, manager):
        session = manager.create_session(SLOW)
        assert manager.get_session(session.session_id) is session
        assert manager.require_session(session.session_id) is session
        assert len(manager.list_sessions()) == 1
        summary = session.summary()
        assert summary.status == "running"
        assert summary.ticks_per_second == 0.5

    async def test_unknown_session(self, manager):
        assert manager.get_session("nope") is None
        with pytest.raises(KeyError):
            manager.require_session("nope")

    async def test_session_limit(self):
        mgr = SessionManager(max_sessions=1)
        mgr.create_session(SLOW)
        with pytest.raises(ValueError, match="Session limit"):
            mgr.create_session(SLOW)
        await mgr.cleanup()

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            SessionManager(max_sessions=0)

    async def test_close_session(self, manager):
        session = manager.create_session(SLOW)
        await manager.close_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert session._task.done()
        with pytest.raises(KeyError):
            await manager.close_session(session.session_id)


class TestTickLoop:
    async def test_loop_advances_engine(self, manager):
        session = manager.create_session(FAST)
        await asyncio.sleep(0.2)
        assert session.engine.tick_count > 0

    async def test_no_tick_before_first_interval(self, manager):
        session = manager.create_session(SLOW)
        await asyncio.sleep(0.05)
        assert session.engine.tick_count == 0

    async def test_pause_stops_ticks(self, manager):
        session = manager.create_session(FAST)
        await asyncio.sleep(0.1)
        state = await manager.pause(session.session_id)
        assert state["status"] == "paused"
        ticks = session.engine.tick_count
        await asyncio.sleep(0.1)
        assert session.engine.tick_count == ticks

    async def test_resume_restarts_ticks(self, manager):
        session = manager.create_session(FAST)
        await manager.pause(session.session_id)
        ticks = session.engine.tick_count
        await manager.resume(session.session_id)
        await asyncio.sleep(0.2)
        assert session.engine.tick_count > ticks

    async def test_speed_change_rearms_timer(self, manager):
        session = manager.create_session(SLOW)
        await asyncio.sleep(0.05)
        await manager.set_speed(session.session_id, 50)
        await asyncio.sleep(0.2)
        assert session.engine.tick_count > 0
        assert session.summary().ticks_per_second == 50

    @pytest.mark.parametrize("tps", [0, -2, float("nan")])
    async def test_invalid_speed(self, manager, tps):
        session = manager.create_session(SLOW)
        with pytest.raises(ValueError, match="ticks_per_second"):
            await manager.set_speed(session.session_id, tps)

    async def test_repeated_speed_updates_keep_ticking(self, manager):
        session = manager.create_session(
            GameConfig(initial_snake=[(1, 10)], ticks_per_second=10),
        )
        for _ in range(10):
            await asyncio.sleep(0.05)
            await manager.set_speed(session.session_id, 10)
        assert session.engine.tick_count >= 3

    async def test_overdue_tick_fires_on_speed_up(self, manager):
        session = manager.create_session(
            GameConfig(initial_snake=[(1, 10)], ticks_per_second=2),
        )
        await asyncio.sleep(0.3)
        assert session.engine.tick_count == 0
        await manager.set_speed(session.session_id, 5)
        await asyncio.sleep(0.05)
        assert session.engine.tick_count == 1

    async def test_game_over_parks_loop(self, manager):
        session = manager.create_session(
            GameConfig(initial_snake=[(19, 10)], ticks_per_second=50),
        )
        await asyncio.sleep(0.2)
        assert session.engine.status is GameStatus.GAME_OVER
        assert session.engine.tick_count == 1
        assert not session._task.done()


class TestControls:
    async def test_direction_is_queued_not_applied(self, manager):
        session = manager.create_session(SLOW)
        assert await manager.set_direction(session.session_id, Direction.UP)
        assert session.engine.pending_direction is Direction.UP
        assert session.engine.snake.head == (10, 10)

    async def test_reversal_rejected(self, manager):
        session = manager.create_session(SLOW)
        assert not await manager.set_direction(session.session_id, Direction.LEFT)

    async def test_reset(self, manager):
        session = manager.create_session(
            GameConfig(initial_snake=[(19, 10)], ticks_per_second=50),
        )
        await asyncio.sleep(0.2)
        state = await manager.reset(session.session_id)
        assert state["status"] == "running"
        assert state["tick"] == 0
        assert state["snake"] == [[19, 10]]


class _Subscriber:
    """Stand-in socket that records close calls."""

    def __init__(self) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.closed_with: int | None = None

    async def send_text(self, payload: str) -> None:
        pass

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed_with = code
        self.client_state = WebSocketState.DISCONNECTED


class TestTickLoopFailure:
    async def test_failed_loop_drops_session_and_closes_subscribers(
        self, manager, caplog,
    ):
        session = manager.create_session(FAST)
        subscriber = _Subscriber()
        session.subscribers.append(subscriber)

        def broken_tick():
            raise RuntimeError("boom")

        session.engine.tick = broken_tick
        with caplog.at_level("ERROR", logger="snakekit.server.session_manager"):
            await asyncio.sleep(0.1)

        assert session._task.done()
        assert manager.get_session(session.session_id) is None
        assert subscriber.closed_with == 1000
        assert session.subscribers == []
        assert "Tick loop error" in caplog.text
