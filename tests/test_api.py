"""REST API endpoint tests."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from snakekit.export.desktop import load_desktop_artifact
from snakekit.server.app import create_app
from snakekit.server.session_manager import SessionManager

BASE = "http://test"

# Slow enough that no tick lands during a test.
_SLOW = {"ticks_per_second": 0.5}


@pytest.fixture()
async def app():
    application = create_app()
    application.state.session_manager = SessionManager()
    yield application
    await application.state.session_manager.cleanup()


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c


async def _create(client, **body) -> str:
    resp = await client.post("/games", json={**_SLOW, **body})
    assert resp.status_code == 201, resp.text
    return resp.json()["game_id"]


class TestCreateGame:
    @pytest.mark.asyncio
    async def test_create_default(self, client):
        resp = await client.post("/games", json={})
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "running"
        assert data["score"] == 0
        assert data["grid_size"] == 20
        assert data["ticks_per_second"] == 8.0
        assert "game_id" in data

    @pytest.mark.asyncio
    async def test_create_from_builder_cells(self, client):
        game_id = await _create(client, grid_size=10, cells=[
            {"x": 1, "y": 1, "kind": "food"},
            {"x": 8, "y": 8, "kind": "obstacle"},
        ])
        resp = await client.get(f"/games/{game_id}/config")
        cfg = resp.json()
        assert cfg["grid_size"] == 10
        assert cfg["initial_foods"] == [[1, 1]]
        assert cfg["obstacles"] == [[8, 8]]
        assert cfg["initial_snake"] == [[5, 5], [4, 5], [3, 5]]

    @pytest.mark.asyncio
    async def test_create_with_custom_snake(self, client):
        game_id = await _create(
            client, initial_snake=[[3, 3], [3, 4]], initial_direction="up",
        )
        state = (await client.get(f"/games/{game_id}")).json()["state"]
        assert state["snake"] == [[3, 3], [3, 4]]
        assert state["direction"] == "UP"

    @pytest.mark.asyncio
    async def test_invalid_kind(self, client):
        resp = await client.post(
            "/games", json={"cells": [{"x": 1, "y": 1, "kind": "portal"}]},
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_grid_too_small(self, client):
        resp = await client.post("/games", json={"grid_size": 2})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_cell_outside_grid(self, client):
        resp = await client.post("/games", json={
            "grid_size": 8, "cells": [{"x": 9, "y": 1, "kind": "obstacle"}],
        })
        assert resp.status_code == 422
        assert "outside the grid" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_duplicate_cells(self, client):
        resp = await client.post("/games", json={"cells": [
            {"x": 1, "y": 1, "kind": "food"},
            {"x": 1, "y": 1, "kind": "obstacle"},
        ]})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_direction(self, client):
        resp = await client.post("/games", json={"initial_direction": "north"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_session_limit(self, app, client):
        app.state.session_manager = SessionManager(max_sessions=1)
        await _create(client)
        resp = await client.post("/games", json=_SLOW)
        assert resp.status_code == 409
        await app.state.session_manager.cleanup()


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        resp = await client.get("/games")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_list_after_create(self, client):
        await _create(client)
        await _create(client)
        resp = await client.get("/games")
        assert len(resp.json()) == 2

    @pytest.mark.asyncio
    async def test_get_existing(self, client):
        game_id = await _create(client)
        resp = await client.get(f"/games/{game_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["game_id"] == game_id
        assert data["state"]["tick"] == 0
        assert data["state"]["snake"][0] == [10, 10]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/games/missing",
        "/games/missing/config",
        "/games/missing/export/html",
        "/games/missing/export/python",
    ])
    async def test_not_found(self, client, path):
        resp = await client.get(path)
        assert resp.status_code == 404


class TestControls:
    @pytest.mark.asyncio
    async def test_pause_and_resume(self, client):
        game_id = await _create(client)
        resp = await client.post(f"/games/{game_id}/pause")
        assert resp.json()["status"] == "paused"
        resp = await client.post(f"/games/{game_id}/resume")
        assert resp.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_reset(self, client):
        game_id = await _create(client)
        await client.post(f"/games/{game_id}/direction", json={"direction": "up"})
        resp = await client.post(f"/games/{game_id}/reset")
        assert resp.status_code == 200
        assert resp.json()["tick"] == 0
        assert resp.json()["direction"] == "RIGHT"

    @pytest.mark.asyncio
    async def test_direction_by_name(self, client):
        game_id = await _create(client)
        resp = await client.post(
            f"/games/{game_id}/direction", json={"direction": "up"},
        )
        assert resp.json() == {"accepted": True, "pending": "UP"}

    @pytest.mark.asyncio
    async def test_direction_by_key_and_swipe(self, client):
        game_id = await _create(client)
        resp = await client.post(
            f"/games/{game_id}/direction", json={"key": "s"},
        )
        assert resp.json() == {"accepted": True, "pending": "DOWN"}
        resp = await client.post(
            f"/games/{game_id}/direction", json={"swipe": [5, -40]},
        )
        assert resp.json() == {"accepted": True, "pending": "UP"}

    @pytest.mark.asyncio
    async def test_reversal_not_accepted(self, client):
        game_id = await _create(client)
        resp = await client.post(
            f"/games/{game_id}/direction", json={"direction": "left"},
        )
        assert resp.json() == {"accepted": False, "pending": "RIGHT"}

    @pytest.mark.asyncio
    async def test_unmapped_input_ignored(self, client):
        game_id = await _create(client)
        resp = await client.post(
            f"/games/{game_id}/direction", json={"key": "q"},
        )
        assert resp.status_code == 200
        assert resp.json()["accepted"] is False

    @pytest.mark.asyncio
    async def test_speed(self, client):
        game_id = await _create(client)
        resp = await client.put(
            f"/games/{game_id}/speed", json={"ticks_per_second": 12},
        )
        assert resp.status_code == 200
        assert resp.json()["ticks_per_second"] == 12

    @pytest.mark.asyncio
    async def test_invalid_speed(self, client):
        game_id = await _create(client)
        resp = await client.put(
            f"/games/{game_id}/speed", json={"ticks_per_second": 0},
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_controls_not_found(self, client):
        resp = await client.post("/games/missing/pause")
        assert resp.status_code == 404
        resp = await client.post(
            "/games/missing/direction", json={"direction": "up"},
        )
        assert resp.status_code == 404


class TestExport:
    @pytest.mark.asyncio
    async def test_export_html(self, client):
        game_id = await _create(client, grid_size=10)
        resp = await client.get(f"/games/{game_id}/export/html")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert '<script id="snakekit-core">' in resp.text

    @pytest.mark.asyncio
    async def test_export_python_uses_configuration(self, client):
        game_id = await _create(
            client, grid_size=10, cells=[{"x": 2, "y": 2, "kind": "food"}],
        )
        await client.post(f"/games/{game_id}/direction", json={"direction": "up"})
        resp = await client.get(f"/games/{game_id}/export/python")
        assert resp.headers["content-type"].startswith("text/plain")
        module = load_desktop_artifact(resp.text)
        assert module.CONFIG["initial_foods"] == [[2, 2]]
        assert module.CONFIG["initial_direction"] == "RIGHT"


class TestDeleteGame:
    @pytest.mark.asyncio
    async def test_delete(self, client):
        game_id = await _create(client)
        resp = await client.delete(f"/games/{game_id}")
        assert resp.status_code == 204
        resp = await client.get(f"/games/{game_id}")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_not_found(self, client):
        resp = await client.delete("/games/missing")
        assert resp.status_code == 404
