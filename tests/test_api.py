"""REST API endpoint tests."""

from __future__ import annotations

from collections import deque

import pytest
from httpx import ASGITransport, AsyncClient

from web_snake.grid import Position
from web_snake.server.app import create_app
from web_snake.server.game_host import GameHost

BASE = "http://test"


@pytest.fixture()
def app():
    application = create_app()
    # No tick loop here: tests advance the session by hand.
    application.state.game_host = GameHost(seed=0)
    return application


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c


def _session(app):
    return app.state.game_host.session


class TestGetGame:
    @pytest.mark.asyncio
    async def test_initial_state(self, client):
        resp = await client.get("/game")
        assert resp.status_code == 200
        data = resp.json()
        assert data["state"]["state"] == "not_started"
        assert data["state"]["score"] == 0
        assert data["state"]["snake"]["body"] == [[5, 5], [5, 6], [5, 7]]
        assert data["config"]["grid_extent"] == 30


class TestStartGame:
    @pytest.mark.asyncio
    async def test_start(self, client):
        resp = await client.post("/game/start")
        assert resp.status_code == 200
        assert resp.json()["state"] == "playing"

    @pytest.mark.asyncio
    async def test_start_while_playing_is_harmless(self, client, app):
        await client.post("/game/start")
        _session(app).on_tick()
        resp = await client.post("/game/start")
        assert resp.status_code == 200
        assert resp.json()["tick"] == 1


class TestDirection:
    @pytest.mark.asyncio
    async def test_direction_buffered(self, client, app):
        await client.post("/game/start")
        resp = await client.post("/game/direction", json={"direction": "up"})
        assert resp.status_code == 202
        assert resp.json() == {"accepted": True, "state": "playing"}
        _session(app).on_tick()
        assert _session(app).snake_segments[0] == (5, 4)

    @pytest.mark.asyncio
    async def test_invalid_direction_rejected(self, client):
        resp = await client.post("/game/direction", json={"direction": "north"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_direction_before_start_starts_game(self, client, app):
        resp = await client.post("/game/direction", json={"direction": "left"})
        assert resp.status_code == 202
        assert resp.json() == {"accepted": False, "state": "playing"}
        assert _session(app).is_playing


class TestSettings:
    @pytest.mark.asyncio
    async def test_apply_settings(self, client, app):
        resp = await client.put("/game/settings", json={
            "speedBase": 150,
            "cellSize": 25,
            "foodColor": "#ff0000",
            "snakeColor": "#00ff00",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["config"]["grid_extent"] == 24
        assert data["config"]["food_color"] == "#ff0000"
        assert data["state"]["speed"] == pytest.approx(15.0)
        assert _session(app).config.cell_size == 25

    @pytest.mark.asyncio
    async def test_grid_too_small(self, client):
        resp = await client.put("/game/settings", json={"cellSize": 200})
        assert resp.status_code == 422
        assert "at least 8" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_non_positive_cell_size(self, client):
        resp = await client.put("/game/settings", json={"cellSize": 0})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_reset_settings(self, client, app):
        await client.put("/game/settings", json={"cellSize": 30})
        resp = await client.post("/game/settings/reset")
        assert resp.status_code == 200
        assert resp.json()["config"]["cell_size"] == 20
        assert _session(app).config.grid_extent == 30

    @pytest.mark.asyncio
    async def test_shrinking_under_the_snake_ends_the_run(self, client, app):
        await client.post("/game/start")
        session = _session(app)
        session.snake.body = deque(Position(x, y) for y in range(8) for x in range(8))
        session.snake.food = Position(20, 20)
        resp = await client.put("/game/settings", json={"cellSize": 75})
        assert resp.status_code == 200
        data = resp.json()
        assert data["config"]["grid_extent"] == 8
        assert data["state"]["state"] == "over"
