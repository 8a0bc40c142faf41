"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from web_snake.server.game_host import GameHost
from web_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_host(ws: WebSocket) -> GameHost:
    return ws.app.state.game_host


@ws_router.websocket("/game/play")
async def play(websocket: WebSocket) -> None:
    """Send directions or start requests, receive game state each tick."""
    host = _get_host(websocket)
    await websocket.accept()
    host.connect(websocket)
    logger.info("Client connected.")

    # Send initial state snapshot so the client can draw immediately.
    state = await host.snapshot()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            if msg.get("action") == "start":
                await host.request_start()
                continue

            direction = Direction.parse(msg.get("direction"))
            if direction is None:
                continue
            await host.request_direction(direction.name.lower())
    except WebSocketDisconnect:
        logger.info("Client disconnected.")
    finally:
        host.disconnect(websocket)
