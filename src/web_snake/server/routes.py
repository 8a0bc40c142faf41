"""REST API route handlers for the hosted game."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from web_snake.config import GameConfiguration
from web_snake.server.game_host import GameHost
from web_snake.server.models import (
    DirectionRequest,
    DirectionResponse,
    SettingsRequest,
)

router = APIRouter(prefix="/game", tags=["game"])


def _get_host(request: Request) -> GameHost:
    return request.app.state.game_host


@router.get("")
async def get_game(request: Request) -> dict:
    """Current game snapshot plus the active configuration."""
    host = _get_host(request)
    state = await host.snapshot()
    return {"state": state, "config": host.session.config.to_dict()}


@router.post("/start", status_code=200)
async def start_game(request: Request) -> dict:
    """Start a new run, or restart after game over."""
    return await _get_host(request).request_start()


@router.post("/direction", status_code=202)
async def change_direction(
    body: DirectionRequest, request: Request,
) -> DirectionResponse:
    """Buffer a direction for the next tick."""
    host = _get_host(request)
    accepted = await host.request_direction(body.direction)
    return DirectionResponse(accepted=accepted, state=host.session.state.value)


@router.put("/settings")
async def apply_settings(body: SettingsRequest, request: Request) -> dict:
    """Replace the configuration with the submitted settings."""
    try:
        config = GameConfiguration(**body.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    state = await _get_host(request).apply_settings(config)
    return {"state": state, "config": config.to_dict()}


@router.post("/settings/reset")
async def reset_settings(request: Request) -> dict:
    """Restore the default settings."""
    config = GameConfiguration.defaults()
    state = await _get_host(request).apply_settings(config)
    return {"state": state, "config": config.to_dict()}
