"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from web_snake.config import (
    DEFAULT_CELL_SIZE,
    DEFAULT_FOOD_COLOR,
    DEFAULT_SNAKE_COLOR,
    DEFAULT_SPEED_BASE,
)

DirectionName = Literal["up", "down", "left", "right"]


class SettingsRequest(BaseModel):
    """Request body for PUT /game/settings, as sent by the settings form."""

    model_config = ConfigDict(populate_by_name=True)

    speed_base: float = Field(
        default=DEFAULT_SPEED_BASE, gt=0, le=10_000, alias="speedBase",
    )
    cell_size: int = Field(default=DEFAULT_CELL_SIZE, ge=1, le=600, alias="cellSize")
    speed_cap: float | None = Field(default=None, gt=0, alias="speedCap")
    food_color: str = Field(
        default=DEFAULT_FOOD_COLOR, max_length=32, alias="foodColor",
    )
    snake_color: str = Field(
        default=DEFAULT_SNAKE_COLOR, max_length=32, alias="snakeColor",
    )


class DirectionRequest(BaseModel):
    """Request body for POST /game/direction."""

    direction: DirectionName


class DirectionResponse(BaseModel):
    """Whether the direction was buffered for the next tick."""

    accepted: bool
    state: str
