"""Web Snake: tick-driven snake game engine."""

from web_snake.config import GameConfiguration
from web_snake.events import GameListener
from web_snake.food import BoardFullError, FoodPlacer
from web_snake.grid import Grid, Position
from web_snake.scheduler import TickScheduler
from web_snake.session import GameSession, GameState
from web_snake.snake import Direction, Snake

__all__ = [
    "BoardFullError",
    "Direction",
    "FoodPlacer",
    "GameConfiguration",
    "GameListener",
    "GameSession",
    "GameState",
    "Grid",
    "Position",
    "Snake",
    "TickScheduler",
]
