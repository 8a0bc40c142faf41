"""Tick-driven game session: the start / playing / over state machine."""

from __future__ import annotations

import enum
import logging

import numpy as np

from web_snake.config import GameConfiguration
from web_snake.events import GameListener, ListenerSet
from web_snake.food import BoardFullError, FoodPlacer
from web_snake.grid import Position
from web_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class GameState(str, enum.Enum):
    """Lifecycle states for a game session."""

    NOT_STARTED = "not_started"
    PLAYING = "playing"
    OVER = "over"


class GameSession:
    """Single-player snake session driven by an external tick scheduler.

    The session owns the configuration, the snake (with its food) and the
    speed. Ticks outside :attr:`GameState.PLAYING` change nothing. Direction
    input is buffered as a single pending value, last write wins, and is
    consumed by the next tick.
    """

    def __init__(
        self,
        config: GameConfiguration | None = None,
        seed: int | None = None,
        listeners: list[GameListener] | None = None,
    ) -> None:
        self.config = config or GameConfiguration()
        self.rng = np.random.default_rng(seed)
        self.placer = FoodPlacer(rng=self.rng)
        self.snake = Snake(self.config.grid_extent, placer=self.placer)

        self.state = GameState.NOT_STARTED
        self.speed = self.config.speed_for_score(0)
        self.tick = 0
        self._pending_direction: Direction | None = None
        self._game_over_announced = False

        self.listeners = ListenerSet()
        for listener in listeners or ():
            self.listeners.add(listener)

    # -- read accessors ---------------------------------------------------

    @property
    def snake_segments(self) -> list[Position]:
        return list(self.snake.body)

    @property
    def food_position(self) -> Position:
        return self.snake.food

    @property
    def score(self) -> int:
        return self.snake.score

    @property
    def direction(self) -> Direction:
        return self.snake.direction

    @property
    def tick_interval_ms(self) -> float:
        """Delay before the next tick, derived from the current speed."""
        return 1000 / self.speed

    @property
    def is_playing(self) -> bool:
        return self.state == GameState.PLAYING

    def add_listener(self, listener: GameListener) -> None:
        self.listeners.add(listener)

    def remove_listener(self, listener: GameListener) -> None:
        self.listeners.remove(listener)

    # -- inputs -----------------------------------------------------------

    def on_direction_input(self, direction: Direction | str) -> bool:
        """Buffer a direction for the next tick.

        Returns ``False`` when the input is not a cardinal direction or the
        game is not being played; such input changes nothing. Reversals are
        accepted here and rejected by the snake when the tick runs.
        """
        parsed = Direction.parse(direction)
        if parsed is None:
            logger.debug("Ignoring invalid direction input %r.", direction)
            return False
        if self.state != GameState.PLAYING:
            logger.debug("Ignoring direction %s while %s.", parsed.name, self.state.value)
            return False
        self._pending_direction = parsed
        return True

    def on_start_or_restart_requested(self) -> bool:
        """Start a fresh run from :attr:`GameState.NOT_STARTED` or :attr:`GameState.OVER`.

        Returns ``False`` if a run is already in progress.
        """
        if self.state == GameState.PLAYING:
            return False

        restarting = self.state == GameState.OVER
        self.snake.reset()
        self.snake.place_food()
        self.speed = self.config.speed_for_score(0)
        self.tick = 0
        self._pending_direction = None
        self._game_over_announced = False
        self.state = GameState.PLAYING
        logger.info(
            "Game %s on a %d-cell grid at %.1f ticks/s.",
            "restarted" if restarting else "started",
            self.config.grid_extent,
            self.speed,
        )

        snapshot = self.get_state()
        self.listeners.emit("on_game_started", snapshot)
        self.listeners.emit("on_render", snapshot)
        return True

    def apply_configuration(self, config: GameConfiguration) -> None:
        """Swap in a new configuration, effective from the next tick.

        The speed is re-derived from the new configuration and the current
        score, and food left outside a shrunken board is placed again. If
        the snake covers the whole shrunken board the swap still completes
        and a running game ends.
        """
        board_full = False
        try:
            self.snake.resize(config.grid_extent)
        except BoardFullError:
            logger.warning(
                "No free cell on the new %d-cell grid; keeping the old food.",
                config.grid_extent,
            )
            self.snake.grid_extent = config.grid_extent
            board_full = True

        self.config = config
        self.speed = config.speed_for_score(self.snake.score)
        logger.info(
            "Settings applied: cell_size=%d grid=%d speed_base=%s.",
            config.cell_size, config.grid_extent, config.speed_base,
        )
        self.listeners.emit("on_settings_changed", config)
        if board_full and self.state == GameState.PLAYING:
            self._end_game()
            self._render()

    def abort(self) -> None:
        """End a running game without a collision, e.g. when ticking fails."""
        if self.state != GameState.PLAYING:
            return
        logger.warning("Run aborted at tick %d.", self.tick)
        self._end_game()
        self._render()

    # -- tick -------------------------------------------------------------

    def on_tick(self) -> dict:
        """Advance the game by one step when playing.

        Returns the full game state as a serializable dict.
        """
        if self.state != GameState.PLAYING:
            return self.get_state()

        requested = self._pending_direction
        self._pending_direction = None
        self.tick += 1
        try:
            self.snake.move(requested if requested is not None else self.snake.direction)
        except BoardFullError:
            logger.warning("Board full at score %d; ending the run.", self.snake.score)
            self._end_game()
            return self._render()

        extent = self.config.grid_extent
        if self.snake.check_boundary_collision(extent) or self.snake.check_self_collision():
            self._end_game()
            return self._render()

        if self.snake.ate:
            self.snake.ate = False
            self.speed = self.config.speed_for_score(self.snake.score)
            self.listeners.emit("on_food_eaten", self.get_state())

        return self._render()

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            "state": self.state.value,
            "score": self.snake.score,
            "speed": self.speed,
            "tick_interval_ms": self.tick_interval_ms,
            "grid_extent": self.config.grid_extent,
            "cell_size": self.config.cell_size,
            "snake": self.snake.to_dict(),
            "food": list(self.snake.food),
            "colors": {
                "food": self.config.food_color,
                "snake": self.config.snake_color,
            },
        }

    def _render(self) -> dict:
        snapshot = self.get_state()
        self.listeners.emit("on_render", snapshot)
        return snapshot

    def _end_game(self) -> None:
        """Freeze the run and announce it exactly once."""
        self.state = GameState.OVER
        self.snake.ate = False
        if self._game_over_announced:
            return
        self._game_over_announced = True
        logger.info(
            "Snake died at tick %d with score %d.", self.tick, self.snake.score,
        )
        self.listeners.emit("on_game_over", self.get_state())
