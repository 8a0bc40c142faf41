"""Food placement on free grid cells."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from web_snake.grid import CellType, Grid, Position, in_bounds

logger = logging.getLogger(__name__)

_DEFAULT_MAX_ATTEMPTS = 1_000


class BoardFullError(RuntimeError):
    """Raised when every grid cell is occupied and no food can be placed."""


class FoodPlacer:
    """Picks a uniformly random grid cell that the snake does not cover.

    Candidates are drawn by rejection sampling. Pure rejection never
    terminates on a full board and slows down on a nearly full one, so
    after *max_attempts* rejected draws the placer builds an occupancy
    :class:`Grid` and chooses among its empty cells instead. A board with
    no empty cell raises :class:`BoardFullError`.

    Uses a seeded NumPy RNG for reproducible placement.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        max_attempts: int = _DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    def place(self, occupied: Iterable[tuple[int, int]], grid_extent: int) -> Position:
        """Return a position in ``[0, grid_extent)²`` not contained in *occupied*."""
        if grid_extent < 1:
            raise ValueError("grid_extent must be at least 1.")
        taken = {
            Position(*pos) for pos in occupied if in_bounds(pos, grid_extent)
        }
        if len(taken) >= grid_extent * grid_extent:
            logger.warning("Board of extent %d is full; no food placed.", grid_extent)
            raise BoardFullError(f"No free cell on a {grid_extent}x{grid_extent} board.")

        for _ in range(self.max_attempts):
            x, y = self.rng.integers(0, grid_extent, size=2).tolist()
            candidate = Position(x, y)
            if candidate not in taken:
                return candidate

        logger.debug(
            "Rejection sampling gave up after %d draws; choosing among free cells.",
            self.max_attempts,
        )
        return self._place_from_free_cells(taken, grid_extent)

    def _place_from_free_cells(
        self, taken: set[Position], grid_extent: int,
    ) -> Position:
        grid = Grid(grid_extent)
        grid.paint(taken, CellType.SNAKE)
        free = grid.empty_cells()
        return free[int(self.rng.integers(len(free)))]
