"""Grid coordinates and occupancy board for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np


class Position(NamedTuple):
    """A grid cell. ``x`` grows to the right, ``y`` grows downwards."""

    x: int
    y: int


class CellType(enum.IntEnum):
    """Integer codes stored in the board array."""

    EMPTY = 0
    SNAKE = 1


def in_bounds(pos: tuple[int, int], extent: int) -> bool:
    """Check whether a coordinate lies within a square grid of *extent* cells."""
    x, y = pos
    return 0 <= x < extent and 0 <= y < extent


class Grid:
    """NumPy-backed square board used to locate free cells.

    The array is indexed ``cells[y, x]`` so rows follow the screen.
    """

    def __init__(self, extent: int) -> None:
        if extent < 1:
            raise ValueError("Grid extent must be at least 1.")
        self.extent = extent
        self.cells = np.zeros((extent, extent), dtype=np.int8)

    def in_bounds(self, pos: tuple[int, int]) -> bool:
        return in_bounds(pos, self.extent)

    def paint(self, positions: Iterable[tuple[int, int]], cell_type: CellType) -> None:
        """Mark every in-bounds position with *cell_type*; others are skipped."""
        for x, y in positions:
            if self.in_bounds((x, y)):
                self.cells[y, x] = cell_type

    def empty_cells(self) -> list[Position]:
        """Return all empty cells in row-major order."""
        ys, xs = np.where(self.cells == CellType.EMPTY)
        return [Position(x, y) for x, y in zip(xs.tolist(), ys.tolist(), strict=True)]
