"""Snake representation, movement and collision logic."""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Iterable

from web_snake.food import FoodPlacer
from web_snake.grid import Position, in_bounds

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, value: object) -> Direction | None:
        """Map a direction or its name (``"up"``, ``"ArrowUp"``) to a member.

        Returns ``None`` for anything that is not one of the four
        cardinal directions.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        name = value.strip().lower()
        if name.startswith("arrow"):
            name = name[len("arrow"):]
        return _NAMES.get(name)


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_NAMES: dict[str, Direction] = {d.name.lower(): d for d in Direction}

INITIAL_BODY: tuple[Position, ...] = (
    Position(5, 5),
    Position(5, 6),
    Position(5, 7),
)
INITIAL_DIRECTION = Direction.RIGHT


class Snake:
    """The player's snake together with the food it is chasing.

    The head is ``body[0]``; the tail is ``body[-1]``. Eating the food
    grows the body by one segment and asks the :class:`FoodPlacer` for a
    new food cell clear of the grown body.
    """

    def __init__(
        self,
        grid_extent: int,
        placer: FoodPlacer | None = None,
        body: Iterable[tuple[int, int]] | None = None,
        direction: Direction = INITIAL_DIRECTION,
    ) -> None:
        self.grid_extent = grid_extent
        self.placer = placer if placer is not None else FoodPlacer()
        segments = INITIAL_BODY if body is None else body
        self.body: deque[Position] = deque(Position(*seg) for seg in segments)
        if not self.body:
            raise ValueError("Snake body must have at least one segment.")
        self.direction = direction
        self.score = 0
        self.ate = False
        self.food = self.placer.place(self.body, self.grid_extent)

    @property
    def head(self) -> Position:
        """Return the head coordinate."""
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def set_direction(self, new_direction: Direction) -> None:
        """Change direction, ignoring 180° reversals."""
        if new_direction is not self.direction.opposite:
            self.direction = new_direction

    def next_head(self) -> Position:
        """Compute the next head position without moving."""
        dx, dy = self.direction.value
        x, y = self.head
        return Position(x + dx, y + dy)

    def move(self, requested: Direction | None = None) -> None:
        """Advance one cell, heading for *requested* unless it is a reversal.

        Eating the food raises the score, sets :attr:`ate` and places new
        food; otherwise the tail is dropped so the length stays the same.
        """
        if requested is not None:
            self.set_direction(requested)
        new_head = self.next_head()
        self.body.appendleft(new_head)
        if new_head == self.food:
            self.score += 1
            self.ate = True
            self.food = self.placer.place(self.body, self.grid_extent)
        else:
            self.body.pop()

    def place_food(self) -> Position:
        """Move the food to a fresh cell clear of the body."""
        self.food = self.placer.place(self.body, self.grid_extent)
        return self.food

    def check_self_collision(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self.body)[1:])

    def check_boundary_collision(self, grid_extent: int | None = None) -> bool:
        """Check whether the head has left the ``[0, grid_extent)`` board."""
        extent = self.grid_extent if grid_extent is None else grid_extent
        return not in_bounds(self.head, extent)

    def reset(self) -> None:
        """Restore the starting body, heading and score.

        The food is left where it is; callers place it again.
        """
        self.body = deque(INITIAL_BODY)
        self.direction = INITIAL_DIRECTION
        self.score = 0
        self.ate = False

    def resize(self, grid_extent: int) -> None:
        """Adopt a new board size, re-placing food that fell off the board.

        The new food cell is chosen before anything changes, so a
        :class:`~web_snake.food.BoardFullError` leaves the snake untouched.
        """
        food = self.food
        if not in_bounds(food, grid_extent):
            logger.debug("Food at %s is off the resized board; re-placing.", food)
            food = self.placer.place(self.body, grid_extent)
        self.grid_extent = grid_extent
        self.food = food

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
            "score": self.score,
        }
