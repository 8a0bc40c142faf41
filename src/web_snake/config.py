"""Game configuration: board geometry, speed and presentation settings."""

from __future__ import annotations

import json
import logging
import numbers
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)

BOARD_EXTENT_PX = 600
DEFAULT_CELL_SIZE = 20
DEFAULT_SPEED_BASE = 100
DEFAULT_FOOD_COLOR = "#e74c3c"
DEFAULT_SNAKE_COLOR = "#27ae60"

# The starting body reaches y == 7, so the grid needs at least 8 cells a side.
MIN_GRID_EXTENT = 8

# Settings keys as sent by the browser settings form.
_SETTINGS_ALIASES: dict[str, str] = {
    "cellSize": "cell_size",
    "size": "cell_size",
    "speedBase": "speed_base",
    "speed": "speed_base",
    "speedCap": "speed_cap",
    "foodColor": "food_color",
    "snakeColor": "snake_color",
}


def _is_integral(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return isinstance(value, numbers.Real) and float(value).is_integer()


def _is_positive_number(value: object) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and 0 < value < float("inf")
    )


@dataclass(frozen=True)
class GameConfiguration:
    """Immutable settings for one game session.

    Only ``cell_size``, ``speed_base`` and ``speed_cap`` influence the
    engine; the colors are carried through for the presentation layer.
    A configuration is never mutated: apply a new instance instead.
    """

    cell_size: int = DEFAULT_CELL_SIZE
    speed_base: float = DEFAULT_SPEED_BASE
    speed_cap: float | None = None
    food_color: str = DEFAULT_FOOD_COLOR
    snake_color: str = DEFAULT_SNAKE_COLOR
    board_extent: int = BOARD_EXTENT_PX

    def __post_init__(self) -> None:
        if not _is_integral(self.cell_size) or self.cell_size < 1:
            raise ValueError("cell_size must be a positive integer.")
        if not _is_integral(self.board_extent) or self.board_extent < 1:
            raise ValueError("board_extent must be a positive integer.")
        # Normalize integral floats such as 20.0 coming from JSON.
        object.__setattr__(self, "cell_size", int(self.cell_size))
        object.__setattr__(self, "board_extent", int(self.board_extent))

        if self.grid_extent < MIN_GRID_EXTENT:
            raise ValueError(
                f"cell_size {self.cell_size} leaves a grid of {self.grid_extent} "
                f"cells; at least {MIN_GRID_EXTENT} are required."
            )
        if not _is_positive_number(self.speed_base):
            raise ValueError("speed_base must be positive.")
        if self.speed_cap is not None and not _is_positive_number(self.speed_cap):
            raise ValueError("speed_cap must be positive when set.")
        if self.board_extent % self.cell_size:
            logger.warning(
                "cell_size %d does not divide the %dpx board; using a %d-cell grid.",
                self.cell_size, self.board_extent, self.grid_extent,
            )

    @property
    def grid_extent(self) -> int:
        """Number of cells along each side of the board (floored)."""
        return self.board_extent // self.cell_size

    @property
    def base_speed(self) -> float:
        """Ticks per second at the start of a run."""
        return self.speed_base / 10

    @property
    def speed_increment(self) -> float:
        """Ticks per second gained per food item eaten."""
        return self.speed_base / 1000

    def speed_for_score(self, score: int) -> float:
        """Return the tick rate for a run that has eaten *score* items."""
        speed = self.base_speed + score * self.speed_increment
        if self.speed_cap is not None:
            speed = min(speed, self.speed_cap)
        return speed

    @classmethod
    def defaults(cls) -> GameConfiguration:
        """Return the factory settings restored by the reset button."""
        return cls()

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, object],
        base: GameConfiguration | None = None,
    ) -> GameConfiguration:
        """Build a configuration from a settings object.

        Accepts camelCase keys as sent by the browser as well as the field
        names. Keys that are missing keep the value from *base* (or the
        defaults); unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        values = asdict(base) if base is not None else {}
        for key, value in settings.items():
            name = _SETTINGS_ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                logger.debug("Ignoring unknown setting %r.", key)
        return cls(**values)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["grid_extent"] = self.grid_extent
        return data

    def save(self, path: str | Path) -> None:
        """Write the configuration to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(asdict(self), indent=2))
        logger.info("Configuration saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfiguration:
        """Load a configuration from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls.from_settings(raw)
