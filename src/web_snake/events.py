"""Listener hooks through which the session notifies its collaborators."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from web_snake.config import GameConfiguration

logger = logging.getLogger(__name__)


class GameListener:
    """Base class for presentation, audio and other feedback collaborators.

    Every hook is a no-op; subclasses override the ones they care about.
    Snapshots are the dictionaries returned by
    :meth:`web_snake.session.GameSession.get_state`.
    """

    def on_render(self, snapshot: dict) -> None:
        """Called after every playing tick and after a (re)start."""

    def on_food_eaten(self, snapshot: dict) -> None:
        pass

    def on_game_started(self, snapshot: dict) -> None:
        pass

    def on_game_over(self, snapshot: dict) -> None:
        pass

    def on_settings_changed(self, config: GameConfiguration) -> None:
        pass


class ListenerSet:
    """Fans events out to registered listeners.

    A listener that raises is logged and skipped so one broken
    collaborator cannot stall the tick.
    """

    def __init__(self) -> None:
        self._listeners: list[GameListener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def add(self, listener: GameListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove(self, listener: GameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, hook: str, payload: object) -> None:
        """Invoke ``listener.<hook>(payload)`` on every listener."""
        # Iterate over a snapshot so handlers may unregister themselves.
        for listener in list(self._listeners):
            try:
                getattr(listener, hook)(payload)
            except Exception:
                logger.exception(
                    "Listener %r failed handling %s.", listener, hook,
                )
