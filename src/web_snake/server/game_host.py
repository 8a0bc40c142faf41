"""Hosts one game session for browser clients and fans out its updates."""

from __future__ import annotations

import asyncio
import json
import logging

from starlette.websockets import WebSocket, WebSocketState

from web_snake.config import GameConfiguration
from web_snake.events import GameListener
from web_snake.scheduler import TickScheduler
from web_snake.session import GameSession

logger = logging.getLogger(__name__)


def _encode(message: dict) -> str:
    return json.dumps(message, separators=(",", ":"))


class GameHost(GameListener):
    """Owns the session, its tick scheduler and the connected sockets.

    Session events are queued as ``{"event": ...}`` messages and flushed
    to every socket together with the next state broadcast. Commands and
    the scheduler's ticks both hold :attr:`lock` while touching the
    session, so they never interleave.
    """

    def __init__(
        self,
        config: GameConfiguration | None = None,
        seed: int | None = None,
    ) -> None:
        self.session = GameSession(config=config, seed=seed)
        self.session.add_listener(self)
        self.sockets: list[WebSocket] = []
        self.lock = asyncio.Lock()
        self.scheduler = TickScheduler(
            self.session,
            after_tick=self._after_tick,
            lock=self.lock,
            on_failure=self._on_loop_failure,
        )
        self._pending_events: list[dict] = []

    # -- GameListener hooks -------------------------------------------------

    def on_food_eaten(self, snapshot: dict) -> None:
        self._pending_events.append({"event": "food_eaten", "score": snapshot["score"]})

    def on_game_started(self, snapshot: dict) -> None:
        self._pending_events.append({"event": "game_started"})

    def on_game_over(self, snapshot: dict) -> None:
        self._pending_events.append({"event": "game_over", "score": snapshot["score"]})

    def on_settings_changed(self, config: GameConfiguration) -> None:
        self._pending_events.append(
            {"event": "settings_changed", "config": config.to_dict()},
        )

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Start ticking on the running event loop."""
        self.scheduler.start()
        logger.info("Game host started.")

    async def cleanup(self) -> None:
        """Stop the tick loop and close any remaining sockets."""
        await self.scheduler.stop()
        self.session.remove_listener(self)
        await self._close_sockets(1001, "Server shutting down.")
        logger.info("Game host cleanup complete.")

    # -- commands -----------------------------------------------------------

    async def request_start(self) -> dict:
        async with self.lock:
            self.session.on_start_or_restart_requested()
            state = self.session.get_state()
        await self.broadcast(state)
        return state

    async def request_direction(self, direction: str) -> bool:
        """Buffer a direction; outside play any direction starts the game."""
        async with self.lock:
            if self.session.is_playing:
                return self.session.on_direction_input(direction)
        await self.request_start()
        return False

    async def apply_settings(self, config: GameConfiguration) -> dict:
        async with self.lock:
            self.session.apply_configuration(config)
            state = self.session.get_state()
        await self.broadcast(state)
        return state

    async def snapshot(self) -> dict:
        async with self.lock:
            return self.session.get_state()

    # -- sockets ------------------------------------------------------------

    def connect(self, ws: WebSocket) -> None:
        self.sockets.append(ws)

    def disconnect(self, ws: WebSocket) -> None:
        if ws in self.sockets:
            self.sockets.remove(ws)

    async def _after_tick(self, state: dict) -> None:
        await self.broadcast(state)

    async def _on_loop_failure(self, state: dict) -> None:
        """Push the final state, then drop every client of the dead loop."""
        await self.broadcast(state)
        await self._close_sockets(1011, "Game loop stopped.")

    async def _close_sockets(self, code: int, reason: str) -> None:
        for ws in list(self.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=code, reason=reason)
            except Exception:
                logger.warning("Failed closing socket (%s).", reason)
        self.sockets.clear()

    async def broadcast(self, state: dict) -> None:
        """Send queued events, then the state, to every connected socket."""
        messages = [_encode(event) for event in self._pending_events]
        self._pending_events.clear()
        messages.append(_encode(state))

        dead: list[WebSocket] = []
        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(self.sockets):
            try:
                if ws.client_state != WebSocketState.CONNECTED:
                    continue
                for payload in messages:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            self.disconnect(ws)
