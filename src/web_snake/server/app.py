"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from web_snake.config import GameConfiguration
from web_snake.server.game_host import GameHost
from web_snake.server.routes import router
from web_snake.server.websocket import ws_router


def create_app(
    config: GameConfiguration | None = None,
    seed: int | None = None,
) -> FastAPI:
    """Build and return the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        host = GameHost(config=config, seed=seed)
        app.state.game_host = host
        host.start()
        yield
        await host.cleanup()

    app = FastAPI(
        title="Web Snake API", version="0.1.0", lifespan=_lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
