"""FastAPI app entry point for Emberhymn Server."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.game import router as game_router
from api.ws import notify_tick
from api.ws import router as ws_router
from config import LOG_LEVEL
from engine.dice import make_rng
from engine.session import create_game
from engine.ticker import Ticker

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.ticker.stop()


def create_app() -> FastAPI:
    """Build the app around a fresh session sitting at the menu."""
    app = FastAPI(
        title="Emberhymn Server",
        description="Dungeon-crawler simulation core for a browser renderer",
        version="0.1.0",
        lifespan=lifespan,
    )

    game_state = create_game()
    app.state.game = game_state
    app.state.rng = make_rng()

    async def _push_tick(results) -> None:
        await notify_tick(game_state, results)

    app.state.ticker = Ticker(game_state, on_change=_push_tick, rng=app.state.rng)

    app.include_router(game_router, prefix="/game", tags=["Game"])
    app.include_router(ws_router, prefix="/game", tags=["WebSocket"])

    @app.get("/")
    def root() -> dict:
        """Root endpoint returning server info."""
        return {"name": "Emberhymn Server", "version": "0.1.0", "status": "running"}

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint."""
        return {"healthy": True}

    return app


app = create_app()
