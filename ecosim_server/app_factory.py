"""Application factory and context for the ecosystem game API.

We use an AppContext dataclass to hold all runtime state instead of
module-level globals, so each test can build an app around its own
registry and save store.

Usage:
------
    # For production (settings from environment)
    app = create_app()

    # For testing
    app = create_app(context=AppContext(save_store=MemorySaveStore()))
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecosim.config.server import DEFAULT_API_PORT, DEFAULT_DATA_DIR
from ecosim_server.logging_config import configure_logging
from ecosim_server.routers.games import setup_games_router
from ecosim_server.session_persistence import FileSaveStore, SaveStore
from ecosim_server.session_registry import SessionRegistry


@dataclass
class AppContext:
    """Runtime context holding all application state."""

    registry: SessionRegistry = field(default_factory=SessionRegistry)
    save_store: SaveStore = field(
        default_factory=lambda: FileSaveStore(os.getenv("ECOSIM_DATA_DIR", DEFAULT_DATA_DIR))
    )

    # Configuration
    server_version: str = "1.0.0"
    api_port: int = field(
        default_factory=lambda: int(os.getenv("ECOSIM_API_PORT", str(DEFAULT_API_PORT)))
    )
    production_mode: bool = field(
        default_factory=lambda: os.getenv("PRODUCTION", "false").lower() == "true"
    )
    allowed_origins: list = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )

    server_start_time: float = field(default_factory=time.time)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("ecosim_server"))


def create_app(
    *,
    production_mode: Optional[bool] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        production_mode: Override production mode (default: from PRODUCTION env var)
        context: Pre-configured AppContext (for testing). If None, creates a new one.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    logger = configure_logging()

    if context is None:
        context = AppContext()
    if production_mode is not None:
        context.production_mode = production_mode
    context.logger = logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = app.state.context
        ctx.logger.info(f"Ecosystem game server {ctx.server_version} ready")
        yield
        ctx.logger.info(f"Shutting down with {ctx.registry.game_count} hosted games")

    app = FastAPI(
        title="Ecosystem Game API",
        version=context.server_version,
        lifespan=lifespan,
        docs_url=None if context.production_mode else "/docs",
        redoc_url=None if context.production_mode else "/redoc",
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins if context.production_mode else ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(setup_games_router(context.registry, context.save_store))

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "version": context.server_version,
            "games": context.registry.game_count,
            "uptime_seconds": time.time() - context.server_start_time,
        }

    return app
