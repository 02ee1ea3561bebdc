"""Logging setup shared by the game server and the headless runner."""

from __future__ import annotations

import logging
import os
from typing import Iterable

LOG_LEVEL_ENV = "ECOSIM_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Package loggers that follow the configured level
GAME_LOGGERS = ("ecosim_server", "ecosim")
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(level: str | None = None) -> str:
    """Pick the level name from the argument, then the environment, then INFO.

    Unknown names fall back to INFO rather than failing startup.
    """
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    if not isinstance(logging.getLevelName(name), int):
        return "INFO"
    return name


def configure_logging(
    level: str | None = None,
    *,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    include_uvicorn: bool = True,
    loggers: Iterable[str] = GAME_LOGGERS,
) -> logging.Logger:
    """Configure the root handler and align the game's loggers to one level.

    Args:
        level: Explicit level name; see ``resolve_level`` for the fallbacks.
        format: Log format string.
        datefmt: Date format string.
        include_uvicorn: Also align uvicorn's loggers (web mode only).
        loggers: Logger names to set to the resolved level.

    Returns:
        The ``ecosim_server`` logger.
    """
    resolved = resolve_level(level)
    logging.basicConfig(level=resolved, format=format, datefmt=datefmt)

    names = list(loggers)
    if include_uvicorn:
        names.extend(UVICORN_LOGGERS)
    for name in names:
        logging.getLogger(name).setLevel(resolved)

    server_logger = logging.getLogger("ecosim_server")
    server_logger.debug(f"Logging configured at {resolved} for {', '.join(names)}")
    return server_logger
