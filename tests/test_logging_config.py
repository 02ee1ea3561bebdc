"""Tests for the shared logging setup."""

import logging

import pytest

from ecosim_server.logging_config import LOG_LEVEL_ENV, configure_logging, resolve_level


@pytest.fixture(autouse=True)
def _restore_levels():
    names = ("ecosim", "ecosim_server", "uvicorn")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_explicit_level_wins(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
    assert resolve_level("debug") == "DEBUG"


def test_environment_level_used(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    assert resolve_level() == "WARNING"


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert resolve_level("chatty") == "INFO"
    assert resolve_level() == "INFO"


def test_game_loggers_aligned():
    logger = configure_logging("DEBUG", include_uvicorn=False)
    assert logger.name == "ecosim_server"
    assert logging.getLogger("ecosim").level == logging.DEBUG
    assert logging.getLogger("ecosim_server").level == logging.DEBUG


def test_uvicorn_aligned_only_when_requested():
    logging.getLogger("uvicorn").setLevel(logging.CRITICAL)
    configure_logging("WARNING", include_uvicorn=False)
    assert logging.getLogger("uvicorn").level == logging.CRITICAL
    configure_logging("WARNING")
    assert logging.getLogger("uvicorn").level == logging.WARNING
