"""Pytest configuration and fixtures for ecosystem game tests."""

import random

import pytest

from ecosim.catalog import Catalog, TrophicLevel
from ecosim.config import GameConfig
from ecosim.engine import SimulationEngine
from ecosim.events import EventBus
from ecosim.population import PopulationStore
from ecosim.session import GameSession

SPECIES_BY_LEVEL = {
    TrophicLevel.PRODUCER: "grass",
    TrophicLevel.PRIMARY: "rabbit",
    TrophicLevel.SECONDARY: "fox",
}


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def catalog():
    return Catalog.default()


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def store(catalog, config, event_bus):
    return PopulationStore(catalog, config, event_bus)


@pytest.fixture
def engine(catalog, config):
    return SimulationEngine(catalog, config)


@pytest.fixture
def session(catalog, config, seeded_rng):
    """A started game on day 1, in the placement phase."""
    game = GameSession(catalog=catalog, config=config, rng=seeded_rng)
    game.start_new_game()
    return game


@pytest.fixture
def populate():
    """Fill a store with producers, primaries and secondaries, in that order.

    Returns a dict of level -> instance ids placed.
    """

    def _populate(target, producers=0, primaries=0, secondaries=0, day=1):
        placed = {level: [] for level in TrophicLevel}
        plan = [
            (TrophicLevel.PRODUCER, producers),
            (TrophicLevel.PRIMARY, primaries),
            (TrophicLevel.SECONDARY, secondaries),
        ]
        for level, count in plan:
            for _ in range(count):
                slot = target.empty_slots()[0]
                placed[level].append(target.place(SPECIES_BY_LEVEL[level], slot, day=day))
        return placed

    return _populate
