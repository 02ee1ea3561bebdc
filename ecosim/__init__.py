"""Ecosystem day-simulation game.

The domain package: species catalog, population store, daily draft,
feeding-allocation engine and the session controller that ties them
together. Nothing here performs I/O.
"""

from ecosim.catalog import Catalog, Species, TrophicLevel
from ecosim.config import GameConfig
from ecosim.engine import DayResult, FeedabilityPreview, FoodLink, SimulationEngine
from ecosim.population import HealthStatus, OrganismInstance, PopulationStore
from ecosim.session import GameSession

__all__ = [
    "Catalog",
    "DayResult",
    "FeedabilityPreview",
    "FoodLink",
    "GameConfig",
    "GameSession",
    "HealthStatus",
    "OrganismInstance",
    "PopulationStore",
    "SimulationEngine",
    "Species",
    "TrophicLevel",
]
