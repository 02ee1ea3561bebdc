"""Simulation engine: the daily feeding allocation.

Design Decisions:
-----------------
1. Health is decided by aggregate counts, not by which individual eats
   which. With P producers, H primary and S secondary consumers:

       feedable_primary   = P // food_requirement
       feedable_secondary = H // food_requirement

   Instances are then visited in ascending instance-id order and each
   consumer takes one unit of its level's capacity while any remains. That
   order decides *which* individuals survive when capacity is partial, so it
   must stay stable.

   Producers are always healthy but earn no points; each fed consumer
   earns ``points_per_healthy``.

2. Deaths are two-phase. ``run_day()`` writes health statuses and stages the
   dead, but leaves them in the store so a death animation can play.
   ``commit_deaths()`` removes them. Counting includes every instance in the
   store regardless of status, so ``run_day()`` can be repeated before the
   commit and yields the same result.

3. Food-chain links are display only. Each healthy consumer is linked to the
   next ``food_requirement`` individuals of its food level, without reuse
   across consumers. Links never change who lives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ecosim.catalog import Catalog, TrophicLevel
from ecosim.config import GameConfig
from ecosim.population import HealthStatus, OrganismInstance, PopulationStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoodLink:
    """One displayed eater -> food edge."""

    eater_id: int
    food_id: int

    def to_dict(self) -> Dict[str, int]:
        return {"eater_id": self.eater_id, "food_id": self.food_id}


@dataclass(frozen=True)
class DayResult:
    """Outcome of one simulated day.

    Attributes:
        day: The day that was simulated
        healthy_ids: Instance ids that were fed (producers always are)
        dead_ids: Instance ids that starved, staged for removal
        score_delta: Points earned this day (fed consumers only)
        links: Eater -> food edges for the food-chain display
        level_counts: Population per trophic level before deaths
    """

    day: int
    healthy_ids: Tuple[int, ...]
    dead_ids: Tuple[int, ...]
    score_delta: int
    links: Tuple[FoodLink, ...] = ()
    level_counts: Dict[TrophicLevel, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "healthy_ids": list(self.healthy_ids),
            "dead_ids": list(self.dead_ids),
            "score_delta": self.score_delta,
            "links": [link.to_dict() for link in self.links],
            "level_counts": {level.value: n for level, n in self.level_counts.items()},
        }


@dataclass(frozen=True)
class FeedabilityPreview:
    """Whether one more organism of a species would be fed."""

    species_id: str
    can_feed: bool
    available: int
    needed: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "species_id": self.species_id,
            "can_feed": self.can_feed,
            "available": self.available,
            "needed": self.needed,
        }


class SimulationEngine:
    """Computes daily feeding outcomes against a PopulationStore.

    Example:
        engine = SimulationEngine(catalog)
        result = engine.run_day(store, day=3)
        # ... play death animations for result.dead_ids ...
        engine.commit_deaths(store)
    """

    def __init__(self, catalog: Catalog, config: Optional[GameConfig] = None) -> None:
        self.catalog = catalog
        self.config = config or GameConfig()
        self._staged_deaths: List[int] = []

    @property
    def staged_deaths(self) -> List[int]:
        """Instance ids marked dead but not yet removed."""
        return list(self._staged_deaths)

    def run_day(self, store: PopulationStore, day: int = 0) -> DayResult:
        """Simulate one day's feeding and stage the deaths.

        Writes each instance's health status; does not add or remove
        instances. Calling it again before ``commit_deaths()`` returns an
        identical result.

        Args:
            store: The population to simulate
            day: Day number recorded on the result

        Returns:
            The DayResult for this population
        """
        result = self.compute_day(store, day)

        dead = set(result.dead_ids)
        for instance in store.all_instances():
            status = HealthStatus.DEAD if instance.instance_id in dead else HealthStatus.HEALTHY
            store.set_health(instance.instance_id, status)
        self._staged_deaths = list(result.dead_ids)

        logger.debug(
            f"Day {day}: {len(result.healthy_ids)} healthy, {len(result.dead_ids)} dead, "
            f"+{result.score_delta} points"
        )
        return result

    def compute_day(self, store: PopulationStore, day: int = 0) -> DayResult:
        """Pure version of ``run_day()``: nothing on the store is touched."""
        requirement = self.config.food_requirement
        by_level = self._group_by_level(store)
        counts = {level: len(members) for level, members in by_level.items()}

        capacity = {
            TrophicLevel.PRIMARY: counts[TrophicLevel.PRODUCER] // requirement,
            TrophicLevel.SECONDARY: counts[TrophicLevel.PRIMARY] // requirement,
        }

        healthy: List[int] = []
        dead: List[int] = []
        fed_consumers = 0
        for instance in store.all_instances():
            level = self.catalog.level_of(instance.species_id)
            if level is TrophicLevel.PRODUCER:
                healthy.append(instance.instance_id)
            elif capacity[level] > 0:
                capacity[level] -= 1
                fed_consumers += 1
                healthy.append(instance.instance_id)
            else:
                dead.append(instance.instance_id)

        healthy_set = set(healthy)
        links = self._build_links(by_level, healthy_set, requirement)

        return DayResult(
            day=day,
            healthy_ids=tuple(healthy),
            dead_ids=tuple(dead),
            score_delta=fed_consumers * self.config.points_per_healthy,
            links=tuple(links),
            level_counts=counts,
        )

    def commit_deaths(self, store: PopulationStore) -> List[int]:
        """Remove the staged dead from the store.

        Safe to call repeatedly; a second call removes nothing.

        Returns:
            Instance ids that were actually removed
        """
        removed = [instance_id for instance_id in self._staged_deaths if store.remove(instance_id)]
        self._staged_deaths = []
        if removed:
            logger.debug(f"Committed {len(removed)} deaths: {removed}")
        return removed

    def stage_deaths(self, instance_ids: List[int]) -> None:
        """Replace the staged deaths, e.g. when resuming a saved results screen."""
        self._staged_deaths = list(instance_ids)

    def discard_staged(self) -> None:
        """Forget staged deaths without touching the store (game reset)."""
        self._staged_deaths = []

    def preview_feedability(self, store: PopulationStore, species_id: str) -> FeedabilityPreview:
        """Project whether one more organism of ``species_id`` would be fed.

        Side-effect free. Producers are never food-limited. Organisms marked
        dead but not yet committed count neither as food nor as competitors.

        Raises:
            UnknownSpeciesError: If the species is not in the catalog
        """
        level = self.catalog.level_of(species_id)
        food_level = level.food_source
        if food_level is None:
            return FeedabilityPreview(species_id=species_id, can_feed=True, available=0, needed=0)

        requirement = self.config.food_requirement
        food_count = self._living_at_level(store, food_level)
        existing = self._living_at_level(store, level)
        available = max(0, food_count - existing * requirement)
        return FeedabilityPreview(
            species_id=species_id,
            can_feed=available >= requirement,
            available=available,
            needed=requirement,
        )

    @staticmethod
    def _living_at_level(store: PopulationStore, level: TrophicLevel) -> int:
        return sum(1 for i in store.instances_at_level(level) if not i.is_dead)

    def _group_by_level(self, store: PopulationStore) -> Dict[TrophicLevel, List[OrganismInstance]]:
        grouped: Dict[TrophicLevel, List[OrganismInstance]] = {level: [] for level in TrophicLevel}
        for instance in store.all_instances():
            grouped[self.catalog.level_of(instance.species_id)].append(instance)
        return grouped

    @staticmethod
    def _build_links(
        by_level: Dict[TrophicLevel, List[OrganismInstance]],
        healthy: set,
        requirement: int,
    ) -> List[FoodLink]:
        links: List[FoodLink] = []
        for eater_level in (TrophicLevel.PRIMARY, TrophicLevel.SECONDARY):
            food = [i.instance_id for i in by_level[eater_level.food_source]]
            cursor = 0
            for eater in by_level[eater_level]:
                if eater.instance_id not in healthy:
                    continue
                if cursor >= len(food):
                    break
                for food_id in food[cursor : cursor + requirement]:
                    links.append(FoodLink(eater_id=eater.instance_id, food_id=food_id))
                cursor += requirement
        return links
