"""Daily draft: the species offered to the player each morning.

A draft always contains a few producers, because producers are the food
every other level ultimately depends on. The rest is a random mix of
consumers, topped up from the whole catalog if a category runs dry, and the
final order is shuffled.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional

from ecosim.catalog import Catalog, TrophicLevel
from ecosim.config import GameConfig
from ecosim.exceptions import EmptyCatalogError, SpeciesNotOfferedError

logger = logging.getLogger(__name__)


class DraftOffer:
    """The ordered species offer for one day.

    Placing an organism consumes one matching entry. Whatever is left when
    the day advances is discarded.
    """

    def __init__(self, species_ids: Iterable[str] = ()) -> None:
        self._species_ids: List[str] = list(species_ids)

    @property
    def species_ids(self) -> List[str]:
        return list(self._species_ids)

    def take(self, species_id: str) -> None:
        """Consume one entry of ``species_id`` from the offer.

        Raises:
            SpeciesNotOfferedError: If the species is not in the offer
        """
        try:
            self._species_ids.remove(species_id)
        except ValueError:
            raise SpeciesNotOfferedError(species_id) from None

    def __contains__(self, species_id: object) -> bool:
        return species_id in self._species_ids

    def __len__(self) -> int:
        return len(self._species_ids)

    def __iter__(self):
        return iter(self._species_ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DraftOffer):
            return NotImplemented
        return self._species_ids == other._species_ids

    def __repr__(self) -> str:
        return f"DraftOffer({self._species_ids!r})"


class DraftGenerator:
    """Draws a bounded random selection of species.

    Args:
        catalog: Species to draw from (draft-eligible entries only)
        config: Supplies draft size and the producer range
        rng: Random source; pass a seeded instance for reproducible drafts
    """

    def __init__(
        self,
        catalog: Catalog,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or GameConfig()
        self.rng = rng or random.Random()

    def generate_draft(self) -> List[str]:
        """Produce ``draft_size`` species ids.

        Returns:
            Shuffled list of species ids of length ``config.draft_size``

        Raises:
            EmptyCatalogError: If no species is draft-eligible
        """
        size = self.config.draft_size
        pool = self.catalog.all_ids(draft_only=True)
        if not pool:
            raise EmptyCatalogError("No draft-eligible species in the catalog")

        producers = self.catalog.all_ids_at_level(TrophicLevel.PRODUCER, draft_only=True)
        consumers = self.catalog.all_ids_at_level(
            TrophicLevel.PRIMARY, draft_only=True
        ) + self.catalog.all_ids_at_level(TrophicLevel.SECONDARY, draft_only=True)

        producer_count = self.rng.randint(
            self.config.min_draft_producers, self.config.max_draft_producers
        )
        producer_count = min(producer_count, size, len(producers))
        draft = self.rng.sample(producers, producer_count)

        consumer_count = min(size - len(draft), len(consumers))
        draft.extend(self.rng.sample(consumers, consumer_count))

        # Top up when a category was exhausted; repeat species only if the
        # whole catalog is smaller than the draft.
        remaining = [s for s in pool if s not in draft]
        while len(draft) < size:
            if remaining:
                pick = self.rng.choice(remaining)
                remaining.remove(pick)
            else:
                pick = self.rng.choice(pool)
            draft.append(pick)

        self.rng.shuffle(draft)
        logger.debug(f"Generated draft: {draft}")
        return draft

    def new_offer(self) -> DraftOffer:
        return DraftOffer(self.generate_draft())
