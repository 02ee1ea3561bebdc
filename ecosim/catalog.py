"""Organism catalog: the static species table.

The catalog is pure data. It maps a species id to its display data and
trophic level, and answers "which species live at this level" for the draft
generator and the population counters. Iteration order is the order species
were registered.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from ecosim.exceptions import UnknownSpeciesError


class TrophicLevel(Enum):
    """Position of a species in the three-tier food chain."""

    PRODUCER = "producer"  # Plants; never food-limited
    PRIMARY = "primary"  # Herbivores; eat producers
    SECONDARY = "secondary"  # Predators; eat primary consumers

    @property
    def food_source(self) -> Optional["TrophicLevel"]:
        """The level this level eats, or None for producers."""
        if self is TrophicLevel.PRIMARY:
            return TrophicLevel.PRODUCER
        if self is TrophicLevel.SECONDARY:
            return TrophicLevel.PRIMARY
        return None


@dataclass(frozen=True)
class Species:
    """A catalog entry. Never mutated after the catalog is built."""

    species_id: str
    name: str
    trophic_level: TrophicLevel
    description: str = ""
    icon: str = ""
    draft_eligible: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "species_id": self.species_id,
            "name": self.name,
            "trophic_level": self.trophic_level.value,
            "description": self.description,
            "icon": self.icon,
            "draft_eligible": self.draft_eligible,
        }


class Catalog:
    """Read-only mapping from species id to Species.

    Example:
        catalog = Catalog.default()
        catalog.lookup("rabbit").trophic_level  # TrophicLevel.PRIMARY
        catalog.all_ids_at_level(TrophicLevel.PRODUCER)  # ["grass", ...]
    """

    def __init__(self, species: Iterable[Species]) -> None:
        self._species: Dict[str, Species] = {}
        for entry in species:
            if entry.species_id in self._species:
                raise ValueError(f"Duplicate species id in catalog: {entry.species_id!r}")
            self._species[entry.species_id] = entry

    @classmethod
    def default(cls) -> "Catalog":
        """Build the catalog shipped with the game."""
        return cls(DEFAULT_SPECIES)

    def lookup(self, species_id: str) -> Species:
        """Get a species by id.

        Raises:
            UnknownSpeciesError: If the id is not in the catalog
        """
        try:
            return self._species[species_id]
        except KeyError:
            raise UnknownSpeciesError(species_id) from None

    def level_of(self, species_id: str) -> TrophicLevel:
        return self.lookup(species_id).trophic_level

    def all_ids_at_level(self, level: TrophicLevel, draft_only: bool = False) -> List[str]:
        """List species ids at a trophic level, in catalog order.

        Args:
            level: The trophic level to filter by
            draft_only: Only include species that may appear in a draft
        """
        return [
            s.species_id
            for s in self._species.values()
            if s.trophic_level is level and (s.draft_eligible or not draft_only)
        ]

    def all_ids(self, draft_only: bool = False) -> List[str]:
        return [s.species_id for s in self._species.values() if s.draft_eligible or not draft_only]

    def __contains__(self, species_id: object) -> bool:
        return species_id in self._species

    def __iter__(self) -> Iterator[Species]:
        return iter(self._species.values())

    def __len__(self) -> int:
        return len(self._species)


DEFAULT_SPECIES = (
    # Producers
    Species("grass", "Grass", TrophicLevel.PRODUCER, "Fast-spreading ground cover.", "grass"),
    Species("clover", "Clover", TrophicLevel.PRODUCER, "Low flowering plant that fixes nitrogen.", "clover"),
    Species("berry_bush", "Berry Bush", TrophicLevel.PRODUCER, "Shrub with edible berries.", "berry_bush"),
    Species("oak_sapling", "Oak Sapling", TrophicLevel.PRODUCER, "Young tree; slow but sturdy.", "oak"),
    Species("algae", "Algae", TrophicLevel.PRODUCER, "Simple plant life from the pond edge.", "algae"),
    # Primary consumers
    Species("rabbit", "Rabbit", TrophicLevel.PRIMARY, "Grazes on grass and clover.", "rabbit"),
    Species("grasshopper", "Grasshopper", TrophicLevel.PRIMARY, "Leaf-chewing insect.", "grasshopper"),
    Species("deer", "Deer", TrophicLevel.PRIMARY, "Browses shrubs and saplings.", "deer"),
    Species("field_mouse", "Field Mouse", TrophicLevel.PRIMARY, "Eats seeds and berries.", "mouse"),
    Species("caterpillar", "Caterpillar", TrophicLevel.PRIMARY, "Feeds on leaves before it pupates.", "caterpillar"),
    # Secondary consumers
    Species("fox", "Fox", TrophicLevel.SECONDARY, "Hunts rabbits and mice.", "fox"),
    Species("hawk", "Hawk", TrophicLevel.SECONDARY, "Hunts small animals from above.", "hawk"),
    Species("snake", "Snake", TrophicLevel.SECONDARY, "Ambush hunter of mice.", "snake"),
    Species("owl", "Owl", TrophicLevel.SECONDARY, "Night hunter of rodents.", "owl"),
    Species("frog", "Frog", TrophicLevel.SECONDARY, "Catches insects with its tongue.", "frog"),
)
