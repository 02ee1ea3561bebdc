"""Population store: the live organism instances and their slots.

The store is the single owner of OrganismInstance objects. It keeps two
views that must always agree:

- ``_instances``: instance id -> OrganismInstance, in creation order. Ids are
  assigned monotonically and never reused, so creation order is also
  ascending-id order. The simulation engine relies on this for its
  deterministic feeding order.
- ``_slots``: slot index -> instance id, for O(1) occupancy checks.

Notifications (OrganismAddedEvent / OrganismRemovedEvent) are emitted
synchronously on the supplied EventBus.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ecosim.catalog import Catalog, TrophicLevel
from ecosim.config import GameConfig
from ecosim.events import EventBus, OrganismAddedEvent, OrganismRemovedEvent
from ecosim.exceptions import SlotOccupiedError, SlotOutOfRangeError

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Health of an organism after the most recent simulated day."""

    HEALTHY = "healthy"
    HUNGRY = "hungry"  # Reserved; the feeding rule only produces HEALTHY or DEAD
    DEAD = "dead"  # Staged for removal until deaths are committed


@dataclass
class OrganismInstance:
    """One placed individual.

    Attributes:
        instance_id: Unique, monotonically assigned id
        species_id: Catalog species id
        slot: Grid slot (unique among live instances)
        health: Current health status
        day_added: Day the organism was placed
    """

    instance_id: int
    species_id: str
    slot: int
    health: HealthStatus = HealthStatus.HEALTHY
    day_added: int = 1

    @property
    def is_dead(self) -> bool:
        return self.health is HealthStatus.DEAD


class PopulationStore:
    """Holds live organism instances and enforces one organism per slot.

    Example:
        store = PopulationStore(Catalog.default())
        rabbit_id = store.place("rabbit", slot=4, day=1)
        store.count_at_level(TrophicLevel.PRIMARY)  # 1
        store.remove(rabbit_id)
    """

    def __init__(
        self,
        catalog: Catalog,
        config: Optional[GameConfig] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or GameConfig()
        self.event_bus = event_bus or EventBus()
        self._instances: Dict[int, OrganismInstance] = {}
        self._slots: Dict[int, int] = {}
        self._next_instance_id = 1

    @property
    def next_instance_id(self) -> int:
        return self._next_instance_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def place(self, species_id: str, slot: int, day: int = 1) -> int:
        """Place a new organism into an empty slot.

        Args:
            species_id: Catalog id of the species to place
            slot: Grid slot index
            day: Current day, recorded as the organism's day-added

        Returns:
            The new instance id

        Raises:
            UnknownSpeciesError: If the species is not in the catalog
            SlotOutOfRangeError: If the slot is outside the grid
            SlotOccupiedError: If the slot already holds a live organism
        """
        self.catalog.lookup(species_id)
        self._check_slot_range(slot)
        occupant = self._slots.get(slot)
        if occupant is not None:
            raise SlotOccupiedError(slot, occupant)

        instance_id = self._next_instance_id
        self._next_instance_id += 1
        assert instance_id not in self._instances, f"Duplicate instance id {instance_id}"

        instance = OrganismInstance(
            instance_id=instance_id,
            species_id=species_id,
            slot=slot,
            health=HealthStatus.HEALTHY,
            day_added=day,
        )
        self._instances[instance_id] = instance
        self._slots[slot] = instance_id
        self._check_invariants()

        logger.debug(f"Placed {species_id} #{instance_id} in slot {slot} (day {day})")
        self.event_bus.emit(
            OrganismAddedEvent(instance_id=instance_id, species_id=species_id, slot=slot, day=day)
        )
        return instance_id

    def remove(self, instance_id: int) -> bool:
        """Remove an organism and free its slot.

        Returns:
            True if the organism was removed, False if it was not present
        """
        instance = self._instances.pop(instance_id, None)
        if instance is None:
            return False
        del self._slots[instance.slot]
        self._check_invariants()

        logger.debug(f"Removed {instance.species_id} #{instance_id} from slot {instance.slot}")
        self.event_bus.emit(
            OrganismRemovedEvent(
                instance_id=instance_id, species_id=instance.species_id, slot=instance.slot
            )
        )
        return True

    def set_health(self, instance_id: int, health: HealthStatus) -> None:
        """Set the health status of a live organism."""
        self._instances[instance_id].health = health

    def clear(self) -> None:
        """Remove every organism, emitting a removal for each.

        Instance ids keep counting from where they were; they are never reused
        within a session.
        """
        for instance_id in list(self._instances):
            self.remove(instance_id)

    def restore(self, instances: Iterable[OrganismInstance], next_instance_id: int) -> None:
        """Replace the store contents with previously saved instances.

        No notifications are emitted; the caller redraws from the full state.

        Raises:
            UnknownSpeciesError: If an instance references an unknown species
            SlotOutOfRangeError: If an instance sits outside the grid
            SlotOccupiedError: If two instances share a slot
            ValueError: If ids are duplicated or not below next_instance_id
        """
        restored: Dict[int, OrganismInstance] = {}
        slots: Dict[int, int] = {}
        for instance in sorted(instances, key=lambda i: i.instance_id):
            self.catalog.lookup(instance.species_id)
            self._check_slot_range(instance.slot)
            if instance.instance_id in restored:
                raise ValueError(f"Duplicate instance id {instance.instance_id}")
            if instance.instance_id >= next_instance_id:
                raise ValueError(
                    f"Instance id {instance.instance_id} is not below next id {next_instance_id}"
                )
            if instance.slot in slots:
                raise SlotOccupiedError(instance.slot, slots[instance.slot])
            restored[instance.instance_id] = instance
            slots[instance.slot] = instance.instance_id

        self._instances = restored
        self._slots = slots
        self._next_instance_id = next_instance_id
        self._check_invariants()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_instance(self, instance_id: int) -> Optional[OrganismInstance]:
        return self._instances.get(instance_id)

    def all_instances(self) -> List[OrganismInstance]:
        """All live instances in ascending instance-id order."""
        return list(self._instances.values())

    def instances_at_level(self, level: TrophicLevel) -> List[OrganismInstance]:
        """Live instances at a trophic level, in ascending instance-id order."""
        return [
            i for i in self._instances.values() if self.catalog.level_of(i.species_id) is level
        ]

    def count_at_level(self, level: TrophicLevel) -> int:
        return len(self.instances_at_level(level))

    def level_counts(self) -> Dict[TrophicLevel, int]:
        counts = {level: 0 for level in TrophicLevel}
        for instance in self._instances.values():
            counts[self.catalog.level_of(instance.species_id)] += 1
        return counts

    def empty_slots(self) -> List[int]:
        return [s for s in range(self.config.total_slots) if s not in self._slots]

    def occupied_slots(self) -> Dict[int, int]:
        """Slot index -> instance id for every occupied slot."""
        return dict(sorted(self._slots.items()))

    def instance_at(self, slot: int) -> Optional[OrganismInstance]:
        instance_id = self._slots.get(slot)
        return self._instances[instance_id] if instance_id is not None else None

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, instance_id: object) -> bool:
        return instance_id in self._instances

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_slot_range(self, slot: int) -> None:
        if not 0 <= slot < self.config.total_slots:
            raise SlotOutOfRangeError(slot, self.config.total_slots)

    def _check_invariants(self) -> None:
        assert len(self._slots) == len(self._instances), "Slot map out of sync with instances"
        for slot, instance_id in self._slots.items():
            assert self._instances[instance_id].slot == slot, f"Slot {slot} points at wrong instance"
