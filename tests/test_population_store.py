"""Tests for the population store."""

import pytest

from ecosim.catalog import TrophicLevel
from ecosim.events import OrganismAddedEvent, OrganismRemovedEvent
from ecosim.exceptions import SlotOccupiedError, SlotOutOfRangeError, UnknownSpeciesError
from ecosim.population import HealthStatus, OrganismInstance


class TestPlace:
    def test_assigns_monotonic_ids(self, store):
        first = store.place("grass", 0)
        second = store.place("rabbit", 1)
        assert (first, second) == (1, 2)
        assert store.next_instance_id == 3

    def test_new_instance_is_healthy_with_day(self, store):
        instance_id = store.place("fox", 7, day=4)
        instance = store.get_instance(instance_id)
        assert instance.health is HealthStatus.HEALTHY
        assert instance.day_added == 4
        assert instance.slot == 7

    def test_occupied_slot_rejected_and_store_unchanged(self, store):
        existing = store.place("grass", 3)
        before = (store.all_instances(), store.occupied_slots(), store.next_instance_id)

        with pytest.raises(SlotOccupiedError) as exc_info:
            store.place("rabbit", 3)

        assert exc_info.value.instance_id == existing
        assert (store.all_instances(), store.occupied_slots(), store.next_instance_id) == before

    @pytest.mark.parametrize("slot", [-1, 50, 1000])
    def test_out_of_range_slot(self, store, slot):
        with pytest.raises(SlotOutOfRangeError):
            store.place("grass", slot)
        assert len(store) == 0

    def test_unknown_species(self, store):
        with pytest.raises(UnknownSpeciesError):
            store.place("dragon", 0)
        assert store.next_instance_id == 1

    def test_emits_added_event(self, store, event_bus):
        received = []
        event_bus.subscribe(OrganismAddedEvent, received.append)
        instance_id = store.place("clover", 5, day=2)
        assert received == [
            OrganismAddedEvent(instance_id=instance_id, species_id="clover", slot=5, day=2)
        ]


class TestRemove:
    def test_frees_slot(self, store):
        instance_id = store.place("grass", 2)
        assert store.remove(instance_id) is True
        assert 2 in store.empty_slots()
        assert store.get_instance(instance_id) is None
        store.place("rabbit", 2)

    def test_absent_is_noop(self, store, event_bus):
        received = []
        event_bus.subscribe_all(received.append)
        assert store.remove(99) is False
        assert received == []

    def test_ids_never_reused(self, store):
        first = store.place("grass", 0)
        store.remove(first)
        assert store.place("grass", 0) == first + 1

    def test_clear_emits_removed_for_each(self, store, event_bus):
        store.place("grass", 0)
        store.place("rabbit", 1)
        removed = []
        event_bus.subscribe(OrganismRemovedEvent, removed.append)
        store.clear()
        assert [e.instance_id for e in removed] == [1, 2]
        assert len(store) == 0
        assert store.next_instance_id == 3


class TestQueries:
    def test_counts_and_order(self, store, populate):
        placed = populate(store, producers=3, primaries=2, secondaries=1)
        assert store.count_at_level(TrophicLevel.PRODUCER) == 3
        assert store.count_at_level(TrophicLevel.PRIMARY) == 2
        assert store.level_counts()[TrophicLevel.SECONDARY] == 1
        assert [i.instance_id for i in store.all_instances()] == (
            placed[TrophicLevel.PRODUCER]
            + placed[TrophicLevel.PRIMARY]
            + placed[TrophicLevel.SECONDARY]
        )

    def test_empty_slots(self, store, config):
        store.place("grass", 0)
        store.place("grass", 10)
        empty = store.empty_slots()
        assert len(empty) == config.total_slots - 2
        assert 0 not in empty and 10 not in empty

    def test_slot_bijection(self, store, populate):
        populate(store, producers=4, primaries=2)
        occupied = store.occupied_slots()
        assert len(occupied) == len(store)
        for slot, instance_id in occupied.items():
            assert store.get_instance(instance_id).slot == slot
            assert store.instance_at(slot).instance_id == instance_id


class TestRestore:
    def test_restore_replaces_contents(self, store):
        store.place("grass", 0)
        store.restore(
            [
                OrganismInstance(4, "rabbit", 9, HealthStatus.DEAD, 3),
                OrganismInstance(2, "grass", 1, HealthStatus.HEALTHY, 1),
            ],
            next_instance_id=6,
        )
        assert [i.instance_id for i in store.all_instances()] == [2, 4]
        assert store.occupied_slots() == {1: 2, 9: 4}
        assert store.place("fox", 0) == 6

    def test_restore_rejects_shared_slot(self, store):
        with pytest.raises(SlotOccupiedError):
            store.restore(
                [OrganismInstance(1, "grass", 0), OrganismInstance(2, "grass", 0)],
                next_instance_id=3,
            )

    def test_restore_rejects_id_at_or_above_next(self, store):
        with pytest.raises(ValueError):
            store.restore([OrganismInstance(3, "grass", 0)], next_instance_id=3)
