"""Ecosystem game exception hierarchy.

Centralised base classes so callers can catch the recoverable failures
(occupied slot, missing save) without swallowing programmer errors.
"""


class EcosimError(Exception):
    """Root of all ecosystem-game domain exceptions."""


class CatalogError(EcosimError):
    """Errors looking up species data."""


class UnknownSpeciesError(CatalogError, KeyError):
    """A species id is not present in the catalog."""

    def __init__(self, species_id: str) -> None:
        super().__init__(species_id)
        self.species_id = species_id

    def __str__(self) -> str:
        return f"Unknown species: {self.species_id!r}"


class EmptyCatalogError(CatalogError):
    """The catalog has nothing to offer in a draft."""


class PlacementError(EcosimError):
    """A placement request was rejected."""


class SlotOccupiedError(PlacementError):
    """The requested slot already holds a live organism."""

    def __init__(self, slot: int, instance_id: int) -> None:
        super().__init__(f"Slot {slot} is occupied by organism #{instance_id}")
        self.slot = slot
        self.instance_id = instance_id


class SlotOutOfRangeError(PlacementError):
    """The requested slot index is outside the grid."""

    def __init__(self, slot: int, total_slots: int) -> None:
        super().__init__(f"Slot {slot} is outside 0..{total_slots - 1}")
        self.slot = slot
        self.total_slots = total_slots


class SpeciesNotOfferedError(PlacementError):
    """The species is not part of today's draft offer."""

    def __init__(self, species_id: str) -> None:
        super().__init__(f"Species {species_id!r} is not in the current draft")
        self.species_id = species_id


class SessionError(EcosimError):
    """Errors in game session orchestration."""


class InvalidPhaseError(SessionError):
    """A command was issued in a phase that does not allow it."""


class PersistenceError(EcosimError):
    """Errors during save / load operations."""


class PersistenceUnavailableError(PersistenceError):
    """The save store could not be read or written."""


class CorruptSaveError(PersistenceError):
    """A save blob is missing fields or has the wrong shape."""
