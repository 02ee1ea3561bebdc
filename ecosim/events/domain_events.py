"""Notification definitions for the rendering collaborators.

These events are data-only (frozen dataclasses) and carry all context a
handler needs, so nothing has to call back into the session to draw them.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ecosim.engine import DayResult


@dataclass(frozen=True)
class OrganismAddedEvent:
    """An organism was placed into a slot.

    Attributes:
        instance_id: ID of the new organism
        species_id: Its species
        slot: The grid slot it occupies
        day: Day it was added on
    """

    instance_id: int
    species_id: str
    slot: int
    day: int


@dataclass(frozen=True)
class OrganismRemovedEvent:
    """An organism left the grid (death commit or game reset)."""

    instance_id: int
    species_id: str
    slot: int


@dataclass(frozen=True)
class DayChangedEvent:
    """The day counter changed; a new draft is available unless the game ended."""

    day: int


@dataclass(frozen=True)
class SimulationCompleteEvent:
    """A day was simulated. Deaths are staged, not yet committed."""

    result: "DayResult"


@dataclass(frozen=True)
class GameOverEvent:
    """The final day passed. Emitted once per game."""

    won: bool
    score: int


def event_to_dict(event: object) -> dict[str, Any]:
    """Convert a notification to a JSON-friendly dict with a ``type`` key."""
    payload: dict[str, Any] = {"type": type(event).__name__}
    for f in fields(event):  # type: ignore[arg-type]
        value = getattr(event, f.name)
        if hasattr(value, "to_dict"):
            payload[f.name] = value.to_dict()
        else:
            payload[f.name] = value
    return payload


__all__ = [
    "DayChangedEvent",
    "GameOverEvent",
    "OrganismAddedEvent",
    "OrganismRemovedEvent",
    "SimulationCompleteEvent",
    "event_to_dict",
]
