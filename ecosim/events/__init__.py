"""Events module for game notifications.

This module provides the EventBus the rendering and input collaborators
subscribe to, plus the typed notification definitions.
"""

from ecosim.events.domain_events import (
    DayChangedEvent,
    GameOverEvent,
    OrganismAddedEvent,
    OrganismRemovedEvent,
    SimulationCompleteEvent,
    event_to_dict,
)
from ecosim.events.event_bus import EventBus

__all__ = [
    "DayChangedEvent",
    "EventBus",
    "GameOverEvent",
    "OrganismAddedEvent",
    "OrganismRemovedEvent",
    "SimulationCompleteEvent",
    "event_to_dict",
]
