"""Synchronous event bus for game notifications.

The EventBus provides a lightweight, synchronous pub/sub mechanism so the
domain never needs to know who is rendering it.

Design goals:
- Zero overhead when no subscribers (single dict lookup)
- Synchronous, so notifications arrive in the order operations occur
- Type-safe dispatch via event type
"""

from __future__ import annotations

from collections import defaultdict
from typing import TypeVar
from collections.abc import Callable

T = TypeVar("T")


class EventBus:
    """Synchronous event bus for game notifications.

    Events are dispatched immediately to all registered handlers.

    Example:
        bus = EventBus()
        bus.subscribe(OrganismAddedEvent, draw_organism)
        bus.emit(OrganismAddedEvent(instance_id=1, species_id="grass", slot=0, day=1))
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)
        self._catch_all: list[Callable[[object], None]] = []

    def emit(self, event: object) -> None:
        """Emit an event to all registered handlers.

        Type-specific handlers run first, in registration order, followed by
        catch-all handlers.

        Args:
            event: The notification to dispatch
        """
        handlers = self._handlers.get(type(event))
        if handlers:
            for handler in list(handlers):
                handler(event)
        for handler in list(self._catch_all):
            handler(event)

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for a specific event type.

        Args:
            event_type: The event class to subscribe to
            handler: Callable that receives the event instance
        """
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: Callable[[object], None]) -> None:
        """Register a handler that receives every event."""
        self._catch_all.append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler for a specific event type.

        Returns:
            True if handler was found and removed, False otherwise
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def unsubscribe_all(self, handler: Callable[[object], None]) -> bool:
        if handler in self._catch_all:
            self._catch_all.remove(handler)
            return True
        return False

    def clear_subscribers(self) -> None:
        """Remove all registered handlers."""
        self._handlers.clear()
        self._catch_all.clear()

    def subscriber_count(self, event_type: type) -> int:
        """Get the number of handlers registered for an event type."""
        return len(self._handlers.get(event_type, []))
