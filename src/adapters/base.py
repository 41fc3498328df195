"""Base types for calendar event sources.

This module defines the EventSource protocol implemented by adapters that
supply calendar events (Google Calendar, in-memory fixtures, ...).
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from src.schedule.schemas import CalendarEvent


@runtime_checkable
class EventSource(Protocol):
    """Protocol for read-only calendar event sources.

    Sources implement this protocol for structural subtyping -
    they don't need to inherit, just implement the methods.
    """

    async def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 10,
    ) -> list[CalendarEvent]:
        """List events starting in a time window, ordered by start time.

        Args:
            time_min: Start of time window
            time_max: End of time window
            max_results: Maximum events to return

        Returns:
            CalendarEvent list
        """
        ...

    async def get_event(self, event_id: str) -> CalendarEvent | None:
        """Get a single event.

        Args:
            event_id: Event ID

        Returns:
            The event, or None if it does not exist
        """
        ...


class InMemoryEventSource:
    """Event source backed by a list held in memory.

    Used for seeded demo data and tests.
    """

    def __init__(self, events: list[CalendarEvent] | None = None):
        self._events: dict[str, CalendarEvent] = {}
        for event in events or []:
            self.add(event)

    def add(self, event: CalendarEvent) -> None:
        """Add or replace an event."""
        self._events[event.id] = event

    def remove(self, event_id: str) -> bool:
        """Remove an event. Returns False if it was not present."""
        return self._events.pop(event_id, None) is not None

    async def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 10,
    ) -> list[CalendarEvent]:
        matching = [
            e for e in self._events.values() if time_min <= e.start_time <= time_max
        ]
        matching.sort(key=lambda e: e.start_time)
        return matching[:max_results]

    async def get_event(self, event_id: str) -> CalendarEvent | None:
        return self._events.get(event_id)
