"""Event sources for calendar data.

- EventSource: protocol every source implements
- InMemoryEventSource: process-local events (demo data and tests)
- GoogleCalendarAdapter: Google Calendar API via a service account
"""

from src.adapters.base import EventSource, InMemoryEventSource
from src.adapters.calendar_adapter import GoogleCalendarAdapter, to_calendar_event

__all__ = [
    "EventSource",
    "GoogleCalendarAdapter",
    "InMemoryEventSource",
    "to_calendar_event",
]
