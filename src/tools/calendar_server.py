"""Calendar tool server.

Exposes calendar lookups and calendar intelligence as named tools
(``calendar.*``) and ``calendar://`` resources. Analysis tools work on a
cached window of upcoming events that is refetched once it is older than
the cache TTL.
"""

import asyncio
import time
from datetime import datetime, timedelta
from typing import Any, Literal

import structlog
from pydantic import Field, field_validator

from src.adapters.base import EventSource
from src.models.base import ApiModel
from src.schedule.analyzer import CalendarAnalyzer
from src.schedule.schemas import (
    CalendarAnalysisRequest,
    CalendarAnalysisResponse,
    CalendarEvent,
    DailyInsights,
    MeetingPreparation,
    assume_local_timezone,
)
from src.tools.base import (
    Resource,
    ResourceNotFoundError,
    Tool,
    ToolNotFoundError,
)

logger = structlog.get_logger()

UPCOMING_RESOURCE_DAYS = 7
UPCOMING_RESOURCE_LIMIT = 50


class EventNotFoundError(LookupError):
    """Raised when a tool needs an event the source does not have."""


class ListEventsParams(ApiModel):
    time_min: datetime
    time_max: datetime
    max_results: int = Field(default=10, ge=1, le=2500)

    @field_validator("time_min", "time_max")
    @classmethod
    def _assume_local_timezone(cls, value: datetime) -> datetime:
        return assume_local_timezone(value)


class GetEventParams(ApiModel):
    event_id: str


class MeetingPrepParams(ApiModel):
    event_id: str
    prep_type: Literal["agenda", "notes", "summary", "action-items"] | None = None


class CalendarToolServer:
    """Tool server backed by an event source and a calendar analyzer.

    Implements the ToolServer protocol.
    """

    id = "calendar-tool-server"
    name = "Calendar Tool Server"
    description = "Calendar events, schedule analysis and meeting preparation"

    def __init__(
        self,
        event_source: EventSource,
        analyzer: CalendarAnalyzer | None = None,
        cache_ttl_seconds: int = 300,
        lookahead_days: int = 30,
        fetch_limit: int = 100,
    ):
        """Initialize server.

        Args:
            event_source: Where events come from
            analyzer: Calendar analyzer (a default one if None)
            cache_ttl_seconds: How long a fetched window is reused
            lookahead_days: Days ahead covered by the cached window
            fetch_limit: Maximum events fetched into the cache
        """
        self._source = event_source
        self._analyzer = analyzer or CalendarAnalyzer()
        self._cache_ttl = cache_ttl_seconds
        self._lookahead = timedelta(days=lookahead_days)
        self._fetch_limit = fetch_limit
        self._cached_events: list[CalendarEvent] = []
        self._fetched_at: float | None = None
        self._lock = asyncio.Lock()
        self._tools = self._build_tools()
        self._resources = self._build_resources()

    # ToolServer protocol

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def list_resources(self) -> list[Resource]:
        return list(self._resources)

    def get_tool(self, name: str) -> Tool | None:
        return self._tools.get(name)

    async def execute_tool(self, name: str, params: dict[str, Any]) -> Any:
        """Execute a tool by name.

        Raises:
            ToolNotFoundError: If this server has no such tool
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(f"Tool {name} not found")
        return await tool.execute(params)

    async def read_resource(self, uri: str) -> Any:
        """Read a resource by URI (exact or template match).

        Raises:
            ResourceNotFoundError: If no resource matches
        """
        for resource in self._resources:
            params = resource.match(uri)
            if params is not None:
                return await resource.read(params)
        raise ResourceNotFoundError(f"Resource {uri} not found")

    # Event cache

    async def get_events(self) -> list[CalendarEvent]:
        """Cached upcoming events, refetched once older than the TTL."""
        async with self._lock:
            if self._cached_events and self._cache_is_fresh():
                return self._cached_events
            return await self._fetch()

    async def refresh_cache(self) -> int:
        """Refetch the cached window now. Returns the number of events."""
        async with self._lock:
            events = await self._fetch()
        return len(events)

    def _cache_is_fresh(self) -> bool:
        if self._fetched_at is None:
            return False
        return time.monotonic() - self._fetched_at < self._cache_ttl

    async def _fetch(self) -> list[CalendarEvent]:
        now = self._analyzer.now()
        self._cached_events = await self._source.list_events(
            now, now + self._lookahead, self._fetch_limit
        )
        self._fetched_at = time.monotonic()
        logger.debug("refreshed event cache", events=len(self._cached_events))
        return self._cached_events

    # Tool handlers

    async def _list_events(self, params: dict[str, Any]) -> list[CalendarEvent]:
        request = ListEventsParams.model_validate(params)
        return await self._source.list_events(
            request.time_min, request.time_max, request.max_results
        )

    async def _get_event(self, params: dict[str, Any]) -> CalendarEvent | None:
        request = GetEventParams.model_validate(params)
        return await self._source.get_event(request.event_id)

    async def _analyze_schedule(self, params: dict[str, Any]) -> CalendarAnalysisResponse:
        request = CalendarAnalysisRequest.model_validate(params)
        events = await self.get_events()
        return self._analyzer.analyze_schedule(request, events)

    async def _daily_insights(self, params: dict[str, Any]) -> DailyInsights:
        events = await self.get_events()
        return self._analyzer.generate_daily_insights(events)

    async def _meeting_prep(self, params: dict[str, Any]) -> MeetingPreparation:
        request = MeetingPrepParams.model_validate(params)
        event = await self._source.get_event(request.event_id)
        if event is None:
            raise EventNotFoundError(f"Event with ID {request.event_id} not found")
        return self._analyzer.generate_meeting_preparation(event)

    # Resource readers

    async def _upcoming_events(self, params: dict[str, str]) -> list[CalendarEvent]:
        now = self._analyzer.now()
        return await self._source.list_events(
            now, now + timedelta(days=UPCOMING_RESOURCE_DAYS), UPCOMING_RESOURCE_LIMIT
        )

    async def _event_details(self, params: dict[str, str]) -> CalendarEvent | None:
        return await self._source.get_event(params["eventId"])

    def _build_tools(self) -> dict[str, Tool]:
        tools = [
            Tool(
                name="calendar.listEvents",
                description="Lists calendar events within a specified time range",
                parameters={
                    "type": "object",
                    "properties": {
                        "timeMin": {"type": "string", "format": "date-time"},
                        "timeMax": {"type": "string", "format": "date-time"},
                        "maxResults": {"type": "integer"},
                    },
                    "required": ["timeMin", "timeMax"],
                },
                handler=self._list_events,
            ),
            Tool(
                name="calendar.getEvent",
                description="Gets a specific calendar event by ID",
                parameters={
                    "type": "object",
                    "properties": {"eventId": {"type": "string"}},
                    "required": ["eventId"],
                },
                handler=self._get_event,
            ),
            Tool(
                name="calendar.analyzeSchedule",
                description=(
                    "Analyzes the user's schedule to identify conflicts, changes, "
                    "and important events"
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "timeRange": {
                            "type": "string",
                            "enum": ["today", "tomorrow", "week", "month"],
                        },
                        "userId": {"type": "string"},
                        "includeDeclinedEvents": {"type": "boolean"},
                        "includeCancelledEvents": {"type": "boolean"},
                    },
                    "required": ["timeRange", "userId"],
                },
                handler=self._analyze_schedule,
            ),
            Tool(
                name="calendar.getDailyInsights",
                description="Generates insights for the current day's calendar",
                parameters={"type": "object", "properties": {}},
                handler=self._daily_insights,
            ),
            Tool(
                name="calendar.generateMeetingPrep",
                description="Generates preparation materials for an upcoming meeting",
                parameters={
                    "type": "object",
                    "properties": {
                        "eventId": {"type": "string"},
                        "prepType": {
                            "type": "string",
                            "enum": ["agenda", "notes", "summary", "action-items"],
                        },
                    },
                    "required": ["eventId"],
                },
                handler=self._meeting_prep,
            ),
        ]
        return {tool.name: tool for tool in tools}

    def _build_resources(self) -> list[Resource]:
        async def daily(params: dict[str, str]) -> DailyInsights:
            return await self._daily_insights({})

        return [
            Resource(
                uri="calendar://events/upcoming",
                content_type="application/json",
                description="Upcoming calendar events",
                reader=self._upcoming_events,
            ),
            Resource(
                uri="calendar://insights/daily",
                content_type="application/json",
                description="Daily calendar insights and alerts",
                reader=daily,
            ),
            Resource(
                uri="calendar://events/{eventId}",
                content_type="application/json",
                description="Specific calendar event details",
                reader=self._event_details,
            ),
        ]
