"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncIterator, Callable
from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DISABLE_CACHE_SCHEDULER", "1")

from src.adapters.base import InMemoryEventSource  # noqa: E402
from src.decisions.engine import DecisionEngine  # noqa: E402
from src.main import app  # noqa: E402
from src.plugins.registry import PluginRegistry  # noqa: E402
from src.schedule.analyzer import CalendarAnalyzer  # noqa: E402
from src.schedule.schemas import CalendarEvent  # noqa: E402
from src.tools.calendar_server import CalendarToolServer  # noqa: E402
from src.tools.client import ToolClient  # noqa: E402

# Tuesday morning
NOW = datetime(2025, 6, 10, 9, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed current time used by analyzers under test."""
    return NOW


@pytest.fixture
def analyzer(now: datetime) -> CalendarAnalyzer:
    """CalendarAnalyzer with a fixed clock."""
    return CalendarAnalyzer(clock=lambda: now)


@pytest.fixture
def make_event(now: datetime) -> Callable[..., CalendarEvent]:
    """Factory for calendar events starting relative to now.

    Usage:
        make_event("e1", start_in=timedelta(hours=2), minutes=45, title="Sync")
    """

    def _make(
        event_id: str,
        start_in: timedelta = timedelta(hours=1),
        minutes: int = 30,
        **fields,
    ) -> CalendarEvent:
        start = now + start_in
        fields.setdefault("title", f"Event {event_id}")
        return CalendarEvent(
            id=event_id,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            **fields,
        )

    return _make


@pytest.fixture
def event_source() -> InMemoryEventSource:
    """Empty in-memory event source."""
    return InMemoryEventSource()


@pytest.fixture
def calendar_server(
    event_source: InMemoryEventSource,
    analyzer: CalendarAnalyzer,
) -> CalendarToolServer:
    """Calendar tool server with caching disabled."""
    return CalendarToolServer(event_source, analyzer, cache_ttl_seconds=0)


@pytest.fixture
def engine() -> DecisionEngine:
    """Decision engine with an empty store and plugin registry."""
    return DecisionEngine(plugins=PluginRegistry())


@pytest.fixture
async def client(
    calendar_server: CalendarToolServer,
    engine: DecisionEngine,
) -> AsyncIterator[AsyncClient]:
    """Create async test client for FastAPI app with in-memory services."""
    tool_client = ToolClient()
    tool_client.register_server(calendar_server)

    # Set up app state
    app.state.calendar_server = calendar_server
    app.state.tool_client = tool_client
    app.state.decision_engine = engine

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up app state
    del app.state.calendar_server
    del app.state.tool_client
    del app.state.decision_engine
