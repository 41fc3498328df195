"""FastAPI application entry point."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI

from src.adapters.base import EventSource, InMemoryEventSource
from src.adapters.calendar_adapter import GoogleCalendarAdapter
from src.api.router import api_router
from src.config import Settings, settings
from src.decisions.engine import DecisionEngine
from src.decisions.samples import seed_engine
from src.plugins.registry import PluginRegistry
from src.schedule.analyzer import CalendarAnalyzer
from src.tools.calendar_server import CalendarToolServer
from src.tools.client import ToolClient

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _create_event_source(config: Settings) -> EventSource:
    """Google Calendar when credentials are configured, else in-memory."""
    adapter = GoogleCalendarAdapter(
        credentials_path=config.google_calendar_credentials,
        calendar_id=config.calendar_id,
    )
    if adapter.is_configured:
        logger.info(f"Using Google Calendar: {config.calendar_id}")
        return adapter

    logger.info("No calendar credentials, using in-memory event source")
    return InMemoryEventSource()


async def _initialize_calendar(app: FastAPI, config: Settings) -> None:
    """Initialize the calendar tool server and the tool client."""
    analyzer = CalendarAnalyzer()
    calendar_server = CalendarToolServer(
        event_source=_create_event_source(config),
        analyzer=analyzer,
        cache_ttl_seconds=config.event_cache_ttl_seconds,
        lookahead_days=config.event_lookahead_days,
        fetch_limit=config.event_fetch_limit,
    )
    tool_client = ToolClient()
    tool_client.register_server(calendar_server)

    app.state.analyzer = analyzer
    app.state.calendar_server = calendar_server
    app.state.tool_client = tool_client
    logger.info(f"Calendar tools registered: {len(tool_client.list_tools())}")


async def _initialize_decisions(app: FastAPI, config: Settings) -> None:
    """Initialize the plugin registry and decision engine."""
    plugins = PluginRegistry()
    engine = DecisionEngine(plugins=plugins)
    if config.seed_sample_data:
        await seed_engine(engine)

    app.state.plugins = plugins
    app.state.decision_engine = engine
    logger.info("DecisionEngine initialized")


def _get_cache_scheduler_context(app: FastAPI, config: Settings):
    """Get cache scheduler lifespan context manager.

    Returns a no-op context if scheduler is disabled via environment.
    """
    from src.schedule.scheduler import cache_scheduler_lifespan

    # Allow disabling scheduler for tests
    if os.environ.get("DISABLE_CACHE_SCHEDULER"):

        @asynccontextmanager
        async def noop_context():
            yield

        return noop_context()

    return cache_scheduler_lifespan(
        app.state.calendar_server,
        minutes=config.cache_refresh_minutes,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Initialize event source, analyzer and calendar tool server
    - Initialize plugin registry and decision engine (optionally seeded)
    - Start the event cache refresh scheduler

    Shutdown:
    - Stop the scheduler
    - Unregister plugins
    """
    logger.info("Starting Management Dashboard...")

    await _initialize_calendar(app, settings)
    await _initialize_decisions(app, settings)

    async with AsyncExitStack() as stack:
        await stack.enter_async_context(_get_cache_scheduler_context(app, settings))
        yield

    # Shutdown
    logger.info("Shutting down Management Dashboard...")
    await app.state.decision_engine.wait_for_outcomes()
    for plugin in app.state.plugins.all():
        await app.state.plugins.unregister(plugin.metadata.id)


app = FastAPI(
    title=settings.app_name,
    description="Calendar intelligence and rule-based decisions for managers",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
