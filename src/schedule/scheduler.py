"""APScheduler integration for periodic event cache refresh.

Keeps the calendar tool server's cached event window warm so analysis
requests rarely wait on the event source.
"""

from contextlib import asynccontextmanager
from datetime import UTC
from typing import TYPE_CHECKING

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from src.tools.calendar_server import CalendarToolServer

logger = structlog.get_logger()

CACHE_REFRESH_JOB_ID = "event_cache_refresh"

# Module-level scheduler instance
_scheduler: AsyncIOScheduler | None = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the scheduler instance.

    Returns:
        AsyncIOScheduler instance
    """
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(timezone=UTC)
    return _scheduler


def reset_scheduler() -> None:
    """Reset the scheduler instance (for testing)."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None


@asynccontextmanager
async def cache_scheduler_lifespan(
    server: "CalendarToolServer",
    minutes: int = 5,
) -> "AsyncGenerator[None, None]":
    """Lifespan context manager for the cache refresh scheduler.

    Starts the scheduler with a job that refreshes the server's event
    cache every ``minutes`` minutes. Shuts down cleanly on exit.

    Usage:
        async with cache_scheduler_lifespan(server):
            # Scheduler is running
            yield
        # Scheduler stopped
    """
    scheduler = get_scheduler()

    scheduler.add_job(
        refresh_event_cache,
        "interval",
        minutes=minutes,
        args=[server],
        id=CACHE_REFRESH_JOB_ID,
        replace_existing=True,
        max_instances=1,
    )

    logger.info("Starting cache scheduler", minutes=minutes)
    scheduler.start()

    try:
        yield
    finally:
        logger.info("Shutting down cache scheduler")
        scheduler.shutdown(wait=False)


async def refresh_event_cache(server: "CalendarToolServer") -> None:
    """Scheduled job: refetch the server's cached event window."""
    try:
        count = await server.refresh_cache()
        logger.debug("Event cache refreshed", events=count)
    except Exception as e:
        logger.error("Event cache refresh failed", error=str(e))
