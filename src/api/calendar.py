"""API endpoints for calendar intelligence.

Schedule analysis, the daily digest and meeting preparation, served from
the calendar tool server's cached event window.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_calendar_server
from src.schedule.schemas import (
    CalendarAnalysisRequest,
    CalendarAnalysisResponse,
    DailyInsights,
    MeetingPreparation,
)
from src.tools.calendar_server import CalendarToolServer, EventNotFoundError

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.post("/analyze", response_model=CalendarAnalysisResponse)
async def analyze_schedule(
    request: CalendarAnalysisRequest,
    server: Annotated[CalendarToolServer, Depends(get_calendar_server)],
) -> CalendarAnalysisResponse:
    """Analyze a user's schedule over a time range.

    Args:
        request: Time range, user and declined/cancelled filters

    Returns:
        Summary figures, insights and recommendations
    """
    return await server.execute_tool(
        "calendar.analyzeSchedule", request.model_dump(by_alias=True)
    )


@router.get("/insights/daily", response_model=DailyInsights)
async def daily_insights(
    server: Annotated[CalendarToolServer, Depends(get_calendar_server)],
) -> DailyInsights:
    """Get today's meetings, conflicts and preparation tasks."""
    return await server.execute_tool("calendar.getDailyInsights", {})


@router.get("/events/{event_id}/prep", response_model=MeetingPreparation)
async def meeting_preparation(
    event_id: str,
    server: Annotated[CalendarToolServer, Depends(get_calendar_server)],
) -> MeetingPreparation:
    """Get the preparation package for a meeting.

    Raises:
        HTTPException: 404 if the event does not exist
    """
    try:
        return await server.execute_tool(
            "calendar.generateMeetingPrep", {"eventId": event_id}
        )
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
