"""Calendar intelligence module.

Schedule analysis (preparation needs, conflicts, recommendations), meeting
preparation material, and periodic refresh of cached events.
"""

from src.schedule.analyzer import CalendarAnalyzer
from src.schedule.formatter import extract_agenda, format_meeting_notes
from src.schedule.heuristics import (
    count_workdays,
    detect_back_to_back,
    determine_meeting_priority,
    generate_preparation_items,
    needs_preparation,
    sort_by_start,
    suggest_conflict_resolution,
)
from src.schedule.scheduler import (
    cache_scheduler_lifespan,
    get_scheduler,
    reset_scheduler,
)
from src.schedule.schemas import (
    CalendarAnalysisRequest,
    CalendarAnalysisResponse,
    CalendarEvent,
    CalendarInsight,
    DailyInsights,
    MeetingPreparation,
)

__all__ = [
    "CalendarAnalysisRequest",
    "CalendarAnalysisResponse",
    "CalendarAnalyzer",
    "CalendarEvent",
    "CalendarInsight",
    "DailyInsights",
    "MeetingPreparation",
    "cache_scheduler_lifespan",
    "count_workdays",
    "detect_back_to_back",
    "determine_meeting_priority",
    "extract_agenda",
    "format_meeting_notes",
    "generate_preparation_items",
    "get_scheduler",
    "needs_preparation",
    "reset_scheduler",
    "sort_by_start",
    "suggest_conflict_resolution",
]
