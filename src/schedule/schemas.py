"""Schemas for calendar intelligence.

Defines calendar events as supplied by an event source, the insights
derived from them, and the request/response shapes of schedule analysis
and meeting preparation.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from src.models.base import ApiModel, ImmutableModel

ResponseStatus = Literal["accepted", "declined", "tentative", "needsAction"]
EventStatus = Literal["confirmed", "tentative", "cancelled"]
InsightType = Literal[
    "upcoming-meeting", "conflict", "change", "preparation-needed", "follow-up"
]
InsightPriority = Literal["low", "medium", "high", "critical"]
RecommendationPriority = Literal["low", "medium", "high"]
TimeRangeName = Literal["today", "tomorrow", "week", "month"]
ChangeType = Literal["time", "location", "attendees", "cancelled", "new"]


def assume_local_timezone(value: datetime) -> datetime:
    """Interpret a naive datetime in the server's local timezone."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


class Attendee(ImmutableModel):
    """A person invited to an event."""

    id: str | None = Field(default=None)
    email: str = Field(description="Attendee email address")
    name: str | None = Field(default=None, description="Display name")
    response_status: ResponseStatus = Field(default="needsAction")
    optional: bool = Field(default=False)
    organizer: bool = Field(default=False)

    @property
    def display_name(self) -> str:
        """Name if known, otherwise the email local part."""
        return self.name or self.email.split("@")[0]


class Attachment(ImmutableModel):
    """A file attached to an event."""

    id: str | None = Field(default=None)
    title: str = Field(default="")
    file_url: str = Field(default="")
    mime_type: str = Field(default="")
    icon_link: str | None = Field(default=None)


class Reminder(ImmutableModel):
    """An event reminder."""

    type: Literal["email", "popup", "notification"] = Field(default="popup")
    minutes: int = Field(ge=0)


class CalendarEvent(ImmutableModel):
    """Calendar event supplied by an event source.

    Timestamps are timezone-aware; naive values are read as local time.
    """

    id: str = Field(description="Calendar event ID")
    title: str = Field(default="", description="Event title/summary")
    description: str | None = Field(default=None)
    start_time: datetime = Field(description="Event start")
    end_time: datetime = Field(description="Event end")
    location: str | None = Field(default=None)
    attendees: list[Attendee] = Field(default_factory=list)
    organizer: Attendee | None = Field(default=None)
    recurrence: list[str] | None = Field(default=None)
    status: EventStatus = Field(default="confirmed")
    meeting_link: str | None = Field(default=None)
    attachments: list[Attachment] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_local_timezone(cls, value: datetime) -> datetime:
        return assume_local_timezone(value)

    @property
    def duration_minutes(self) -> float:
        """Length of the event in minutes."""
        return (self.end_time - self.start_time).total_seconds() / 60

    @property
    def text(self) -> str:
        """Lowercased title and description, for keyword matching."""
        return f"{self.title} {self.description or ''}".lower()


class InsightAction(ImmutableModel):
    """Something the user can do about an insight."""

    id: str
    label: str
    action_type: Literal[
        "reschedule", "prepare", "follow-up", "cancel", "join", "custom"
    ]
    data: dict[str, Any] | None = Field(default=None)


class CalendarInsight(ImmutableModel):
    """A single detected fact about the calendar."""

    id: str = Field(description="Derived from the related event ids")
    type: InsightType
    title: str
    description: str
    priority: InsightPriority
    related_event_ids: list[str] = Field(min_length=1)
    created_at: datetime
    expires_at: datetime | None = Field(default=None)
    actions: list[InsightAction] | None = Field(default=None)
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Type-specific extras: overlapMinutes, suggestedResolution, "
        "preparationItems, dueBy, changeType",
    )


class UpcomingMeeting(ApiModel):
    """A meeting starting today."""

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    needs_preparation: bool
    preparation_items: list[str] | None = Field(default=None)


class ConflictSummary(ApiModel):
    """A conflict projected for the daily view."""

    id: str
    description: str
    event_ids: list[str]
    suggested_resolution: str | None = Field(default=None)


class EventChange(ApiModel):
    """A change to an event projected for the daily view."""

    id: str
    description: str
    event_id: str
    change_type: ChangeType = Field(default="time")


class PreparationTask(ApiModel):
    """A preparation to-do projected for the daily view."""

    id: str
    event_id: str
    title: str
    description: str
    due_by: datetime | None = Field(default=None)


class DailyInsights(ApiModel):
    """Insights for a single local day."""

    date: str = Field(description="Local date, YYYY-MM-DD")
    upcoming_meetings: list[UpcomingMeeting] = Field(default_factory=list)
    conflicts: list[ConflictSummary] = Field(default_factory=list)
    changes: list[EventChange] = Field(default_factory=list)
    preparation_tasks: list[PreparationTask] = Field(default_factory=list)


class RelevantDocument(ApiModel):
    """A document worth reading before a meeting."""

    title: str
    url: str
    description: str | None = Field(default=None)


class AttendeeContext(ApiModel):
    """What to know about an attendee going into a meeting."""

    attendee_id: str
    name: str
    notes: str = Field(default="")
    previous_meeting_outcomes: list[str] = Field(default_factory=list)


class MeetingPreparation(ApiModel):
    """Preparation package for a single meeting."""

    event_id: str
    title: str
    agenda: list[str] = Field(default_factory=list)
    notes: str = Field(default="")
    action_items: list[str] = Field(default_factory=list)
    relevant_documents: list[RelevantDocument] = Field(default_factory=list)
    attendee_context: list[AttendeeContext] = Field(default_factory=list)


class CalendarAnalysisRequest(ApiModel):
    """Parameters of a schedule analysis."""

    time_range: TimeRangeName = Field(default="week")
    user_id: str = Field(description="Email of the user whose calendar is analyzed")
    include_declined_events: bool = Field(default=False)
    include_cancelled_events: bool = Field(default=False)


class TimeWindow(ApiModel):
    """Concrete window an analysis covered."""

    start: datetime
    end: datetime


class AnalysisSummary(ApiModel):
    """Aggregate figures of a schedule analysis."""

    total_events: int
    total_meeting_hours: float
    busy_hours_percentage: float
    conflict_count: int
    upcoming_deadlines: int = Field(default=0)


class Recommendation(ApiModel):
    """Advice generated from a schedule analysis."""

    id: str
    type: str
    description: str
    priority: RecommendationPriority


class CalendarAnalysisResponse(ApiModel):
    """Result of a schedule analysis."""

    time_range: TimeWindow
    summary: AnalysisSummary
    insights: list[CalendarInsight] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
