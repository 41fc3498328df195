"""Calendar analyzer.

Turns a list of calendar events into insights (preparation needs,
conflicts, changes), a daily digest, a schedule analysis with
recommendations, and meeting preparation packages. Stateless: the same
events and clock give the same results.
"""

import calendar
from collections.abc import Callable
from datetime import datetime, time, timedelta

import structlog

from src.models.base import local_now
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
from src.schedule.schemas import (
    AnalysisSummary,
    AttendeeContext,
    CalendarAnalysisRequest,
    CalendarAnalysisResponse,
    CalendarEvent,
    CalendarInsight,
    ConflictSummary,
    DailyInsights,
    EventChange,
    InsightAction,
    MeetingPreparation,
    PreparationTask,
    Recommendation,
    RelevantDocument,
    TimeWindow,
    UpcomingMeeting,
)

logger = structlog.get_logger()

# Only meetings starting within this many hours are checked for preparation
PREP_LOOKAHEAD_HOURS = 24
# Overlaps of this many minutes or fewer are not conflicts
MIN_CONFLICT_OVERLAP_MINUTES = 5
WORKDAY_HOURS = 8
MEETING_OVERLOAD_PERCENT = 70


def _add_month(moment: datetime) -> datetime:
    """Same time one calendar month later, clamped to the month's last day."""
    year = moment.year + moment.month // 12
    month = moment.month % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def _end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


class CalendarAnalyzer:
    """Derives insights and recommendations from calendar events."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        """Initialize analyzer.

        Args:
            clock: Returns the current aware datetime (defaults to local now)
        """
        self._clock = clock or local_now

    def now(self) -> datetime:
        """Current time according to the analyzer's clock."""
        return self._clock()

    def analyze_events(self, events: list[CalendarEvent]) -> list[CalendarInsight]:
        """Run every detector over the events.

        Order is fixed: preparation, conflicts, changes.
        """
        insights: list[CalendarInsight] = []
        insights.extend(self._find_meetings_needing_preparation(events))
        insights.extend(self._detect_conflicts(events))
        insights.extend(self._detect_changes(events))
        return insights

    def generate_daily_insights(self, events: list[CalendarEvent]) -> DailyInsights:
        """Build today's digest.

        Upcoming meetings are limited to events starting between local
        midnight today and local midnight tomorrow, but conflicts and
        preparation needs are evaluated across all supplied events.
        """
        now = self.now()
        today = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
        tomorrow = today + timedelta(days=1)

        todays_events = sort_by_start(
            [e for e in events if today <= e.start_time < tomorrow]
        )
        insights = self.analyze_events(events)

        prep_by_event: dict[str, CalendarInsight] = {}
        for insight in insights:
            if insight.type == "preparation-needed":
                prep_by_event.setdefault(insight.related_event_ids[0], insight)

        upcoming = []
        for event in todays_events:
            prep = prep_by_event.get(event.id)
            upcoming.append(
                UpcomingMeeting(
                    id=event.id,
                    title=event.title,
                    start_time=event.start_time,
                    end_time=event.end_time,
                    needs_preparation=prep is not None,
                    preparation_items=(prep.metadata or {}).get("preparationItems")
                    if prep
                    else None,
                )
            )

        conflicts = [
            ConflictSummary(
                id=insight.id,
                description=insight.description,
                event_ids=insight.related_event_ids,
                suggested_resolution=(insight.metadata or {}).get("suggestedResolution"),
            )
            for insight in insights
            if insight.type == "conflict"
        ]

        changes = [
            EventChange(
                id=insight.id,
                description=insight.description,
                event_id=insight.related_event_ids[0],
                change_type=(insight.metadata or {}).get("changeType", "time"),
            )
            for insight in insights
            if insight.type == "change"
        ]

        preparation_tasks = [
            PreparationTask(
                id=insight.id,
                event_id=insight.related_event_ids[0],
                title=insight.title,
                description=insight.description,
                due_by=(insight.metadata or {}).get("dueBy") or insight.expires_at,
            )
            for insight in insights
            if insight.type == "preparation-needed"
        ]

        return DailyInsights(
            date=today.date().isoformat(),
            upcoming_meetings=upcoming,
            conflicts=conflicts,
            changes=changes,
            preparation_tasks=preparation_tasks,
        )

    def resolve_time_range(self, time_range: str, now: datetime) -> datetime:
        """Compute the end of an analysis window starting now."""
        if time_range == "today":
            return _end_of_day(now)
        if time_range == "tomorrow":
            return _end_of_day(now + timedelta(days=1))
        if time_range == "month":
            return _add_month(now)
        return now + timedelta(days=7)

    def analyze_schedule(
        self,
        request: CalendarAnalysisRequest,
        events: list[CalendarEvent],
    ) -> CalendarAnalysisResponse:
        """Analyze the requesting user's schedule over a time range.

        Past events, events after the window, events the user declined and
        cancelled events are dropped (the last two unless requested).
        """
        now = self.now()
        end = self.resolve_time_range(request.time_range, now)

        selected = [e for e in events if self._in_analysis(e, request, now, end)]
        insights = self.analyze_events(selected)

        total_hours = sum(e.duration_minutes for e in selected) / 60
        work_hours = count_workdays(now, end) * WORKDAY_HOURS
        busy_percentage = (total_hours / work_hours) * 100 if work_hours > 0 else 0.0
        conflict_count = sum(1 for i in insights if i.type == "conflict")

        logger.debug(
            "analyzed schedule",
            time_range=request.time_range,
            events=len(selected),
            conflicts=conflict_count,
        )

        return CalendarAnalysisResponse(
            time_range=TimeWindow(start=now, end=end),
            summary=AnalysisSummary(
                total_events=len(selected),
                total_meeting_hours=total_hours,
                busy_hours_percentage=busy_percentage,
                conflict_count=conflict_count,
                upcoming_deadlines=0,
            ),
            insights=insights,
            recommendations=self._recommend(insights, selected, busy_percentage),
        )

    def generate_meeting_preparation(self, event: CalendarEvent) -> MeetingPreparation:
        """Build the preparation package for a meeting.

        Attendee notes and previous outcomes stay empty: no meeting
        history is stored.
        """
        return MeetingPreparation(
            event_id=event.id,
            title=f"Preparation for: {event.title}",
            agenda=extract_agenda(event.description),
            notes=format_meeting_notes(event),
            action_items=[],
            relevant_documents=[
                RelevantDocument(
                    title=attachment.title,
                    url=attachment.file_url,
                    description=attachment.mime_type or None,
                )
                for attachment in event.attachments
                if attachment.file_url
            ],
            attendee_context=[
                AttendeeContext(
                    attendee_id=attendee.email,
                    name=attendee.display_name,
                )
                for attendee in event.attendees
            ],
        )

    @staticmethod
    def _in_analysis(
        event: CalendarEvent,
        request: CalendarAnalysisRequest,
        now: datetime,
        end: datetime,
    ) -> bool:
        if event.start_time < now or event.start_time > end:
            return False

        if not request.include_declined_events:
            for attendee in event.attendees:
                if attendee.email == request.user_id:
                    if attendee.response_status == "declined":
                        return False
                    break

        if not request.include_cancelled_events and event.status == "cancelled":
            return False

        return True

    def _find_meetings_needing_preparation(
        self, events: list[CalendarEvent]
    ) -> list[CalendarInsight]:
        now = self.now()
        horizon = now + timedelta(hours=PREP_LOOKAHEAD_HOURS)
        insights = []

        for event in events:
            if not (now < event.start_time <= horizon):
                continue
            if not needs_preparation(event):
                continue

            start_label = event.start_time.astimezone().strftime("%H:%M")
            insights.append(
                CalendarInsight(
                    id=f"prep-{event.id}",
                    type="preparation-needed",
                    title=f"Prepare for: {event.title}",
                    description=(
                        f'You have a meeting "{event.title}" at {start_label} '
                        "that requires preparation."
                    ),
                    priority=determine_meeting_priority(event),
                    related_event_ids=[event.id],
                    created_at=now,
                    expires_at=event.start_time,
                    actions=[
                        InsightAction(
                            id=f"prepare-{event.id}",
                            label="Prepare Now",
                            action_type="prepare",
                            data={"eventId": event.id},
                        )
                    ],
                    metadata={
                        "preparationItems": generate_preparation_items(event),
                        "dueBy": event.start_time.isoformat(),
                    },
                )
            )

        return insights

    def _detect_conflicts(self, events: list[CalendarEvent]) -> list[CalendarInsight]:
        """Emit one insight per event that significantly overlaps a later one.

        Only the first significant overlap of each event is reported.
        """
        now = self.now()
        ordered = sort_by_start(events)
        insights = []

        for i, first in enumerate(ordered):
            for second in ordered[i + 1 :]:
                if second.start_time >= first.end_time:
                    continue

                overlap_start = max(first.start_time, second.start_time)
                overlap_end = min(first.end_time, second.end_time)
                overlap_minutes = (overlap_end - overlap_start).total_seconds() / 60
                if overlap_minutes <= MIN_CONFLICT_OVERLAP_MINUTES:
                    continue

                pair = f"{first.id}-{second.id}"
                day = first.start_time.astimezone().strftime("%Y-%m-%d")
                insights.append(
                    CalendarInsight(
                        id=f"conflict-{pair}",
                        type="conflict",
                        title="Schedule Conflict",
                        description=(
                            f'You have a scheduling conflict between "{first.title}" '
                            f'and "{second.title}" on {day}.'
                        ),
                        priority="high",
                        related_event_ids=[first.id, second.id],
                        created_at=now,
                        expires_at=first.start_time,
                        actions=[
                            InsightAction(
                                id=f"resolve-{pair}",
                                label="Resolve Conflict",
                                action_type="reschedule",
                                data={"eventIds": [first.id, second.id]},
                            )
                        ],
                        metadata={
                            "overlapMinutes": overlap_minutes,
                            "suggestedResolution": suggest_conflict_resolution(
                                first, second
                            ),
                        },
                    )
                )
                break

        return insights

    def _detect_changes(self, events: list[CalendarEvent]) -> list[CalendarInsight]:
        # No event snapshots are kept between calls, so there is nothing to diff.
        return []

    def _recommend(
        self,
        insights: list[CalendarInsight],
        events: list[CalendarEvent],
        busy_percentage: float,
    ) -> list[Recommendation]:
        recommendations = []

        if busy_percentage > MEETING_OVERLOAD_PERCENT:
            recommendations.append(
                Recommendation(
                    id="rec-meeting-overload",
                    type="meeting-reduction",
                    description=(
                        "You have a high meeting load. Consider blocking focus time "
                        "or declining non-essential meetings."
                    ),
                    priority="high",
                )
            )

        if detect_back_to_back(events):
            recommendations.append(
                Recommendation(
                    id="rec-back-to-back",
                    type="meeting-spacing",
                    description=(
                        "You have several back-to-back meetings. Consider adding "
                        "buffer time between meetings."
                    ),
                    priority="medium",
                )
            )

        conflicts = sum(1 for i in insights if i.type == "conflict")
        if conflicts:
            recommendations.append(
                Recommendation(
                    id="rec-conflicts",
                    type="conflict-resolution",
                    description=(
                        f"You have {conflicts} scheduling conflicts. Review and "
                        "resolve them as soon as possible."
                    ),
                    priority="high",
                )
            )

        prep_needed = sum(1 for i in insights if i.type == "preparation-needed")
        if prep_needed:
            recommendations.append(
                Recommendation(
                    id="rec-preparation",
                    type="meeting-preparation",
                    description=(
                        f"You have {prep_needed} meetings that require preparation. "
                        "Schedule time to prepare."
                    ),
                    priority="medium",
                )
            )

        return recommendations
