"""Heuristics for classifying meetings.

Pure functions: preparation need, meeting priority, preparation items,
conflict resolution advice, back-to-back detection and workday counting.
"""

from datetime import datetime, timedelta

from src.schedule.schemas import CalendarEvent, InsightPriority

# Meetings longer than this need preparation
PREP_DURATION_MINUTES = 30
# Meetings with more attendees than this need preparation
PREP_ATTENDEE_COUNT = 3

PREPARATION_KEYWORDS = (
    "review",
    "discuss",
    "planning",
    "strategy",
    "decision",
    "presentation",
    "report",
    "update",
    "sync",
    "alignment",
    "interview",
    "evaluation",
    "assessment",
    "quarterly",
    "annual",
)

CRITICAL_KEYWORDS = (
    "urgent",
    "critical",
    "emergency",
    "important",
    "priority",
    "deadline",
    "review",
    "decision",
    "approval",
    "executive",
)

ONE_ON_ONE_MARKERS = ("1:1", "one on one", "1-on-1")

HIGH_PRIORITY_ATTENDEE_COUNT = 5
HIGH_PRIORITY_DURATION_MINUTES = 60

# Gap below which consecutive meetings count as back-to-back
BACK_TO_BACK_BUFFER_MINUTES = 15


def needs_preparation(event: CalendarEvent) -> bool:
    """Decide whether a meeting needs preparation.

    True when the meeting runs over 30 minutes, has more than 3 attendees,
    or mentions a preparation keyword in its title or description.
    """
    if event.duration_minutes > PREP_DURATION_MINUTES:
        return True

    if len(event.attendees) > PREP_ATTENDEE_COUNT:
        return True

    text = event.text
    return any(keyword in text for keyword in PREPARATION_KEYWORDS)


def determine_meeting_priority(event: CalendarEvent) -> InsightPriority:
    """Priority of a meeting. The first matching rule wins.

    Order: 1:1 in the title, more than 5 attendees, longer than an hour,
    critical keyword in title or description. Anything else is medium.
    """
    title = event.title.lower()
    if any(marker in title for marker in ONE_ON_ONE_MARKERS):
        return "high"

    if len(event.attendees) > HIGH_PRIORITY_ATTENDEE_COUNT:
        return "high"

    if event.duration_minutes > HIGH_PRIORITY_DURATION_MINUTES:
        return "high"

    text = event.text
    if any(keyword in text for keyword in CRITICAL_KEYWORDS):
        return "high"

    return "medium"


def generate_preparation_items(event: CalendarEvent) -> list[str]:
    """Build a checklist of things to do before a meeting."""
    items = ["Review meeting agenda and objectives"]

    if event.description and "agenda" in event.description:
        items.append("Review the provided agenda")

    title = event.title.lower()
    if "1:1" in title or "one on one" in title:
        items.extend(
            [
                "Prepare updates on your current projects",
                "Note any challenges or blockers to discuss",
                "Prepare questions or topics you want to address",
            ]
        )
    elif "review" in title or "status" in title:
        items.extend(
            [
                "Prepare status updates on relevant projects",
                "Gather metrics and progress data",
            ]
        )
    elif "interview" in title:
        items.extend(
            [
                "Review candidate resume and application materials",
                "Prepare interview questions",
            ]
        )
    elif "planning" in title or "strategy" in title:
        items.extend(
            [
                "Review relevant background materials",
                "Prepare ideas or proposals to share",
            ]
        )

    items.append("Review previous meeting notes if available")
    return items


def suggest_conflict_resolution(first: CalendarEvent, second: CalendarEvent) -> str:
    """Suggest which of two conflicting meetings to move.

    Shorter meetings are easier to move; on equal length, the one with
    fewer attendees is.
    """
    first_duration = first.end_time - first.start_time
    second_duration = second.end_time - second.start_time

    if first_duration < second_duration:
        return f'Consider rescheduling "{first.title}" to a later time.'
    if second_duration < first_duration:
        return f'Consider rescheduling "{second.title}" to a later time.'

    if len(first.attendees) < len(second.attendees):
        return f'Consider rescheduling "{first.title}" as it has fewer attendees.'
    if len(second.attendees) < len(first.attendees):
        return f'Consider rescheduling "{second.title}" as it has fewer attendees.'

    return "Review both meetings and determine which one can be rescheduled."


def sort_by_start(events: list[CalendarEvent]) -> list[CalendarEvent]:
    """Sort events by start, then end, then id."""
    return sorted(events, key=lambda e: (e.start_time, e.end_time, e.id))


def detect_back_to_back(
    events: list[CalendarEvent],
) -> list[tuple[CalendarEvent, CalendarEvent]]:
    """Find consecutive meetings with less than 15 minutes between them."""
    ordered = sort_by_start(events)
    pairs = []
    for current, following in zip(ordered, ordered[1:]):
        gap = following.start_time - current.end_time
        if gap < timedelta(minutes=BACK_TO_BACK_BUFFER_MINUTES):
            pairs.append((current, following))
    return pairs


def count_workdays(start: datetime, end: datetime) -> int:
    """Count Monday-Friday days stepping a day at a time from start to end.

    Inclusive of both ends; no holiday awareness.
    """
    count = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count
