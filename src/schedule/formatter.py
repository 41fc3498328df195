"""Text helpers for meeting preparation.

Extracts agenda items from free-text event descriptions and renders a
markdown notes template for a meeting.
"""

import re

from src.schedule.schemas import CalendarEvent

AGENDA_MARKER = re.compile(r"agenda:?\s*(.*)$", re.IGNORECASE)
BULLET_LINE = re.compile(r"^(?:[-*]|\d+\.)\s*(.+)$")


def _bullet_text(line: str) -> str | None:
    match = BULLET_LINE.match(line.strip())
    return match.group(1).strip() if match else None


def extract_agenda(description: str | None) -> list[str]:
    """Extract agenda items from an event description.

    Looks for bullet or numbered lines right after an "Agenda" marker,
    stopping at a blank line or the first non-bullet line. Without a
    marker (or with an empty agenda block), every bullet line counts.

    Args:
        description: Event description text

    Returns:
        Agenda items with their bullet/number prefix removed
    """
    if not description:
        return []

    lines = description.splitlines()
    items: list[str] = []

    for index, line in enumerate(lines):
        marker = AGENDA_MARKER.search(line)
        if not marker:
            continue

        block = [marker.group(1), *lines[index + 1 :]]
        for raw in block:
            if not raw.strip():
                if items:
                    break
                continue
            text = _bullet_text(raw)
            if text is None:
                if items:
                    break
                continue
            items.append(text)
        break

    if not items:
        items = [text for text in map(_bullet_text, lines) if text]

    return items


def format_meeting_notes(event: CalendarEvent) -> str:
    """Render a markdown notes template for a meeting.

    Sections: title, date, time, attendees, agenda (when one can be
    extracted), then empty discussion notes, action items and next steps.
    """
    start = event.start_time.astimezone()
    end = event.end_time.astimezone()

    lines = [
        f"# {event.title}",
        "",
        f"**Date:** {start:%Y-%m-%d}",
        f"**Time:** {start:%H:%M} - {end:%H:%M}",
        "",
        "**Attendees:**",
    ]
    lines.extend(f"- {attendee.display_name}" for attendee in event.attendees)
    lines.append("")

    agenda = extract_agenda(event.description)
    if agenda:
        lines.append("**Agenda:**")
        lines.extend(f"- {item}" for item in agenda)
        lines.append("")

    lines.extend(
        [
            "**Discussion Notes:**",
            "",
            "**Action Items:**",
            "",
            "**Next Steps:**",
            "",
        ]
    )
    return "\n".join(lines) + "\n"
