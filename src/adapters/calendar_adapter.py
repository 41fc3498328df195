"""Google Calendar adapter for listing and fetching events.

Uses the Google Calendar API with service account credentials and maps
Google's event shape onto CalendarEvent.
"""

import asyncio
import os
from datetime import datetime
from typing import Any

import structlog
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from src.schedule.schemas import Attachment, Attendee, CalendarEvent, Reminder

logger = structlog.get_logger()

# Required scopes for calendar read access
CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat()


def to_calendar_event(raw: dict[str, Any]) -> CalendarEvent:
    """Convert a Google Calendar event resource to a CalendarEvent.

    All-day events (start.date only) start at local midnight.

    Args:
        raw: Event dict as returned by events().get / events().list

    Returns:
        CalendarEvent
    """
    attendees = [
        Attendee(
            email=a.get("email", ""),
            name=a.get("displayName"),
            response_status=a.get("responseStatus") or "needsAction",
            optional=a.get("optional", False),
            organizer=a.get("organizer", False),
        )
        for a in raw.get("attendees", [])
    ]

    attachments = [
        Attachment(
            id=a.get("fileId"),
            title=a.get("title", ""),
            file_url=a.get("fileUrl", ""),
            mime_type=a.get("mimeType", ""),
            icon_link=a.get("iconLink"),
        )
        for a in raw.get("attachments", [])
    ]

    reminders = [
        Reminder(
            type="email" if r.get("method") == "email" else "popup",
            minutes=r.get("minutes", 0),
        )
        for r in (raw.get("reminders") or {}).get("overrides", [])
    ]

    organizer = None
    if raw.get("organizer"):
        organizer = Attendee(
            email=raw["organizer"].get("email", ""),
            name=raw["organizer"].get("displayName"),
            response_status="accepted",
            organizer=True,
        )

    meeting_link = raw.get("hangoutLink")
    if not meeting_link:
        entry_points = (raw.get("conferenceData") or {}).get("entryPoints") or []
        if entry_points:
            meeting_link = entry_points[0].get("uri")

    start = raw.get("start", {})
    end = raw.get("end", {})

    return CalendarEvent(
        id=raw["id"],
        title=raw.get("summary", ""),
        description=raw.get("description"),
        start_time=start.get("dateTime") or start.get("date"),
        end_time=end.get("dateTime") or end.get("date"),
        location=raw.get("location"),
        attendees=attendees,
        organizer=organizer,
        recurrence=raw.get("recurrence"),
        status=raw.get("status", "confirmed"),
        meeting_link=meeting_link,
        attachments=attachments,
        reminders=reminders,
        metadata={
            "htmlLink": raw.get("htmlLink"),
            "created": raw.get("created"),
            "updated": raw.get("updated"),
            "iCalUID": raw.get("iCalUID"),
            "colorId": raw.get("colorId"),
        },
    )


class GoogleCalendarAdapter:
    """Event source for a Google Calendar.

    Implements the EventSource protocol.
    """

    def __init__(
        self,
        credentials_path: str | None = None,
        calendar_id: str = "primary",
    ):
        """Initialize with service account credentials.

        Args:
            credentials_path: Path to service account JSON.
                             Falls back to GOOGLE_CALENDAR_CREDENTIALS env var.
            calendar_id: Calendar to read (default: primary)
        """
        self._credentials_path = credentials_path or os.environ.get(
            "GOOGLE_CALENDAR_CREDENTIALS"
        )
        self._calendar_id = calendar_id
        self._service = None

    @property
    def is_configured(self) -> bool:
        """Check if credentials are available."""
        return bool(self._credentials_path)

    def _get_service(self):
        """Get or create Calendar API service."""
        if self._service is None:
            if not self._credentials_path:
                raise ValueError(
                    "No credentials. Set GOOGLE_CALENDAR_CREDENTIALS env var "
                    "or pass credentials_path to constructor."
                )
            creds = Credentials.from_service_account_file(
                self._credentials_path,
                scopes=CALENDAR_SCOPES,
            )
            self._service = build("calendar", "v3", credentials=creds)
        return self._service

    async def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 10,
    ) -> list[CalendarEvent]:
        """List events in a time window.

        Args:
            time_min: Start of time window
            time_max: End of time window
            max_results: Maximum events to return (default 10)

        Returns:
            CalendarEvent list ordered by start time, empty on API errors
        """
        try:
            service = self._get_service()

            def _fetch_events():
                return (
                    service.events()
                    .list(
                        calendarId=self._calendar_id,
                        timeMin=_rfc3339(time_min),
                        timeMax=_rfc3339(time_max),
                        maxResults=max_results,
                        singleEvents=True,
                        orderBy="startTime",
                    )
                    .execute()
                )

            # Use asyncio.to_thread for non-blocking I/O
            events_result = await asyncio.to_thread(_fetch_events)
            return [to_calendar_event(e) for e in events_result.get("items", [])]
        except Exception as e:
            logger.warning(
                "Error listing calendar events",
                calendar_id=self._calendar_id,
                time_min=time_min.isoformat(),
                time_max=time_max.isoformat(),
                error=str(e),
            )
            return []

    async def get_event(self, event_id: str) -> CalendarEvent | None:
        """Get a calendar event by ID.

        Args:
            event_id: Event ID from calendar

        Returns:
            CalendarEvent, or None if missing or on API errors
        """
        try:
            service = self._get_service()

            def _fetch_event():
                return (
                    service.events()
                    .get(
                        calendarId=self._calendar_id,
                        eventId=event_id,
                    )
                    .execute()
                )

            raw = await asyncio.to_thread(_fetch_event)
            return to_calendar_event(raw)
        except Exception as e:
            logger.warning(
                "Error getting calendar event",
                calendar_id=self._calendar_id,
                event_id=event_id,
                error=str(e),
            )
            return None
