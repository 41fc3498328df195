"""Tests for GoogleCalendarAdapter."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from src.adapters.calendar_adapter import GoogleCalendarAdapter, to_calendar_event

RAW_EVENT = {
    "id": "evt1",
    "summary": "Q2 Planning Review",
    "description": "Agenda:\n- Goals",
    "start": {"dateTime": "2025-06-10T14:00:00+00:00"},
    "end": {"dateTime": "2025-06-10T15:30:00+00:00"},
    "location": "Room 4",
    "status": "confirmed",
    "attendees": [
        {"email": "alice@example.com", "displayName": "Alice", "responseStatus": "accepted"},
        {"email": "bob@example.com", "responseStatus": "declined", "optional": True},
    ],
    "organizer": {"email": "alice@example.com", "displayName": "Alice"},
    "conferenceData": {"entryPoints": [{"uri": "https://meet.example.com/abc"}]},
    "attachments": [
        {
            "fileId": "f1",
            "title": "Plan",
            "fileUrl": "https://drive.example.com/f1",
            "mimeType": "application/pdf",
        }
    ],
    "reminders": {"useDefault": False, "overrides": [{"method": "email", "minutes": 30}]},
    "htmlLink": "https://calendar.example.com/evt1",
    "iCalUID": "evt1@example.com",
}


@pytest.fixture
def mock_build():
    """Mock googleapiclient.discovery.build."""
    with patch("src.adapters.calendar_adapter.build") as mock:
        yield mock


@pytest.fixture
def mock_credentials():
    """Mock google.oauth2.service_account.Credentials."""
    with patch("src.adapters.calendar_adapter.Credentials") as mock:
        yield mock


class TestToCalendarEvent:
    """Tests for mapping Google events."""

    def test_maps_fields(self):
        event = to_calendar_event(RAW_EVENT)

        assert event.id == "evt1"
        assert event.title == "Q2 Planning Review"
        assert event.start_time == datetime(2025, 6, 10, 14, 0, tzinfo=UTC)
        assert event.duration_minutes == 90
        assert [a.display_name for a in event.attendees] == ["Alice", "bob"]
        assert event.attendees[1].response_status == "declined"
        assert event.attendees[1].optional is True
        assert event.organizer.organizer is True
        assert event.meeting_link == "https://meet.example.com/abc"
        assert event.attachments[0].file_url == "https://drive.example.com/f1"
        assert event.reminders[0].type == "email"
        assert event.reminders[0].minutes == 30
        assert event.metadata["htmlLink"] == "https://calendar.example.com/evt1"
        assert event.metadata["iCalUID"] == "evt1@example.com"

    def test_hangout_link_wins(self):
        event = to_calendar_event({**RAW_EVENT, "hangoutLink": "https://meet.google.com/x"})
        assert event.meeting_link == "https://meet.google.com/x"

    def test_all_day_event(self):
        """All-day events start at local midnight."""
        event = to_calendar_event(
            {"id": "evt2", "start": {"date": "2025-06-10"}, "end": {"date": "2025-06-11"}}
        )
        assert event.start_time.tzinfo is not None
        assert (event.start_time.hour, event.start_time.minute) == (0, 0)
        assert event.title == ""
        assert event.attendees == []


class TestGoogleCalendarAdapterInit:
    """Tests for GoogleCalendarAdapter initialization."""

    def test_uses_provided_credentials(self, mock_build, mock_credentials):
        """Should use credentials path passed to constructor."""
        adapter = GoogleCalendarAdapter(credentials_path="/path/to/creds.json")
        adapter._get_service()

        call_args = mock_credentials.from_service_account_file.call_args
        assert call_args[0][0] == "/path/to/creds.json"
        mock_build.assert_called_once()

    def test_falls_back_to_env_var(self, mock_build, mock_credentials, monkeypatch):
        """Should fall back to GOOGLE_CALENDAR_CREDENTIALS env var."""
        monkeypatch.setenv("GOOGLE_CALENDAR_CREDENTIALS", "/env/creds.json")
        adapter = GoogleCalendarAdapter()

        assert adapter.is_configured
        adapter._get_service()
        call_args = mock_credentials.from_service_account_file.call_args
        assert call_args[0][0] == "/env/creds.json"

    def test_no_credentials_raises_value_error(self, mock_build, monkeypatch):
        """Should raise ValueError when no credentials available."""
        monkeypatch.delenv("GOOGLE_CALENDAR_CREDENTIALS", raising=False)
        adapter = GoogleCalendarAdapter()

        assert not adapter.is_configured
        with pytest.raises(ValueError, match="No credentials"):
            adapter._get_service()

    def test_service_is_cached(self, mock_build, mock_credentials):
        adapter = GoogleCalendarAdapter(credentials_path="/path/to/creds.json")
        adapter._get_service()
        adapter._get_service()
        mock_build.assert_called_once()


class TestListEvents:
    """Tests for list_events."""

    @pytest.mark.asyncio
    async def test_returns_mapped_events(self, mock_build, mock_credentials):
        mock_service = MagicMock()
        mock_service.events().list().execute.return_value = {"items": [RAW_EVENT]}
        mock_build.return_value = mock_service

        adapter = GoogleCalendarAdapter(credentials_path="/creds.json", calendar_id="team")
        start = datetime(2025, 6, 10, 0, 0, tzinfo=UTC)
        events = await adapter.list_events(start, start + timedelta(days=1), 5)

        assert [e.id for e in events] == ["evt1"]
        kwargs = mock_service.events().list.call_args.kwargs
        assert kwargs["calendarId"] == "team"
        assert kwargs["maxResults"] == 5
        assert kwargs["singleEvents"] is True
        assert kwargs["orderBy"] == "startTime"
        assert kwargs["timeMin"] == "2025-06-10T00:00:00+00:00"

    @pytest.mark.asyncio
    async def test_naive_window_is_sent_with_local_offset(
        self, mock_build, mock_credentials
    ):
        mock_service = MagicMock()
        mock_service.events().list().execute.return_value = {"items": []}
        mock_build.return_value = mock_service

        adapter = GoogleCalendarAdapter(credentials_path="/creds.json")
        start = datetime(2025, 6, 10, 9, 0)
        await adapter.list_events(start, start + timedelta(days=1))

        kwargs = mock_service.events().list.call_args.kwargs
        assert kwargs["timeMin"] == start.astimezone().isoformat()
        assert not kwargs["timeMin"].endswith("Z")

    @pytest.mark.asyncio
    async def test_api_error_returns_empty(self, mock_build, mock_credentials):
        mock_service = MagicMock()
        mock_service.events().list().execute.side_effect = Exception("API error")
        mock_build.return_value = mock_service

        adapter = GoogleCalendarAdapter(credentials_path="/creds.json")
        start = datetime(2025, 6, 10, tzinfo=UTC)

        assert await adapter.list_events(start, start + timedelta(days=1)) == []

    @pytest.mark.asyncio
    async def test_missing_credentials_returns_empty(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_CALENDAR_CREDENTIALS", raising=False)
        adapter = GoogleCalendarAdapter()
        start = datetime(2025, 6, 10, tzinfo=UTC)

        assert await adapter.list_events(start, start + timedelta(days=1)) == []


class TestGetEvent:
    """Tests for get_event."""

    @pytest.mark.asyncio
    async def test_returns_event(self, mock_build, mock_credentials):
        mock_service = MagicMock()
        mock_service.events().get().execute.return_value = RAW_EVENT
        mock_build.return_value = mock_service

        adapter = GoogleCalendarAdapter(credentials_path="/creds.json")
        event = await adapter.get_event("evt1")

        assert event.title == "Q2 Planning Review"
        mock_service.events().get.assert_called_with(calendarId="primary", eventId="evt1")

    @pytest.mark.asyncio
    async def test_api_error_returns_none(self, mock_build, mock_credentials):
        mock_service = MagicMock()
        mock_service.events().get().execute.side_effect = Exception("Not found")
        mock_build.return_value = mock_service

        adapter = GoogleCalendarAdapter(credentials_path="/creds.json")

        assert await adapter.get_event("missing") is None
