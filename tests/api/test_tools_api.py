"""Tests for tool discovery and dispatch endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient


class TestDiscovery:
    """Tests for listing tools and resources."""

    @pytest.mark.asyncio
    async def test_lists_calendar_tools(self, client: AsyncClient):
        response = await client.get("/tools")

        assert response.status_code == 200
        names = [t["name"] for t in response.json()]
        assert names == [
            "calendar.listEvents",
            "calendar.getEvent",
            "calendar.analyzeSchedule",
            "calendar.getDailyInsights",
            "calendar.generateMeetingPrep",
        ]

    @pytest.mark.asyncio
    async def test_lists_resources(self, client: AsyncClient):
        response = await client.get("/tools/resources")

        assert response.status_code == 200
        resources = response.json()
        assert resources[0] == {
            "uri": "calendar://events/upcoming",
            "contentType": "application/json",
            "description": resources[0]["description"],
        }
        assert "calendar://events/{eventId}" in [r["uri"] for r in resources]


class TestExecute:
    """Tests for POST /tools/{name}."""

    @pytest.mark.asyncio
    async def test_get_event(self, client: AsyncClient, event_source, make_event):
        event_source.add(make_event("e1", title="Standup"))

        response = await client.post("/tools/calendar.getEvent", json={"eventId": "e1"})

        assert response.status_code == 200
        data = response.json()
        assert data["tool"] == "calendar.getEvent"
        assert data["result"]["title"] == "Standup"
        assert "startTime" in data["result"]

    @pytest.mark.asyncio
    async def test_list_events(self, client: AsyncClient, event_source, make_event, now):
        event_source.add(make_event("e1"))
        event_source.add(make_event("e2", start_in=timedelta(days=2)))

        response = await client.post(
            "/tools/calendar.listEvents",
            json={
                "timeMin": now.isoformat(),
                "timeMax": (now + timedelta(days=1)).isoformat(),
                "maxResults": 5,
            },
        )

        assert response.status_code == 200
        assert [e["id"] for e in response.json()["result"]] == ["e1"]

    @pytest.mark.asyncio
    async def test_tool_without_body(self, client: AsyncClient):
        response = await client.post("/tools/calendar.getDailyInsights")

        assert response.status_code == 200
        assert response.json()["result"]["upcomingMeetings"] == []

    @pytest.mark.asyncio
    async def test_unknown_tool(self, client: AsyncClient):
        response = await client.post("/tools/calendar.nope", json={})

        assert response.status_code == 404
        assert response.json()["detail"] == "Tool calendar.nope not found"

    @pytest.mark.asyncio
    async def test_unknown_event_for_prep(self, client: AsyncClient):
        response = await client.post(
            "/tools/calendar.generateMeetingPrep", json={"eventId": "missing"}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_params(self, client: AsyncClient):
        response = await client.post("/tools/calendar.listEvents", json={})

        assert response.status_code == 422
        locations = [tuple(e["loc"]) for e in response.json()["detail"]]
        assert ("timeMin",) in locations


class TestReadResource:
    """Tests for GET /tools/resources/read."""

    @pytest.mark.asyncio
    async def test_reads_event_template(self, client: AsyncClient, event_source, make_event):
        event_source.add(make_event("e1"))

        response = await client.get(
            "/tools/resources/read", params={"uri": "calendar://events/e1"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["uri"] == "calendar://events/e1"
        assert data["content"]["id"] == "e1"

    @pytest.mark.asyncio
    async def test_unknown_resource(self, client: AsyncClient):
        response = await client.get("/tools/resources/read", params={"uri": "calendar://x"})
        assert response.status_code == 404
