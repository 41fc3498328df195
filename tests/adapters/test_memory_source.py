"""Tests for InMemoryEventSource."""

from datetime import timedelta

import pytest

from src.adapters.base import EventSource, InMemoryEventSource


class TestInMemoryEventSource:
    """Tests for the in-memory event source."""

    def test_implements_protocol(self):
        assert isinstance(InMemoryEventSource(), EventSource)

    @pytest.mark.asyncio
    async def test_lists_window_in_start_order(self, make_event, now):
        source = InMemoryEventSource(
            [
                make_event("late", start_in=timedelta(hours=5)),
                make_event("early", start_in=timedelta(hours=1)),
                make_event("outside", start_in=timedelta(days=3)),
            ]
        )

        events = await source.list_events(now, now + timedelta(days=1), 10)

        assert [e.id for e in events] == ["early", "late"]

    @pytest.mark.asyncio
    async def test_truncates_to_max_results(self, make_event, now):
        source = InMemoryEventSource(
            [make_event(f"e{i}", start_in=timedelta(hours=i + 1)) for i in range(5)]
        )

        events = await source.list_events(now, now + timedelta(days=1), 2)

        assert [e.id for e in events] == ["e0", "e1"]

    @pytest.mark.asyncio
    async def test_get_add_remove(self, make_event):
        source = InMemoryEventSource()
        source.add(make_event("e1", title="First"))
        source.add(make_event("e1", title="Replaced"))

        assert (await source.get_event("e1")).title == "Replaced"
        assert source.remove("e1") is True
        assert source.remove("e1") is False
        assert await source.get_event("e1") is None
