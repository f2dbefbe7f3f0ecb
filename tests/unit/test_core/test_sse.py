"""Unit tests for SSE event_generator function."""
import pytest
import json
from unittest.mock import Mock, AsyncMock
from sqlalchemy.exc import SQLAlchemyError

from classvote.api.v1.endpoints.sse import event_generator
from classvote.core.errors import NotFoundError


def _connected_request():
    request = Mock()
    request.is_disconnected = AsyncMock(return_value=False)
    return request


@pytest.mark.unit
class TestEventGenerator:
    """Tests for event_generator async function."""

    @pytest.mark.asyncio
    async def test_yields_snapshot(self):
        data_func = Mock(return_value={"title": "文化祭"})
        gen = event_generator(_connected_request(), data_func, interval=0.01)

        event = await gen.__anext__()

        # Japanese text is sent as is
        assert event == 'data: {"title": "文化祭"}\n\n'
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_stops_when_client_disconnects(self):
        request = Mock()
        request.is_disconnected = AsyncMock(return_value=True)
        data_func = Mock()

        events = [event async for event in event_generator(request, data_func, interval=0.01)]

        assert events == []
        data_func.assert_not_called()

    @pytest.mark.asyncio
    async def test_deleted_vote_ends_stream(self):
        data_func = Mock(side_effect=NotFoundError("Vote not found"))

        events = [event async for event in event_generator(_connected_request(), data_func, interval=0.01)]

        assert len(events) == 1
        assert events[0].startswith("event: deleted\n")

    @pytest.mark.asyncio
    async def test_recovers_from_transient_database_error(self):
        data_func = Mock(side_effect=[SQLAlchemyError("blip"), {"ok": True}])
        gen = event_generator(_connected_request(), data_func, interval=0.01)

        event = await gen.__anext__()

        assert json.loads(event[len("data: "):]) == {"ok": True}
        assert data_func.call_count == 2
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_gives_up_after_repeated_database_errors(self):
        data_func = Mock(side_effect=SQLAlchemyError("down"))

        events = [
            event async for event in
            event_generator(_connected_request(), data_func, interval=0.01, max_consecutive_errors=3)
        ]

        assert data_func.call_count == 3
        assert len(events) == 1
        assert events[0].startswith("event: error\n")
        assert "Service temporarily unavailable" in events[0]

    @pytest.mark.asyncio
    async def test_unexpected_error_ends_stream(self):
        data_func = Mock(side_effect=KeyError("boom"))

        events = [event async for event in event_generator(_connected_request(), data_func, interval=0.01)]

        assert len(events) == 1
        assert "Internal error" in events[0]
