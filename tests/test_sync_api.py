from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from typing import Any

import pytest

from pycouncil._api.sync import (
    fetch_last_run_summary,
    fetch_sync_status,
    parse_sync_event,
    stream_sync_events,
    trigger_sync,
)
from pycouncil._sse import ServerSentEvent
from pycouncil.exceptions import (
    CouncilResponseError,
    CouncilTransportError,
    CouncilTriggerError,
)
from pycouncil.models.sync import EventLevel


class _ScriptedTransport:
    """Returns (or raises) a fixed response and records requests."""

    def __init__(self, response: Any = None, *, lines: list[str] | None = None) -> None:
        self._response = response
        self._lines = lines or []
        self.requests: list[tuple[str, str]] = []

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        self.requests.append((method, endpoint))
        if isinstance(self._response, Exception):
            raise self._response
        return self._response

    async def iter_lines(self, endpoint: str) -> AsyncIterator[str]:
        self.requests.append(("STREAM", endpoint))
        for line in self._lines:
            yield line


async def _collect(iterator: AsyncIterator[Any]) -> list[Any]:
    return [item async for item in iterator]


@pytest.mark.asyncio
async def test_fetch_sync_status_parses_snapshot() -> None:
    transport = _ScriptedTransport(
        {
            "running": True,
            "currentTown": "ba",
            "currentSeason": "2022-2026",
            "currentPhase": "polls",
            "totalMeetings": 12,
            "processedMeetings": 4,
            "startedAt": "2026-03-01T10:00:00Z",
            "lastCompletedAt": None,
        }
    )

    status = await fetch_sync_status(transport)

    assert transport.requests == [("GET", "/sync/status")]
    assert status.running is True
    assert status.current_town == "ba"
    assert status.processed_meetings == 4
    assert status.last_completed_at is None


@pytest.mark.asyncio
async def test_fetch_sync_status_rejects_non_object() -> None:
    with pytest.raises(CouncilResponseError):
        await fetch_sync_status(_ScriptedTransport(["not", "an", "object"]))


@pytest.mark.asyncio
async def test_fetch_sync_status_rejects_inconsistent_progress() -> None:
    transport = _ScriptedTransport({"running": True, "totalMeetings": 2, "processedMeetings": 5})

    with pytest.raises(CouncilResponseError):
        await fetch_sync_status(transport)


@pytest.mark.asyncio
async def test_fetch_last_run_summary_keeps_event_order() -> None:
    transport = _ScriptedTransport(
        {
            "success": True,
            "events": [
                {"message": "first", "level": "INFO"},
                {"message": "second", "level": "WARN"},
                {"message": "third", "level": "ERROR"},
            ],
        }
    )

    summary = await fetch_last_run_summary(transport)

    assert transport.requests == [("GET", "/sync/last-run")]
    assert [e.message for e in summary.events] == ["first", "second", "third"]
    assert summary.events[2].level is EventLevel.ERROR


# ------------------------------------------------------------------
# Trigger
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_trigger_all_towns() -> None:
    transport = _ScriptedTransport({"status": "started", "message": "Sync started"})

    result = await trigger_sync(transport)

    assert transport.requests == [("POST", "/sync/trigger")]
    assert result.status == "started"
    assert result.message == "Sync started"


@pytest.mark.asyncio
async def test_trigger_single_town_quotes_ref() -> None:
    transport = _ScriptedTransport({"status": "started"})

    await trigger_sync(transport, "banska bystrica")

    assert transport.requests == [("POST", "/sync/trigger/banska%20bystrica")]


@pytest.mark.asyncio
async def test_trigger_empty_body_is_accepted() -> None:
    result = await trigger_sync(_ScriptedTransport(None))

    assert result.status == ""
    assert result.message == ""


@pytest.mark.asyncio
async def test_trigger_rejected_status_raises() -> None:
    transport = _ScriptedTransport({"status": "error", "message": "Sync already running"})

    with pytest.raises(CouncilTriggerError) as exc_info:
        await trigger_sync(transport)

    exc = exc_info.value
    assert exc.status == "error"
    assert str(exc) == "Sync already running"
    assert exc.endpoint == "/sync/trigger"


@pytest.mark.asyncio
async def test_trigger_http_error_maps_to_trigger_error() -> None:
    transport = _ScriptedTransport(
        CouncilTransportError(
            "HTTP 409 from /sync/trigger",
            status_code=409,
            endpoint="/sync/trigger",
            payload={"status": "error", "message": "Sync already running"},
        )
    )

    with pytest.raises(CouncilTriggerError) as exc_info:
        await trigger_sync(transport)

    exc = exc_info.value
    assert exc.status_code == 409
    assert exc.status == "error"
    assert str(exc) == "Sync already running"
    assert isinstance(exc.__cause__, CouncilTransportError)


@pytest.mark.asyncio
async def test_trigger_http_error_without_body_keeps_transport_message() -> None:
    transport = _ScriptedTransport(CouncilTransportError("HTTP 500 from /sync/trigger", status_code=500))

    with pytest.raises(CouncilTriggerError) as exc_info:
        await trigger_sync(transport)

    assert exc_info.value.status == ""
    assert "HTTP 500" in str(exc_info.value)


@pytest.mark.asyncio
async def test_trigger_network_error_is_not_a_rejection() -> None:
    transport = _ScriptedTransport(CouncilTransportError("connection refused"))

    with pytest.raises(CouncilTransportError) as exc_info:
        await trigger_sync(transport)

    assert not isinstance(exc_info.value, CouncilTriggerError)


# ------------------------------------------------------------------
# Event stream
# ------------------------------------------------------------------


def test_parse_sync_event_object() -> None:
    event = parse_sync_event(
        ServerSentEvent(data='{"timestamp": "2026-03-01T10:00:00Z", "level": "INFO", "message": "Fetching polls", "town": "ba"}')
    )

    assert event.message == "Fetching polls"
    assert event.town == "ba"
    assert event.timestamp is not None and event.timestamp.hour == 10


def test_parse_sync_event_plain_string() -> None:
    event = parse_sync_event(ServerSentEvent(data='"Done"'))

    assert event.message == "Done"
    assert event.level is EventLevel.INFO


def test_parse_sync_event_not_json() -> None:
    with pytest.raises(CouncilResponseError):
        parse_sync_event(ServerSentEvent(data="not json"))


@pytest.mark.asyncio
async def test_stream_yields_events_in_order() -> None:
    transport = _ScriptedTransport(
        lines=[
            ": connected",
            "",
            'data: {"message": "one"}',
            "",
            "id: 7",
            'data: {"message": "two",',
            'data:  "level": "WARN"}',
            "",
            'data: {"message": "three"}',
            "",
        ]
    )

    events = await _collect(stream_sync_events(transport))

    assert transport.requests == [("STREAM", "/sync/events")]
    assert [e.message for e in events] == ["one", "two", "three"]
    assert events[1].level is EventLevel.WARN


@pytest.mark.asyncio
async def test_stream_skips_keepalive_frames() -> None:
    transport = _ScriptedTransport(
        lines=[
            "event: ping",
            "data: {}",
            "",
            "event: heartbeat",
            "data: 1",
            "",
            'data: {"message": "real"}',
            "",
        ]
    )

    events = await _collect(stream_sync_events(transport))

    assert [e.message for e in events] == ["real"]


@pytest.mark.asyncio
async def test_stream_skips_undecodable_frames() -> None:
    transport = _ScriptedTransport(
        lines=[
            "data: garbage",
            "",
            "data: [1, 2]",
            "",
            'data: {"message": "after"}',
            "",
        ]
    )

    events = await _collect(stream_sync_events(transport))

    assert [e.message for e in events] == ["after"]


@pytest.mark.asyncio
async def test_stream_without_trailing_blank_line_drops_partial_frame() -> None:
    transport = _ScriptedTransport(lines=['data: {"message": "complete"}', "", 'data: {"message": "partial"}'])

    events = await _collect(stream_sync_events(transport))

    assert [e.message for e in events] == ["complete"]
