"""Synchronization job endpoints.

Endpoints:
  - GET  /sync/status           (status snapshot)
  - GET  /sync/last-run         (last completed run with its event log)
  - POST /sync/trigger[/{town}] (start a job, optionally for one town)
  - GET  /sync/events           (server-sent event stream)
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from pycouncil._api._common import get_model, parse_model, segment
from pycouncil._constants import (
    KEEPALIVE_EVENT_NAMES,
    SYNC_EVENTS_ENDPOINT,
    SYNC_LAST_RUN_ENDPOINT,
    SYNC_STATUS_ENDPOINT,
    SYNC_TRIGGER_ENDPOINT,
    TRIGGER_REJECTED_STATUSES,
)
from pycouncil._sse import EventStreamDecoder, ServerSentEvent
from pycouncil._transport import Transport
from pycouncil.exceptions import CouncilResponseError, CouncilTransportError, CouncilTriggerError
from pycouncil.models.sync import LastRunSummary, SyncEvent, SyncStatus, TriggerResult

_logger = logging.getLogger(__name__)


async def fetch_sync_status(transport: Transport) -> SyncStatus:
    return await get_model(transport, SYNC_STATUS_ENDPOINT, SyncStatus)


async def fetch_last_run_summary(transport: Transport) -> LastRunSummary:
    return await get_model(transport, SYNC_LAST_RUN_ENDPOINT, LastRunSummary)


def _descriptor_field(payload: Any, key: str) -> str:
    if isinstance(payload, dict):
        value = payload.get(key)
        if value is not None:
            return str(value)
    return ""


async def trigger_sync(transport: Transport, town: str | None = None) -> TriggerResult:
    """Ask the server to start a sync job.

    Returns once the command was accepted; the job may not have started
    yet.  Rejections raise :class:`CouncilTriggerError`, network failures
    raise :class:`CouncilTransportError`.
    """
    endpoint = SYNC_TRIGGER_ENDPOINT
    if town is not None:
        endpoint = f"{endpoint}/{segment(town)}"

    try:
        data = await transport.request_json("POST", endpoint)
    except CouncilTransportError as exc:
        if exc.status_code is None:
            raise
        status = _descriptor_field(exc.payload, "status")
        message = _descriptor_field(exc.payload, "message") or str(exc)
        raise CouncilTriggerError(
            message,
            status=status,
            endpoint=endpoint,
            status_code=exc.status_code,
        ) from exc

    result = TriggerResult() if data is None else parse_model(TriggerResult, data, endpoint=endpoint)
    if result.status.strip().lower() in TRIGGER_REJECTED_STATUSES:
        raise CouncilTriggerError(
            result.message or f"{endpoint} rejected: status={result.status}",
            status=result.status,
            endpoint=endpoint,
        )

    _logger.debug("Sync trigger accepted town=%s status=%s", town, result.status)
    return result


def parse_sync_event(sse: ServerSentEvent) -> SyncEvent:
    """Decode the JSON payload of one server-sent event."""
    try:
        data = json.loads(sse.data)
    except json.JSONDecodeError as exc:
        raise CouncilResponseError(
            f"Sync event is not JSON: {sse.data[:128]}",
            endpoint=SYNC_EVENTS_ENDPOINT,
        ) from exc
    if isinstance(data, str):
        # Plain-text message frames
        data = {"message": data}
    return parse_model(SyncEvent, data, endpoint=SYNC_EVENTS_ENDPOINT)


async def stream_sync_events(transport: Transport) -> AsyncIterator[SyncEvent]:
    """Yield sync events from the server push stream in emission order.

    Keepalive frames are ignored.  Frames that fail to decode are logged
    and skipped; they do not end the stream.
    """
    decoder = EventStreamDecoder()
    async for line in transport.iter_lines(SYNC_EVENTS_ENDPOINT):
        sse = decoder.decode(line)
        if sse is None or sse.event in KEEPALIVE_EVENT_NAMES:
            continue
        try:
            event = parse_sync_event(sse)
        except CouncilResponseError:
            _logger.debug("Skipping undecodable sync event id=%s", sse.id, exc_info=True)
            continue
        yield event
