from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest

from pycouncil.exceptions import CouncilTransportError
from pycouncil.models.sync import SyncEvent
from pycouncil.sync.subscriber import EventSubscriber


async def _settle(rounds: int = 20) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class _Stream:
    """Event stream double fed through a queue; ``None`` ends the stream."""

    def __init__(self) -> None:
        self.opens = 0
        self.queue: asyncio.Queue[SyncEvent | BaseException | None] = asyncio.Queue()

    async def __call__(self) -> AsyncIterator[SyncEvent]:
        self.opens += 1
        while True:
            item = await self.queue.get()
            if item is None:
                return
            if isinstance(item, BaseException):
                raise item
            yield item


@pytest.mark.asyncio
async def test_events_delivered_in_stream_order() -> None:
    stream = _Stream()
    received: list[SyncEvent] = []
    subscriber = EventSubscriber(stream)

    subscriber.open(received.append)
    events = [SyncEvent(message=str(i)) for i in range(5)]
    for event in events:
        stream.queue.put_nowait(event)
    await _settle()

    assert received == events
    subscriber.close()


@pytest.mark.asyncio
async def test_open_is_idempotent() -> None:
    stream = _Stream()
    subscriber = EventSubscriber(stream)

    subscriber.open(lambda _e: None)
    subscriber.open(lambda _e: None)
    await _settle()

    assert stream.opens == 1
    assert subscriber.is_open
    subscriber.close()


@pytest.mark.asyncio
async def test_close_is_safe_when_not_open_and_repeatable() -> None:
    stream = _Stream()
    subscriber = EventSubscriber(stream)

    subscriber.close()
    subscriber.open(lambda _e: None)
    await _settle()
    subscriber.close()
    subscriber.close()
    await _settle()

    assert not subscriber.is_open


@pytest.mark.asyncio
async def test_close_does_not_report_stream_end() -> None:
    stream = _Stream()
    closed: list[BaseException | None] = []
    subscriber = EventSubscriber(stream, on_close=closed.append)

    subscriber.open(lambda _e: None)
    await _settle()
    subscriber.close()
    await _settle()

    assert closed == []


@pytest.mark.asyncio
async def test_server_end_reports_clean_close_and_allows_reopen() -> None:
    stream = _Stream()
    closed: list[BaseException | None] = []
    subscriber = EventSubscriber(stream, on_close=closed.append)

    subscriber.open(lambda _e: None)
    stream.queue.put_nowait(None)
    await _settle()

    assert closed == [None]
    assert not subscriber.is_open

    subscriber.open(lambda _e: None)
    await _settle()
    assert stream.opens == 2
    subscriber.close()


@pytest.mark.asyncio
async def test_stream_failure_reports_error() -> None:
    stream = _Stream()
    closed: list[BaseException | None] = []
    received: list[SyncEvent] = []
    subscriber = EventSubscriber(stream, on_close=closed.append)

    subscriber.open(received.append)
    stream.queue.put_nowait(SyncEvent(message="before"))
    stream.queue.put_nowait(CouncilTransportError("connection reset"))
    await _settle()

    assert [e.message for e in received] == ["before"]
    assert len(closed) == 1
    assert isinstance(closed[0], CouncilTransportError)
    assert not subscriber.is_open


@pytest.mark.asyncio
async def test_unexpected_stream_crash_still_reports_close() -> None:
    stream = _Stream()
    closed: list[BaseException | None] = []
    subscriber = EventSubscriber(stream, on_close=closed.append)

    subscriber.open(lambda _e: None)
    stream.queue.put_nowait(RuntimeError("decoder bug"))
    await _settle()

    assert len(closed) == 1
    assert isinstance(closed[0], RuntimeError)
    assert not subscriber.is_open


@pytest.mark.asyncio
async def test_handler_error_does_not_stop_stream() -> None:
    stream = _Stream()
    received: list[str] = []

    def handler(event: SyncEvent) -> None:
        if event.message == "bad":
            raise RuntimeError("handler bug")
        received.append(event.message)

    subscriber = EventSubscriber(stream)
    subscriber.open(handler)
    for message in ("a", "bad", "b"):
        stream.queue.put_nowait(SyncEvent(message=message))
    await _settle()

    assert received == ["a", "b"]
    assert subscriber.is_open
    subscriber.close()
