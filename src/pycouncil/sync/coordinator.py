"""Sync coordinator: the single owner of observed sync job state.

The coordinator merges three independent asynchronous sources into one
read model:

* a recurring status poll (:meth:`SyncCoordinator.poll`),
* the live event stream (:class:`~pycouncil.sync.subscriber.EventSubscriber`),
* one-shot reads and commands (last-run backfill, trigger).

Everything runs on one asyncio event loop.  No mutation awaits midway,
so two coordinator updates never interleave.

Lifecycle::

    coordinator = SyncCoordinator(client)
    await coordinator.initialize()   # stream + polling + last-run backfill
    ...
    coordinator.close()              # stream closed, timer and polls cancelled

or ``async with SyncCoordinator(client) as coordinator: ...``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from pycouncil._constants import DEFAULT_POLL_INTERVAL, EVENT_LOG_KEEP, EVENT_LOG_MAX
from pycouncil.exceptions import CouncilConfigError, CouncilError
from pycouncil.models.sync import LastRunSummary, SyncEvent, SyncStatus, TriggerResult
from pycouncil.sync.event_log import EventLog
from pycouncil.sync.observers import fetch_status_snapshot, load_last_run
from pycouncil.sync.subscriber import EventSubscriber

_logger = logging.getLogger(__name__)


class SyncBackend(Protocol):
    """What the coordinator needs from a client.

    :class:`~pycouncil.client.CouncilClient` implements it; tests pass
    lightweight doubles.
    """

    async def get_sync_status(self) -> SyncStatus:
        ...

    async def get_last_run_summary(self) -> LastRunSummary:
        ...

    async def trigger_sync(self, town: str | None = None) -> TriggerResult:
        ...

    def sync_events(self) -> AsyncIterator[SyncEvent]:
        ...


@dataclass(frozen=True, slots=True)
class SyncState:
    """Immutable read model handed to the view layer."""

    status: SyncStatus | None
    events: tuple[SyncEvent, ...]
    last_run: LastRunSummary | None

    @property
    def is_running(self) -> bool:
        return self.status is not None and self.status.running


class SyncCoordinator:
    """Observe the server-side sync job and expose one coherent state.

    Parameters
    ----------
    backend
        Source of status snapshots, last-run summaries, trigger commands
        and the live event stream.
    poll_interval
        Seconds between status polls.
    event_log_max, event_log_keep
        Backpressure cap of the event log (see :class:`EventLog`).
    events_enabled
        Open the live event stream on :meth:`initialize`.
    reconnect_delay
        Seconds before reopening a stream that ended or failed.  ``0``
        leaves the coordinator without live events until re-created.
    on_change
        Called with the new :class:`SyncState` after every applied update.
    """

    def __init__(
        self,
        backend: SyncBackend,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        event_log_max: int = EVENT_LOG_MAX,
        event_log_keep: int = EVENT_LOG_KEEP,
        events_enabled: bool = True,
        reconnect_delay: float = 0.0,
        on_change: Callable[[SyncState], None] | None = None,
    ) -> None:
        if poll_interval <= 0:
            raise CouncilConfigError(f"poll_interval must be positive, got {poll_interval}")
        if not 0 < event_log_keep <= event_log_max:
            raise CouncilConfigError(f"event_log_keep must be in (0, {event_log_max}], got {event_log_keep}")
        self._backend = backend
        self._poll_interval = poll_interval
        self._events_enabled = events_enabled
        self._reconnect_delay = reconnect_delay
        self._on_change = on_change

        self._status: SyncStatus | None = None
        self._events = EventLog(max_size=event_log_max, keep=event_log_keep)
        self._last_run: LastRunSummary | None = None
        # Bumped whenever a trigger resets the log; a last-run backfill
        # issued under an older generation must not seed the new run.
        self._log_generation = 0

        self._subscriber = EventSubscriber(backend.sync_events, on_close=self._on_stream_closed)
        self._initialized = False
        self._closed = False
        self._poll_task: asyncio.Task[None] | None = None
        self._inflight_polls: set[asyncio.Task[None]] = set()
        self._reconnect_handle: asyncio.TimerHandle | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SyncCoordinator:
        await self.initialize()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    @property
    def status(self) -> SyncStatus | None:
        return self._status

    @property
    def events(self) -> tuple[SyncEvent, ...]:
        return self._events.snapshot()

    @property
    def last_run(self) -> LastRunSummary | None:
        return self._last_run

    @property
    def is_running(self) -> bool:
        """``False`` until the first snapshot, then the snapshot's ``running``."""
        return self._status is not None and self._status.running

    @property
    def state(self) -> SyncState:
        return SyncState(status=self._status, events=self._events.snapshot(), last_run=self._last_run)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    @property
    def is_streaming(self) -> bool:
        return self._subscriber.is_open

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Open the event stream, start polling and backfill the last run.

        Only the first call does anything.
        """
        if self._initialized:
            return
        if self._closed:
            raise CouncilError("SyncCoordinator is closed")
        self._initialized = True

        if self._events_enabled:
            self._subscriber.open(self._on_event)
        self.start_polling()

        generation = self._log_generation
        summary = await load_last_run(self._backend)
        if summary is None or self._closed:
            return
        self._last_run = summary
        # Live events (or a trigger reset) win over history.
        if not self._events and generation == self._log_generation:
            self._events.extend(summary.events)
            _logger.debug("Event log seeded with %d last-run events", len(self._events))
        self._notify()

    def close(self) -> None:
        """Tear down: stop polling, cancel in-flight polls, close the stream."""
        if self._closed:
            return
        self._closed = True
        self.stop_polling()
        for task in list(self._inflight_polls):
            task.cancel()
        self._inflight_polls.clear()
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None
        self._subscriber.close()
        _logger.debug("Sync coordinator closed")

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll(self) -> None:
        """Fetch one snapshot and apply it.  Failures leave state untouched."""
        snapshot = await fetch_status_snapshot(self._backend)
        if snapshot is None or self._closed:
            return
        # Applied in completion order: the latest completed fetch wins.
        self._status = snapshot
        self._notify()

    def start_polling(self) -> None:
        """Poll now and then every ``poll_interval`` seconds.  No-op if running."""
        if self._closed or self.is_polling:
            return
        loop = asyncio.get_running_loop()
        self._poll_task = loop.create_task(self._poll_loop(), name="pycouncil-sync-poll")

    def stop_polling(self) -> None:
        """Cancel future polls.  A poll already in flight still completes."""
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            task.cancel()

    async def _poll_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            # Each poll runs as its own task so cancelling the timer
            # does not cancel a request already on the wire.
            task = loop.create_task(self.poll())
            self._inflight_polls.add(task)
            task.add_done_callback(self._poll_done)
            await asyncio.sleep(self._poll_interval)

    def _poll_done(self, task: asyncio.Task[None]) -> None:
        self._inflight_polls.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.warning("Sync status poll crashed", exc_info=exc)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def trigger_sync(self, town: str | None = None) -> TriggerResult:
        """Start a sync job, reset the event log and refresh the status.

        Raises whatever the trigger command raised; state is unchanged
        in that case.
        """
        result = await self._backend.trigger_sync(town)
        if self._closed:
            return result
        self._events.clear()
        self._log_generation += 1
        self._notify()
        await self.poll()
        return result

    # ------------------------------------------------------------------
    # Event stream
    # ------------------------------------------------------------------

    def _on_event(self, event: SyncEvent) -> None:
        if self._closed:
            return
        self._events.append(event)
        self._notify()

    def _on_stream_closed(self, error: BaseException | None) -> None:
        if self._closed or self._reconnect_delay <= 0:
            _logger.debug("Live sync events stopped (error=%s)", error)
            return
        loop = asyncio.get_running_loop()
        _logger.debug("Reopening sync event stream in %.1fs", self._reconnect_delay)
        self._reconnect_handle = loop.call_later(self._reconnect_delay, self._reopen_stream)

    def _reopen_stream(self) -> None:
        self._reconnect_handle = None
        if self._closed:
            return
        self._subscriber.open(self._on_event)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _notify(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self.state)
        except Exception:
            _logger.debug("on_change callback failed", exc_info=True)
