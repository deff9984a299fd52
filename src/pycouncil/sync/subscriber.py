"""Live sync event subscriber."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable

from pycouncil.exceptions import CouncilError
from pycouncil.models.sync import SyncEvent

_logger = logging.getLogger(__name__)

EventStreamFactory = Callable[[], AsyncIterator[SyncEvent]]


class EventSubscriber:
    """Holds at most one live event stream and forwards its events.

    The stream runs in a background task on the current event loop.
    Events are handed to the registered handler one at a time, in the
    order the stream yields them.  The subscriber never reconnects on
    its own; when the stream ends or fails, ``on_close`` is called with
    the error (or ``None`` for a clean end) so the owner can decide.
    """

    def __init__(
        self,
        stream_factory: EventStreamFactory,
        *,
        on_close: Callable[[BaseException | None], None] | None = None,
    ) -> None:
        self._stream_factory = stream_factory
        self._on_close = on_close
        self._task: asyncio.Task[None] | None = None

    @property
    def is_open(self) -> bool:
        """Whether a stream task is live."""
        return self._task is not None and not self._task.done()

    def open(self, on_event: Callable[[SyncEvent], None]) -> None:
        """Start streaming into *on_event*.  No-op while already open."""
        if self.is_open:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(on_event), name="pycouncil-sync-events")
        _logger.debug("Sync event stream opened")

    def close(self) -> None:
        """Cancel the stream.  Safe to call when not open."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            _logger.debug("Sync event stream closed")

    async def _run(self, on_event: Callable[[SyncEvent], None]) -> None:
        error: BaseException | None = None
        try:
            async for event in self._stream_factory():
                try:
                    on_event(event)
                except Exception:
                    _logger.debug("Sync event handler failed", exc_info=True)
        except CouncilError as exc:
            error = exc
            _logger.debug("Sync event stream failed", exc_info=True)
        except Exception as exc:
            error = exc
            _logger.warning("Sync event stream crashed", exc_info=True)
        else:
            _logger.debug("Sync event stream ended by server")

        if self._task is asyncio.current_task():
            self._task = None
        if self._on_close is not None:
            try:
                self._on_close(error)
            except Exception:
                _logger.debug("on_close callback failed", exc_info=True)
