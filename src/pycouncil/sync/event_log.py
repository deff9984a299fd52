"""Bounded, append-only sync event log."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from pycouncil._constants import EVENT_LOG_KEEP, EVENT_LOG_MAX
from pycouncil.models.sync import SyncEvent

_logger = logging.getLogger(__name__)


class EventLog:
    """Ordered event buffer with a backpressure cap.

    Appends never reorder.  When an append pushes the length past
    ``max_size`` the log drops its oldest entries, keeping the most
    recent ``keep`` in their original order.  Callers never observe a
    length above ``max_size``.
    """

    def __init__(self, *, max_size: int = EVENT_LOG_MAX, keep: int = EVENT_LOG_KEEP) -> None:
        if not 0 < keep <= max_size:
            raise ValueError(f"keep must be in (0, {max_size}], got {keep}")
        self._max_size = max_size
        self._keep = keep
        self._events: list[SyncEvent] = []

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def keep(self) -> int:
        return self._keep

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[SyncEvent]:
        return iter(tuple(self._events))

    def __bool__(self) -> bool:
        return bool(self._events)

    def append(self, event: SyncEvent) -> None:
        self._events.append(event)
        if len(self._events) > self._max_size:
            dropped = len(self._events) - self._keep
            del self._events[:dropped]
            _logger.debug("Event log over %d entries; dropped %d oldest", self._max_size, dropped)

    def extend(self, events: Iterable[SyncEvent]) -> None:
        """Append events one by one, applying the cap after each."""
        for event in events:
            self.append(event)

    def clear(self) -> None:
        self._events.clear()

    def snapshot(self) -> tuple[SyncEvent, ...]:
        return tuple(self._events)
