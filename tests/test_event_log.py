from __future__ import annotations

import pytest

from pycouncil.models.sync import SyncEvent
from pycouncil.sync.event_log import EventLog


def _events(count: int) -> list[SyncEvent]:
    return [SyncEvent(message=f"event {i}") for i in range(count)]


def test_append_preserves_order_under_cap() -> None:
    log = EventLog()
    events = _events(10)
    for event in events:
        log.append(event)

    assert log.snapshot() == tuple(events)


def test_log_never_exceeds_max_and_keeps_recent_tail() -> None:
    log = EventLog(max_size=500, keep=300)
    events = _events(600)
    longest = 0

    for index, event in enumerate(events):
        log.append(event)
        longest = max(longest, len(log))
        if index == 500:
            # First truncation: exactly the most recent 300, in order.
            assert log.snapshot() == tuple(events[201:501])

    assert longest == 500
    assert log.snapshot() == tuple(events[201:600])


def test_extend_applies_cap_per_event() -> None:
    log = EventLog(max_size=5, keep=3)
    events = _events(7)
    log.extend(events)

    # 6th append truncates to [3, 4, 5]; 7th appends 6.
    assert [e.message for e in log] == ["event 3", "event 4", "event 5", "event 6"]


def test_clear_empties_log() -> None:
    log = EventLog()
    log.extend(_events(3))
    log.clear()

    assert len(log) == 0
    assert not log


def test_same_content_events_are_not_deduplicated() -> None:
    log = EventLog()
    log.append(SyncEvent(message="same"))
    log.append(SyncEvent(message="same"))

    assert len(log) == 2


@pytest.mark.parametrize(("max_size", "keep"), [(10, 0), (10, 11)])
def test_invalid_cap_rejected(max_size: int, keep: int) -> None:
    with pytest.raises(ValueError):
        EventLog(max_size=max_size, keep=keep)
