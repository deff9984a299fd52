from __future__ import annotations

from pycouncil._sse import EventStreamDecoder


def _feed(decoder: EventStreamDecoder, lines: list[str]) -> list:
    out = []
    for line in lines:
        event = decoder.decode(line)
        if event is not None:
            out.append(event)
    return out


def test_blank_line_dispatches_accumulated_data() -> None:
    events = _feed(EventStreamDecoder(), ["data: one", "data: two", ""])

    assert len(events) == 1
    assert events[0].data == "one\ntwo"
    assert events[0].event == "message"


def test_comments_and_unknown_fields_ignored() -> None:
    events = _feed(EventStreamDecoder(), [": keepalive", "foo: bar", "data: x", ""])

    assert [e.data for e in events] == ["x"]


def test_event_name_resets_between_events() -> None:
    events = _feed(
        EventStreamDecoder(),
        ["event: ping", "data: {}", "", "data: {}", ""],
    )

    assert [e.event for e in events] == ["ping", "message"]


def test_last_event_id_persists() -> None:
    decoder = EventStreamDecoder()
    events = _feed(decoder, ["id: 7", "data: a", "", "data: b", ""])

    assert [e.id for e in events] == ["7", "7"]
    assert decoder.last_event_id == "7"


def test_blank_line_without_data_dispatches_nothing() -> None:
    events = _feed(EventStreamDecoder(), ["event: sync", "", "", "retry: 100", ""])

    assert events == []


def test_value_without_leading_space_and_retry() -> None:
    events = _feed(EventStreamDecoder(), ["retry: 2500", "data:raw", ""])

    assert events[0].data == "raw"
    assert events[0].retry == 2500
