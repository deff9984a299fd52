"""Server-sent events (``text/event-stream``) line decoder."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServerSentEvent:
    """One dispatched server-sent event."""

    data: str
    event: str = "message"
    id: str | None = None
    retry: int | None = None


class EventStreamDecoder:
    """Incremental decoder fed one line (without terminator) at a time.

    Follows the WHATWG event-stream rules: ``data`` lines accumulate,
    a blank line dispatches, ``:`` lines are comments, and the last
    event id persists across events.
    """

    def __init__(self) -> None:
        self._data: list[str] = []
        self._event = ""
        self._last_id: str | None = None
        self._retry: int | None = None

    @property
    def last_event_id(self) -> str | None:
        return self._last_id

    def decode(self, line: str) -> ServerSentEvent | None:
        """Consume a line; return an event when the line completes one."""
        if not line:
            return self._dispatch()

        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if field == "data":
            self._data.append(value)
        elif field == "event":
            self._event = value
        elif field == "id":
            if "\0" not in value:
                self._last_id = value
        elif field == "retry":
            if value.isdigit():
                self._retry = int(value)
        return None

    def _dispatch(self) -> ServerSentEvent | None:
        data = self._data
        event = self._event
        retry = self._retry
        self._data = []
        self._event = ""
        self._retry = None
        if not data:
            return None
        return ServerSentEvent(
            data="\n".join(data),
            event=event or "message",
            id=self._last_id,
            retry=retry,
        )
