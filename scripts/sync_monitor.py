#!/usr/bin/env python3
"""Terminal monitor for the council data sync job.

Connects to the API configured via ``COUNCIL_*`` environment variables,
then:
1) optionally triggers a sync (``--trigger`` / ``--town``),
2) prints every status snapshot change and every live sync event,
3) runs until ``--duration`` elapses or Ctrl+C.

The last completed run's events are printed first when no live events
have arrived yet.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycouncil import CouncilClient, CouncilConfig, CouncilError, SyncEvent, SyncState, SyncStatus  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch the council data sync job status and live events.",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="API base URL (overrides COUNCIL_BASE_URL).",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds between status polls.",
    )
    parser.add_argument(
        "--trigger",
        action="store_true",
        help="Trigger a full sync before watching.",
    )
    parser.add_argument(
        "--town",
        default=None,
        help="Trigger a sync for one town before watching (implies --trigger).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _format_status(status: SyncStatus) -> str:
    if not status.running:
        completed = status.last_completed_at.isoformat() if status.last_completed_at else "never"
        return f"idle (last completed: {completed})"
    progress = f"{status.processed_meetings}/{status.total_meetings}" if status.total_meetings else "-"
    return (
        f"running town={status.current_town or '-'} season={status.current_season or '-'} "
        f"phase={status.current_phase or '-'} meetings={progress}"
    )


def _format_event(event: SyncEvent) -> str:
    ts = event.timestamp.strftime("%Y-%m-%d %H:%M:%S") if event.timestamp else "--"
    return f"{ts} {event.level.value:<5} {event.message}"


class _Printer:
    """Prints only what changed between two states."""

    def __init__(self) -> None:
        self._status: SyncStatus | None = None
        self._printed: tuple[SyncEvent, ...] = ()

    def __call__(self, state: SyncState) -> None:
        if state.status is not None and state.status != self._status:
            self._status = state.status
            print(f"[sync] status: {_format_status(state.status)}")

        events = state.events
        if not events:
            if self._printed:
                print("[sync] event log reset")
            self._printed = ()
            return
        # Find where the already printed tail continues; after truncation
        # the log no longer starts with what we printed first.
        new: tuple[SyncEvent, ...] = events
        if self._printed:
            last = self._printed[-1]
            for index in range(len(events) - 1, -1, -1):
                if events[index] is last:
                    new = events[index + 1 :]
                    break
        for event in new:
            print(f"[sync] {_format_event(event)}")
        self._printed = events


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.poll_interval is not None:
        overrides["poll_interval"] = args.poll_interval
    config = CouncilConfig.from_env(**overrides)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    async with CouncilClient(config) as client:
        async with client.sync_coordinator(on_change=_Printer()) as sync:
            if args.trigger or args.town:
                try:
                    result = await sync.trigger_sync(args.town)
                except CouncilError as exc:
                    print(f"[sync] trigger failed: {exc}", file=sys.stderr)
                    return 2
                print(f"[sync] trigger accepted: status={result.status} message={result.message}")

            timeout = args.duration if args.duration > 0 else None
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(stop.wait(), timeout)
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(_main())
