"""Sync monitoring layer.

This package observes the server-side import job: it polls the status
snapshot, holds the live event subscription, backfills from the last
run, and merges all of it into one bounded, ordered read model owned by
:class:`~pycouncil.sync.coordinator.SyncCoordinator`.
"""

from pycouncil.sync.coordinator import SyncBackend, SyncCoordinator, SyncState
from pycouncil.sync.event_log import EventLog
from pycouncil.sync.subscriber import EventSubscriber

__all__ = [
    "EventLog",
    "EventSubscriber",
    "SyncBackend",
    "SyncCoordinator",
    "SyncState",
]
