"""Observational fetchers for the sync coordinator.

Status and last-run reads are *observational*: a failure means "no
update this time", never an error for the caller.  Retrying is left to
the coordinator's polling cadence.  Only :class:`CouncilError` is
absorbed; anything else propagates to the caller (the polling loop logs
it as a crash).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pycouncil.exceptions import CouncilError
from pycouncil.models.sync import LastRunSummary, SyncStatus

if TYPE_CHECKING:
    from pycouncil.sync.coordinator import SyncBackend

_logger = logging.getLogger(__name__)


async def fetch_status_snapshot(backend: SyncBackend) -> SyncStatus | None:
    """One status round-trip; ``None`` when it failed."""
    try:
        return await backend.get_sync_status()
    except CouncilError:
        _logger.debug("Sync status fetch failed; keeping previous snapshot", exc_info=True)
        return None


async def load_last_run(backend: SyncBackend) -> LastRunSummary | None:
    """One last-run round-trip; ``None`` when no summary is available."""
    try:
        return await backend.get_last_run_summary()
    except CouncilError:
        _logger.debug("Last-run summary unavailable", exc_info=True)
        return None
