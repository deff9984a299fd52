"""High-level async client for the council voting-records API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

import aiohttp

from pycouncil._api import members as _members_api
from pycouncil._api import politicians as _politicians_api
from pycouncil._api import polls as _polls_api
from pycouncil._api import sync as _sync_api
from pycouncil._api import towns as _towns_api
from pycouncil._transport import HttpTransport, Transport
from pycouncil.config import CouncilConfig
from pycouncil.exceptions import CouncilError
from pycouncil.models.member import CouncilMember, MemberVote
from pycouncil.models.politician import Politician
from pycouncil.models.poll import Poll, PollDetail
from pycouncil.models.sync import LastRunSummary, SyncEvent, SyncStatus, TriggerResult
from pycouncil.models.town import Season, Town
from pycouncil.sync.coordinator import SyncCoordinator, SyncState

_logger = logging.getLogger(__name__)


class CouncilClient:
    """Async client for the council voting-records API.

    Usage::

        async with CouncilClient(config) as client:
            towns = await client.get_towns()
            async with client.sync_coordinator() as sync:
                ...
    """

    def __init__(
        self,
        config: CouncilConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or CouncilConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None

    @property
    def config(self) -> CouncilConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CouncilClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise CouncilError("Client not initialized. Use 'async with CouncilClient(...) as client:'")
        return self._transport

    def _institution(self, institution: str | None) -> str:
        return institution if institution is not None else self._config.institution

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def get_towns(self) -> list[Town]:
        return await _towns_api.fetch_towns(self._require_transport())

    async def get_seasons(self, city: str, institution: str | None = None) -> list[Season]:
        return await _towns_api.fetch_seasons(self._require_transport(), city, self._institution(institution))

    async def get_polls(self, city: str, season: str, *, institution: str | None = None) -> list[Poll]:
        return await _polls_api.fetch_polls(
            self._require_transport(),
            city,
            self._institution(institution),
            season,
        )

    async def get_poll(self, ref: str) -> PollDetail:
        return await _polls_api.fetch_poll(self._require_transport(), ref)

    async def get_members(self, city: str, season: str, *, institution: str | None = None) -> list[CouncilMember]:
        return await _members_api.fetch_members(
            self._require_transport(),
            city,
            self._institution(institution),
            season,
        )

    async def get_member(self, ref: str) -> CouncilMember:
        return await _members_api.fetch_member(self._require_transport(), ref)

    async def get_member_votes(self, ref: str) -> list[MemberVote]:
        return await _members_api.fetch_member_votes(self._require_transport(), ref)

    async def get_party_switchers(self, city: str) -> list[Politician]:
        return await _politicians_api.fetch_party_switchers(self._require_transport(), city)

    async def get_club_switchers(self, city: str) -> list[Politician]:
        return await _politicians_api.fetch_club_switchers(self._require_transport(), city)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def register_town(self, ref: str, name: str) -> Town:
        """Register a town with the backend so sync jobs import it."""
        return await _towns_api.register_town(self._require_transport(), ref, name)

    # ------------------------------------------------------------------
    # Sync job
    # ------------------------------------------------------------------

    async def get_sync_status(self) -> SyncStatus:
        return await _sync_api.fetch_sync_status(self._require_transport())

    async def get_last_run_summary(self) -> LastRunSummary:
        return await _sync_api.fetch_last_run_summary(self._require_transport())

    async def trigger_sync(self, town: str | None = None) -> TriggerResult:
        """Ask the server to start a sync job (optionally for one town)."""
        return await _sync_api.trigger_sync(self._require_transport(), town)

    def sync_events(self) -> AsyncIterator[SyncEvent]:
        """Live sync events, in server order, until the stream ends."""
        return _sync_api.stream_sync_events(self._require_transport())

    def sync_coordinator(
        self,
        *,
        on_change: Callable[[SyncState], None] | None = None,
        **overrides: Any,
    ) -> SyncCoordinator:
        """Build a :class:`SyncCoordinator` backed by this client.

        Defaults come from the client config; keyword arguments of
        :class:`SyncCoordinator` override them.
        """
        options: dict[str, Any] = {
            "poll_interval": self._config.poll_interval,
            "event_log_max": self._config.event_log_max,
            "event_log_keep": self._config.event_log_keep,
            "events_enabled": self._config.events_enabled,
            "reconnect_delay": self._config.events_reconnect_delay,
        }
        options.update(overrides)
        return SyncCoordinator(self, on_change=on_change, **options)
