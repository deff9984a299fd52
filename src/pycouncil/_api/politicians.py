"""Politician endpoints (party and club switchers)."""

from __future__ import annotations

from pycouncil._api._common import get_model_list, segment
from pycouncil._transport import Transport
from pycouncil.models.politician import Politician


async def fetch_party_switchers(transport: Transport, city: str) -> list[Politician]:
    """Politicians nominated by different parties across seasons."""
    return await get_model_list(transport, f"/politicians/{segment(city)}/party-switchers", Politician)


async def fetch_club_switchers(transport: Transport, city: str) -> list[Politician]:
    """Politicians who changed council clubs."""
    return await get_model_list(transport, f"/politicians/{segment(city)}/club-switchers", Politician)
