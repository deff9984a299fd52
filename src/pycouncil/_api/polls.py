"""Poll endpoints."""

from __future__ import annotations

from pycouncil._api._common import get_model, get_model_list, segment
from pycouncil._transport import Transport
from pycouncil.models.poll import Poll, PollDetail


async def fetch_polls(transport: Transport, city: str, institution: str, season: str) -> list[Poll]:
    endpoint = f"/{segment(city)}/{segment(institution)}/{segment(season)}/polls"
    return await get_model_list(transport, endpoint, Poll)


async def fetch_poll(transport: Transport, ref: str) -> PollDetail:
    return await get_model(transport, f"/polls/{segment(ref)}", PollDetail)
