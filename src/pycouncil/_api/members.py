"""Council member endpoints."""

from __future__ import annotations

from pycouncil._api._common import get_model, get_model_list, segment
from pycouncil._transport import Transport
from pycouncil.models.member import CouncilMember, MemberVote


async def fetch_members(transport: Transport, city: str, institution: str, season: str) -> list[CouncilMember]:
    endpoint = f"/{segment(city)}/{segment(institution)}/{segment(season)}/members"
    return await get_model_list(transport, endpoint, CouncilMember)


async def fetch_member(transport: Transport, ref: str) -> CouncilMember:
    return await get_model(transport, f"/members/{segment(ref)}", CouncilMember)


async def fetch_member_votes(transport: Transport, ref: str) -> list[MemberVote]:
    return await get_model_list(transport, f"/members/{segment(ref)}/votes", MemberVote)
