"""Council member models."""

from __future__ import annotations

from pydantic import Field

from pycouncil.models._base import CouncilBaseModel, CouncilEnum
from pycouncil.models.poll import AgendaItemRef, VoteResult


class VoteChoice(CouncilEnum):
    VOTED_FOR = "VOTED_FOR"
    VOTED_AGAINST = "VOTED_AGAINST"
    ABSTAIN = "ABSTAIN"
    NOT_VOTED = "NOT_VOTED"
    ABSENT = "ABSENT"
    UNKNOWN = "UNKNOWN"


class ClubInfo(CouncilBaseModel):
    """Council club (caucus) membership for a season."""

    ref: str
    name: str = ""
    season: str = ""
    position: str = ""


class CouncilMember(CouncilBaseModel):
    ref: str
    name: str = ""
    title: str | None = None
    picture: str | None = None
    email: str | None = None
    phone: str | None = None
    other_functions: str | None = None
    nominee: list[str] = Field(default_factory=list)
    """Parties that nominated the member."""
    club: ClubInfo | None = None
    season: str | None = None


class MemberVotePoll(CouncilBaseModel):
    ref: str
    name: str = ""
    result: VoteResult | None = None
    agenda_item: AgendaItemRef | None = None


class MemberVote(CouncilBaseModel):
    """How one member voted in one poll."""

    voted: VoteChoice = VoteChoice.UNKNOWN
    poll: MemberVotePoll
