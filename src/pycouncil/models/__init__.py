"""Data models for council API responses."""

from pycouncil.models._base import ApiTimestamp, CouncilBaseModel, CouncilEnum, parse_api_timestamp
from pycouncil.models.member import ClubInfo, CouncilMember, MemberVote, MemberVotePoll, VoteChoice
from pycouncil.models.poll import (
    AgendaItemRef,
    CouncilMemberRef,
    MajorityType,
    MeetingRef,
    Poll,
    PollDetail,
    VoteGroup,
    VoteResult,
    VotesCount,
    VotesGrouped,
)
from pycouncil.models.politician import Politician
from pycouncil.models.sync import EventLevel, LastRunSummary, SyncEvent, SyncStatus, TriggerResult
from pycouncil.models.town import Season, Town

__all__ = [
    "AgendaItemRef",
    "ApiTimestamp",
    "ClubInfo",
    "CouncilBaseModel",
    "CouncilEnum",
    "CouncilMember",
    "CouncilMemberRef",
    "EventLevel",
    "LastRunSummary",
    "MajorityType",
    "MeetingRef",
    "MemberVote",
    "MemberVotePoll",
    "Politician",
    "Poll",
    "PollDetail",
    "Season",
    "SyncEvent",
    "SyncStatus",
    "Town",
    "TriggerResult",
    "VoteChoice",
    "VoteGroup",
    "VoteResult",
    "VotesCount",
    "VotesGrouped",
    "parse_api_timestamp",
]
