"""Poll (council vote) models."""

from __future__ import annotations

from pydantic import Field

from pycouncil.models._base import ApiTimestamp, CouncilBaseModel, CouncilEnum


class VoteResult(CouncilEnum):
    PASSED = "PASSED"
    REJECTED = "REJECTED"
    UNKNOWN = "UNKNOWN"


class MajorityType(CouncilEnum):
    """Quorum rule a poll was decided by."""

    SIMPLE_MAJORITY = "SIMPLE_MAJORITY"
    THREE_FIFTHS_PRESENT = "THREE_FIFTHS_PRESENT"
    THREE_FIFTHS_ALL = "THREE_FIFTHS_ALL"
    ABSOLUTE_MAJORITY = "ABSOLUTE_MAJORITY"
    UNKNOWN = "UNKNOWN"


class MeetingRef(CouncilBaseModel):
    ref: str
    name: str = ""
    date: ApiTimestamp = None


class AgendaItemRef(CouncilBaseModel):
    ref: str
    name: str = ""
    meeting: MeetingRef | None = None


class VotesCount(CouncilBaseModel):
    """Vote totals.  ``for`` and ``not`` are Python keywords, hence the suffix."""

    absent: int = 0
    for_: int = Field(default=0, alias="for")
    against: int = 0
    abstain: int = 0
    not_: int = Field(default=0, alias="not")

    @property
    def present(self) -> int:
        return self.for_ + self.against + self.abstain + self.not_


class CouncilMemberRef(CouncilBaseModel):
    ref: str
    name: str = ""
    picture: str | None = None


class VoteGroup(CouncilBaseModel):
    voters: list[CouncilMemberRef] = Field(default_factory=list)
    count: int = 0


class VotesGrouped(CouncilBaseModel):
    for_: VoteGroup = Field(default_factory=VoteGroup, alias="for")
    against: VoteGroup = Field(default_factory=VoteGroup)
    not_: VoteGroup = Field(default_factory=VoteGroup, alias="not")
    abstain: VoteGroup = Field(default_factory=VoteGroup)
    absent: VoteGroup = Field(default_factory=VoteGroup)


class Poll(CouncilBaseModel):
    """A single council poll."""

    ref: str
    name: str = ""
    note: str | None = None
    voters: int = 0
    votes_count: VotesCount = Field(default_factory=VotesCount)
    result: VoteResult | None = None
    majority_type: MajorityType = MajorityType.UNKNOWN
    agenda_item: AgendaItemRef | None = None

    @property
    def passed(self) -> bool:
        return self.result == VoteResult.PASSED


class PollDetail(Poll):
    """Poll with per-member votes grouped by choice."""

    votes: VotesGrouped = Field(default_factory=VotesGrouped)
