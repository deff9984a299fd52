"""Town and season models."""

from __future__ import annotations

from pycouncil.models._base import ApiTimestamp, CouncilBaseModel


class Town(CouncilBaseModel):
    """A town whose council data is imported."""

    ref: str
    name: str = ""
    last_sync_date: ApiTimestamp = None
    """When the town's data was last synchronized."""


class Season(CouncilBaseModel):
    """An electoral season (council term) of a town."""

    ref: str
    name: str = ""
    meeting_count: int | None = None
    poll_count: int | None = None
    incomplete_meetings: int | None = None
    """Meetings whose import has not finished yet."""
