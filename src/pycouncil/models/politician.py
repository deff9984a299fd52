"""Politician model used by the party/club switcher lists."""

from __future__ import annotations

from pydantic import Field

from pycouncil.models._base import CouncilBaseModel


class Politician(CouncilBaseModel):
    name: str
    titles: str | None = None
    picture: str | None = None
    email: str | None = None
    phone: str | None = None
    party_nominees: list[str] = Field(default_factory=list)
    club: str | None = None
