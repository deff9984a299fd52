"""Synchronization job models: status snapshot, events, last run, trigger."""

from __future__ import annotations

from pydantic import Field, model_validator

from pycouncil.models._base import ApiTimestamp, CouncilBaseModel, CouncilEnum


class EventLevel(CouncilEnum):
    """Severity attached to a sync event."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> CouncilEnum:
        if isinstance(value, str) and value.upper() == "WARNING":
            return cls.WARN
        return super()._missing_(value)


class SyncStatus(CouncilBaseModel):
    """Point-in-time status of the server-side import job.

    A snapshot is always replaced as a whole; it is never merged with a
    previous one.
    """

    running: bool = False
    """Whether a job is currently executing."""
    current_town: str | None = None
    """Town being imported."""
    current_season: str | None = None
    """Season being imported."""
    current_phase: str | None = None
    """Job phase label (e.g. ``"meetings"``)."""
    total_meetings: int = Field(default=0, ge=0)
    """Meetings scheduled for the current run."""
    processed_meetings: int = Field(default=0, ge=0)
    """Meetings already processed in the current run."""
    started_at: ApiTimestamp = None
    """When the current (or last) run started."""
    last_completed_at: ApiTimestamp = None
    """When the last run completed."""

    @model_validator(mode="after")
    def _check_progress(self) -> SyncStatus:
        if self.total_meetings > 0 and self.processed_meetings > self.total_meetings:
            raise ValueError(
                f"processedMeetings ({self.processed_meetings}) exceeds totalMeetings ({self.total_meetings})"
            )
        return self

    @property
    def progress(self) -> float | None:
        """Fraction of processed meetings, or ``None`` when nothing is scheduled."""
        if self.total_meetings <= 0:
            return None
        return self.processed_meetings / self.total_meetings


class SyncEvent(CouncilBaseModel):
    """One server-ordered log record emitted by the import job.

    Records are opaque to the client: they are displayed in arrival
    order and never merged, reordered or deduplicated.
    """

    timestamp: ApiTimestamp = None
    level: EventLevel = EventLevel.INFO
    message: str = ""
    town: str | None = None
    season: str | None = None
    phase: str | None = None


class LastRunSummary(CouncilBaseModel):
    """Summary of the most recently completed run, with its event log."""

    events: list[SyncEvent] = Field(default_factory=list)
    town: str | None = None
    started_at: ApiTimestamp = None
    finished_at: ApiTimestamp = None
    success: bool | None = None
    total_meetings: int = 0
    processed_meetings: int = 0
    error_message: str | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()


class TriggerResult(CouncilBaseModel):
    """Server descriptor returned for an accepted trigger command."""

    status: str = ""
    message: str = ""
