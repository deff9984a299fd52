"""pycouncil - Async Python client for municipal council voting records."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycouncil")
except PackageNotFoundError:
    __version__ = "0+local"
from pycouncil.client import CouncilClient
from pycouncil.config import CouncilConfig
from pycouncil.exceptions import (
    CouncilApiError,
    CouncilConfigError,
    CouncilError,
    CouncilNotFoundError,
    CouncilResponseError,
    CouncilTransportError,
    CouncilTriggerError,
)
from pycouncil.models import (
    CouncilMember,
    EventLevel,
    LastRunSummary,
    MajorityType,
    MemberVote,
    Politician,
    Poll,
    PollDetail,
    Season,
    SyncEvent,
    SyncStatus,
    Town,
    TriggerResult,
    VoteChoice,
    VoteResult,
)
from pycouncil.sync import EventLog, EventSubscriber, SyncCoordinator, SyncState

__all__ = [
    "__version__",
    "CouncilApiError",
    "CouncilClient",
    "CouncilConfig",
    "CouncilConfigError",
    "CouncilError",
    "CouncilMember",
    "CouncilNotFoundError",
    "CouncilResponseError",
    "CouncilTransportError",
    "CouncilTriggerError",
    "EventLevel",
    "EventLog",
    "EventSubscriber",
    "LastRunSummary",
    "MajorityType",
    "MemberVote",
    "Politician",
    "Poll",
    "PollDetail",
    "Season",
    "SyncCoordinator",
    "SyncEvent",
    "SyncState",
    "SyncStatus",
    "Town",
    "TriggerResult",
    "VoteChoice",
    "VoteResult",
]
