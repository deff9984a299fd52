"""Internal constants shared across the library."""

DEFAULT_BASE_URL = "http://localhost:8080/api"
USER_AGENT = "pycouncil/1"

#: Default council institution code ("mestské zastupiteľstvo", city council).
DEFAULT_INSTITUTION = "mz"

# ------------------------------------------------------------------
# Sync monitoring
# ------------------------------------------------------------------

DEFAULT_POLL_INTERVAL: float = 15.0
EVENT_LOG_MAX: int = 500
EVENT_LOG_KEEP: int = 300

SYNC_STATUS_ENDPOINT = "/sync/status"
SYNC_LAST_RUN_ENDPOINT = "/sync/last-run"
SYNC_TRIGGER_ENDPOINT = "/sync/trigger"
SYNC_EVENTS_ENDPOINT = "/sync/events"

#: Trigger response statuses that mean the server refused to start a job.
TRIGGER_REJECTED_STATUSES: frozenset[str] = frozenset({"error", "failed", "rejected"})

#: Server-sent event names that carry no sync event payload.
KEEPALIVE_EVENT_NAMES: frozenset[str] = frozenset({"ping", "heartbeat", "keepalive"})
