"""Client configuration for pycouncil."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pycouncil._constants import (
    DEFAULT_BASE_URL,
    DEFAULT_INSTITUTION,
    DEFAULT_POLL_INTERVAL,
    EVENT_LOG_KEEP,
    EVENT_LOG_MAX,
)
from pycouncil.exceptions import CouncilConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class CouncilConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        API base URL, without a trailing slash.
    institution : str
        Default institution code used by the season/poll/member getters.
    request_timeout : float
        Total timeout in seconds for one-shot requests.  Also used as the
        connect timeout of the event stream, which otherwise has no
        read deadline.
    poll_interval : float
        Seconds between sync status polls.
    event_log_max : int
        Hard maximum length of the in-memory sync event log.
    event_log_keep : int
        Number of most recent events kept when the maximum is exceeded.
    events_enabled : bool
        Open the live sync event stream when a coordinator initializes.
    events_reconnect_delay : float
        Seconds to wait before reopening an event stream that ended or
        failed.  ``0`` disables reconnection.
    """

    base_url: str = DEFAULT_BASE_URL
    institution: str = DEFAULT_INSTITUTION
    request_timeout: float = 30.0
    poll_interval: float = DEFAULT_POLL_INTERVAL
    event_log_max: int = EVENT_LOG_MAX
    event_log_keep: int = EVENT_LOG_KEEP
    events_enabled: bool = True
    events_reconnect_delay: float = 0.0

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise CouncilConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.request_timeout <= 0:
            raise CouncilConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if not 0 < self.event_log_keep <= self.event_log_max:
            raise CouncilConfigError(
                f"event_log_keep must be in (0, {self.event_log_max}], got {self.event_log_keep}"
            )
        if self.events_reconnect_delay < 0:
            raise CouncilConfigError("events_reconnect_delay must not be negative")

    @classmethod
    def from_env(cls, **overrides: Any) -> CouncilConfig:
        """Create configuration from environment variables.

        Reads optional ``COUNCIL_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CouncilConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "COUNCIL_BASE_URL": "base_url",
            "COUNCIL_INSTITUTION": "institution",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric values, handled separately
        _ENV_FLOAT_MAP = {
            "COUNCIL_REQUEST_TIMEOUT": "request_timeout",
            "COUNCIL_POLL_INTERVAL": "poll_interval",
            "COUNCIL_EVENTS_RECONNECT_DELAY": "events_reconnect_delay",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        _ENV_INT_MAP = {
            "COUNCIL_EVENT_LOG_MAX": "event_log_max",
            "COUNCIL_EVENT_LOG_KEEP": "event_log_keep",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = int(val)

        if "events_enabled" not in overrides:
            config_kwargs["events_enabled"] = _env_bool(env.get("COUNCIL_EVENTS_ENABLED"), True)

        config_kwargs.update(overrides)

        base_url = config_kwargs.get("base_url")
        if isinstance(base_url, str):
            config_kwargs["base_url"] = base_url.rstrip("/")

        return cls(**config_kwargs)
