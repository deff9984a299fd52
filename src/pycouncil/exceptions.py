"""Custom exception hierarchy for pycouncil."""

from __future__ import annotations

from typing import Any


class CouncilError(Exception):
    """Base exception for all pycouncil errors."""


class CouncilConfigError(CouncilError):
    """Invalid or missing configuration."""


class CouncilTransportError(CouncilError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        payload: Any = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.payload = payload
        super().__init__(message)


class CouncilNotFoundError(CouncilTransportError):
    """The requested resource does not exist (HTTP 404)."""


class CouncilResponseError(CouncilError):
    """Response body did not match the expected schema."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class CouncilApiError(CouncilError):
    """API answered but reported an application-level failure."""

    def __init__(
        self,
        message: str,
        *,
        status: str = "",
        endpoint: str = "",
    ) -> None:
        self.status = status
        self.endpoint = endpoint
        super().__init__(message)


class CouncilTriggerError(CouncilApiError):
    """The server refused to start a synchronization job.

    Raised for non-2xx trigger responses (e.g. ``409`` while a job is
    already running) and for 2xx responses whose ``status`` marks a
    rejection.  ``status`` and ``message`` carry the server's descriptor
    when one was returned.
    """

    def __init__(
        self,
        message: str,
        *,
        status: str = "",
        endpoint: str = "",
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, status=status, endpoint=endpoint)
