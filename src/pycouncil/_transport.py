"""HTTP transport for JSON requests and line-oriented event streams."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any, Protocol

import aiohttp

from pycouncil._constants import USER_AGENT
from pycouncil.config import CouncilConfig
from pycouncil.exceptions import CouncilNotFoundError, CouncilTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        ...

    def iter_lines(self, endpoint: str) -> AsyncIterator[str]:
        ...


def _decode_body(text: str) -> Any:
    """Best-effort JSON decode of an error body."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def _raise_for_status(status: int, endpoint: str, text: str) -> None:
    if 200 <= status < 300:
        return
    payload = _decode_body(text)
    exc_type = CouncilNotFoundError if status == 404 else CouncilTransportError
    raise exc_type(
        f"HTTP {status} from {endpoint}: {text[:200]}",
        status_code=status,
        endpoint=endpoint,
        payload=payload,
    )


class HttpTransport:
    """aiohttp-backed transport for the council API."""

    def __init__(self, config: CouncilConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _url(self, endpoint: str) -> str:
        return f"{self._config.base_url}{endpoint}"

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        An empty 2xx body decodes to ``None``.
        """
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        url = self._url(endpoint)
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                json=dict(payload) if payload is not None else None,
                headers=headers,
                timeout=timeout,
            ) as resp:
                body = await resp.read()
                status = resp.status
        except aiohttp.ClientError as exc:
            raise CouncilTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise CouncilTransportError(
                f"Request to {endpoint} timed out",
                endpoint=endpoint,
            ) from exc

        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            _raise_for_status(status, endpoint, body.decode("utf-8", errors="replace"))
            raise CouncilTransportError(
                f"Invalid encoding from {endpoint}: {exc}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        _raise_for_status(status, endpoint, text)

        if not text.strip():
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CouncilTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

    async def iter_lines(self, endpoint: str) -> AsyncIterator[str]:
        """Open a streaming GET and yield its body line by line.

        Line terminators are stripped.  The generator ends when the server
        closes the stream; closing the generator closes the connection.
        """
        headers: dict[str, str] = {
            "accept": "text/event-stream",
            "cache-control": "no-cache",
            "user-agent": USER_AGENT,
        }
        url = self._url(endpoint)
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=self._config.request_timeout)

        _logger.debug("STREAM %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=timeout) as resp:
                if resp.status != 200:
                    text = (await resp.read()).decode("utf-8", errors="replace")
                    _raise_for_status(resp.status, endpoint, text)
                    raise CouncilTransportError(
                        f"HTTP {resp.status} from {endpoint}: expected 200 for stream",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
                async for raw in resp.content:
                    yield raw.decode("utf-8", errors="replace").rstrip("\r\n")
        except aiohttp.ClientError as exc:
            raise CouncilTransportError(
                f"Stream {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise CouncilTransportError(
                f"Stream {endpoint} timed out",
                endpoint=endpoint,
            ) from exc
