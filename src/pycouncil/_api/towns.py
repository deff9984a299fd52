"""Town and season endpoints.

Endpoints:
  - GET  /cities                          (list towns)
  - POST /cities                          (register a town for import)
  - GET  /{city}/{institution}/seasons    (list seasons)
"""

from __future__ import annotations

import logging

from pycouncil._api._common import get_model_list, parse_model, segment
from pycouncil._transport import Transport
from pycouncil.models.town import Season, Town

_logger = logging.getLogger(__name__)

_TOWNS_ENDPOINT = "/cities"


async def fetch_towns(transport: Transport) -> list[Town]:
    return await get_model_list(transport, _TOWNS_ENDPOINT, Town)


async def register_town(transport: Transport, ref: str, name: str) -> Town:
    """Register a town so the import job starts covering it."""
    payload = {"ref": ref.strip(), "name": name.strip()}
    if not payload["ref"] or not payload["name"]:
        raise ValueError("town ref and name must be non-empty")
    data = await transport.request_json("POST", _TOWNS_ENDPOINT, payload=payload)
    _logger.debug("Registered town ref=%s", payload["ref"])
    if data is None:
        return Town(ref=payload["ref"], name=payload["name"])
    return parse_model(Town, data, endpoint=_TOWNS_ENDPOINT)


async def fetch_seasons(transport: Transport, city: str, institution: str) -> list[Season]:
    endpoint = f"/{segment(city)}/{segment(institution)}/seasons"
    return await get_model_list(transport, endpoint, Season)
