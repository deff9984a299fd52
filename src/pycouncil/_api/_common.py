"""Shared helpers for council API endpoint modules.

This module centralizes the most repeated patterns:
- quoting path parameters
- GETting an endpoint and validating the body into a model (or list)
- mapping pydantic validation failures to :class:`CouncilResponseError`

It is internal to pycouncil and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from pycouncil._transport import Transport
from pycouncil.exceptions import CouncilResponseError

M = TypeVar("M", bound=BaseModel)


def segment(value: str) -> str:
    """Quote a single path parameter."""
    text = str(value).strip()
    if not text:
        raise ValueError("path parameter must be non-empty")
    return quote(text, safe="")


def parse_model(model: type[M], data: Any, *, endpoint: str) -> M:
    """Validate *data* into *model*, wrapping schema failures."""
    if not isinstance(data, dict):
        raise CouncilResponseError(
            f"{endpoint} returned {type(data).__name__}, expected an object",
            endpoint=endpoint,
        )
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise CouncilResponseError(f"{endpoint} response invalid: {exc}", endpoint=endpoint) from exc


def parse_model_list(model: type[M], data: Any, *, endpoint: str) -> list[M]:
    """Validate a JSON array into a list of *model*."""
    if not isinstance(data, list):
        raise CouncilResponseError(
            f"{endpoint} returned {type(data).__name__}, expected a list",
            endpoint=endpoint,
        )
    return [parse_model(model, item, endpoint=endpoint) for item in data]


async def get_model(transport: Transport, endpoint: str, model: type[M]) -> M:
    data = await transport.request_json("GET", endpoint)
    return parse_model(model, data, endpoint=endpoint)


async def get_model_list(transport: Transport, endpoint: str, model: type[M]) -> list[M]:
    data = await transport.request_json("GET", endpoint)
    return parse_model_list(model, data, endpoint=endpoint)
