"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class Envelope(BaseModel):
    """Standard response wrapper: ``{success, data, message, timestamp}``.

    ``data`` is already in wire form (camelCase dicts from ``to_dict()``).
    """

    success: bool = True
    data: Any = None
    message: str | None = None
    timestamp: str


class SessionStartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    track_name: str | None = Field(default=None, alias="trackName")
