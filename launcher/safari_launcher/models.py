"""Pydantic models exposed by the launcher API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from .events import BrowserState


class SessionCreateRequest(BaseModel):
    """Inbound payload for launching a browser at a test harness URL."""

    browser: str = "Safari"
    url: Annotated[str, Field(min_length=1, max_length=2048)]


class BrowserInfo(BaseModel):
    name: str
    application_name: str


class LifecycleEventModel(BaseModel):
    name: str
    at: datetime
    detail: str | None = None


class SessionSummary(BaseModel):
    id: str
    browser: str
    application_name: str
    state: BrowserState
    url: str
    created_at: datetime
    was_running_before_launch: bool | None = None


class SessionDetail(SessionSummary):
    """Session payload including recent lifecycle events."""

    events: list[LifecycleEventModel]
    foreground_ticks: int
    foreground_failures: int
    last_error: str | None = None


class SessionDeleteResponse(BaseModel):
    id: str
    state: BrowserState
    error: str | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
    checks: dict[str, str]


__all__ = [
    "BrowserInfo",
    "HealthResponse",
    "LifecycleEventModel",
    "SessionCreateRequest",
    "SessionDeleteResponse",
    "SessionDetail",
    "SessionSummary",
]
