"""Bookkeeping for launcher sessions driven through the HTTP API."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from .config import LauncherSettings, get_profile
from .errors import LaunchError, ShutdownError
from .launcher import SafariLauncher, create_launcher
from .metrics import LauncherMetrics
from .models import LifecycleEventModel, SessionDetail, SessionSummary

LOGGER = logging.getLogger(__name__)

LauncherFactory = Callable[[str, LauncherSettings], SafariLauncher]


class BrowserBusyError(RuntimeError):
    """Raised when a browser already has an active session."""


@dataclass(slots=True)
class SessionHandle:
    id: str
    browser: str
    url: str
    created_at: datetime
    launcher: SafariLauncher
    was_running_before_launch: bool | None = None

    def summary(self) -> SessionSummary:
        return SessionSummary(
            id=self.id,
            browser=self.browser,
            application_name=self.launcher.profile.application_name,
            state=self.launcher.state,
            url=self.url,
            created_at=self.created_at,
            was_running_before_launch=self.was_running_before_launch,
        )

    def detail(self) -> SessionDetail:
        launcher = self.launcher
        enforcer = launcher.session.enforcer if launcher.session else None
        events = [
            LifecycleEventModel(
                name=event.name,
                at=event.at,
                detail=_describe(event.payload),
            )
            for event in launcher.events.history
        ]
        return SessionDetail(
            **self.summary().model_dump(),
            events=events,
            foreground_ticks=enforcer.ticks if enforcer else 0,
            foreground_failures=enforcer.failures if enforcer else 0,
            last_error=str(launcher.last_error) if launcher.last_error else None,
        )


class SessionManager:
    """Create, track and kill one launcher per browser application."""

    def __init__(
        self,
        settings: LauncherSettings,
        *,
        metrics: LauncherMetrics | None = None,
        factory: LauncherFactory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings
        self._metrics = metrics
        self._factory = factory or create_launcher
        self._logger = logger or LOGGER
        self._sessions: dict[str, SessionHandle] = {}
        self._lock = asyncio.Lock()

    async def create(self, browser: str, url: str) -> SessionHandle:
        get_profile(browser)
        async with self._lock:
            for handle in self._sessions.values():
                if handle.browser == browser:
                    raise BrowserBusyError(f"{browser} already has an active session ({handle.id})")
            launcher = self._factory(browser, self._settings)
            if self._metrics is not None:
                self._metrics.attach(launcher)
            handle = SessionHandle(
                id=str(uuid.uuid4()),
                browser=browser,
                url=url,
                created_at=datetime.now(tz=timezone.utc),
                launcher=launcher,
            )
            self._sessions[handle.id] = handle

        try:
            await launcher.start(url)
        except LaunchError:
            # Undo whatever part of the launch did happen before reporting.
            await launcher.kill()
            async with self._lock:
                self._sessions.pop(handle.id, None)
            raise
        if launcher.session is not None:
            handle.was_running_before_launch = launcher.session.was_running_before_launch
        self._logger.info("Session %s started %s at %s", handle.id, browser, url)
        return handle

    async def get(self, session_id: str) -> SessionHandle | None:
        async with self._lock:
            return self._sessions.get(session_id)

    async def list_summaries(self) -> list[SessionSummary]:
        async with self._lock:
            return [handle.summary() for handle in self._sessions.values()]

    async def delete(self, session_id: str) -> tuple[SessionHandle, ShutdownError | None] | None:
        async with self._lock:
            handle = self._sessions.pop(session_id, None)
        if handle is None:
            return None
        error = await handle.launcher.kill()
        self._logger.info("Session %s finished", handle.id)
        return handle, error

    async def close(self) -> None:
        async with self._lock:
            handles = list(self._sessions.values())
            self._sessions.clear()
        for handle in handles:
            try:
                await asyncio.wait_for(
                    handle.launcher.kill(), timeout=self._settings.shutdown_timeout_seconds
                )
            except TimeoutError:
                self._logger.warning("Timed out shutting down session %s", handle.id)


def _describe(payload: dict[str, object]) -> str | None:
    error = payload.get("error")
    if error is not None:
        return str(error)
    if "url" in payload:
        return str(payload["url"])
    return None


__all__ = ["BrowserBusyError", "SessionHandle", "SessionManager"]
