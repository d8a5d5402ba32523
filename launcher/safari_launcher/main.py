"""Application factory for the Safari launcher service."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from .config import BROWSER_PROFILES, LauncherSettings, load_settings
from .errors import LaunchError
from .metrics import LauncherMetrics
from .models import (
    BrowserInfo,
    HealthResponse,
    SessionCreateRequest,
    SessionDeleteResponse,
    SessionDetail,
    SessionSummary,
)
from .sessions import BrowserBusyError, SessionManager
from .version import __version__

LOGGER = logging.getLogger(__name__)


class AppState:
    def __init__(self, settings: LauncherSettings) -> None:
        self.settings = settings
        self.registry = CollectorRegistry()
        self.metrics = LauncherMetrics(self.registry)
        self.manager: SessionManager | None = None

    async def startup(self) -> None:
        LOGGER.info("Starting Safari launcher")
        self.manager = SessionManager(self.settings, metrics=self.metrics)

    async def shutdown(self) -> None:
        LOGGER.info("Shutting down Safari launcher")
        if self.manager:
            await self.manager.close()


def get_app_state(request: Request) -> AppState:
    """Return the launcher application state."""

    state = getattr(request.app.state, "app_state", None)
    if not isinstance(state, AppState):
        raise HTTPException(status_code=500, detail="Launcher app state is not initialised")
    return state


def get_manager(state: AppState = Depends(get_app_state)) -> SessionManager:
    if not state.manager:
        raise HTTPException(status_code=503, detail="Launcher initialising")
    return state.manager


def create_app(settings: LauncherSettings | None = None) -> FastAPI:
    cfg = settings or load_settings()
    app = FastAPI(title="Safari Launcher", version=__version__)

    state = AppState(cfg)
    app.state.app_state = state

    @app.on_event("startup")
    async def _startup() -> None:
        await state.startup()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await state.shutdown()

    @app.get("/health", response_model=HealthResponse)
    async def health(app_state: AppState = Depends(get_app_state)) -> HealthResponse:
        checks = {"manager": "ok" if app_state.manager else "starting"}
        return HealthResponse(status="ok", version=app.version, checks=checks)

    @app.get("/browsers", response_model=list[BrowserInfo])
    async def list_browsers() -> list[BrowserInfo]:
        return [
            BrowserInfo(name=profile.name, application_name=profile.application_name)
            for profile in BROWSER_PROFILES.values()
        ]

    @app.get("/sessions", response_model=list[SessionSummary])
    async def list_sessions(manager: SessionManager = Depends(get_manager)) -> list[SessionSummary]:
        return await manager.list_summaries()

    @app.post("/sessions", response_model=SessionDetail, status_code=status.HTTP_201_CREATED)
    async def create_session(
        request: SessionCreateRequest,
        manager: SessionManager = Depends(get_manager),
    ) -> SessionDetail:
        try:
            handle = await manager.create(request.browser, request.url)
        except KeyError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.args[0]) from exc
        except BrowserBusyError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        except LaunchError as exc:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
        return handle.detail()

    @app.get("/sessions/{session_id}", response_model=SessionDetail)
    async def get_session(
        session_id: str, manager: SessionManager = Depends(get_manager)
    ) -> SessionDetail:
        handle = await manager.get(session_id)
        if not handle:
            raise HTTPException(status_code=404, detail="Session not found")
        return handle.detail()

    @app.delete("/sessions/{session_id}", response_model=SessionDeleteResponse)
    async def delete_session(
        session_id: str,
        manager: SessionManager = Depends(get_manager),
    ) -> SessionDeleteResponse:
        result = await manager.delete(session_id)
        if not result:
            raise HTTPException(status_code=404, detail="Session not found")
        handle, error = result
        return SessionDeleteResponse(
            id=handle.id,
            state=handle.launcher.state,
            error=str(error) if error else None,
        )

    @app.get(cfg.metrics_endpoint)
    async def metrics(app_state: AppState = Depends(get_app_state)) -> Response:
        data = generate_latest(app_state.registry)
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    return app


__all__ = ["AppState", "create_app", "get_app_state", "get_manager"]
