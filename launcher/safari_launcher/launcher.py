"""Launch and shutdown control for Safari-family browsers."""

from __future__ import annotations

import asyncio
import atexit
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .config import BrowserProfile, LauncherSettings, get_profile
from .enforcer import ForegroundEnforcer
from .errors import LaunchError, PreferenceError, ScriptError, ShutdownError, TickError
from .events import CRASH, DONE, ERROR, READY, START, BrowserState, LifecycleEmitter
from .preferences import PreferenceFlag
from .scripting import BrowserScripting, ScriptRunner

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class BrowserSession:
    target_url: str
    was_running_before_launch: bool
    enforcer: ForegroundEnforcer | None = None
    prior_setting_value: bool | None = None
    # Set before the open script is sent; close and quit are skipped otherwise.
    document_requested: bool = False


class SafariLauncher:
    """Open a browser at a test URL, keep it in front, and tear it down.

    ``was_running_before_launch`` is recorded once during :meth:`start` and
    decides whether :meth:`kill` quits the application. Preferences switched
    on at launch are put back after the close and quit steps.
    """

    def __init__(
        self,
        profile: BrowserProfile,
        scripting: BrowserScripting,
        *,
        settings: LauncherSettings,
        emitter: LifecycleEmitter,
        preference: PreferenceFlag | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.name = profile.name
        self.profile = profile
        self.events = emitter
        self.session: BrowserSession | None = None
        self.last_error: Exception | None = None
        self._scripting = scripting
        self._settings = settings
        self._preference = preference
        self._logger = logger or LOGGER
        self._exit_hook: Callable[[], None] | None = None
        self._start_finished: asyncio.Event | None = None
        self._killed = False

    @property
    def state(self) -> BrowserState:
        return self.events.state

    async def start(self, url: str) -> None:
        if not url or not url.strip():
            raise LaunchError("A non-empty URL is required to launch the browser")
        if self.state is not BrowserState.INIT:
            raise LaunchError(f"{self.name} launcher was already started")

        self.events.transition(BrowserState.BEING_STARTED)
        self.events.emit(START, url=url)
        self._logger.info("Launching %s at %s", self.profile.application_name, url)
        self._start_finished = asyncio.Event()
        try:
            await self._launch(url)
        finally:
            self._start_finished.set()

    async def _launch(self, url: str) -> None:
        try:
            was_running = await self._scripting.is_running()
            session = BrowserSession(target_url=url, was_running_before_launch=was_running)
            self.session = session
            self._ensure_not_killed()
            await self._enable_preference(session)
            self._ensure_not_killed()
            if self._settings.reset_on_launch:
                await self._reset()
                self._ensure_not_killed()
            session.document_requested = True
            await self._scripting.open_document(url)
            self._ensure_not_killed()
        except LaunchError as error:
            self._report_launch_error(error)
            raise
        except (ScriptError, PreferenceError) as exc:
            error = LaunchError(f"Failed to launch {self.name} at {url}: {exc}")
            self._report_launch_error(error)
            raise error from exc

        enforcer = ForegroundEnforcer(
            self._scripting,
            url,
            interval=self._settings.foreground_interval_seconds,
            on_error=self._on_tick_error,
            logger=self._logger,
        )
        session.enforcer = enforcer
        enforcer.start()
        self._exit_hook = enforcer.cancel
        atexit.register(self._exit_hook)

        self.events.transition(BrowserState.READY)
        self.events.emit(READY, url=url, was_running_before_launch=was_running)

    async def kill(self, done: Callable[[], None] | None = None) -> ShutdownError | None:
        """Close the test tab, quit if we launched the app, restore preferences.

        A concurrent :meth:`start` is allowed to reach its next step and fail
        with :class:`LaunchError` before anything is closed. ``done`` is
        invoked exactly once per call, whatever happens. Shutdown failures are
        logged and emitted as ``error`` events, then returned.
        """

        try:
            return await self._shutdown()
        finally:
            if done is not None:
                done()

    async def _shutdown(self) -> ShutdownError | None:
        if self._killed:
            return None
        self._killed = True
        self.events.transition(BrowserState.BEING_KILLED)

        error: ShutdownError | None = None
        try:
            # A launch in progress stops at its next step; wait for it so the
            # session reflects everything it changed.
            if self._start_finished is not None:
                await self._start_finished.wait()
            session = self.session
            if session is not None:
                error = await self._close_session(session)
        finally:
            self.session = None
            self.events.transition(BrowserState.FINISHED)
            self.events.emit(DONE, error=error)
        return error

    async def _close_session(self, session: BrowserSession) -> ShutdownError | None:
        if session.enforcer is not None:
            await session.enforcer.stop()
            session.enforcer = None
        self._unregister_exit_hook()

        failures: list[str] = []
        if session.document_requested:
            try:
                await self._scripting.close_documents(session.target_url)
            except ScriptError as exc:
                failures.append(f"close: {exc}")
            if not session.was_running_before_launch:
                try:
                    await self._scripting.quit()
                except ScriptError as exc:
                    failures.append(f"quit: {exc}")
        try:
            await self._restore_preference(session.prior_setting_value)
        except PreferenceError as exc:
            failures.append(f"restore preference: {exc}")

        if not failures:
            return None
        error = ShutdownError(f"Errors while shutting down {self.name}: " + "; ".join(failures))
        self.last_error = error
        self._logger.error("%s", error)
        self.events.emit(ERROR, error=error)
        return error

    async def _enable_preference(self, session: BrowserSession) -> None:
        """Switch the managed preference on, recording the value it replaces."""

        if self._preference is None:
            return
        current = await asyncio.to_thread(self._preference.read_flag)
        if current:
            return
        session.prior_setting_value = current
        await asyncio.to_thread(self._preference.write_flag, True)

    def _ensure_not_killed(self) -> None:
        if self._killed:
            raise LaunchError(f"{self.name} was killed while launching")

    def _report_launch_error(self, error: LaunchError) -> None:
        self.last_error = error
        self._logger.error("%s", error)
        self.events.emit(ERROR, error=error)

    async def _restore_preference(self, prior: bool | None) -> None:
        if self._preference is None or prior is None or prior is True:
            return
        await asyncio.to_thread(self._preference.write_flag, prior)

    async def _reset(self) -> None:
        try:
            await self._scripting.reset()
        except ScriptError as exc:
            self._logger.warning("Resetting %s failed: %s", self.profile.application_name, exc)

    def _on_tick_error(self, error: TickError) -> None:
        self.events.emit(CRASH, error=error)

    def _unregister_exit_hook(self) -> None:
        if self._exit_hook is not None:
            atexit.unregister(self._exit_hook)
            self._exit_hook = None


def create_launcher(
    name: str,
    settings: LauncherSettings,
    *,
    scripting: BrowserScripting | None = None,
    preference: PreferenceFlag | None = None,
    emitter: LifecycleEmitter | None = None,
    logger: logging.Logger | None = None,
) -> SafariLauncher:
    """Build a launcher for the browser registered as ``name``."""

    profile = get_profile(name)
    if scripting is None:
        runner = ScriptRunner(
            osascript_path=settings.osascript_path,
            timeout=settings.script_timeout_seconds,
            logger=logger,
        )
        scripting = BrowserScripting(profile.application_name, runner)
    if not settings.manage_preference:
        preference = None
    elif preference is None:
        preference = PreferenceFlag(
            profile.preferences_domain,
            settings.preference_key,
            defaults_path=settings.defaults_path,
            timeout=settings.script_timeout_seconds,
        )
    return SafariLauncher(
        profile,
        scripting,
        settings=settings,
        emitter=emitter or LifecycleEmitter(history_size=settings.event_history_size, logger=logger),
        preference=preference,
        logger=logger,
    )


__all__ = ["BrowserSession", "SafariLauncher", "create_launcher"]
