"""AppleScript bridge used to drive the browser application."""

from __future__ import annotations

import logging

from .errors import ScriptError, ScriptTimeoutError
from .processes import run_process

LOGGER = logging.getLogger(__name__)

MISSING = "missing"


def quote_applescript(text: str) -> str:
    """Return ``text`` as an AppleScript string literal."""

    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class ScriptRunner:
    """Execute scripts through ``osascript`` and return their textual result."""

    def __init__(
        self,
        *,
        osascript_path: str = "osascript",
        timeout: float = 10.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._osascript_path = osascript_path
        self._timeout = timeout
        self._logger = logger or LOGGER

    async def run(self, script: str) -> str:
        try:
            returncode, stdout, stderr = await run_process(
                self._osascript_path, "-e", script, timeout=self._timeout
            )
        except TimeoutError as exc:
            raise ScriptTimeoutError(f"Script did not finish within {self._timeout:g}s") from exc
        except OSError as exc:
            raise ScriptError(f"Unable to execute {self._osascript_path}: {exc}") from exc
        if returncode != 0:
            message = stderr.strip() or "unknown error"
            raise ScriptError(
                f"osascript failed (code {returncode}): {message}",
                returncode=returncode,
                stderr=stderr,
            )
        result = stdout.strip()
        self._logger.debug("osascript -> %r", result)
        return result


class BrowserScripting:
    """Typed operations on one scriptable browser application."""

    def __init__(self, application_name: str, runner: ScriptRunner) -> None:
        self.application_name = application_name
        self._runner = runner
        self._app = quote_applescript(application_name)

    async def is_running(self) -> bool:
        result = await self._runner.run(f"return application {self._app} is running")
        return result == "true"

    async def open_document(self, url: str) -> None:
        await self._runner.run(
            f"tell application {self._app} to make new document with properties "
            f"{{URL:{quote_applescript(url)}}}"
        )

    async def find_tab(self, url: str) -> int | None:
        """Return the id of the first window holding a tab at ``url``."""

        script = "\n".join(
            [
                f"tell application {self._app}",
                "  repeat with w in windows",
                "    try",
                "      repeat with t in tabs of w",
                "        considering case",
                f"          if URL of t is {quote_applescript(url)} then return id of w",
                "        end considering",
                "      end repeat",
                "    end try",
                "  end repeat",
                "end tell",
                f"return {quote_applescript(MISSING)}",
            ]
        )
        result = await self._runner.run(script)
        if result == MISSING or not result:
            return None
        try:
            return int(result)
        except ValueError:
            raise ScriptError(f"Unexpected window id {result!r}") from None

    async def raise_window(self, window_id: int) -> None:
        await self._runner.run(
            f"tell application {self._app} to set index of window id {int(window_id)} to 1"
        )

    async def activate(self) -> None:
        script = "\n".join(
            [
                f"tell application {self._app} to activate",
                'tell application "System Events"',
                f"  if exists process {self._app} then set visible of process {self._app} to true",
                "end tell",
            ]
        )
        await self._runner.run(script)

    async def close_documents(self, url: str) -> None:
        # Matching happens in the script so the comparison is case sensitive
        # whatever the application does with ``whose`` clauses.
        script = "\n".join(
            [
                f"tell application {self._app}",
                "  set matches to {}",
                "  repeat with d in documents",
                "    try",
                "      considering case",
                f"        if URL of d is {quote_applescript(url)} then set end of matches to contents of d",
                "      end considering",
                "    end try",
                "  end repeat",
                "  repeat with d in matches",
                "    close d",
                "  end repeat",
                "end tell",
            ]
        )
        await self._runner.run(script)

    async def quit(self) -> None:
        await self._runner.run(f"tell application {self._app} to quit")

    async def reset(self) -> None:
        """Click the "Reset" menu item and confirm the dialog."""

        menu_item = quote_applescript(f"Reset {self.application_name}…")
        script = "\n".join(
            [
                f"tell application {self._app} to activate",
                'tell application "System Events"',
                f"  tell process {self._app}",
                f"    click menu item {menu_item} of menu 1 of menu bar item {self._app} of menu bar 1",
                "    delay 1",
                '    click button "Reset" of window 1',
                "  end tell",
                "end tell",
            ]
        )
        await self._runner.run(script)


__all__ = ["BrowserScripting", "MISSING", "ScriptRunner", "quote_applescript"]
