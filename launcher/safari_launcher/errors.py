"""Exceptions raised by the launcher components."""

from __future__ import annotations


class ScriptError(RuntimeError):
    """Raised when ``osascript`` exits with a failure status."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ScriptTimeoutError(ScriptError):
    """Raised when a script does not finish within the configured timeout."""


class PreferenceError(RuntimeError):
    """Raised when an application preference cannot be read or written."""


class LauncherError(RuntimeError):
    """Base class for lifecycle failures reported to the orchestrator."""


class LaunchError(LauncherError):
    """The browser could not be probed or opened. Fatal for the run."""


class TickError(LauncherError):
    """A foreground enforcement tick failed. The loop keeps running."""


class ShutdownError(LauncherError):
    """Closing, quitting or restoring preferences failed during kill."""


__all__ = [
    "LaunchError",
    "LauncherError",
    "PreferenceError",
    "ScriptError",
    "ScriptTimeoutError",
    "ShutdownError",
    "TickError",
]
