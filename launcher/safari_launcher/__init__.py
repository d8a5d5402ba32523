"""Launch, keep frontmost and tear down Safari for test runs."""

from .config import BROWSER_PROFILES, BrowserProfile, LauncherSettings, load_settings
from .errors import LaunchError, ShutdownError, TickError
from .launcher import BrowserSession, SafariLauncher, create_launcher
from .version import __version__

__all__ = [
    "BROWSER_PROFILES",
    "BrowserProfile",
    "BrowserSession",
    "LaunchError",
    "LauncherSettings",
    "SafariLauncher",
    "ShutdownError",
    "TickError",
    "__version__",
    "create_launcher",
    "load_settings",
]
