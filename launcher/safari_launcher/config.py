"""Configuration helpers for the Safari launcher service."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserProfile(BaseModel):
    """Names that parameterise which application the scripts target."""

    name: str
    application_name: str
    preferences_domain: str


BROWSER_PROFILES: dict[str, BrowserProfile] = {
    "Safari": BrowserProfile(
        name="Safari",
        application_name="Safari",
        preferences_domain="com.apple.Safari",
    ),
    "SafariTechPreview": BrowserProfile(
        name="SafariTechPreview",
        application_name="Safari Technology Preview",
        preferences_domain="com.apple.SafariTechnologyPreview",
    ),
}


class LauncherSettings(BaseSettings):
    """Runtime settings for the launcher."""

    model_config = SettingsConfigDict(env_prefix="SAFARI_LAUNCHER_", env_file=".env")

    host: str = "127.0.0.1"
    port: int = 8090
    metrics_endpoint: str = "/metrics"
    log_level: Literal["critical", "error", "warning", "info", "debug"] = "info"

    osascript_path: str = "osascript"
    defaults_path: str = "defaults"
    script_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = 10.0
    foreground_interval_seconds: Annotated[float, Field(gt=0.0, le=60.0)] = 2.0
    shutdown_timeout_seconds: Annotated[float, Field(gt=0.0, le=600.0)] = 30.0

    # Preference that some automation steps need switched on while a run is
    # active. It is restored to its prior value on shutdown.
    manage_preference: bool = True
    preference_key: str = "IncludeDevelopMenu"

    reset_on_launch: bool = False
    event_history_size: Annotated[int, Field(ge=1, le=1000)] = 50

    @model_validator(mode="after")
    def _validate_timeouts(self) -> "LauncherSettings":
        if self.manage_preference and not self.preference_key.strip():
            raise ValueError("preference_key must be set when manage_preference is enabled")
        if self.shutdown_timeout_seconds < self.script_timeout_seconds:
            raise ValueError(
                "shutdown_timeout_seconds must be greater than or equal to script_timeout_seconds"
            )
        return self


def get_profile(name: str) -> BrowserProfile:
    """Return the profile registered under ``name``."""

    try:
        return BROWSER_PROFILES[name]
    except KeyError:
        raise KeyError(f"Unknown browser {name!r}; expected one of {sorted(BROWSER_PROFILES)}") from None


@lru_cache
def load_settings() -> LauncherSettings:
    """Return cached settings instance."""

    return LauncherSettings()


__all__ = ["BROWSER_PROFILES", "BrowserProfile", "LauncherSettings", "get_profile", "load_settings"]
