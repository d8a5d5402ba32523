from __future__ import annotations

import pytest
from fakes import FakeBrowser, FakePreference

from safari_launcher.config import LauncherSettings


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def preference() -> FakePreference:
    return FakePreference()


@pytest.fixture
def settings() -> LauncherSettings:
    return LauncherSettings(foreground_interval_seconds=0.01, script_timeout_seconds=1.0)
