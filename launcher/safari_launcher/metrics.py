"""Prometheus counters fed by launcher lifecycle events."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter

from .events import CRASH, DONE, ERROR, READY, BrowserState

if TYPE_CHECKING:
    from .launcher import SafariLauncher


class LauncherMetrics:
    def __init__(self, registry: CollectorRegistry) -> None:
        self.launches = Counter(
            "safari_launcher_launches_total",
            "Browser launches by outcome",
            ["browser", "outcome"],
            registry=registry,
        )
        self.tick_failures = Counter(
            "safari_launcher_foreground_tick_failures_total",
            "Foreground enforcement ticks that failed",
            ["browser"],
            registry=registry,
        )
        self.shutdowns = Counter(
            "safari_launcher_shutdowns_total",
            "Completed shutdowns by outcome",
            ["browser", "outcome"],
            registry=registry,
        )

    def attach(self, launcher: SafariLauncher) -> None:
        """Subscribe the counters to ``launcher``'s lifecycle events."""

        browser = launcher.name
        events = launcher.events

        def on_ready(**_: object) -> None:
            self.launches.labels(browser=browser, outcome="ready").inc()

        def on_error(error: Exception, **_: object) -> None:
            if events.state is BrowserState.BEING_STARTED:
                self.launches.labels(browser=browser, outcome="failed").inc()

        def on_crash(**_: object) -> None:
            self.tick_failures.labels(browser=browser).inc()

        def on_done(error: Exception | None = None, **_: object) -> None:
            outcome = "failed" if error is not None else "ok"
            self.shutdowns.labels(browser=browser, outcome=outcome).inc()

        events.on(READY, on_ready)
        events.on(ERROR, on_error)
        events.on(CRASH, on_crash)
        events.on(DONE, on_done)


__all__ = ["LauncherMetrics"]
