"""Lifecycle state tracking and event emission shared by launchers."""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

LOGGER = logging.getLogger(__name__)

START = "start"
READY = "ready"
CRASH = "crash"
ERROR = "error"
DONE = "done"


class BrowserState(str, Enum):
    INIT = "INIT"
    BEING_STARTED = "BEING_STARTED"
    READY = "READY"
    BEING_KILLED = "BEING_KILLED"
    FINISHED = "FINISHED"


@dataclass(slots=True, frozen=True)
class LifecycleEvent:
    name: str
    at: datetime
    payload: dict[str, Any] = field(default_factory=dict)


Listener = Callable[..., None]


class LifecycleEmitter:
    """Process tracking and event emission applied to every launcher.

    Listeners are plain callables invoked synchronously with the event
    payload as keyword arguments. A failing listener is logged and does not
    prevent the remaining listeners from running.
    """

    def __init__(self, *, history_size: int = 50, logger: logging.Logger | None = None) -> None:
        self.state = BrowserState.INIT
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._history: deque[LifecycleEvent] = deque(maxlen=history_size)
        self._logger = logger or LOGGER

    def on(self, name: str, listener: Listener) -> None:
        self._listeners[name].append(listener)

    def off(self, name: str, listener: Listener) -> None:
        listeners = self._listeners.get(name)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, name: str, **payload: Any) -> None:
        self._history.append(LifecycleEvent(name=name, at=datetime.now(tz=timezone.utc), payload=payload))
        for listener in list(self._listeners.get(name, ())):
            try:
                listener(**payload)
            except Exception:
                self._logger.exception("Listener for %r event failed", name)

    def transition(self, state: BrowserState) -> None:
        self._logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    @property
    def history(self) -> list[LifecycleEvent]:
        return list(self._history)


__all__ = [
    "BrowserState",
    "CRASH",
    "DONE",
    "ERROR",
    "LifecycleEmitter",
    "LifecycleEvent",
    "READY",
    "START",
]
