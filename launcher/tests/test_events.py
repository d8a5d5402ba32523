from __future__ import annotations

from safari_launcher.events import DONE, ERROR, READY, BrowserState, LifecycleEmitter


def test_emit_calls_listeners_with_payload() -> None:
    emitter = LifecycleEmitter()
    seen: list[str] = []
    emitter.on(READY, lambda url, **_: seen.append(url))

    emitter.emit(READY, url="http://host/", was_running_before_launch=False)

    assert seen == ["http://host/"]
    assert emitter.history[0].name == READY
    assert emitter.history[0].payload["url"] == "http://host/"


def test_failing_listener_does_not_block_others() -> None:
    emitter = LifecycleEmitter()
    seen: list[object] = []

    def broken(**_: object) -> None:
        raise ValueError("listener bug")

    emitter.on(ERROR, broken)
    emitter.on(ERROR, lambda error: seen.append(error))

    emitter.emit(ERROR, error="boom")

    assert seen == ["boom"]


def test_off_removes_listener() -> None:
    emitter = LifecycleEmitter()
    seen: list[None] = []

    def listener(**_: object) -> None:
        seen.append(None)

    emitter.on(DONE, listener)
    emitter.off(DONE, listener)
    emitter.off(DONE, listener)
    emitter.emit(DONE)

    assert seen == []


def test_history_is_bounded_and_state_transitions() -> None:
    emitter = LifecycleEmitter(history_size=2)
    for name in ("start", "ready", "done"):
        emitter.emit(name)
    emitter.transition(BrowserState.FINISHED)

    assert [event.name for event in emitter.history] == ["ready", "done"]
    assert emitter.state is BrowserState.FINISHED
