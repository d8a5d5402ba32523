"""Recording fakes for the scripting bridge and preference store."""

from __future__ import annotations

import asyncio


class FakeBrowser:
    """In-memory stand-in for :class:`BrowserScripting` that records calls."""

    def __init__(self, *, running: bool = False, application_name: str = "Safari") -> None:
        self.application_name = application_name
        self.running = running
        self.windows: dict[int, list[str]] = {}
        self.calls: list[tuple[str, object]] = []
        self.failures: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self._next_window = 1

    def ops(self) -> list[str]:
        return [op for op, _ in self.calls]

    def add_window(self, *urls: str) -> int:
        window_id = self._next_window
        self._next_window += 1
        self.windows[window_id] = list(urls)
        return window_id

    async def _call(self, op: str, arg: object = None) -> None:
        self.calls.append((op, arg))
        gate = self.gates.get(op)
        if gate is not None:
            await gate.wait()
        if op in self.failures:
            raise self.failures[op]

    async def is_running(self) -> bool:
        await self._call("is_running")
        return self.running

    async def open_document(self, url: str) -> None:
        await self._call("open", url)
        self.running = True
        self.add_window(url)

    async def find_tab(self, url: str) -> int | None:
        await self._call("find", url)
        for window_id, tabs in self.windows.items():
            if url in tabs:
                return window_id
        return None

    async def raise_window(self, window_id: int) -> None:
        await self._call("raise", window_id)

    async def activate(self) -> None:
        await self._call("activate")
        self.running = True

    async def close_documents(self, url: str) -> None:
        await self._call("close", url)
        for window_id in list(self.windows):
            self.windows[window_id] = [tab for tab in self.windows[window_id] if tab != url]
            if not self.windows[window_id]:
                del self.windows[window_id]

    async def quit(self) -> None:
        await self._call("quit")
        self.running = False
        self.windows.clear()

    async def reset(self) -> None:
        await self._call("reset")


class FakePreference:
    def __init__(self, value: bool = False) -> None:
        self.value = value
        self.reads = 0
        self.writes: list[bool] = []
        self.failure: Exception | None = None

    def read_flag(self) -> bool:
        self.reads += 1
        return self.value

    def write_flag(self, value: bool) -> None:
        if self.failure is not None:
            raise self.failure
        self.writes.append(value)
        self.value = value


async def wait_until(predicate, *, timeout: float = 1.0) -> None:
    async def _loop() -> None:
        while not predicate():
            await asyncio.sleep(0.002)

    await asyncio.wait_for(_loop(), timeout)
