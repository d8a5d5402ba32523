from __future__ import annotations

import asyncio
import sys

import pytest

from safari_launcher.processes import run_process


@pytest.mark.anyio
async def test_run_process_captures_output() -> None:
    code, stdout, stderr = await run_process(
        sys.executable, "-c", "import sys; print('ok'); print('warn', file=sys.stderr)", timeout=10
    )

    assert code == 0
    assert stdout.strip() == "ok"
    assert stderr.strip() == "warn"


@pytest.mark.anyio
async def test_run_process_reports_exit_status() -> None:
    code, _, _ = await run_process(sys.executable, "-c", "raise SystemExit(3)", timeout=10)

    assert code == 3


@pytest.mark.anyio
async def test_run_process_times_out() -> None:
    with pytest.raises(TimeoutError):
        await run_process(sys.executable, "-c", "import time; time.sleep(30)", timeout=0.2)


@pytest.mark.anyio
async def test_run_process_cancellation_propagates() -> None:
    task = asyncio.create_task(
        run_process(sys.executable, "-c", "import time; time.sleep(30)", timeout=30)
    )
    await asyncio.sleep(0.2)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
