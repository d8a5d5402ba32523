"""Shared helpers for running short-lived helper processes."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from asyncio import subprocess as aio_subprocess

LOGGER = logging.getLogger(__name__)


async def terminate_process(process: aio_subprocess.Process, *, kill: bool = False) -> None:
    """Terminate *process* gracefully, falling back to kill on timeout."""

    if process.returncode is not None:
        return
    if not kill:
        with contextlib.suppress(ProcessLookupError):
            process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=5)
            return
        except TimeoutError:
            LOGGER.warning("Process %s did not exit after terminate; killing", process.pid)
    with contextlib.suppress(ProcessLookupError):
        process.kill()
    with contextlib.suppress(asyncio.TimeoutError):
        await asyncio.wait_for(process.wait(), timeout=5)


async def run_process(
    *args: str, timeout: float
) -> tuple[int, str, str]:
    """Run ``args`` to completion and return ``(returncode, stdout, stderr)``.

    The child is killed when ``timeout`` expires or the awaiting task is
    cancelled; :class:`TimeoutError` is raised in the former case.
    """

    process = await aio_subprocess.create_subprocess_exec(
        *args,
        stdin=aio_subprocess.DEVNULL,
        stdout=aio_subprocess.PIPE,
        stderr=aio_subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except BaseException:
        await terminate_process(process, kill=True)
        raise
    return (
        process.returncode if process.returncode is not None else -1,
        stdout.decode(errors="replace"),
        stderr.decode(errors="replace"),
    )


__all__ = ["run_process", "terminate_process"]
