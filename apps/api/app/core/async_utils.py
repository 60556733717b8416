from __future__ import annotations

import asyncio
from typing import Coroutine, TypeVar

import anyio

T = TypeVar("T")


def run_async(coro: Coroutine[object, object, T], *, timeout: float | None = None) -> T:
    """
    Run an adapter coroutine from synchronous service code.

    Sync FastAPI endpoints execute in AnyIO worker threads, so the coroutine is
    handed back to the request's event loop. CLI commands and plain tests have
    no loop and get a fresh one. Calling this from inside a coroutine is a bug.
    """

    async def _runner() -> T:
        if timeout is not None:
            with anyio.fail_after(timeout):
                return await coro
        return await coro

    try:
        return anyio.from_thread.run(_runner)
    except RuntimeError:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return anyio.run(_runner)
        coro.close()
        raise RuntimeError("run_async called from async context; use await instead")
