"""Run font downloads and other coroutines from synchronous drivers."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pdfdesk.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Coroutine

T = TypeVar("T")


class _LoopThread(threading.Thread, Generic[T]):
    """Worker thread that owns a fresh event loop for a single coroutine."""

    def __init__(self, coro: Coroutine[Any, Any, T], *, name: str) -> None:
        super().__init__(name=name, daemon=True)
        self._coro = coro
        self.result: T | None = None
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            self.result = asyncio.run(self._coro)
        except BaseException as exc:  # noqa: BLE001
            self.error = exc


def run_async(coro: Coroutine[Any, Any, T], *, thread_name: str = "pdfdesk-async") -> T:
    """Run a coroutine to completion from sync code.

    Inside a running event loop (e.g. a notebook) the coroutine is moved to a
    worker thread named `thread_name` so the caller's loop is never re-entered.

    Args:
        coro: The coroutine to run.
        thread_name: Name of the worker thread, if one is needed.

    Raises:
        AsyncExecutionError: If the coroutine fails on the worker thread.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    worker = _LoopThread(coro, name=thread_name)
    worker.start()
    worker.join()
    if worker.error is not None:
        raise AsyncExecutionError(result=worker.error) from worker.error
    return worker.result  # type: ignore[return-value]


async def gather_ordered(*awaitables: Awaitable[T]) -> list[T | BaseException]:
    """Await all awaitables concurrently, keeping failures in place of results."""
    return list(await asyncio.gather(*awaitables, return_exceptions=True))
