"""Deferred, optionally coalescing task scheduling on the running event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()

ErrorHook = Callable[[str, BaseException], None]
TaskFactory = Callable[[], Awaitable[None]]


def log_deferred_failure(key: str, exc: BaseException) -> None:
    """Default error hook: log the failure with its traceback."""
    logger.error("deferred_task_failed", key=key, error=str(exc), exc_info=exc)


class DeferredScheduler:
    """Runs coroutines after a delay without blocking the caller.

    By default every scheduled task runs. With ``coalesce=True`` a task that
    is still waiting is cancelled when another one is scheduled under the
    same key, so only the latest write of a burst happens. Tasks that have
    already started are never cancelled by coalescing.

    Failures have no caller to propagate to; they are passed to ``on_error``.
    """

    def __init__(self, on_error: ErrorHook | None = None, *, coalesce: bool = False) -> None:
        """Initialize with an error hook and the coalescing policy."""
        self._on_error = on_error or log_deferred_failure
        self._coalesce = coalesce
        self._tasks: set[asyncio.Task[None]] = set()
        self._waiting: dict[str, asyncio.Task[None]] = {}

    @property
    def pending(self) -> int:
        """Number of scheduled tasks not yet finished."""
        return sum(1 for task in self._tasks if not task.done())

    def schedule(self, key: str, delay: float, factory: TaskFactory) -> asyncio.Task[None]:
        """Run ``await factory()`` after ``delay`` seconds.

        Must be called with a running event loop.
        """
        if self._coalesce:
            previous = self._waiting.get(key)
            if previous is not None and not previous.done():
                logger.debug("deferred_task_coalesced", key=key)
                previous.cancel()

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(key, delay, factory), name=f"deferred:{key}")
        self._tasks.add(task)
        self._waiting[key] = task
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, key: str, delay: float, factory: TaskFactory) -> None:
        """Sleep, then execute the factory and report failures."""
        await asyncio.sleep(delay)
        if self._waiting.get(key) is asyncio.current_task():
            del self._waiting[key]
        try:
            await factory()
        except Exception as exc:
            self._on_error(key, exc)

    async def drain(self) -> None:
        """Wait for every scheduled task, including ones scheduled meanwhile."""
        while pending := [task for task in self._tasks if not task.done()]:
            await asyncio.gather(*pending, return_exceptions=True)

    def cancel_all(self) -> None:
        """Cancel every task that has not finished."""
        for task in list(self._tasks):
            task.cancel()
        self._waiting.clear()
