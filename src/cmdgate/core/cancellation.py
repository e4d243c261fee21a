"""Cooperative cancellation for async gateway calls.

A :class:`CancellationToken` is handed to ``execute_async`` / ``fetch_async``
and passed through to the connection open and to the unit of work.
Cancelling it aborts whichever of the two is pending.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from cmdgate.core.errors import OperationCancelledError

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal shared between a caller and a call."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Later calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(self._reason or "operation cancelled")

    async def wait(self) -> None:
        """Suspend until :meth:`cancel` is called."""
        await self._event.wait()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable*, aborting it if the token fires first.

        The inner task is cancelled and awaited before
        :class:`OperationCancelledError` is raised, so its own cleanup has
        run by the time the caller sees the cancellation. If the awaitable
        settles first its result (or exception) wins.
        """
        if self._event.is_set() and asyncio.iscoroutine(awaitable):
            awaitable.close()
        self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.wait({task})
        if task.cancelled() and self.cancelled:
            raise OperationCancelledError(self._reason or "operation cancelled")
        return task.result()
