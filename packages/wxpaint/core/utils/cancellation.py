"""Cooperative cancellation for generation runs.

One CancelToken is created per invocation and threaded into every I/O call
that invocation issues. Awaitables are raced against the token with
``guard()``; inter-poll delays use ``sleep()`` so they wake as soon as the
token fires.

Example:
    >>> token = CancelToken()
    >>> job_id = await token.guard(client.submit_job(request))
    >>> await token.sleep(2.0)
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


class Cancelled(Exception):
    """Raised when a caller-initiated cancellation is observed.

    An intentional abort, not a failure: not a subclass of ``PaintingError``.

    Attributes:
        reason: Optional free-form reason supplied to ``CancelToken.cancel``
    """

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(reason or "Operation cancelled")


class CancelToken:
    """Shared, one-shot cancellation flag.

    Once cancelled a token stays cancelled; create a new token per run.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        """True once ``cancel()`` has been called."""
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation. Subsequent calls are no-ops."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ``Cancelled`` if the token has fired."""
        if self._event.is_set():
            raise Cancelled(self._reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        When the token wins, the in-flight work is cancelled and awaited
        before ``Cancelled`` is raised, so no request outlives the signal.

        Args:
            awaitable: Coroutine or future to run

        Returns:
            The awaitable's result

        Raises:
            Cancelled: If the token fired before or while the work ran
        """
        if self._event.is_set():
            # Close an un-started coroutine so it does not warn on GC.
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            raise Cancelled(self._reason)

        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            waiter.cancel()
            raise

        if self._event.is_set():
            work.cancel()
            await asyncio.gather(work, return_exceptions=True)
            raise Cancelled(self._reason)

        waiter.cancel()
        return work.result()

    async def sleep(self, delay: float) -> None:
        """Sleep for ``delay`` seconds, waking early on cancellation.

        Raises:
            Cancelled: If the token fires before or during the sleep
        """
        self.raise_if_cancelled()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=max(0.0, delay))
        except asyncio.TimeoutError:
            return
        raise Cancelled(self._reason)
