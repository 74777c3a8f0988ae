"""Per-call cancellation contexts.

A `CancellationScope` owns the single "current" token for one class of
operation (generation, status probe). `cancel_and_replace` cancels whatever
token is current, without checking whether its call already finished, and
installs a fresh one: last writer wins.

There is no lock around the current token. Concurrent callers sharing one
scope cancel each other nondeterministically, which is acceptable for a
single-user desktop backend but not for multi-tenant serving.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from .errors import GenerationCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")

CANCEL_REASON = "Operation canceled by the user."


class CancellationToken:
    """Cancellation handle for one logical call.

    Awaitables run through `run` are wrapped in tasks so that `cancel` can
    interrupt an in-flight network request, not just future ones.
    """

    def __init__(self, label: str = "generation"):
        self.label = label
        self.reason: Optional[str] = None
        self._cancelled = False
        self._tasks: set[asyncio.Future] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str = CANCEL_REASON) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self.reason = reason
        for task in list(self._tasks):
            task.cancel()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise GenerationCancelled(self.reason or CANCEL_REASON)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await `awaitable`, raising `GenerationCancelled` if this token is cancelled."""
        if self._cancelled:
            # Close un-awaited coroutines to avoid "never awaited" warnings
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        try:
            return await task
        except asyncio.CancelledError:
            if self._cancelled:
                raise GenerationCancelled(self.reason or CANCEL_REASON) from None
            raise
        finally:
            self._tasks.discard(task)

    async def sleep(self, delay: float) -> None:
        """Cancellable delay, used at poll boundaries."""
        await self.run(asyncio.sleep(delay))


class CancellationScope:
    """Holds the current token for one class of operation."""

    def __init__(self, label: str = "generation"):
        self.label = label
        self._current: Optional[CancellationToken] = None

    @property
    def current(self) -> Optional[CancellationToken]:
        return self._current

    def cancel_and_replace(self) -> CancellationToken:
        """Cancel the current token unconditionally and install a new one."""
        previous = self._current
        if previous is not None and not previous.cancelled:
            logger.info("Superseding outstanding %s call", self.label)
            previous.cancel()
        self._current = CancellationToken(self.label)
        return self._current

    def cancel(self) -> bool:
        """Cancel the current token, if any. Returns True when something was cancelled."""
        if self._current is None or self._current.cancelled:
            return False
        logger.info("Cancelling outstanding %s call", self.label)
        self._current.cancel()
        return True
