"""Background execution — keep the process alive while a reply is in flight.

A ``BackgroundExecution`` is acquired synchronously from a
``BackgroundTaskHost`` and released exactly once, whichever comes first:
the guarded work finishing (successfully or not), or the host expiring the
request.  ``TaskKeeper`` is the asyncio host used by server deployments;
it lets shutdown wait for in-flight work instead of cutting it off.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ExpirationHandler = Callable[[], None]


@runtime_checkable
class BackgroundTaskHost(Protocol):
    """Platform facility that defers process suspension."""

    def begin_background_task(self, expiration_handler: ExpirationHandler | None = None) -> int:
        """Start deferring suspension. Returns an id for ``end_background_task``."""
        ...

    def end_background_task(self, task_id: int) -> None:
        """Stop deferring suspension for *task_id*."""
        ...


class BackgroundExecution:
    """Scoped background-execution token with idempotent release."""

    def __init__(self, host: BackgroundTaskHost, name: str = "") -> None:
        self._host = host
        self._name = name
        self._released = False
        self._task_id = host.begin_background_task(self._expire)
        logger.debug("Background execution %s started (%s)", self._task_id, name)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        """End the background task. Returns False if it was already released."""
        if self._released:
            return False
        self._released = True
        self._host.end_background_task(self._task_id)
        logger.debug("Background execution %s released (%s)", self._task_id, self._name)
        return True

    def _expire(self) -> None:
        logger.warning("Background execution %s expired (%s)", self._task_id, self._name)
        self.release()

    def __enter__(self) -> BackgroundExecution:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class TaskKeeper:
    """``BackgroundTaskHost`` for asyncio processes.

    Tracks open background tasks so shutdown can ``wait_idle()`` before the
    event loop stops.  Tasks still open after the timeout are expired.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._open: dict[int, ExpirationHandler | None] = {}
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> int:
        """Number of background tasks not yet ended."""
        return len(self._open)

    def begin_background_task(self, expiration_handler: ExpirationHandler | None = None) -> int:
        task_id = next(self._ids)
        self._open[task_id] = expiration_handler
        self._idle.clear()
        return task_id

    def end_background_task(self, task_id: int) -> None:
        if task_id not in self._open:
            logger.debug("end_background_task(%s): not open", task_id)
        self._open.pop(task_id, None)
        if not self._open:
            self._idle.set()

    def expire_all(self) -> int:
        """Invoke the expiration handler of every open task. Returns the count."""
        expired = list(self._open.items())
        for task_id, handler in expired:
            if handler is not None:
                handler()
            self._open.pop(task_id, None)
        if not self._open:
            self._idle.set()
        return len(expired)

    async def wait_idle(self, timeout: float | None = None) -> bool:
        """Wait until no background task is open.

        Returns True if idle within *timeout*; otherwise expires the
        remaining tasks and returns False.
        """
        try:
            await asyncio.wait_for(self._idle.wait(), timeout)
        except TimeoutError:
            count = self.expire_all()
            logger.warning("Expired %d background task(s) after %ss", count, timeout)
            return False
        return True
