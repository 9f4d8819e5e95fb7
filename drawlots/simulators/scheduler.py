"""Clock and callback scheduling used to drive animations.

Simulators never sleep. They ask a :class:`Scheduler` to call them back
after a delay or on the next animation frame, and advance their state when
the callback fires. Tests and headless playback use :class:`ManualScheduler`
with a virtual clock; interactive playback uses :class:`AsyncioScheduler`.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 1000.0 / 60.0
"""Default spacing between animation frames (60 fps)."""


class ScheduledCall:
    """Handle to a pending callback."""

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()

    def settle(self) -> None:
        """Mark the callback as run; a later :meth:`cancel` only sets the flag."""
        self._on_cancel = None


class Scheduler(ABC):
    """Source of time and deferred callbacks, in milliseconds."""

    frame_interval_ms: float = FRAME_INTERVAL_MS

    @abstractmethod
    def now(self) -> float:
        """Return the current monotonic time in milliseconds."""

    @abstractmethod
    def call_later(
        self, delay_ms: float, callback: Callable[[], None]
    ) -> ScheduledCall:
        """Run ``callback`` once, ``delay_ms`` from now."""

    @abstractmethod
    def call_next_frame(self, callback: Callable[[float], None]) -> ScheduledCall:
        """Run ``callback(timestamp_ms)`` before the next frame is drawn."""


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler that only moves when told to.

    Callbacks run strictly in due-time order and, for equal due times, in the
    order they were scheduled. The clock reads the callback's due time while
    it runs.
    """

    def __init__(
        self, *, start_ms: float = 0.0, frame_interval_ms: float = FRAME_INTERVAL_MS
    ) -> None:
        self._now = float(start_ms)
        self.frame_interval_ms = frame_interval_ms
        self._queue: list[tuple[float, int, ScheduledCall, Callable[[], None]]] = []
        self._counter = itertools.count()
        self._live = 0

    def now(self) -> float:
        return self._now

    def _push(self, due: float, fn: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self._discard)
        heapq.heappush(self._queue, (due, next(self._counter), call, fn))
        self._live += 1
        return call

    def _discard(self) -> None:
        self._live -= 1
        # Cancelled entries deeper in the heap are skipped when they surface.
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)

    def call_later(
        self, delay_ms: float, callback: Callable[[], None]
    ) -> ScheduledCall:
        return self._push(self._now + max(0.0, float(delay_ms)), callback)

    def call_next_frame(self, callback: Callable[[float], None]) -> ScheduledCall:
        return self._push(
            self._now + self.frame_interval_ms, lambda: callback(self._now)
        )

    @property
    def pending(self) -> int:
        """Number of callbacks that are scheduled and not cancelled."""
        return self._live

    def _pop_next(self, deadline: float) -> bool:
        while self._queue:
            due, _, call, fn = self._queue[0]
            if due > deadline:
                return False
            heapq.heappop(self._queue)
            if call.cancelled:
                continue
            call.settle()
            self._live -= 1
            self._now = due
            fn()
            return True
        return False

    def advance(self, ms: float) -> None:
        """Move the clock forward by ``ms``, running every callback that falls due."""
        if ms < 0:
            raise ValueError("cannot move the clock backwards")
        target = self._now + ms
        while self._pop_next(target):
            pass
        self._now = target

    def run_until_idle(self, limit_ms: float = 600_000.0) -> float:
        """Run callbacks until none are pending or ``limit_ms`` has elapsed.

        Returns
        -------
        float
            Virtual time that elapsed.
        """
        started = self._now
        deadline = started + limit_ms
        while self._pop_next(deadline):
            pass
        if self.pending:
            logger.warning(
                f"ManualScheduler stopped with {self.pending} pending callbacks "
                f"after {limit_ms} ms"
            )
        return self._now - started


class AsyncioScheduler(Scheduler):
    """Wall-clock scheduler backed by an ``asyncio`` event loop.

    Must be created from inside a running loop unless ``loop`` is given.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        *,
        frame_interval_ms: float = FRAME_INTERVAL_MS,
    ) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self.frame_interval_ms = frame_interval_ms

    def now(self) -> float:
        return self._loop.time() * 1000.0

    def call_later(
        self, delay_ms: float, callback: Callable[[], None]
    ) -> ScheduledCall:
        handle = self._loop.call_later(max(0.0, delay_ms) / 1000.0, callback)
        return ScheduledCall(handle.cancel)

    def call_next_frame(self, callback: Callable[[float], None]) -> ScheduledCall:
        handle = self._loop.call_later(
            self.frame_interval_ms / 1000.0, lambda: callback(self.now())
        )
        return ScheduledCall(handle.cancel)


__all__ = [
    "AsyncioScheduler",
    "FRAME_INTERVAL_MS",
    "ManualScheduler",
    "ScheduledCall",
    "Scheduler",
]
