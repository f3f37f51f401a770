"""
Cancellable timer handles for the session runner.

The session never owns a global timer.  It is given a Scheduler and keeps the
handles it gets back, so every way out of a session can cancel them.

Two schedulers are provided:
- ManualScheduler: a virtual clock advanced by hand (tests, replays)
- WallClockScheduler: follows real time; due callbacks fire when the host
  catches up, so timers and terminal input share one thread
"""

from __future__ import annotations

import heapq
import itertools
import time
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class _ManualHandle:
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by ``advance()``.

    Callbacks fire in due-time order (ties in scheduling order).  A callback
    may schedule further callbacks; those fire within the same ``advance``
    call if they fall due before its end.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self.now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled, not-yet-cancelled callbacks."""
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that falls due."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            handle.callback()
        self.now = target


class WallClockScheduler(ManualScheduler):
    """
    ManualScheduler whose clock follows real time.

    Nothing runs in the background: the host calls ``catch_up()`` whenever
    it regains control (after reading input, between redraws) and every
    callback that fell due in the meantime fires then, on the caller's
    thread.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._last = clock()
        super().__init__(start=0.0)

    def catch_up(self) -> None:
        """Fire everything that fell due since the last call."""
        now = self._clock()
        elapsed = max(0.0, now - self._last)
        self._last = now
        self.advance(elapsed)
