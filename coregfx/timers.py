"""Timer queue for the phase loop: repeating and one-shot callbacks on a pluggable clock.

All times are in milliseconds. The queue never fires anything on its own; the
host calls run_due() from its loop, so callbacks always execute on
the host's thread.
"""

import heapq
import itertools
import time
from typing import Callable


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class ManualClock:
    """Clock that only moves when told to. Used to drive a TimerQueue deterministically."""

    def __init__(self, start: float = 0.0):
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


class TimerHandle:
    def __init__(self, queue: "TimerQueue", seq: int, deadline: float, period: float | None, callback: Callable[[], None]):
        self.queue = queue
        self.seq = seq
        self.deadline = deadline
        self.period = period
        self.callback = callback
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.period is not None

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self):
        self.cancelled = True

    def __lt__(self, other: "TimerHandle") -> bool:
        return (self.deadline, self.seq) < (other.deadline, other.seq)


class TimerQueue:
    _instance = None

    @classmethod
    def get(cls):
        if cls._instance is None:
            cls._instance = TimerQueue()
        return cls._instance

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self.clock = clock
        self._heap: list[TimerHandle] = []
        self._seq = itertools.count()

    def __len__(self):
        return sum(1 for h in self._heap if not h.cancelled)

    def _schedule(self, delay: float, period: float | None, callback) -> TimerHandle:
        handle = TimerHandle(self, next(self._seq), self.clock() + delay, period, callback)
        heapq.heappush(self._heap, handle)
        return handle

    def every(self, period: float, callback: Callable[[], None]) -> TimerHandle:
        """Call callback every period ms until the returned handle is cancelled."""
        if period <= 0:
            raise ValueError("period must be positive")
        return self._schedule(period, period, callback)

    def after(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Call callback once, delay ms from now."""
        if delay < 0:
            raise ValueError("delay must not be negative")
        return self._schedule(delay, None, callback)

    def run_due(self) -> int:
        """Fire every timer whose deadline has passed, earliest first. Returns the count fired.

        Timers due at the same instant fire in the order they were created.
        A repeating timer that fell behind fires once per missed period.
        """
        now = self.clock()
        fired = 0
        while self._heap and self._heap[0].deadline <= now:
            handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            if handle.repeating:
                handle.deadline += handle.period
                heapq.heappush(self._heap, handle)
            else:
                handle.cancelled = True
            handle.callback()
            fired += 1
        return fired
