"""Deferred callbacks, run in due order when the queue is pumped."""
from __future__ import annotations

import heapq
import itertools
import time
from typing import Callable


class TimerQueue:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._heap: list = []
        self._seq = itertools.count()
        self._cancelled: set[int] = set()
        self._offset = 0.0

    def now(self) -> float:
        return self._clock() + self._offset

    def call_later(self, delay: float, callback: Callable[[], None]) -> int:
        handle = next(self._seq)
        heapq.heappush(self._heap, (self.now() + max(0.0, delay), handle, callback))
        return handle

    def cancel(self, handle: int) -> None:
        self._cancelled.add(handle)

    def cancel_all(self) -> None:
        """Navigating away drops whatever was still pending."""
        self._heap.clear()
        self._cancelled.clear()

    def pending(self) -> int:
        return sum(1 for _, h, _ in self._heap if h not in self._cancelled)

    def run_due(self) -> int:
        ran = 0
        while self._heap and self._heap[0][0] <= self.now():
            _, handle, callback = heapq.heappop(self._heap)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            callback()
            ran += 1
        return ran

    def advance(self, seconds: float) -> int:
        """Move this queue's clock forward, running callbacks at their own due times."""
        target = self.now() + seconds
        ran = 0
        while self._heap and self._heap[0][0] <= target:
            due, handle, callback = heapq.heappop(self._heap)
            if handle in self._cancelled:
                self._cancelled.discard(handle)
                continue
            self._offset += max(0.0, due - self.now())
            callback()
            ran += 1
        self._offset += max(0.0, target - self.now())
        return ran
