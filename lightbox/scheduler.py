"""One-shot deferred callbacks driven by the frame loop.

There is no timer thread: the main loop calls :meth:`Scheduler.run_due` every
frame, and anything whose deadline has passed runs right there on the UI
thread. Each :class:`DeferredCall` is a handle its owner can cancel.
"""

from __future__ import annotations
import heapq
import itertools
from typing import Callable, List, Optional, Tuple

from .logging import now, log


class DeferredCall:
    """Handle for a callback scheduled with :meth:`Scheduler.call_later`."""

    __slots__ = ("due", "callback", "label", "cancelled", "fired")

    def __init__(self, due: float, callback: Callable[[], None], label: str = ""):
        self.due = due
        self.callback = callback
        self.label = label
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> bool:
        """Prevent the callback from running. Returns True if it was pending."""
        was_pending = self.pending
        self.cancelled = True
        return was_pending

    def __repr__(self) -> str:
        state = "fired" if self.fired else "cancelled" if self.cancelled else "pending"
        return f"DeferredCall({self.label or self.callback!r}, due={self.due:.3f}, {state})"


class Scheduler:
    """Min-heap of deferred calls keyed by due time."""

    def __init__(self, clock: Callable[[], float] = now):
        self._clock = clock
        self._heap: List[Tuple[float, int, DeferredCall]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None],
                   label: str = "") -> DeferredCall:
        """Run callback once, no earlier than delay_ms from now."""
        call = DeferredCall(self._clock() + max(0.0, delay_ms) / 1000.0, callback, label)
        heapq.heappush(self._heap, (call.due, next(self._seq), call))
        return call

    def run_due(self) -> int:
        """Fire every due call that was not cancelled. Returns how many ran."""
        t = self._clock()
        fired = 0
        while self._heap and self._heap[0][0] <= t:
            _, _, call = heapq.heappop(self._heap)
            if call.cancelled:
                continue
            call.fired = True
            try:
                call.callback()
            except Exception as e:
                log(f"[SCHED][ERR] {call.label or 'deferred call'}: {e!r}")
            fired += 1
        return fired

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, c in self._heap if c.pending)

    def next_due(self) -> Optional[float]:
        for due, _, call in sorted(self._heap):
            if call.pending:
                return due
        return None

    def clear(self) -> None:
        """Cancel everything still queued."""
        for _, _, call in self._heap:
            call.cancel()
        self._heap.clear()
