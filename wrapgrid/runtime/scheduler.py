"""Tick-driven one-shot timers; `reschedule` is the debounce primitive."""

from __future__ import annotations

from collections.abc import Callable
from heapq import heappop, heappush

TimerCallback = Callable[[], None]


class Scheduler:
    """One-shot timers fired only from `advance`/`run_due` on the tick thread.

    Cancelling drops the callback from `_callbacks`; the stale heap slot is
    skipped when it surfaces.
    """

    def __init__(self) -> None:
        self._now_seconds = 0.0
        self._next_timer_id = 1
        self._callbacks: dict[int, TimerCallback] = {}
        self._deadlines: list[tuple[float, int]] = []

    @property
    def now_seconds(self) -> float:
        return self._now_seconds

    @property
    def pending_count(self) -> int:
        return len(self._callbacks)

    def is_pending(self, timer_id: int | None) -> bool:
        return timer_id is not None and timer_id in self._callbacks

    def call_later(self, delay_seconds: float, callback: TimerCallback) -> int:
        """Fire `callback` once, `delay_seconds` after the current scheduler time."""
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        timer_id = self._next_timer_id
        self._next_timer_id += 1
        self._callbacks[timer_id] = callback
        heappush(self._deadlines, (self._now_seconds + delay_seconds, timer_id))
        return timer_id

    def reschedule(
        self, timer_id: int | None, delay_seconds: float, callback: TimerCallback
    ) -> int:
        """Cancel `timer_id` (if pending) and schedule `callback` after delay.

        Every call pushes the deadline out, so a burst of calls fires once.
        """
        self.cancel(timer_id)
        return self.call_later(delay_seconds, callback)

    def cancel(self, timer_id: int | None) -> None:
        if timer_id is not None:
            self._callbacks.pop(timer_id, None)

    def clear(self) -> None:
        self._callbacks.clear()
        self._deadlines.clear()

    def advance(self, delta_seconds: float) -> int:
        """Move the clock forward by `delta_seconds` and fire due timers."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        return self.run_due(self._now_seconds + delta_seconds)

    def run_due(self, now_seconds: float) -> int:
        """Fire timers due at or before `now_seconds`; return how many ran."""
        if now_seconds < self._now_seconds:
            raise ValueError("now_seconds cannot move backwards")
        self._now_seconds = now_seconds
        fired = 0
        while self._deadlines and self._deadlines[0][0] <= now_seconds:
            _, timer_id = heappop(self._deadlines)
            callback = self._callbacks.pop(timer_id, None)
            if callback is None:
                continue
            callback()
            fired += 1
        return fired
