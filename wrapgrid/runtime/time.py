"""Frame timing primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic

TimeSource = Callable[[], float]


@dataclass(frozen=True, slots=True)
class FrameTime:
    """Per-frame timing context handed to the tick."""

    frame_index: int
    delta_seconds: float
    elapsed_seconds: float
    now_seconds: float


class FrameClock:
    """Monotonic frame clock with bounded frame deltas."""

    def __init__(
        self,
        *,
        time_source: TimeSource | None = None,
        max_delta_seconds: float = 0.25,
    ) -> None:
        if max_delta_seconds <= 0.0:
            raise ValueError("max_delta_seconds must be > 0")
        self._time_source = time_source or monotonic
        self._max_delta_seconds = max_delta_seconds
        self._last_seconds: float | None = None
        self._elapsed_seconds = 0.0
        self._frame_index = 0

    def next(self) -> FrameTime:
        """Advance the clock and return the next frame context."""
        now = self._time_source()
        if self._last_seconds is None:
            delta = 0.0
        else:
            delta = min(max(0.0, now - self._last_seconds), self._max_delta_seconds)
        self._last_seconds = now
        self._elapsed_seconds += delta
        frame = FrameTime(
            frame_index=self._frame_index,
            delta_seconds=delta,
            elapsed_seconds=self._elapsed_seconds,
            now_seconds=now,
        )
        self._frame_index += 1
        return frame


class Throttle:
    """Allows an action at most once per interval of wall time."""

    def __init__(self, interval_seconds: float) -> None:
        if interval_seconds < 0.0:
            raise ValueError("interval_seconds must be >= 0")
        self._interval_seconds = interval_seconds
        self._last_fired: float | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    def ready(self, now_seconds: float) -> bool:
        """Return True (and arm the next window) if the interval has elapsed."""
        if self._last_fired is not None and now_seconds - self._last_fired < self._interval_seconds:
            return False
        self._last_fired = now_seconds
        return True

    def reset(self) -> None:
        self._last_fired = None
