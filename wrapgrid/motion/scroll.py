"""Eased scroll position, per-axis direction, and active-scroll debounce."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from wrapgrid.layout.geometry import Vec2
from wrapgrid.runtime.config import ScrollConfig
from wrapgrid.runtime.scheduler import Scheduler

_LOG = logging.getLogger("wrapgrid.scroll")


class HorizontalDirection(Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def increasing(self) -> bool:
        return self is HorizontalDirection.RIGHT


class VerticalDirection(Enum):
    UP = "up"
    DOWN = "down"

    @property
    def increasing(self) -> bool:
        return self is VerticalDirection.DOWN


@dataclass(frozen=True, slots=True)
class ScrollDirection:
    x: HorizontalDirection = HorizontalDirection.RIGHT
    y: VerticalDirection = VerticalDirection.DOWN


@dataclass(frozen=True, slots=True)
class ScrollState:
    """Read-only snapshot of the tracker taken once per tick."""

    current: Vec2
    target: Vec2
    last: Vec2
    direction: ScrollDirection
    is_actively_scrolling: bool

    @property
    def velocity(self) -> Vec2:
        return self.current - self.last


class ScrollTracker:
    """Eased scroll tracker with an Idle/Moving state machine.

    Input handlers only move `target`; `tick()` is the only place `current`
    changes. The Moving -> Idle transition is a debounce timer on the injected
    scheduler, so the owner must advance that scheduler once per frame.
    """

    def __init__(
        self,
        config: ScrollConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._config = config or ScrollConfig()
        _validate_ease(self._config.ease)
        self._scheduler = scheduler or Scheduler()
        self._ease = self._config.ease
        self._current = Vec2()
        self._target = Vec2()
        self._last = Vec2()
        self._direction = ScrollDirection()
        self._actively_scrolling = False
        self._debounce_timer_id: int | None = None
        self._drag_origin: Vec2 | None = None
        self._drag_anchor: Vec2 | None = None

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def is_actively_scrolling(self) -> bool:
        return self._actively_scrolling

    @property
    def is_dragging(self) -> bool:
        return self._drag_origin is not None

    def tick(self) -> ScrollState:
        """Advance the eased position by one frame and return the new state."""
        self._last = self._current
        self._current = self._current.lerp(self._target, self._ease)
        self._direction = ScrollDirection(
            x=_resolve_x(self._current.x, self._last.x, self._direction.x),
            y=_resolve_y(self._current.y, self._last.y, self._direction.y),
        )
        epsilon = self._config.epsilon
        is_moving = (
            abs(self._current.x - self._target.x) > epsilon
            or abs(self._current.y - self._target.y) > epsilon
        )
        if is_moving:
            if not self._actively_scrolling:
                _LOG.debug(
                    "scroll_state moving target=(%.1f, %.1f)", self._target.x, self._target.y
                )
            self._actively_scrolling = True
            self._debounce_timer_id = self._scheduler.reschedule(
                self._debounce_timer_id,
                self._config.debounce_seconds,
                self._on_debounce_elapsed,
            )
        return self.state()

    def state(self) -> ScrollState:
        return ScrollState(
            current=self._current,
            target=self._target,
            last=self._last,
            direction=self._direction,
            is_actively_scrolling=self._actively_scrolling,
        )

    def velocity(self) -> Vec2:
        """Displacement applied by the most recent `tick()`."""
        return self._current - self._last

    def add_scroll(self, dx: float, dy: float) -> None:
        self._target = Vec2(self._target.x + dx, self._target.y + dy)

    def set_target(self, x: float, y: float) -> None:
        self._target = Vec2(x, y)

    def handle_wheel(self, dx: float, dy: float) -> None:
        """Apply an already-normalized wheel delta in pixels."""
        multiplier = self._config.wheel_multiplier
        self.add_scroll(dx * multiplier, dy * multiplier)

    def begin_drag(self, x: float, y: float) -> None:
        self._drag_origin = Vec2(x, y)
        self._drag_anchor = self._current

    def drag_to(self, x: float, y: float) -> bool:
        """Move the target relative to the drag start; False when not dragging."""
        if self._drag_origin is None or self._drag_anchor is None:
            return False
        multiplier = self._config.drag_multiplier
        self.set_target(
            self._drag_anchor.x + (self._drag_origin.x - x) * multiplier,
            self._drag_anchor.y + (self._drag_origin.y - y) * multiplier,
        )
        return True

    def end_drag(self) -> None:
        self._drag_origin = None
        self._drag_anchor = None

    def update_config(self, *, ease: float | None = None) -> None:
        if ease is None:
            return
        _validate_ease(ease)
        self._ease = ease

    def reset(self) -> None:
        self._scheduler.cancel(self._debounce_timer_id)
        self._debounce_timer_id = None
        self._current = Vec2()
        self._target = Vec2()
        self._last = Vec2()
        self._direction = ScrollDirection()
        self._actively_scrolling = False
        self.end_drag()

    def dispose(self) -> None:
        self._scheduler.cancel(self._debounce_timer_id)
        self._debounce_timer_id = None

    def _on_debounce_elapsed(self) -> None:
        self._debounce_timer_id = None
        self._actively_scrolling = False
        _LOG.debug("scroll_state idle current=(%.1f, %.1f)", self._current.x, self._current.y)


def _resolve_x(
    current: float, last: float, previous: HorizontalDirection
) -> HorizontalDirection:
    if current > last:
        return HorizontalDirection.RIGHT
    if current < last:
        return HorizontalDirection.LEFT
    return previous


def _resolve_y(current: float, last: float, previous: VerticalDirection) -> VerticalDirection:
    if current > last:
        return VerticalDirection.DOWN
    if current < last:
        return VerticalDirection.UP
    return previous


def _validate_ease(ease: float) -> None:
    if not 0.0 < ease <= 1.0:
        raise ValueError("ease must be in (0, 1]")
