"""Per-tile wrap-around positioning.

Each tick a tile's unwrapped render-space position is derived from its pixel
bounds and the eased scroll. When the tile's edge (with a one-tile buffer)
crosses the viewport boundary that the current motion is carrying it past,
the tile is translated by exactly one grid period on that axis.

Wrap offsets are stored as whole step counts per axis, so the render-space
offset is always an exact multiple of the period and never drifts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from wrapgrid.api.render import Placeable
from wrapgrid.layout.geometry import Rect, Size, Vec2
from wrapgrid.layout.render_space import RenderSpace
from wrapgrid.motion.scroll import (
    HorizontalDirection,
    ScrollDirection,
    ScrollState,
    VerticalDirection,
)

_LOG = logging.getLogger("wrapgrid.wrap")


@dataclass(slots=True)
class Tile:
    """One pool slot: fixed unwrapped bounds plus accumulated wrap steps."""

    slot: int
    bounds: Rect
    content_index: int
    view: Placeable | None = None
    wrap_steps_x: int = 0
    wrap_steps_y: int = 0
    extra: Vec2 = field(default_factory=Vec2)

    def reset_wrap(self, bounds: Rect | None = None) -> None:
        if bounds is not None:
            self.bounds = bounds
        self.wrap_steps_x = 0
        self.wrap_steps_y = 0
        self.extra = Vec2()


@dataclass(frozen=True, slots=True)
class WrapResult:
    wrapped_x: bool
    wrapped_y: bool
    position: Vec2
    scale: Vec2
    extra: Vec2

    @property
    def wrapped(self) -> bool:
        return self.wrapped_x or self.wrapped_y


@dataclass(frozen=True, slots=True)
class EdgeFlags:
    """Boundary-crossing flags for one axis, buffered by one tile size."""

    before: bool
    after: bool


class WrapEngine:
    """Wrap decisions for tiles sharing one render space and grid period."""

    def __init__(self, render_space: RenderSpace, grid_period: Size) -> None:
        self._render_space = render_space
        self._grid_period_px = grid_period
        self._period = _period_to_render(render_space, grid_period)

    @property
    def render_space(self) -> RenderSpace:
        return self._render_space

    @property
    def period(self) -> Vec2:
        """Grid period in render-space units."""
        return self._period

    def relayout(self, render_space: RenderSpace, grid_period: Size) -> None:
        """Swap geometry after a resize; callers must reset tiles afterwards."""
        self._render_space = render_space
        self._grid_period_px = grid_period
        self._period = _period_to_render(render_space, grid_period)

    def reset_tile(self, tile: Tile, bounds: Rect | None = None) -> None:
        tile.reset_wrap(bounds)

    def tile_scale(self, tile: Tile) -> Vec2:
        size = self._render_space.size_to_render(Size(tile.bounds.w, tile.bounds.h))
        return Vec2(size.width, size.height)

    def position_of(self, tile: Tile, scroll: Vec2) -> Vec2:
        """Current wrapped render-space center of a tile for a scroll offset."""
        if self._render_space.is_degenerate:
            return Vec2()
        viewport = self._render_space.viewport
        unit = self._render_space.scale
        scale = self.tile_scale(tile)
        x = (
            -viewport.width / 2.0
            + scale.x / 2.0
            + (tile.bounds.x - scroll.x) * unit.x
            - tile.extra.x
        )
        y = (
            viewport.height / 2.0
            - scale.y / 2.0
            - (tile.bounds.y - scroll.y) * unit.y
            - tile.extra.y
        )
        return Vec2(x, y)

    def edge_flags(self, position: Vec2, scale: Vec2) -> tuple[EdgeFlags, EdgeFlags]:
        viewport = self._render_space.viewport
        half_w = viewport.width / 2.0
        half_h = viewport.height / 2.0
        flags_x = EdgeFlags(
            before=position.x + scale.x / 2.0 < -half_w + scale.x,
            after=position.x - scale.x / 2.0 > half_w - scale.x,
        )
        flags_y = EdgeFlags(
            before=position.y + scale.y / 2.0 < -half_h + scale.y,
            after=position.y - scale.y / 2.0 > half_h - scale.y,
        )
        return flags_x, flags_y

    def update(
        self,
        tile: Tile,
        scroll: ScrollState,
        direction: ScrollDirection | None = None,
    ) -> WrapResult:
        """Position one tile for this tick and wrap it at most once per axis."""
        motion = direction or scroll.direction
        scale = self.tile_scale(tile)
        if self._render_space.is_degenerate:
            return WrapResult(False, False, Vec2(), scale, tile.extra)

        position = self.position_of(tile, scroll.current)
        flags_x, flags_y = self.edge_flags(position, scale)

        step_x = 0
        if self._period.x > 0.0:
            if motion.x is HorizontalDirection.RIGHT and flags_x.before:
                step_x = -1
            elif motion.x is HorizontalDirection.LEFT and flags_x.after:
                step_x = 1

        # Render-space y points up, so scrolling down carries tiles upward.
        step_y = 0
        if self._period.y > 0.0:
            if motion.y is VerticalDirection.DOWN and flags_y.after:
                step_y = 1
            elif motion.y is VerticalDirection.UP and flags_y.before:
                step_y = -1

        if step_x or step_y:
            tile.wrap_steps_x += step_x
            tile.wrap_steps_y += step_y
            tile.extra = Vec2(
                tile.wrap_steps_x * self._period.x,
                tile.wrap_steps_y * self._period.y,
            )
            position = Vec2(
                position.x - step_x * self._period.x,
                position.y - step_y * self._period.y,
            )
            if _LOG.isEnabledFor(logging.DEBUG):
                _LOG.debug(
                    "tile_wrap slot=%d steps=(%d, %d) extra=(%.3f, %.3f)",
                    tile.slot,
                    tile.wrap_steps_x,
                    tile.wrap_steps_y,
                    tile.extra.x,
                    tile.extra.y,
                )

        if tile.view is not None:
            tile.view.set_scale(scale)
            tile.view.set_position(position)
        return WrapResult(
            wrapped_x=step_x != 0,
            wrapped_y=step_y != 0,
            position=position,
            scale=scale,
            extra=tile.extra,
        )


def _period_to_render(render_space: RenderSpace, grid_period: Size) -> Vec2:
    size = render_space.size_to_render(grid_period)
    return Vec2(size.width, size.height)
