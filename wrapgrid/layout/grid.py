"""Tile grid layout: visible slot counts and the seamless wrap period."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from wrapgrid.layout.geometry import Rect, Size, index_to_cell
from wrapgrid.runtime.errors import DegenerateLayoutError

_LOG = logging.getLogger("wrapgrid.layout")


@dataclass(frozen=True, slots=True)
class GridLayout:
    """Result of one layout pass.

    `columns`/`rows` include the edge buffer and size the tile pool.
    `base_columns`/`base_rows` are the unbuffered counts that tile the screen
    without overlap; the grid period is derived from them so the repeat
    distance equals pitch times an exact column/row count and leaves no seam.
    """

    columns: int
    rows: int
    base_columns: int
    base_rows: int
    grid_period: Size
    tile: Size
    gap: float

    @property
    def total(self) -> int:
        return self.columns * self.rows

    @property
    def pitch(self) -> Size:
        return Size(self.tile.width + self.gap, self.tile.height + self.gap)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def slot_bounds(self, slot: int) -> Rect:
        """Unwrapped pixel bounds of a pool slot."""
        if not 0 <= slot < self.total:
            raise IndexError(f"slot out of range: {slot} (total={self.total})")
        cell = index_to_cell(slot, self.columns)
        pitch = self.pitch
        return Rect(
            x=cell.col * pitch.width,
            y=cell.row * pitch.height,
            w=self.tile.width,
            h=self.tile.height,
        )

    @property
    def pool_extent(self) -> Size:
        """Pixel extent covered by the buffered tile pool."""
        if self.is_empty:
            return Size(0.0, 0.0)
        pitch = self.pitch
        return Size(
            self.columns * pitch.width - self.gap,
            self.rows * pitch.height - self.gap,
        )

    def rebased(self, extent: Size) -> GridLayout:
        """Return a copy whose wrap cycle is measured over `extent`.

        The gallery wraps over the pool extent so that every pool slot owns a
        distinct position inside one period.
        """
        if self.is_empty or extent.is_degenerate:
            return self
        base_columns, base_rows, period = _cycle(extent, self.tile, self.gap)
        return GridLayout(
            columns=self.columns,
            rows=self.rows,
            base_columns=base_columns,
            base_rows=base_rows,
            grid_period=period,
            tile=self.tile,
            gap=self.gap,
        )

    @classmethod
    def empty(cls, tile: Size | None = None, gap: float = 0.0) -> GridLayout:
        return cls(
            columns=0,
            rows=0,
            base_columns=0,
            base_rows=0,
            grid_period=Size(0.0, 0.0),
            tile=tile or Size(0.0, 0.0),
            gap=gap,
        )


def compute_layout(
    screen: Size,
    tile: Size,
    gap: float,
    *,
    buffer: int = 2,
    strict: bool = False,
) -> GridLayout:
    """Compute slot counts and grid period for a screen.

    Degenerate input yields `GridLayout.empty()` unless `strict` is set, in
    which case `DegenerateLayoutError` is raised.
    """
    pitch_x = tile.width + gap
    pitch_y = tile.height + gap
    if screen.is_degenerate or tile.is_degenerate or pitch_x <= 0.0 or pitch_y <= 0.0:
        if strict:
            raise DegenerateLayoutError(
                f"cannot lay out tiles: screen={screen} tile={tile} gap={gap}"
            )
        _LOG.debug("degenerate_layout screen=%s tile=%s gap=%s", screen, tile, gap)
        return GridLayout.empty(tile=tile, gap=gap)

    extra = max(0, int(buffer))
    base_columns, base_rows, period = _cycle(screen, tile, gap)
    layout = GridLayout(
        columns=math.ceil(screen.width / pitch_x) + extra,
        rows=math.ceil(screen.height / pitch_y) + extra,
        base_columns=base_columns,
        base_rows=base_rows,
        grid_period=period,
        tile=tile,
        gap=gap,
    )
    _LOG.debug(
        "layout columns=%d rows=%d base=%dx%d period=%.1fx%.1f",
        layout.columns,
        layout.rows,
        layout.base_columns,
        layout.base_rows,
        layout.grid_period.width,
        layout.grid_period.height,
    )
    return layout


def _cycle(extent: Size, tile: Size, gap: float) -> tuple[int, int, Size]:
    pitch_x = tile.width + gap
    pitch_y = tile.height + gap
    base_columns = math.floor((extent.width + gap) / pitch_x)
    base_rows = math.floor((extent.height + gap) / pitch_y)
    return base_columns, base_rows, Size(base_columns * pitch_x, base_rows * pitch_y)


@dataclass(frozen=True, slots=True)
class LayoutCalculator:
    """Layout calculator bound to one tile geometry."""

    tile: Size
    gap: float = 5.0
    buffer: int = 2

    def compute(self, screen: Size, *, strict: bool = False) -> GridLayout:
        return compute_layout(screen, self.tile, self.gap, buffer=self.buffer, strict=strict)
