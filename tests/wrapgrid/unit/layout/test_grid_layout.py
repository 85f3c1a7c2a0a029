from __future__ import annotations

import pytest

from wrapgrid.layout.geometry import Rect, Size
from wrapgrid.layout.grid import GridLayout, LayoutCalculator, compute_layout
from wrapgrid.runtime.errors import DegenerateLayoutError

TILE = Size(128.0, 192.0)


def test_compute_layout_counts_buffered_slots_and_period() -> None:
    layout = compute_layout(Size(1000.0, 1000.0), TILE, 5.0)

    assert layout.columns == 10
    assert layout.rows == 8
    assert layout.base_columns == 7
    assert layout.base_rows == 5
    assert layout.grid_period == Size(931.0, 985.0)
    assert layout.total == 80
    assert layout.pitch == Size(133.0, 197.0)


def test_grid_period_is_whole_pitch_multiple() -> None:
    layout = LayoutCalculator(TILE, gap=5.0).compute(Size(1366.0, 768.0))

    assert layout.grid_period.width == layout.base_columns * layout.pitch.width
    assert layout.grid_period.height == layout.base_rows * layout.pitch.height


def test_buffer_is_configurable() -> None:
    layout = LayoutCalculator(TILE, gap=5.0, buffer=0).compute(Size(1000.0, 1000.0))

    assert layout.columns == 8
    assert layout.rows == 6


def test_slot_bounds_follow_row_major_order() -> None:
    layout = compute_layout(Size(1000.0, 1000.0), TILE, 5.0)

    assert layout.slot_bounds(0) == Rect(0.0, 0.0, 128.0, 192.0)
    assert layout.slot_bounds(11) == Rect(133.0, 197.0, 128.0, 192.0)
    with pytest.raises(IndexError):
        layout.slot_bounds(layout.total)


def test_rebased_layout_wraps_over_pool_extent() -> None:
    layout = compute_layout(Size(1000.0, 1000.0), TILE, 5.0)
    extent = layout.pool_extent

    assert extent == Size(1325.0, 1571.0)
    rebased = layout.rebased(extent)
    assert rebased.columns == layout.columns
    assert rebased.base_columns == 10
    assert rebased.base_rows == 8
    assert rebased.grid_period == Size(1330.0, 1576.0)


@pytest.mark.parametrize(
    "screen",
    [Size(0.0, 600.0), Size(800.0, 0.0), Size(-5.0, 10.0)],
)
def test_degenerate_screen_yields_empty_layout(screen: Size) -> None:
    layout = compute_layout(screen, TILE, 5.0)

    assert layout.is_empty
    assert layout.total == 0
    assert layout.pool_extent == Size(0.0, 0.0)
    assert layout.rebased(Size(100.0, 100.0)) is layout


def test_strict_layout_raises_for_degenerate_input() -> None:
    with pytest.raises(DegenerateLayoutError):
        compute_layout(Size(0.0, 0.0), TILE, 5.0, strict=True)
    with pytest.raises(DegenerateLayoutError):
        LayoutCalculator(Size(0.0, 192.0)).compute(Size(800.0, 600.0), strict=True)


def test_empty_layout_keeps_tile_geometry() -> None:
    layout = GridLayout.empty(tile=TILE, gap=5.0)

    assert layout.tile == TILE
    assert layout.gap == 5.0
    assert layout.is_empty
