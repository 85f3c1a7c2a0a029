from __future__ import annotations

from wrapgrid.layout.geometry import CellCoord, Rect, Vec2, cell_to_index, index_to_cell


def test_vec2_arithmetic_and_lerp() -> None:
    a = Vec2(1.0, 2.0)
    b = Vec2(3.0, 6.0)

    assert a + b == Vec2(4.0, 8.0)
    assert b - a == Vec2(2.0, 4.0)
    assert a.lerp(b, 0.5) == Vec2(2.0, 4.0)
    assert a.lerp(b, 1.0) == b


def test_rect_edges_and_containment() -> None:
    rect = Rect(10.0, 20.0, 30.0, 40.0)

    assert rect.right == 40.0
    assert rect.bottom == 60.0
    assert rect.center == Vec2(25.0, 40.0)
    assert rect.contains(10.0, 20.0)
    assert not rect.contains(41.0, 30.0)


def test_index_cell_round_trip() -> None:
    assert index_to_cell(11, 5) == CellCoord(row=2, col=1)
    assert cell_to_index(CellCoord(row=2, col=1), 5) == 11
    assert index_to_cell(3, 0) == CellCoord(row=0, col=0)
