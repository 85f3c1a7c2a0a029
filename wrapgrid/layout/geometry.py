"""Geometry primitives shared by layout, motion, and rendering seams."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vec2:
    """Immutable 2D point or vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def lerp(self, target: Vec2, factor: float) -> Vec2:
        """Linear interpolation per axis."""
        return Vec2(
            lerp(self.x, target.x, factor),
            lerp(self.y, target.y, factor),
        )


@dataclass(frozen=True, slots=True)
class Size:
    """Width/height pair."""

    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0.0 or self.height <= 0.0


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle in pixel space (y grows downward)."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> Vec2:
        return Vec2(self.x + self.w / 2.0, self.y + self.h / 2.0)

    def contains(self, px: float, py: float) -> bool:
        """Return whether a point is inside the rectangle."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom


@dataclass(frozen=True, slots=True)
class CellCoord:
    """Grid cell coordinate in row/column space."""

    row: int
    col: int


def lerp(start: float, end: float, factor: float) -> float:
    return start + (end - start) * factor


def index_to_cell(index: int, columns: int) -> CellCoord:
    """Row/column of a linear slot index."""
    if columns <= 0:
        return CellCoord(row=0, col=0)
    return CellCoord(row=index // columns, col=index % columns)


def cell_to_index(cell: CellCoord, columns: int) -> int:
    return cell.row * columns + cell.col
