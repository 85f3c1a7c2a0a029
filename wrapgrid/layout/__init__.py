"""Grid layout and pixel/render-space geometry."""

from wrapgrid.layout.geometry import CellCoord, Rect, Size, Vec2, cell_to_index, index_to_cell
from wrapgrid.layout.grid import GridLayout, LayoutCalculator, compute_layout
from wrapgrid.layout.render_space import RenderSpace

__all__ = [
    "CellCoord",
    "GridLayout",
    "LayoutCalculator",
    "Rect",
    "RenderSpace",
    "Size",
    "Vec2",
    "cell_to_index",
    "compute_layout",
    "index_to_cell",
]
