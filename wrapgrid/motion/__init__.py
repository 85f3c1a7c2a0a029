"""Scroll tracking and per-tile wrap-around."""

from wrapgrid.motion.scroll import (
    HorizontalDirection,
    ScrollDirection,
    ScrollState,
    ScrollTracker,
    VerticalDirection,
)
from wrapgrid.motion.wrap import EdgeFlags, Tile, WrapEngine, WrapResult

__all__ = [
    "EdgeFlags",
    "HorizontalDirection",
    "ScrollDirection",
    "ScrollState",
    "ScrollTracker",
    "Tile",
    "VerticalDirection",
    "WrapEngine",
    "WrapResult",
]
