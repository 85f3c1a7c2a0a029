"""Rendering-collaborator contracts consumed by the wrap runtime."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from wrapgrid.layout.geometry import Vec2
    from wrapgrid.prefetch.payload import Payload


class Placeable(Protocol):
    """Opaque handle exposing a render-space position and scale."""

    def get_position(self) -> Vec2: ...

    def set_position(self, position: Vec2) -> None: ...

    def get_scale(self) -> Vec2: ...

    def set_scale(self, scale: Vec2) -> None: ...


class DisplaySlot(Protocol):
    """Target that shows an image or synthetic bitmap payload."""

    def present(self, payload: Payload) -> None: ...


class TileView(Placeable, DisplaySlot, Protocol):
    """Per-tile rendering handle: placement plus display slot."""


TileViewFactory = Callable[[int], TileView]
